"""
ConversationId Value Object - identity of one deal conversation.

Stored in canonical lowercase UUID form so ids from URLs, Redis keys and
fresh conversations compare equal.
"""

from dataclasses import dataclass
from uuid import UUID, uuid4


@dataclass(frozen=True)
class ConversationId:
    value: str

    def __post_init__(self):
        try:
            canonical = str(UUID(str(self.value)))
        except ValueError:
            raise ValueError(f"Not a conversation id: {self.value!r}")
        object.__setattr__(self, "value", canonical)

    @classmethod
    def new(cls) -> "ConversationId":
        return cls(str(uuid4()))

    def __str__(self) -> str:
        return self.value

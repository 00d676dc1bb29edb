"""MessageId Value Object - identity of a message within a conversation."""

from dataclasses import dataclass
from uuid import UUID, uuid4


@dataclass(frozen=True)
class MessageId:
    value: str

    def __post_init__(self):
        try:
            object.__setattr__(self, "value", str(UUID(str(self.value))))
        except ValueError:
            raise ValueError(f"Invalid message ID (UUID): {self.value!r}")

    @classmethod
    def new(cls) -> "MessageId":
        return cls(str(uuid4()))

    def __str__(self) -> str:
        return self.value

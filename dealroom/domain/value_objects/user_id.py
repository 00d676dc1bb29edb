"""
UserId Value Object - Participant identity as issued by the host application.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserId:
    value: str  # user_id, opaque identifier (e.g. "user-1", "assistant")

    def __post_init__(self):
        if not self.value or not self.value.strip():
            raise ValueError("A participant needs a non-blank user id")

    def __str__(self) -> str:
        return self.value


ASSISTANT_USER_ID = UserId("assistant")
SYSTEM_USER_ID = UserId("system")

# Ids the engine posts under; a host user can never act as one of them
RESERVED_USER_IDS = frozenset({ASSISTANT_USER_ID, SYSTEM_USER_ID})

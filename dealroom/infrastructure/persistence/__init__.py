"""Conversation repository implementations."""

from dealroom.infrastructure.persistence.in_memory_conversation_repository import (
    InMemoryConversationRepository,
)
from dealroom.infrastructure.persistence.redis_conversation_repository import (
    RedisConversationRepository,
)

__all__ = [
    "InMemoryConversationRepository",
    "RedisConversationRepository",
]

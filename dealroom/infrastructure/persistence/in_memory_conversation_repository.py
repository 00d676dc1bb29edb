"""
In-Memory Conversation Repository - default store when no REDIS_URL is set.

Conversations are held by reference; the aggregate replaces its tuples on
every change, so readers of a returned instance see whole snapshots.
"""

from typing import Optional

from dealroom.domain.entities.conversation import Conversation
from dealroom.domain.ports.repositories import ConversationRepository
from dealroom.domain.value_objects.conversation_id import ConversationId


class InMemoryConversationRepository(ConversationRepository):
    def __init__(self):
        self._conversations: dict[str, Conversation] = {}

    async def get_by_id(
        self, conversation_id: ConversationId
    ) -> Optional[Conversation]:
        return self._conversations.get(conversation_id.value)

    async def list_all(self) -> list[Conversation]:
        return list(self._conversations.values())

    async def save(self, conversation: Conversation) -> None:
        self._conversations[conversation.id.value] = conversation

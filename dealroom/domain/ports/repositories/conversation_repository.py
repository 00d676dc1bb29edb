"""
Conversation Repository Port - Where deal conversations are kept between requests.
Implementations: dealroom/infrastructure/persistence/
"""

from abc import ABC, abstractmethod
from typing import Optional
from dealroom.domain.entities.conversation import Conversation
from dealroom.domain.value_objects.conversation_id import ConversationId


class ConversationRepository(ABC):
    @abstractmethod
    async def get_by_id(
        self, conversation_id: ConversationId
    ) -> Optional[Conversation]: ...

    @abstractmethod
    async def list_all(self) -> list[Conversation]: ...

    @abstractmethod
    async def save(self, conversation: Conversation) -> None: ...

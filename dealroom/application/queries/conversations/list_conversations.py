"""List Conversations Query - Worklist view: filter, then sort, then limit."""

from dataclasses import dataclass

from dealroom.application.common.interfaces import Query, QueryHandler
from dealroom.domain.entities.conversation import Conversation
from dealroom.domain.ports.repositories import ConversationRepository
from dealroom.domain.services.conversation_directory import (
    FilterMode,
    SortKey,
    list_conversations,
    owned_by,
)
from dealroom.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class ListConversationsQuery(Query[list[Conversation]]):
    acting_user_id: UserId
    filter_mode: FilterMode = FilterMode.ALL
    sort_key: SortKey = SortKey.RECENT
    limit: int = 50


class ListConversationsHandler(QueryHandler[list[Conversation]]):
    def __init__(self, conversation_repository: ConversationRepository):
        self._conversation_repository = conversation_repository

    async def execute(self, query: ListConversationsQuery) -> list[Conversation]:
        conversations = await self._conversation_repository.list_all()
        return list_conversations(
            conversations,
            mode=query.filter_mode,
            key=query.sort_key,
            owner=owned_by(query.acting_user_id),
            limit=query.limit,
        )

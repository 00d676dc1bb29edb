"""Get Conversation Query - Full snapshot for one of the caller's conversations."""

from dataclasses import dataclass

from dealroom.application.common.interfaces import Query, QueryHandler
from dealroom.application.common.loading import load_conversation, require_participant
from dealroom.domain.entities.conversation import Conversation
from dealroom.domain.ports.repositories import ConversationRepository
from dealroom.domain.value_objects.conversation_id import ConversationId
from dealroom.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class GetConversationQuery(Query[Conversation]):
    conversation_id: ConversationId
    acting_user_id: UserId


class GetConversationHandler(QueryHandler[Conversation]):
    def __init__(self, conversation_repository: ConversationRepository):
        self._conversation_repository = conversation_repository

    async def execute(self, query: GetConversationQuery) -> Conversation:
        conversation = await load_conversation(
            self._conversation_repository, query.conversation_id
        )
        require_participant(conversation, query.acting_user_id)
        return conversation

"""Get Participant Permissions Query."""

from dataclasses import dataclass

from dealroom.application.common.interfaces import Query, QueryHandler
from dealroom.application.common.loading import load_conversation, require_participant
from dealroom.domain.entities.participant import Permissions
from dealroom.domain.ports.repositories import ConversationRepository
from dealroom.domain.value_objects.conversation_id import ConversationId
from dealroom.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class GetPermissionsQuery(Query[Permissions]):
    conversation_id: ConversationId
    acting_user_id: UserId
    user_id: UserId


class GetPermissionsHandler(QueryHandler[Permissions]):
    def __init__(self, conversation_repository: ConversationRepository):
        self._conversation_repository = conversation_repository

    async def execute(self, query: GetPermissionsQuery) -> Permissions:
        conversation = await load_conversation(
            self._conversation_repository, query.conversation_id
        )
        require_participant(conversation, query.acting_user_id)
        # NotFoundError when user_id is not a participant
        return conversation.participant_permissions(query.user_id)

"""Shared lookups used by command and query handlers."""

from dealroom.domain.entities.conversation import Conversation
from dealroom.domain.exceptions import AccessDeniedError, NotFoundError
from dealroom.domain.ports.repositories import ConversationRepository
from dealroom.domain.value_objects.conversation_id import ConversationId
from dealroom.domain.value_objects.user_id import UserId


async def load_conversation(
    repository: ConversationRepository, conversation_id: ConversationId
) -> Conversation:
    conversation = await repository.get_by_id(conversation_id)
    if not conversation:
        raise NotFoundError(f"Conversation {conversation_id.value} not found")
    return conversation


def require_participant(conversation: Conversation, user_id: UserId) -> None:
    if not conversation.has_participant(user_id):
        raise AccessDeniedError(
            f"User {user_id.value} has no access to conversation {conversation.id.value}"
        )

"""
Advance Status Command - Move a deal to its next lifecycle stage.

Returns the status_update system message recorded by the aggregate.
"""

import logging
from dataclasses import dataclass

from dealroom.application.common.interfaces import Command, CommandHandler
from dealroom.application.common.loading import load_conversation
from dealroom.application.services.conversation_locks import ConversationLocks
from dealroom.application.services.notifier import ConversationNotifier
from dealroom.domain.entities.message import Message
from dealroom.domain.ports.repositories import ConversationRepository
from dealroom.domain.value_objects.conversation_id import ConversationId
from dealroom.domain.value_objects.deal_status import DealStatus
from dealroom.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdvanceStatusCommand(Command[Message]):
    conversation_id: ConversationId
    acting_user_id: UserId
    next_status: DealStatus


class AdvanceStatusHandler(CommandHandler[Message]):
    def __init__(
        self,
        conversation_repository: ConversationRepository,
        locks: ConversationLocks,
        notifier: ConversationNotifier,
    ):
        self._conversation_repository = conversation_repository
        self._locks = locks
        self._notifier = notifier

    async def execute(self, command: AdvanceStatusCommand) -> Message:
        async with self._locks.for_conversation(command.conversation_id):
            conversation = await load_conversation(
                self._conversation_repository, command.conversation_id
            )
            message = conversation.advance_status(
                command.next_status, command.acting_user_id
            )
            await self._conversation_repository.save(conversation)

        logger.info(f"[AdvanceStatus] {command.conversation_id}: {message.content}")
        await self._notifier.message_appended(message)
        return message

"""Mark Presence Command - A participant goes online or offline."""

import logging
from dataclasses import dataclass

from dealroom.application.common.interfaces import Command, CommandHandler
from dealroom.application.common.loading import load_conversation
from dealroom.application.services.conversation_locks import ConversationLocks
from dealroom.domain.entities.participant import Participant
from dealroom.domain.ports.repositories import ConversationRepository
from dealroom.domain.value_objects.conversation_id import ConversationId
from dealroom.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkPresenceCommand(Command[Participant]):
    conversation_id: ConversationId
    user_id: UserId
    is_online: bool


class MarkPresenceHandler(CommandHandler[Participant]):
    def __init__(
        self,
        conversation_repository: ConversationRepository,
        locks: ConversationLocks,
    ):
        self._conversation_repository = conversation_repository
        self._locks = locks

    async def execute(self, command: MarkPresenceCommand) -> Participant:
        async with self._locks.for_conversation(command.conversation_id):
            conversation = await load_conversation(
                self._conversation_repository, command.conversation_id
            )
            participant = conversation.mark_presence(command.user_id, command.is_online)
            await self._conversation_repository.save(conversation)

        logger.debug(
            f"[MarkPresence] {command.user_id} online={command.is_online} "
            f"in {command.conversation_id}"
        )
        return participant

"""Add Participant Command - Invite a user into a conversation."""

import logging
from dataclasses import dataclass
from typing import Optional

from dealroom.application.common.interfaces import Command, CommandHandler
from dealroom.application.common.loading import load_conversation
from dealroom.application.services.conversation_locks import ConversationLocks
from dealroom.domain.entities.participant import Participant, Permissions
from dealroom.domain.ports.clock import Clock
from dealroom.domain.ports.repositories import ConversationRepository
from dealroom.domain.value_objects.conversation_id import ConversationId
from dealroom.domain.value_objects.participant_role import ParticipantRole
from dealroom.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AddParticipantCommand(Command[Participant]):
    conversation_id: ConversationId
    acting_user_id: UserId
    user_id: UserId
    name: str
    role: ParticipantRole
    company: str = ""
    permissions: Optional[Permissions] = None


class AddParticipantHandler(CommandHandler[Participant]):
    def __init__(
        self,
        conversation_repository: ConversationRepository,
        locks: ConversationLocks,
        clock: Clock,
    ):
        self._conversation_repository = conversation_repository
        self._locks = locks
        self._clock = clock

    async def execute(self, command: AddParticipantCommand) -> Participant:
        async with self._locks.for_conversation(command.conversation_id):
            conversation = await load_conversation(
                self._conversation_repository, command.conversation_id
            )
            participant = conversation.add_participant(
                Participant.create(
                    user_id=command.user_id,
                    name=command.name,
                    role=command.role,
                    joined_at=self._clock.now(),
                    company=command.company,
                    permissions=command.permissions,
                ),
                invited_by=command.acting_user_id,
            )
            await self._conversation_repository.save(conversation)

        logger.info(
            f"[AddParticipant] {command.acting_user_id} added {participant.user_id} "
            f"as {participant.role.value} to {command.conversation_id}"
        )
        return participant

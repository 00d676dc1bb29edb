"""
Create Conversation Command.

Guidelines:
- Command: @dataclass(frozen=True) holding input data
- Handler: receives repository, clock and customer directory via __init__ (DI)
- Returns: the created Conversation

Flow:
1. Resolve the borrower through the customer directory when customer_id is given
2. Build participants (creator + invitees), permissions defaulted from role
3. Conversation.create() adds the assistant and validates everything
4. Save via repository
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from dealroom.application.common.interfaces import Command, CommandHandler
from dealroom.domain.entities.conversation import Conversation
from dealroom.domain.entities.participant import Participant, Permissions
from dealroom.domain.exceptions import ValidationError
from dealroom.domain.ports.clock import Clock
from dealroom.domain.ports.customer_directory import CustomerDirectory
from dealroom.domain.ports.repositories import ConversationRepository
from dealroom.domain.value_objects.deal_type import DealType
from dealroom.domain.value_objects.participant_role import ParticipantRole
from dealroom.domain.value_objects.risk_profile import BorrowerRiskProfile
from dealroom.domain.value_objects.urgency import Urgency
from dealroom.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvitedParticipant:
    user_id: UserId
    name: str
    role: ParticipantRole
    company: str = ""
    permissions: Optional[Permissions] = None


@dataclass(frozen=True)
class CreateConversationCommand(Command[Conversation]):
    transaction_id: str
    title: str
    deal_amount: float
    deal_type: DealType
    participants: tuple[InvitedParticipant, ...]
    borrower_name: Optional[str] = None
    customer_id: Optional[str] = None
    urgency: Urgency = Urgency.MEDIUM
    target_close_date: Optional[datetime] = None
    risk_profile: Optional[BorrowerRiskProfile] = None


class CreateConversationHandler(CommandHandler[Conversation]):
    def __init__(
        self,
        conversation_repository: ConversationRepository,
        customer_directory: CustomerDirectory,
        clock: Clock,
    ):
        self._conversation_repository = conversation_repository
        self._customer_directory = customer_directory
        self._clock = clock

    async def execute(self, command: CreateConversationCommand) -> Conversation:
        borrower_name = command.borrower_name
        risk_profile = command.risk_profile
        if command.customer_id:
            profile = await self._customer_directory.resolve(command.customer_id)
            borrower_name = borrower_name or profile.name
            risk_profile = risk_profile or profile.risk_profile
        if not borrower_name:
            raise ValidationError("Either borrower_name or customer_id is required")

        joined_at = self._clock.now()
        participants = [
            Participant.create(
                user_id=invited.user_id,
                name=invited.name,
                role=invited.role,
                joined_at=joined_at,
                company=invited.company,
                permissions=invited.permissions,
            )
            for invited in command.participants
        ]

        conversation = Conversation.create(
            transaction_id=command.transaction_id,
            title=command.title,
            borrower_name=borrower_name,
            deal_amount=command.deal_amount,
            deal_type=command.deal_type,
            initial_participants=participants,
            urgency=command.urgency,
            target_close_date=command.target_close_date,
            risk_profile=risk_profile,
            clock=self._clock,
        )
        await self._conversation_repository.save(conversation)
        logger.info(
            f"[CreateConversation] {conversation.id} for transaction "
            f"{conversation.transaction_id} ({len(conversation.participants)} participants)"
        )
        return conversation

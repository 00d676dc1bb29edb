"""Conversation DTOs for API request/response and snapshot storage."""

from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from dealroom.application.dto.chat import AttachmentDTO, MessageDTO
from dealroom.domain.entities.conversation import Conversation
from dealroom.domain.entities.participant import Participant, Permissions
from dealroom.domain.ports.clock import Clock
from dealroom.domain.value_objects.conversation_id import ConversationId
from dealroom.domain.value_objects.deal_status import DealStatus
from dealroom.domain.value_objects.deal_type import DealType
from dealroom.domain.value_objects.participant_role import ParticipantRole
from dealroom.domain.value_objects.risk_profile import BorrowerRiskProfile
from dealroom.domain.value_objects.urgency import Urgency
from dealroom.domain.value_objects.user_id import UserId


class PermissionsDTO(BaseModel):
    can_invite_users: bool = False
    can_upload_documents: bool = False
    can_access_financials: bool = False
    can_submit_to_lenders: bool = False
    can_approve_deal: bool = False

    @classmethod
    def from_entity(cls, permissions: Permissions) -> PermissionsDTO:
        return cls(
            can_invite_users=permissions.can_invite_users,
            can_upload_documents=permissions.can_upload_documents,
            can_access_financials=permissions.can_access_financials,
            can_submit_to_lenders=permissions.can_submit_to_lenders,
            can_approve_deal=permissions.can_approve_deal,
        )

    def to_entity(self) -> Permissions:
        return Permissions(**self.model_dump())


class ParticipantDTO(BaseModel):
    user_id: str
    name: str
    role: ParticipantRole
    company: str = ""
    joined_at: datetime
    permissions: PermissionsDTO
    is_online: bool = False
    last_seen: Optional[datetime] = None

    @classmethod
    def from_entity(cls, participant: Participant) -> ParticipantDTO:
        return cls(
            user_id=participant.user_id.value,
            name=participant.name,
            role=participant.role,
            company=participant.company,
            joined_at=participant.joined_at,
            permissions=PermissionsDTO.from_entity(participant.permissions),
            is_online=participant.is_online,
            last_seen=participant.last_seen,
        )

    def to_entity(self) -> Participant:
        return Participant(
            user_id=UserId(self.user_id),
            name=self.name,
            role=self.role,
            company=self.company,
            joined_at=self.joined_at,
            permissions=self.permissions.to_entity(),
            is_online=self.is_online,
            last_seen=self.last_seen,
        )


class RiskProfileDTO(BaseModel):
    credit_score: Optional[int] = None
    dscr: Optional[float] = None
    years_in_business: Optional[float] = None
    collateral_coverage: Optional[float] = None

    def to_entity(self) -> BorrowerRiskProfile:
        return BorrowerRiskProfile(**self.model_dump())


class ConversationDTO(BaseModel):
    id: str
    transaction_id: str
    title: str
    borrower_name: str
    deal_amount: float
    deal_type: DealType
    status: DealStatus
    urgency: Urgency
    created_at: datetime
    updated_at: datetime
    target_close_date: Optional[datetime] = None
    risk_profile: Optional[RiskProfileDTO] = None
    participants: list[ParticipantDTO]
    messages: list[MessageDTO] = []
    documents: list[AttachmentDTO] = []

    @classmethod
    def from_entity(cls, conversation: Conversation) -> ConversationDTO:
        risk = conversation.risk_profile
        return cls(
            id=conversation.id.value,
            transaction_id=conversation.transaction_id,
            title=conversation.title,
            borrower_name=conversation.borrower_name,
            deal_amount=conversation.deal_amount,
            deal_type=conversation.deal_type,
            status=conversation.status,
            urgency=conversation.urgency,
            created_at=conversation.created_at,
            updated_at=conversation.updated_at,
            target_close_date=conversation.target_close_date,
            risk_profile=RiskProfileDTO(
                credit_score=risk.credit_score,
                dscr=risk.dscr,
                years_in_business=risk.years_in_business,
                collateral_coverage=risk.collateral_coverage,
            )
            if risk
            else None,
            participants=[ParticipantDTO.from_entity(p) for p in conversation.participants],
            messages=[MessageDTO.from_entity(m) for m in conversation.messages],
            documents=[AttachmentDTO.from_entity(a) for a in conversation.documents],
        )

    def to_entity(self, clock: Clock) -> Conversation:
        return Conversation(
            id=ConversationId(self.id),
            transaction_id=self.transaction_id,
            title=self.title,
            borrower_name=self.borrower_name,
            deal_amount=self.deal_amount,
            deal_type=self.deal_type,
            status=self.status,
            created_at=self.created_at,
            updated_at=self.updated_at,
            urgency=self.urgency,
            participants=tuple(p.to_entity() for p in self.participants),
            messages=tuple(m.to_entity() for m in self.messages),
            documents=tuple(a.to_entity() for a in self.documents),
            target_close_date=self.target_close_date,
            risk_profile=self.risk_profile.to_entity() if self.risk_profile else None,
            clock=clock,
        )


class ConversationSummaryDTO(BaseModel):
    """Worklist row: deal headline plus a preview of the last message."""

    id: str
    transaction_id: str
    title: str
    borrower_name: str
    deal_amount: float
    deal_type: DealType
    status: DealStatus
    urgency: Urgency
    updated_at: datetime
    participant_count: int
    message_count: int
    preview: str = ""

    @classmethod
    def from_entity(cls, conversation: Conversation) -> ConversationSummaryDTO:
        last = conversation.last_message
        return cls(
            id=conversation.id.value,
            transaction_id=conversation.transaction_id,
            title=conversation.title,
            borrower_name=conversation.borrower_name,
            deal_amount=conversation.deal_amount,
            deal_type=conversation.deal_type,
            status=conversation.status,
            urgency=conversation.urgency,
            updated_at=conversation.updated_at,
            participant_count=len(conversation.participants),
            message_count=len(conversation.messages),
            preview=last.content[:80] if last else "",
        )


class ConversationListDTO(BaseModel):
    conversations: list[ConversationSummaryDTO]
    total: int

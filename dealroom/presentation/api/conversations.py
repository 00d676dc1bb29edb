"""
Conversations API Router - deal conversations, participants, status and deal terms.

Thin layer: parses the request, builds a Command/Query, delegates to the
injected handler and maps the result to a DTO. Domain exceptions are mapped
to HTTP status codes by the app-level exception handlers.

Flow:
  HTTP Request → Router → Command → Handler → Conversation aggregate → Repository
                                 ↓
  HTTP Response ← Router ← DTO ←
"""

from datetime import datetime
from logging import getLogger
from typing import Any, Literal, Optional
from fastapi import APIRouter, Depends, Query, Request, status
from dishka.integrations.fastapi import FromDishka, inject
from pydantic import BaseModel, Field

from dealroom.application.commands.conversations import (
    AddParticipantCommand,
    AddParticipantHandler,
    AdvanceStatusCommand,
    AdvanceStatusHandler,
    CreateConversationCommand,
    CreateConversationHandler,
    InvitedParticipant,
    MarkPresenceCommand,
    MarkPresenceHandler,
    UpdateDealCommand,
    UpdateDealHandler,
)
from dealroom.application.queries.conversations import (
    GetConversationHandler,
    GetConversationQuery,
    GetPermissionsHandler,
    GetPermissionsQuery,
    ListConversationsHandler,
    ListConversationsQuery,
)
from dealroom.application.dto.chat import MessageDTO
from dealroom.application.dto.conversation import (
    ConversationDTO,
    ConversationListDTO,
    ConversationSummaryDTO,
    ParticipantDTO,
    PermissionsDTO,
    RiskProfileDTO,
)
from dealroom.domain.services.conversation_directory import FilterMode, SortKey
from dealroom.domain.value_objects.deal_status import DealStatus
from dealroom.domain.value_objects.deal_type import DealType
from dealroom.domain.value_objects.participant_role import ParticipantRole
from dealroom.domain.value_objects.urgency import Urgency
from dealroom.domain.value_objects.user_id import UserId
from dealroom.presentation.api.params import parse_conversation_id, parse_user_id
from dealroom.presentation.dependencies.auth import AuthUser, get_current_user

logger = getLogger(__name__)


# ==================== REQUEST/RESPONSE MODELS ====================


class ParticipantRequest(BaseModel):
    user_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    role: ParticipantRole
    company: str = ""
    permissions: Optional[PermissionsDTO] = None

    def to_invited(self) -> InvitedParticipant:
        return InvitedParticipant(
            user_id=UserId(self.user_id),
            name=self.name,
            role=self.role,
            company=self.company,
            permissions=self.permissions.to_entity() if self.permissions else None,
        )


class CreateConversationRequest(BaseModel):
    """
    Request body for opening a deal conversation.

    Either borrower_name or customer_id (resolved through the customer
    directory) is required. The caller joins as creator_role unless they are
    already listed in participants.
    """

    transaction_id: str
    title: str
    deal_amount: float = Field(allow_inf_nan=False)
    deal_type: DealType
    borrower_name: Optional[str] = None
    customer_id: Optional[str] = None
    urgency: Urgency = Urgency.MEDIUM
    target_close_date: Optional[datetime] = None
    risk_profile: Optional[RiskProfileDTO] = None
    creator_role: ParticipantRole = ParticipantRole.FINANCE_MANAGER
    creator_company: str = ""
    participants: list[ParticipantRequest] = []


class AdvanceStatusRequest(BaseModel):
    status: DealStatus


class UpdateDealRequest(BaseModel):
    field: Literal["title", "deal_amount", "urgency", "target_close_date"]
    value: Any = None


class PresenceRequest(BaseModel):
    is_online: bool


# ==================== ROUTER ====================

router = APIRouter(prefix="/conversations", tags=["conversations"])


# ==================== ENDPOINTS ====================


@router.post(
    "",
    response_model=ConversationDTO,
    status_code=status.HTTP_201_CREATED,
)
@inject
async def create_conversation(
    request: CreateConversationRequest,
    handler: FromDishka[CreateConversationHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """Open a conversation for a transaction. EVA joins automatically."""
    participants = [p.to_invited() for p in request.participants]
    if not any(p.user_id == current_user.user_id for p in participants):
        participants.insert(
            0,
            InvitedParticipant(
                user_id=current_user.user_id,
                name=current_user.display_name,
                role=request.creator_role,
                company=request.creator_company,
            ),
        )

    command = CreateConversationCommand(
        transaction_id=request.transaction_id,
        title=request.title,
        deal_amount=request.deal_amount,
        deal_type=request.deal_type,
        participants=tuple(participants),
        borrower_name=request.borrower_name,
        customer_id=request.customer_id,
        urgency=request.urgency,
        target_close_date=request.target_close_date,
        risk_profile=request.risk_profile.to_entity() if request.risk_profile else None,
    )
    conversation = await handler.execute(command)
    return ConversationDTO.from_entity(conversation)


@router.get(
    "",
    response_model=ConversationListDTO,
    status_code=status.HTTP_200_OK,
)
@inject
async def list_conversations(
    http_request: Request,
    handler: FromDishka[ListConversationsHandler],
    current_user: AuthUser = Depends(get_current_user),
    filter: FilterMode = FilterMode.ALL,
    sort: SortKey = SortKey.RECENT,
    limit: Optional[int] = Query(default=None, ge=1, le=500),
):
    """
    Worklist of deal conversations.

    GET /conversations?filter=urgent&sort=amount&limit=20
    filter: all | active | urgent | my_deals (conversations the caller participates in)
    sort:   recent | amount | urgency
    """
    query = ListConversationsQuery(
        acting_user_id=current_user.user_id,
        filter_mode=filter,
        sort_key=sort,
        limit=limit or http_request.app.state.config.CONVERSATION_LIST_LIMIT,
    )
    conversations = await handler.execute(query)
    return ConversationListDTO(
        conversations=[ConversationSummaryDTO.from_entity(c) for c in conversations],
        total=len(conversations),
    )


@router.get(
    "/{conversation_id}",
    response_model=ConversationDTO,
    status_code=status.HTTP_200_OK,
)
@inject
async def get_conversation(
    conversation_id: str,
    handler: FromDishka[GetConversationHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """Full conversation snapshot: participants, messages and documents."""
    query = GetConversationQuery(
        conversation_id=parse_conversation_id(conversation_id),
        acting_user_id=current_user.user_id,
    )
    conversation = await handler.execute(query)
    return ConversationDTO.from_entity(conversation)


@router.post(
    "/{conversation_id}/status",
    response_model=MessageDTO,
    status_code=status.HTTP_200_OK,
)
@inject
async def advance_status(
    conversation_id: str,
    request: AdvanceStatusRequest,
    handler: FromDishka[AdvanceStatusHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """Move the deal to its next stage. Returns the status_update message."""
    command = AdvanceStatusCommand(
        conversation_id=parse_conversation_id(conversation_id),
        acting_user_id=current_user.user_id,
        next_status=request.status,
    )
    message = await handler.execute(command)
    return MessageDTO.from_entity(message)


@router.post(
    "/{conversation_id}/participants",
    response_model=ParticipantDTO,
    status_code=status.HTTP_201_CREATED,
)
@inject
async def add_participant(
    conversation_id: str,
    request: ParticipantRequest,
    handler: FromDishka[AddParticipantHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """Invite a user. The caller needs can_invite_users."""
    command = AddParticipantCommand(
        conversation_id=parse_conversation_id(conversation_id),
        acting_user_id=current_user.user_id,
        user_id=parse_user_id(request.user_id),
        name=request.name,
        role=request.role,
        company=request.company,
        permissions=request.permissions.to_entity() if request.permissions else None,
    )
    participant = await handler.execute(command)
    return ParticipantDTO.from_entity(participant)


@router.get(
    "/{conversation_id}/participants/{user_id}/permissions",
    response_model=PermissionsDTO,
    status_code=status.HTTP_200_OK,
)
@inject
async def get_participant_permissions(
    conversation_id: str,
    user_id: str,
    handler: FromDishka[GetPermissionsHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    query = GetPermissionsQuery(
        conversation_id=parse_conversation_id(conversation_id),
        acting_user_id=current_user.user_id,
        user_id=parse_user_id(user_id),
    )
    permissions = await handler.execute(query)
    return PermissionsDTO.from_entity(permissions)


@router.patch(
    "/{conversation_id}/deal",
    response_model=MessageDTO,
    status_code=status.HTTP_200_OK,
)
@inject
async def update_deal(
    conversation_id: str,
    request: UpdateDealRequest,
    handler: FromDishka[UpdateDealHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """
    Change one deal attribute.

    Request: {"field": "deal_amount", "value": 800000}
    Response: the deal_update system message
    """
    command = UpdateDealCommand(
        conversation_id=parse_conversation_id(conversation_id),
        acting_user_id=current_user.user_id,
        field_name=request.field,
        value=request.value,
    )
    message = await handler.execute(command)
    return MessageDTO.from_entity(message)


@router.post(
    "/{conversation_id}/presence",
    response_model=ParticipantDTO,
    status_code=status.HTTP_200_OK,
)
@inject
async def mark_presence(
    conversation_id: str,
    request: PresenceRequest,
    handler: FromDishka[MarkPresenceHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """Mark the caller online or offline in this conversation."""
    command = MarkPresenceCommand(
        conversation_id=parse_conversation_id(conversation_id),
        user_id=current_user.user_id,
        is_online=request.is_online,
    )
    participant = await handler.execute(command)
    return ParticipantDTO.from_entity(participant)

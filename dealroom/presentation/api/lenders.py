"""
Lenders API Router - EVA's lender matches and lender selection.
"""

from logging import getLogger
from typing import Optional
from fastapi import APIRouter, Depends, status
from dishka.integrations.fastapi import FromDishka, inject
from pydantic import BaseModel

from dealroom.application.commands.lenders import SelectLenderCommand, SelectLenderHandler
from dealroom.application.queries.lenders import (
    RequestLenderMatchesHandler,
    RequestLenderMatchesQuery,
)
from dealroom.application.dto.chat import MessageDTO
from dealroom.application.dto.lender import LenderRecommendationDTO
from dealroom.presentation.api.params import parse_conversation_id
from dealroom.presentation.dependencies.auth import AuthUser, get_current_user

logger = getLogger(__name__)


# ==================== REQUEST/RESPONSE MODELS ====================


class LenderMatchesResponse(BaseModel):
    conversation_id: str
    recommendations: list[LenderRecommendationDTO]


class SelectLenderResponse(BaseModel):
    recommendation: LenderRecommendationDTO
    message: MessageDTO
    confirmation: Optional[MessageDTO] = None
    confirmation_pending: bool = False


# ==================== ROUTER ====================

router = APIRouter(prefix="/conversations", tags=["lenders"])


# ==================== ENDPOINTS ====================


@router.get(
    "/{conversation_id}/lender-matches",
    response_model=LenderMatchesResponse,
    status_code=status.HTTP_200_OK,
)
@inject
async def request_lender_matches(
    conversation_id: str,
    handler: FromDishka[RequestLenderMatchesHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """Ranked lender recommendations for the deal (deterministic)."""
    query = RequestLenderMatchesQuery(
        conversation_id=parse_conversation_id(conversation_id),
        acting_user_id=current_user.user_id,
    )
    recommendations = await handler.execute(query)
    return LenderMatchesResponse(
        conversation_id=conversation_id,
        recommendations=[LenderRecommendationDTO.from_entity(r) for r in recommendations],
    )


@router.post(
    "/{conversation_id}/lender-matches/{recommendation_id}/select",
    response_model=SelectLenderResponse,
    status_code=status.HTTP_201_CREATED,
)
@inject
async def select_lender(
    conversation_id: str,
    recommendation_id: str,
    handler: FromDishka[SelectLenderHandler],
    current_user: AuthUser = Depends(get_current_user),
    wait_for_reply: bool = False,
):
    """Submit the deal to a recommended lender. Does not change the deal status."""
    command = SelectLenderCommand(
        conversation_id=parse_conversation_id(conversation_id),
        acting_user_id=current_user.user_id,
        recommendation_id=recommendation_id,
        wait_for_reply=wait_for_reply,
    )
    result = await handler.execute(command)
    return SelectLenderResponse(
        recommendation=LenderRecommendationDTO.from_entity(result.recommendation),
        message=MessageDTO.from_entity(result.message),
        confirmation=MessageDTO.from_entity(result.confirmation)
        if result.confirmation
        else None,
        confirmation_pending=result.confirmation_pending,
    )

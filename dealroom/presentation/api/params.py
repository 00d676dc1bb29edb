"""Path parameter parsing shared by the routers."""

from fastapi import HTTPException, status

from dealroom.domain.value_objects.conversation_id import ConversationId
from dealroom.domain.value_objects.user_id import UserId


def parse_conversation_id(raw: str) -> ConversationId:
    try:
        return ConversationId(raw)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


def parse_user_id(raw: str) -> UserId:
    try:
        return UserId(raw)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

"""
Chat API Router - posting messages and documents into a deal conversation.

Both endpoints may queue a reply from EVA. By default the response returns
as soon as the message is stored (reply_pending=true) and EVA's reply shows
up in the conversation after the assistant delay; wait_for_reply=true keeps
the request open until the reply has been appended.
"""

from logging import getLogger
from typing import Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from dishka.integrations.fastapi import FromDishka, inject
from pydantic import BaseModel

from dealroom.application.commands.chat import (
    SendMessageCommand,
    SendMessageHandler,
    SendMessageResult,
    UploadedFile,
)
from dealroom.application.dto.chat import MessageDTO
from dealroom.domain.value_objects.message_type import MessageType
from dealroom.presentation.api.params import parse_conversation_id
from dealroom.presentation.dependencies.auth import AuthUser, get_current_user

logger = getLogger(__name__)


# ==================== REQUEST/RESPONSE MODELS ====================


class SendMessageRequest(BaseModel):
    content: str
    message_type: MessageType = MessageType.TEXT
    wait_for_reply: bool = False


class SendMessageResponse(BaseModel):
    message: MessageDTO
    reply: Optional[MessageDTO] = None
    reply_pending: bool = False

    @classmethod
    def from_result(cls, result: SendMessageResult) -> "SendMessageResponse":
        return cls(
            message=MessageDTO.from_entity(result.message),
            reply=MessageDTO.from_entity(result.reply) if result.reply else None,
            reply_pending=result.reply_pending,
        )


# ==================== ROUTER ====================

router = APIRouter(prefix="/conversations", tags=["chat"])


# ==================== ENDPOINTS ====================


@router.post(
    "/{conversation_id}/messages",
    response_model=SendMessageResponse,
    status_code=status.HTTP_201_CREATED,
)
@inject
async def send_message(
    conversation_id: str,
    request: SendMessageRequest,
    handler: FromDishka[SendMessageHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    command = SendMessageCommand(
        conversation_id=parse_conversation_id(conversation_id),
        sender_id=current_user.user_id,
        content=request.content,
        message_type=request.message_type,
        wait_for_reply=request.wait_for_reply,
    )
    result = await handler.execute(command)
    return SendMessageResponse.from_result(result)


@router.post(
    "/{conversation_id}/documents",
    response_model=SendMessageResponse,
    status_code=status.HTTP_201_CREATED,
)
@inject
async def share_documents(
    conversation_id: str,
    handler: FromDishka[SendMessageHandler],
    current_user: AuthUser = Depends(get_current_user),
    files: list[UploadFile] = File(...),
    content: str = Form(default=""),
    wait_for_reply: bool = Form(default=False),
):
    """Upload files and share them as one document_share message."""
    uploads = []
    for upload in files:
        uploads.append(
            UploadedFile(
                file_name=upload.filename or "file",
                content=await upload.read(),
                file_type=upload.content_type or "application/octet-stream",
            )
        )
    logger.debug(f"[Chat] {current_user.user_id} sharing {len(uploads)} file(s)")

    command = SendMessageCommand(
        conversation_id=parse_conversation_id(conversation_id),
        sender_id=current_user.user_id,
        content=content,
        files=tuple(uploads),
        wait_for_reply=wait_for_reply,
    )
    result = await handler.execute(command)
    return SendMessageResponse.from_result(result)

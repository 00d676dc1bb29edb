"""
SendMessage Command - Append a participant message and trigger EVA.

Command data:
- conversation_id: ConversationId
- sender_id: UserId
- content: str
- files: uploaded files to store and attach (optional)
- wait_for_reply: block until EVA's reply is appended (optional)

Handler:
1. Load conversation, check the sender may post (and upload, when files are given)
2. Upload files through the attachment store
3. Append the message under the conversation lock and save
4. If the content mentions a trigger keyword, queue EVA's reply while still
   holding the lock, then notify
5. Return the message (and the reply when waited for)
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from dealroom.application.common.interfaces import Command, CommandHandler
from dealroom.application.common.loading import load_conversation
from dealroom.application.services.assistant_dispatcher import AssistantDispatcher
from dealroom.application.services.conversation_locks import ConversationLocks
from dealroom.application.services.notifier import ConversationNotifier
from dealroom.domain.entities.attachment import Attachment
from dealroom.domain.entities.message import Message
from dealroom.domain.exceptions import AccessDeniedError, ValidationError
from dealroom.domain.ports.attachment_store import AttachmentStore
from dealroom.domain.ports.clock import Clock
from dealroom.domain.ports.repositories import ConversationRepository
from dealroom.domain.services.assistant_responder import (
    AssistantResponder,
    should_respond,
)
from dealroom.domain.value_objects.conversation_id import ConversationId
from dealroom.domain.value_objects.message_type import MessageType
from dealroom.domain.value_objects.user_id import ASSISTANT_USER_ID, UserId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedFile:
    file_name: str
    content: bytes
    file_type: str = "application/octet-stream"


@dataclass(frozen=True)
class SendMessageResult:
    message: Message
    reply: Optional[Message] = None
    reply_pending: bool = False


@dataclass(frozen=True)
class SendMessageCommand(Command[SendMessageResult]):
    conversation_id: ConversationId
    sender_id: UserId
    content: str
    message_type: MessageType = MessageType.TEXT
    files: tuple[UploadedFile, ...] = ()
    wait_for_reply: bool = False


class SendMessageHandler(CommandHandler[SendMessageResult]):
    def __init__(
        self,
        conversation_repository: ConversationRepository,
        locks: ConversationLocks,
        notifier: ConversationNotifier,
        dispatcher: AssistantDispatcher,
        responder: AssistantResponder,
        attachment_store: AttachmentStore,
        clock: Clock,
        max_upload_bytes: int,
    ):
        self._conversation_repository = conversation_repository
        self._locks = locks
        self._notifier = notifier
        self._dispatcher = dispatcher
        self._responder = responder
        self._attachment_store = attachment_store
        self._clock = clock
        self._max_upload_bytes = max_upload_bytes

    async def execute(self, command: SendMessageCommand) -> SendMessageResult:
        attachments = await self._store_files(command)

        async with self._locks.for_conversation(command.conversation_id):
            conversation = await load_conversation(
                self._conversation_repository, command.conversation_id
            )
            message = conversation.append_message(
                command.sender_id,
                command.content,
                command.message_type,
                attachments=attachments,
            )
            await self._conversation_repository.save(conversation)
            # Queued before the lock is released so replies keep trigger order
            future = self._queue_reply(message)

        logger.info(
            f"[SendMessage] {message.sender_id} -> {command.conversation_id} "
            f"({message.message_type.value}, {len(message.attachments)} attachments)"
        )
        await self._notifier.message_appended(message)

        if future is None:
            return SendMessageResult(message=message)
        if not command.wait_for_reply:
            return SendMessageResult(message=message, reply_pending=True)

        reply = await future
        return SendMessageResult(message=message, reply=reply)

    def _queue_reply(self, message: Message) -> Optional[asyncio.Future]:
        if message.sender_id == ASSISTANT_USER_ID or not should_respond(message.content):
            return None
        content = message.content
        return self._dispatcher.submit(
            message.conversation_id,
            lambda latest: self._responder.synthesize(content, latest),
        )

    async def _store_files(self, command: SendMessageCommand) -> list[Attachment]:
        if not command.files:
            return []

        # Check before uploading so a rejected message leaves no stray files
        conversation = await load_conversation(
            self._conversation_repository, command.conversation_id
        )
        sender = conversation.get_participant(command.sender_id)
        if not sender.permissions.can_upload_documents:
            raise AccessDeniedError(f"{sender.name} cannot upload documents", "can_upload_documents")

        attachments = []
        for upload in command.files:
            if len(upload.content) > self._max_upload_bytes:
                raise ValidationError(
                    f"{upload.file_name} exceeds the upload limit of "
                    f"{self._max_upload_bytes // (1024 * 1024)} MB"
                )
            stored = await self._attachment_store.upload(
                upload.file_name, upload.content, upload.file_type
            )
            attachments.append(
                Attachment.create(
                    file_name=upload.file_name,
                    file_type=stored.file_type,
                    file_size=stored.file_size,
                    url=stored.url,
                    uploaded_at=self._clock.now(),
                )
            )
        return attachments

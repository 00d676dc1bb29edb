"""Message DTOs for API responses and snapshot serialization."""

from __future__ import annotations
from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel

from dealroom.domain.entities.attachment import Attachment
from dealroom.domain.entities.message import (
    DealUpdate,
    EvaRecommendation,
    LenderSelection,
    Message,
    MessageMetadata,
)
from dealroom.domain.value_objects.conversation_id import ConversationId
from dealroom.domain.value_objects.message_id import MessageId
from dealroom.domain.value_objects.message_type import MessageType, RecommendationType
from dealroom.domain.value_objects.user_id import UserId


class AttachmentDTO(BaseModel):
    id: str
    file_name: str
    file_type: str
    file_size: int
    url: str
    uploaded_at: datetime

    @classmethod
    def from_entity(cls, attachment: Attachment) -> AttachmentDTO:
        return cls(
            id=attachment.id,
            file_name=attachment.file_name,
            file_type=attachment.file_type,
            file_size=attachment.file_size,
            url=attachment.url,
            uploaded_at=attachment.uploaded_at,
        )

    def to_entity(self) -> Attachment:
        return Attachment(**self.model_dump())


class EvaRecommendationDTO(BaseModel):
    type: RecommendationType
    confidence: int
    data: dict[str, Any]


class DealUpdateDTO(BaseModel):
    field: str
    old_value: Optional[str] = None
    new_value: Optional[str] = None


class LenderSelectionDTO(BaseModel):
    recommendation_id: str
    lender_name: str
    time_to_close: int


class MessageMetadataDTO(BaseModel):
    eva_recommendation: Optional[EvaRecommendationDTO] = None
    deal_update: Optional[DealUpdateDTO] = None
    lender_selection: Optional[LenderSelectionDTO] = None

    @classmethod
    def from_entity(cls, metadata: MessageMetadata) -> MessageMetadataDTO:
        eva = metadata.eva_recommendation
        update = metadata.deal_update
        selection = metadata.lender_selection
        return cls(
            eva_recommendation=EvaRecommendationDTO(
                type=eva.type, confidence=eva.confidence, data=dict(eva.data)
            )
            if eva
            else None,
            deal_update=DealUpdateDTO(
                field=update.field,
                old_value=update.old_value,
                new_value=update.new_value,
            )
            if update
            else None,
            lender_selection=LenderSelectionDTO(
                recommendation_id=selection.recommendation_id,
                lender_name=selection.lender_name,
                time_to_close=selection.time_to_close,
            )
            if selection
            else None,
        )

    def to_entity(self) -> MessageMetadata:
        eva = self.eva_recommendation
        return MessageMetadata(
            eva_recommendation=EvaRecommendation(
                type=eva.type, confidence=eva.confidence, data=eva.data
            )
            if eva
            else None,
            deal_update=DealUpdate(**self.deal_update.model_dump())
            if self.deal_update
            else None,
            lender_selection=LenderSelection(**self.lender_selection.model_dump())
            if self.lender_selection
            else None,
        )


class MessageDTO(BaseModel):
    """DTO for message data returned to frontend."""

    id: str
    conversation_id: str
    sender_id: str
    sender_name: str
    sender_role: str
    content: str
    message_type: MessageType
    timestamp: datetime
    is_system_message: bool = False
    attachments: list[AttachmentDTO] = []
    metadata: Optional[MessageMetadataDTO] = None

    @classmethod
    def from_entity(cls, message: Message) -> MessageDTO:
        return cls(
            id=message.id.value,
            conversation_id=message.conversation_id.value,
            sender_id=message.sender_id.value,
            sender_name=message.sender_name,
            sender_role=message.sender_role,
            content=message.content,
            message_type=message.message_type,
            timestamp=message.timestamp,
            is_system_message=message.is_system_message,
            attachments=[AttachmentDTO.from_entity(a) for a in message.attachments],
            metadata=MessageMetadataDTO.from_entity(message.metadata)
            if message.metadata
            else None,
        )

    def to_entity(self) -> Message:
        return Message(
            id=MessageId(self.id),
            conversation_id=ConversationId(self.conversation_id),
            sender_id=UserId(self.sender_id),
            sender_name=self.sender_name,
            sender_role=self.sender_role,
            content=self.content,
            message_type=self.message_type,
            timestamp=self.timestamp,
            is_system_message=self.is_system_message,
            attachments=tuple(a.to_entity() for a in self.attachments),
            metadata=self.metadata.to_entity() if self.metadata else None,
        )

"""
Message Entity - A single immutable message in a deal conversation.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Any, Mapping, Optional

from dealroom.domain.entities.attachment import Attachment
from dealroom.domain.value_objects.conversation_id import ConversationId
from dealroom.domain.value_objects.message_id import MessageId
from dealroom.domain.value_objects.message_type import MessageType, RecommendationType
from dealroom.domain.value_objects.participant_role import (
    ParticipantRole,
    SYSTEM_SENDER_ROLE,
)
from dealroom.domain.value_objects.user_id import UserId

_VALID_SENDER_ROLES = {role.value for role in ParticipantRole} | {SYSTEM_SENDER_ROLE}


@dataclass(frozen=True)
class EvaRecommendation:
    type: RecommendationType
    confidence: int  # 0-100
    data: Mapping[str, Any]

    def __post_init__(self):
        if not 0 <= self.confidence <= 100:
            raise ValueError(f"Confidence out of range: {self.confidence}")
        # read-only copy so the message stays immutable
        object.__setattr__(self, "data", MappingProxyType(dict(self.data)))


@dataclass(frozen=True)
class DealUpdate:
    field: str
    old_value: Optional[str]
    new_value: Optional[str]


@dataclass(frozen=True)
class LenderSelection:
    recommendation_id: str
    lender_name: str
    time_to_close: int


@dataclass(frozen=True)
class MessageMetadata:
    eva_recommendation: Optional[EvaRecommendation] = None
    deal_update: Optional[DealUpdate] = None
    lender_selection: Optional[LenderSelection] = None


@dataclass(frozen=True)
class Message:
    id: MessageId
    conversation_id: ConversationId
    sender_id: UserId
    sender_name: str
    sender_role: str
    content: str
    message_type: MessageType
    timestamp: datetime
    is_system_message: bool = False
    attachments: tuple[Attachment, ...] = ()
    metadata: Optional[MessageMetadata] = None

    def __post_init__(self):
        if self.sender_role not in _VALID_SENDER_ROLES:
            raise ValueError(f"Invalid sender role: {self.sender_role}")
        object.__setattr__(self, "attachments", tuple(self.attachments))

    @property
    def eva_recommendation(self) -> Optional[EvaRecommendation]:
        return self.metadata.eva_recommendation if self.metadata else None

    @property
    def deal_update(self) -> Optional[DealUpdate]:
        return self.metadata.deal_update if self.metadata else None

    @classmethod
    def create(
        cls,
        conversation_id: ConversationId,
        sender_id: UserId,
        sender_name: str,
        sender_role: str,
        content: str,
        message_type: MessageType,
        timestamp: datetime,
        is_system_message: bool = False,
        attachments: tuple[Attachment, ...] = (),
        metadata: Optional[MessageMetadata] = None,
    ) -> Message:
        """Factory method to create a new Message with a generated ID."""
        return cls(
            id=MessageId.new(),
            conversation_id=conversation_id,
            sender_id=sender_id,
            sender_name=sender_name,
            sender_role=sender_role,
            content=content,
            message_type=message_type,
            timestamp=timestamp,
            is_system_message=is_system_message,
            attachments=attachments,
            metadata=metadata,
        )

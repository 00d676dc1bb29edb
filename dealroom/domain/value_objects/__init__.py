"""
VALUE OBJECTS - Immutable domain types

Each value object:
- Has no identity (compared by value, not by ID)
- Is immutable (frozen dataclass or Enum)
- Validates itself on creation
- Pure Python (no framework dependencies)
"""

from dealroom.domain.value_objects.conversation_id import ConversationId
from dealroom.domain.value_objects.message_id import MessageId
from dealroom.domain.value_objects.user_id import (
    UserId,
    ASSISTANT_USER_ID,
    SYSTEM_USER_ID,
    RESERVED_USER_IDS,
)
from dealroom.domain.value_objects.participant_role import (
    ParticipantRole,
    SYSTEM_SENDER_ROLE,
)
from dealroom.domain.value_objects.message_type import MessageType, RecommendationType
from dealroom.domain.value_objects.deal_status import DealStatus, ACTIVE_STATUSES
from dealroom.domain.value_objects.deal_type import DealType
from dealroom.domain.value_objects.urgency import Urgency
from dealroom.domain.value_objects.risk_profile import BorrowerRiskProfile

__all__ = [
    "ConversationId",
    "MessageId",
    "UserId",
    "ASSISTANT_USER_ID",
    "SYSTEM_USER_ID",
    "RESERVED_USER_IDS",
    "ParticipantRole",
    "SYSTEM_SENDER_ROLE",
    "MessageType",
    "RecommendationType",
    "DealStatus",
    "ACTIVE_STATUSES",
    "DealType",
    "Urgency",
    "BorrowerRiskProfile",
]

"""
ENTITIES - Business objects with identity

Each entity:
- Has a unique identifier
- Has behavior (methods)
- Pure Python dataclasses (no ORM, no Pydantic)

Conversation is the aggregate root: messages, participants and documents
are only changed through its methods.
"""

from dealroom.domain.entities.attachment import Attachment
from dealroom.domain.entities.message import (
    Message,
    MessageMetadata,
    EvaRecommendation,
    DealUpdate,
    LenderSelection,
)
from dealroom.domain.entities.participant import (
    Participant,
    Permissions,
    ASSISTANT_PERMISSIONS,
)
from dealroom.domain.entities.lender_recommendation import LenderRecommendation
from dealroom.domain.entities.conversation import Conversation

__all__ = [
    "Attachment",
    "Message",
    "MessageMetadata",
    "EvaRecommendation",
    "DealUpdate",
    "LenderSelection",
    "Participant",
    "Permissions",
    "ASSISTANT_PERMISSIONS",
    "LenderRecommendation",
    "Conversation",
]

"""
DTOs - Data Transfer Objects

DTOs for transferring data between layers:
- chat.py         → MessageDTO, AttachmentDTO
- conversation.py → ConversationDTO, ConversationSummaryDTO, ParticipantDTO
- lender.py       → LenderRecommendationDTO

Note: These are different from domain entities.
DTOs are for API input/output and stored snapshots, entities are for business logic.
"""

from dealroom.application.dto.chat import MessageDTO, AttachmentDTO
from dealroom.application.dto.conversation import (
    ConversationDTO,
    ConversationListDTO,
    ConversationSummaryDTO,
    ParticipantDTO,
    PermissionsDTO,
    RiskProfileDTO,
)
from dealroom.application.dto.lender import LenderRecommendationDTO

__all__ = [
    "MessageDTO",
    "AttachmentDTO",
    "ConversationDTO",
    "ConversationListDTO",
    "ConversationSummaryDTO",
    "ParticipantDTO",
    "PermissionsDTO",
    "RiskProfileDTO",
    "LenderRecommendationDTO",
]

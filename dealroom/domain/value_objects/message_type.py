"""
MessageType - Kinds of messages stored in a deal conversation.
"""

from enum import Enum


class MessageType(str, Enum):
    TEXT = "text"
    DOCUMENT_SHARE = "document_share"
    STATUS_UPDATE = "status_update"
    EVA_RECOMMENDATION = "eva_recommendation"
    DEAL_UPDATE = "deal_update"


class RecommendationType(str, Enum):
    """Kinds of structured recommendations the assistant attaches to a reply."""

    LENDER_MATCH = "lender_match"
    TERMS_SUGGESTION = "terms_suggestion"
    RISK_ASSESSMENT = "risk_assessment"

"""
DOMAIN SERVICES - Pure decision logic (no I/O)

- assistant_responder     → when and how EVA replies
- lender_matcher          → deterministic lender ranking
- conversation_directory  → worklist filter/sort
"""

from dealroom.domain.services.assistant_responder import (
    AssistantReply,
    AssistantResponder,
    should_respond,
)
from dealroom.domain.services.lender_matcher import (
    LenderMatcher,
    LenderProfile,
    DEFAULT_LENDER_CATALOG,
    borrower_strength,
    rank_recommendations,
    risk_level,
)
from dealroom.domain.services.conversation_directory import (
    FilterMode,
    SortKey,
    filter_conversations,
    sort_conversations,
    list_conversations,
    owned_by,
)

__all__ = [
    "AssistantReply",
    "AssistantResponder",
    "should_respond",
    "LenderMatcher",
    "LenderProfile",
    "DEFAULT_LENDER_CATALOG",
    "borrower_strength",
    "rank_recommendations",
    "risk_level",
    "FilterMode",
    "SortKey",
    "filter_conversations",
    "sort_conversations",
    "list_conversations",
    "owned_by",
]

"""
Assistant Responder - Decides whether EVA answers a message and what it says.

Pure decision logic. The dispatcher in the application layer owns timing,
queuing and appending the reply to the conversation.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from dealroom.domain.entities.conversation import Conversation
from dealroom.domain.entities.lender_recommendation import LenderRecommendation
from dealroom.domain.entities.message import EvaRecommendation, MessageMetadata
from dealroom.domain.services.lender_matcher import (
    LenderMatcher,
    borrower_strength,
    risk_level,
)
from dealroom.domain.value_objects.message_type import MessageType, RecommendationType
from dealroom.domain.value_objects.risk_profile import BorrowerRiskProfile

logger = logging.getLogger(__name__)

TRIGGER_KEYWORDS = ("eva", "match", "lender", "recommend", "analyze", "help")

LENDER_MATCH_CONFIDENCE = 92
RISK_ASSESSMENT_CONFIDENCE = 88

DEFAULT_CREDIT_SCORE = 720
DEFAULT_DSCR = 1.4

GENERIC_REPLY = (
    "I'm here to help with this deal. I can provide lender matching, risk "
    "assessment, or document analysis. What specific aspects would you like "
    "me to assist with?"
)
FALLBACK_REPLY = "I encountered an error while processing your request. Please try again."


@dataclass(frozen=True)
class AssistantReply:
    content: str
    metadata: Optional[MessageMetadata] = None

    @property
    def message_type(self) -> MessageType:
        if self.metadata is not None:
            return MessageType.EVA_RECOMMENDATION
        return MessageType.TEXT


def should_respond(content: str) -> bool:
    """True when the message mentions any trigger keyword (case-insensitive)."""
    lowered = (content or "").lower()
    return any(keyword in lowered for keyword in TRIGGER_KEYWORDS)


class AssistantResponder:
    def __init__(self, lender_matcher: LenderMatcher):
        self._lender_matcher = lender_matcher

    def synthesize(self, content: str, conversation: Conversation) -> AssistantReply:
        """
        Build EVA's reply. First matching rule wins:
        1. "match" / "lender"    -> lender match summary
        2. "analyze" / "credit"  -> risk assessment
        3. anything else         -> clarifying question
        """
        lowered = (content or "").lower()
        if "match" in lowered or "lender" in lowered:
            return self._lender_match_reply(conversation)
        if "analyze" in lowered or "credit" in lowered:
            return self._risk_assessment_reply(conversation)
        return AssistantReply(content=GENERIC_REPLY)

    def lender_selected(self, recommendation: LenderRecommendation) -> AssistantReply:
        return AssistantReply(
            content=(
                f"Great choice! I've prepared the submission package for "
                f"{recommendation.lender_name}. This lender typically closes in "
                f"{recommendation.time_to_close} days."
            )
        )

    @staticmethod
    def fallback() -> AssistantReply:
        return AssistantReply(content=FALLBACK_REPLY)

    def _lender_match_reply(self, conversation: Conversation) -> AssistantReply:
        matches = self._lender_matcher.match(conversation)
        if not matches:
            content = (
                f"I couldn't find a lender on our panel for a "
                f"${conversation.deal_amount:,.0f} {conversation.deal_type.label} deal. "
                f"Adjusting the amount or structure may open up more options."
            )
            data = {"topRecommendation": None, "speedAdvantage": None, "termAdvantage": None}
        else:
            top = matches[0]
            fastest = min(matches, key=lambda r: (r.time_to_close, r.rank_key))
            cheapest = min(matches, key=lambda r: (r.estimated_rate, r.rank_key))
            content = (
                f"I've analyzed this deal and found {len(matches)} lender matches. "
                f"{top.lender_name} has the highest approval probability at "
                f"{top.approval_probability}%. For speed I recommend {fastest.lender_name} "
                f"({fastest.time_to_close}-day close); for best terms, "
                f"{cheapest.lender_name} ({cheapest.estimated_rate:.2f}% estimated rate)."
            )
            data = {
                "topRecommendation": top.lender_name,
                "speedAdvantage": f"{fastest.lender_name}: {fastest.time_to_close}-day close",
                "termAdvantage": f"{cheapest.lender_name}: {cheapest.estimated_rate:.2f}% estimated rate",
            }
        return AssistantReply(
            content=content,
            metadata=MessageMetadata(
                eva_recommendation=EvaRecommendation(
                    type=RecommendationType.LENDER_MATCH,
                    confidence=LENDER_MATCH_CONFIDENCE,
                    data=data,
                )
            ),
        )

    def _risk_assessment_reply(self, conversation: Conversation) -> AssistantReply:
        provided = conversation.risk_profile or BorrowerRiskProfile()
        credit_score = provided.credit_score or DEFAULT_CREDIT_SCORE
        dscr = provided.dscr if provided.dscr is not None else DEFAULT_DSCR
        profile = BorrowerRiskProfile(
            credit_score=credit_score,
            dscr=dscr,
            years_in_business=provided.years_in_business,
            collateral_coverage=provided.collateral_coverage,
        )
        level = risk_level(borrower_strength(profile))

        content = (
            f"I've analyzed the borrower's credit profile for {conversation.borrower_name}. "
            f"They have a {credit_score} FICO score and a debt service coverage ratio "
            f"of {dscr:.2f}x, which puts this deal at {level} risk."
        )
        return AssistantReply(
            content=content,
            metadata=MessageMetadata(
                eva_recommendation=EvaRecommendation(
                    type=RecommendationType.RISK_ASSESSMENT,
                    confidence=RISK_ASSESSMENT_CONFIDENCE,
                    data={"creditScore": credit_score, "dscr": dscr, "riskLevel": level},
                )
            ),
        )

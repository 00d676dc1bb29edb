"""
Lender Matcher - Deterministic lender recommendations for a deal.

Scoring:
1. Borrower strength (0-100) is a weighted average of the risk inputs, each
   scored against hard-approval / soft-approval / info-request / hard-decline
   tiers. Missing inputs count as neutral.
2. Every catalog lender that supports the deal type and amount gets an
   approval probability, rate and time to close derived from its base terms
   and the borrower strength.
3. Results are ranked by approval desc, time to close asc, rate asc, name asc.

Same conversation in, same ranked list (and ids) out.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Sequence
from uuid import NAMESPACE_URL, uuid5

from dealroom.domain.entities.conversation import Conversation
from dealroom.domain.entities.lender_recommendation import LenderRecommendation
from dealroom.domain.exceptions import ValidationError
from dealroom.domain.value_objects.deal_type import DealType
from dealroom.domain.value_objects.risk_profile import BorrowerRiskProfile

logger = logging.getLogger(__name__)

NEUTRAL_POINTS = 60
_TIER_POINTS = (100, 80, 60, 40)
_BELOW_DECLINE_POINTS = 20

# (attribute, weight, thresholds for hard_approval, soft_approval, info_request, hard_decline)
_CRITERIA = (
    ("credit_score", 25, (750, 680, 620, 580)),
    ("dscr", 20, (1.5, 1.25, 1.0, 0.8)),
    ("collateral_coverage", 15, (150, 120, 100, 80)),
    ("years_in_business", 10, (5, 3, 2, 1)),
)

LARGE_DEAL_AMOUNT = 1_000_000
LARGE_DEAL_EXTRA_DAYS = 2
NEAR_LIMIT_RATIO = 0.8
NEAR_LIMIT_PENALTY = 5
RATE_PER_STRENGTH_POINT = 0.02

_DEAL_TYPE_PREMIUM = {
    DealType.EQUIPMENT_FINANCING: 0.0,
    DealType.WORKING_CAPITAL: 1.5,
    DealType.COMMERCIAL_MORTGAGE: -0.25,
    DealType.SBA_LOAN: 0.5,
}

_DEAL_TYPE_TERMS = {
    DealType.EQUIPMENT_FINANCING: "60 months, fixed rate",
    DealType.WORKING_CAPITAL: "18 months, revolving",
    DealType.COMMERCIAL_MORTGAGE: "10-year term, 25-year amortization",
    DealType.SBA_LOAN: "10 years, SBA 7(a)",
}


@dataclass(frozen=True)
class LenderProfile:
    name: str
    deal_types: frozenset
    min_amount: float
    max_amount: float
    base_approval: float
    risk_sensitivity: float
    base_rate: float
    base_days_to_close: int
    advantages: tuple[str, ...]
    requirements: tuple[str, ...]
    competitive_edge: str

    def supports(self, deal_type: DealType, amount: float) -> bool:
        return deal_type in self.deal_types and self.min_amount <= amount <= self.max_amount


DEFAULT_LENDER_CATALOG: tuple[LenderProfile, ...] = (
    LenderProfile(
        name="Capital Equipment Finance",
        deal_types=frozenset({DealType.EQUIPMENT_FINANCING}),
        min_amount=25_000,
        max_amount=5_000_000,
        base_approval=86,
        risk_sensitivity=0.4,
        base_rate=6.75,
        base_days_to_close=5,
        advantages=(
            "Equipment-secured structure keeps pricing low",
            "Pays the vendor directly on delivery",
        ),
        requirements=("Equipment quote or invoice", "Two years of business tax returns"),
        competitive_edge="Fastest equipment funding on the panel",
    ),
    LenderProfile(
        name="First Capital Bank",
        deal_types=frozenset(
            {
                DealType.EQUIPMENT_FINANCING,
                DealType.WORKING_CAPITAL,
                DealType.COMMERCIAL_MORTGAGE,
            }
        ),
        min_amount=100_000,
        max_amount=10_000_000,
        base_approval=80,
        risk_sensitivity=0.6,
        base_rate=6.25,
        base_days_to_close=21,
        advantages=(
            "Lowest bank rates for established borrowers",
            "Relationship pricing on deposits",
        ),
        requirements=(
            "Three years of financial statements",
            "Minimum 680 personal credit score",
            "Personal guarantee from majority owners",
        ),
        competitive_edge="Best rate in market for strong credits",
    ),
    LenderProfile(
        name="Growth Capital Partners",
        deal_types=frozenset({DealType.WORKING_CAPITAL, DealType.EQUIPMENT_FINANCING}),
        min_amount=10_000,
        max_amount=2_000_000,
        base_approval=90,
        risk_sensitivity=0.3,
        base_rate=9.5,
        base_days_to_close=3,
        advantages=(
            "Approves thinner credit files",
            "Funding within days of approval",
        ),
        requirements=("Six months of bank statements",),
        competitive_edge="60% faster than traditional lenders",
    ),
    LenderProfile(
        name="Main Street SBA Lending",
        deal_types=frozenset(
            {DealType.SBA_LOAN, DealType.WORKING_CAPITAL, DealType.EQUIPMENT_FINANCING}
        ),
        min_amount=50_000,
        max_amount=5_000_000,
        base_approval=75,
        risk_sensitivity=0.7,
        base_rate=7.25,
        base_days_to_close=45,
        advantages=(
            "SBA guarantee allows a lower down payment",
            "Longest available repayment terms",
        ),
        requirements=(
            "SBA Form 1919 for each owner",
            "Business plan with projections",
            "Two years of business tax returns",
        ),
        competitive_edge="Preferred SBA lender with delegated authority",
    ),
    LenderProfile(
        name="Commercial Trust",
        deal_types=frozenset({DealType.COMMERCIAL_MORTGAGE, DealType.SBA_LOAN}),
        min_amount=250_000,
        max_amount=20_000_000,
        base_approval=78,
        risk_sensitivity=0.5,
        base_rate=6.5,
        base_days_to_close=30,
        advantages=(
            "Up to 85% loan-to-value on owner-occupied property",
            "No prepayment penalty after year three",
        ),
        requirements=("Appraisal and environmental report", "Minimum 1.25x DSCR"),
        competitive_edge="Long amortization on owner-occupied real estate",
    ),
    LenderProfile(
        name="Commercial Real Estate Partners",
        deal_types=frozenset({DealType.COMMERCIAL_MORTGAGE}),
        min_amount=500_000,
        max_amount=25_000_000,
        base_approval=82,
        risk_sensitivity=0.5,
        base_rate=6.9,
        base_days_to_close=35,
        advantages=(
            "Interest-only period available",
            "Handles mixed-use and investor properties",
        ),
        requirements=("Rent roll and leases", "Appraisal", "Property condition report"),
        competitive_edge="Most flexible structures for larger properties",
    ),
)


def _criterion_points(value: Optional[float], thresholds: Sequence[float]) -> int:
    if value is None:
        return NEUTRAL_POINTS
    for threshold, points in zip(thresholds, _TIER_POINTS):
        if value >= threshold:
            return points
    return _BELOW_DECLINE_POINTS


def borrower_strength(profile: Optional[BorrowerRiskProfile]) -> int:
    """Weighted 0-100 score of a borrower's risk inputs."""
    profile = profile or BorrowerRiskProfile()
    total_weight = sum(weight for _, weight, _ in _CRITERIA)
    weighted = sum(
        _criterion_points(getattr(profile, attr), thresholds) * weight
        for attr, weight, thresholds in _CRITERIA
    )
    return round(weighted / total_weight)


def risk_level(strength: int) -> str:
    if strength >= 70:
        return "low"
    if strength >= 50:
        return "moderate"
    return "high"


def rank_recommendations(
    recommendations: Sequence[LenderRecommendation],
) -> list[LenderRecommendation]:
    """Approval desc, then time to close asc, then rate asc."""
    return sorted(recommendations, key=lambda r: r.rank_key)


def _slug(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


class LenderMatcher:
    def __init__(
        self,
        catalog: Sequence[LenderProfile] = DEFAULT_LENDER_CATALOG,
        limit: Optional[int] = 3,
    ):
        self._catalog = tuple(catalog)
        self._limit = limit

    def match(self, conversation: Conversation) -> list[LenderRecommendation]:
        """Rank the catalog lenders for the conversation's deal."""
        amount = conversation.deal_amount
        if amount is None or amount <= 0:
            raise ValidationError(f"Deal amount must be positive, got {amount}")

        strength = borrower_strength(conversation.risk_profile)
        candidates = [
            self._recommend(lender, conversation, strength)
            for lender in self._catalog
            if lender.supports(conversation.deal_type, amount)
        ]
        ranked = rank_recommendations(candidates)
        if self._limit is not None:
            ranked = ranked[: self._limit]

        logger.debug(
            f"[LenderMatcher] conversation={conversation.id} strength={strength} "
            f"eligible={len(candidates)} returned={len(ranked)}"
        )
        return ranked

    def _recommend(
        self, lender: LenderProfile, conversation: Conversation, strength: int
    ) -> LenderRecommendation:
        amount = conversation.deal_amount
        penalty = NEAR_LIMIT_PENALTY if amount > lender.max_amount * NEAR_LIMIT_RATIO else 0
        approval = round(
            lender.base_approval
            + (strength - NEUTRAL_POINTS) * lender.risk_sensitivity
            - penalty
        )
        rate = round(
            lender.base_rate
            + _DEAL_TYPE_PREMIUM[conversation.deal_type]
            + (NEUTRAL_POINTS - strength) * RATE_PER_STRENGTH_POINT,
            2,
        )
        days = lender.base_days_to_close
        if amount > LARGE_DEAL_AMOUNT:
            days += LARGE_DEAL_EXTRA_DAYS

        return LenderRecommendation(
            id=str(uuid5(NAMESPACE_URL, f"dealroom:{conversation.id}:{_slug(lender.name)}")),
            lender_name=lender.name,
            approval_probability=max(0, min(100, approval)),
            estimated_rate=rate,
            estimated_terms=_DEAL_TYPE_TERMS[conversation.deal_type],
            time_to_close=days,
            advantages=lender.advantages,
            requirements=lender.requirements,
            competitive_edge=lender.competitive_edge,
        )

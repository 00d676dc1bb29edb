"""
Unit tests for the deterministic lender matcher.

Run with: pytest tests/test_lender_matcher.py -v
"""

import pytest

from conftest import build_conversation
from dealroom.domain.entities.lender_recommendation import LenderRecommendation
from dealroom.domain.exceptions import ValidationError
from dealroom.domain.services.lender_matcher import (
    LenderMatcher,
    borrower_strength,
    rank_recommendations,
    risk_level,
)
from dealroom.domain.value_objects.deal_type import DealType
from dealroom.domain.value_objects.risk_profile import BorrowerRiskProfile


def recommendation(rec_id, approval, days, rate=7.0, name=None):
    return LenderRecommendation(
        id=rec_id,
        lender_name=name or f"Lender {rec_id}",
        approval_probability=approval,
        estimated_rate=rate,
        estimated_terms="60 months",
        time_to_close=days,
        advantages=("Fast",),
        requirements=("Financials",),
        competitive_edge="Speed",
    )


class TestBorrowerStrength:
    """Weighted tier scoring of the risk profile."""

    def test_missing_profile_is_neutral(self):
        assert borrower_strength(None) == 60
        assert borrower_strength(BorrowerRiskProfile()) == 60

    def test_strong_profile(self):
        profile = BorrowerRiskProfile(
            credit_score=780, dscr=1.6, years_in_business=8, collateral_coverage=160
        )
        assert borrower_strength(profile) == 100

    def test_weak_profile(self):
        profile = BorrowerRiskProfile(
            credit_score=560, dscr=0.7, years_in_business=0.5, collateral_coverage=50
        )
        assert borrower_strength(profile) == 20

    def test_assistant_default_profile_is_low_risk(self):
        # 720 FICO / 1.4x DSCR, everything else neutral
        strength = borrower_strength(BorrowerRiskProfile(credit_score=720, dscr=1.4))
        assert strength == 73
        assert risk_level(strength) == "low"

    @pytest.mark.parametrize(
        "strength,level", [(100, "low"), (70, "low"), (69, "moderate"), (50, "moderate"), (49, "high")]
    )
    def test_risk_level_thresholds(self, strength, level):
        assert risk_level(strength) == level


class TestRanking:
    """Approval desc, then time to close asc, then rate asc."""

    def test_probability_then_time_to_close(self):
        rec1 = recommendation("rec1", 88, 5)
        rec2 = recommendation("rec2", 92, 7)
        rec3 = recommendation("rec3", 92, 5)

        ranked = rank_recommendations([rec1, rec2, rec3])

        assert [r.id for r in ranked] == ["rec3", "rec2", "rec1"]

    def test_rate_breaks_remaining_ties(self):
        cheap = recommendation("cheap", 90, 5, rate=6.0)
        pricey = recommendation("pricey", 90, 5, rate=8.0)

        assert [r.id for r in rank_recommendations([pricey, cheap])] == ["cheap", "pricey"]


class TestLenderMatcher:
    """End-to-end matching against the default catalog."""

    def test_equipment_deal_without_risk_profile(self, clock):
        matches = LenderMatcher().match(build_conversation(clock))

        assert [(m.lender_name, m.approval_probability, m.time_to_close, m.estimated_rate) for m in matches] == [
            ("Growth Capital Partners", 90, 3, 9.5),
            ("Capital Equipment Finance", 86, 5, 6.75),
            ("First Capital Bank", 80, 21, 6.25),
        ]
        assert all(m.estimated_terms == "60 months, fixed rate" for m in matches)

    def test_strong_borrower_caps_approval_and_lowers_rate(self, clock):
        conversation = build_conversation(
            clock,
            risk_profile=BorrowerRiskProfile(
                credit_score=780, dscr=1.6, years_in_business=8, collateral_coverage=160
            ),
        )
        matches = LenderMatcher().match(conversation)

        assert [m.approval_probability for m in matches] == [100, 100, 100]
        assert [m.lender_name for m in matches] == [
            "Growth Capital Partners",
            "Capital Equipment Finance",
            "First Capital Bank",
        ]
        assert matches[1].estimated_rate == 5.95

    def test_large_deal_near_lender_limit(self, clock):
        conversation = build_conversation(
            clock, deal_amount=1_800_000, deal_type=DealType.WORKING_CAPITAL
        )
        matches = LenderMatcher().match(conversation)

        assert [(m.lender_name, m.approval_probability, m.time_to_close) for m in matches] == [
            ("Growth Capital Partners", 85, 5),
            ("First Capital Bank", 80, 23),
            ("Main Street SBA Lending", 75, 47),
        ]
        assert matches[0].estimated_rate == 11.0

    def test_commercial_mortgage(self, clock):
        conversation = build_conversation(
            clock, deal_amount=600_000, deal_type=DealType.COMMERCIAL_MORTGAGE
        )
        names = [m.lender_name for m in LenderMatcher().match(conversation)]

        assert names == ["Commercial Real Estate Partners", "First Capital Bank", "Commercial Trust"]

    def test_no_eligible_lender(self, clock):
        conversation = build_conversation(clock, deal_amount=40_000, deal_type=DealType.SBA_LOAN)
        assert LenderMatcher().match(conversation) == []

    def test_limit(self, clock):
        conversation = build_conversation(clock)
        assert len(LenderMatcher(limit=1).match(conversation)) == 1
        assert len(LenderMatcher(limit=None).match(conversation)) == 4

    def test_ids_are_stable_per_conversation(self, clock):
        first = build_conversation(clock)
        second = build_conversation(clock)
        matcher = LenderMatcher()

        assert [m.id for m in matcher.match(first)] == [m.id for m in matcher.match(first)]
        assert matcher.match(first)[0].id != matcher.match(second)[0].id

    def test_rejects_non_positive_amount(self, conversation):
        conversation.deal_amount = 0
        with pytest.raises(ValidationError):
            LenderMatcher().match(conversation)

"""
LenderRecommendation Entity - A ranked candidate lender for one deal.

Produced fresh per match request; only persisted indirectly when a user
selects it (the selection message carries its id and lender name).
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class LenderRecommendation:
    id: str
    lender_name: str
    approval_probability: int  # 0-100
    estimated_rate: float  # percent
    estimated_terms: str
    time_to_close: int  # days
    advantages: tuple[str, ...]
    requirements: tuple[str, ...]
    competitive_edge: str

    def __post_init__(self):
        if not 0 <= self.approval_probability <= 100:
            raise ValueError(
                f"Approval probability out of range: {self.approval_probability}"
            )
        if self.time_to_close <= 0:
            raise ValueError(f"Time to close must be positive: {self.time_to_close}")
        if not self.advantages:
            raise ValueError("A recommendation needs at least one advantage")
        if not self.requirements:
            raise ValueError("A recommendation needs at least one requirement")
        if not self.competitive_edge:
            raise ValueError("Competitive edge cannot be empty")

    @property
    def rank_key(self) -> tuple:
        """Higher approval first, then faster close, then lower rate."""
        return (
            -self.approval_probability,
            self.time_to_close,
            self.estimated_rate,
            self.lender_name,
        )

"""
BorrowerRiskProfile Value Object - Risk inputs supplied by the host for a deal.

All inputs are optional; the lender matcher scores missing ones as neutral.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class BorrowerRiskProfile:
    credit_score: Optional[int] = None  # FICO, 300-850
    dscr: Optional[float] = None  # debt service coverage ratio
    years_in_business: Optional[float] = None
    collateral_coverage: Optional[float] = None  # percent of loan amount

    def __post_init__(self):
        if self.credit_score is not None and not 300 <= self.credit_score <= 850:
            raise ValueError(f"Credit score out of range: {self.credit_score}")
        for name in ("dscr", "years_in_business", "collateral_coverage"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} cannot be negative: {value}")

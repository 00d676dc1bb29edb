"""
DealType - Financing products a conversation can be opened for.
"""

from enum import Enum


class DealType(str, Enum):
    EQUIPMENT_FINANCING = "equipment_financing"
    WORKING_CAPITAL = "working_capital"
    COMMERCIAL_MORTGAGE = "commercial_mortgage"
    SBA_LOAN = "sba_loan"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")

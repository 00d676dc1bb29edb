"""
DealStatus - Lifecycle stages of a deal conversation.

    prospecting -> pre_qualified -> in_review -> submitted -> approved -> funded -> closed
                                                 submitted -> rejected

rejected and closed are terminal.
"""

from enum import Enum


class DealStatus(str, Enum):
    PROSPECTING = "prospecting"
    PRE_QUALIFIED = "pre_qualified"
    IN_REVIEW = "in_review"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"
    FUNDED = "funded"
    CLOSED = "closed"

    @property
    def successors(self) -> frozenset:
        return _SUCCESSORS[self]

    @property
    def is_terminal(self) -> bool:
        return not _SUCCESSORS[self]

    @property
    def label(self) -> str:
        """Human readable label, e.g. 'In Review'."""
        return self.value.replace("_", " ").title()

    def can_advance_to(self, next_status: "DealStatus") -> bool:
        return next_status in _SUCCESSORS[self]


_SUCCESSORS = {
    DealStatus.PROSPECTING: frozenset({DealStatus.PRE_QUALIFIED}),
    DealStatus.PRE_QUALIFIED: frozenset({DealStatus.IN_REVIEW}),
    DealStatus.IN_REVIEW: frozenset({DealStatus.SUBMITTED}),
    DealStatus.SUBMITTED: frozenset({DealStatus.APPROVED, DealStatus.REJECTED}),
    DealStatus.APPROVED: frozenset({DealStatus.FUNDED}),
    DealStatus.REJECTED: frozenset(),
    DealStatus.FUNDED: frozenset({DealStatus.CLOSED}),
    DealStatus.CLOSED: frozenset(),
}

ACTIVE_STATUSES = frozenset(
    {DealStatus.PRE_QUALIFIED, DealStatus.IN_REVIEW, DealStatus.SUBMITTED}
)

"""
Urgency - Deal-level priority tag used for worklist triage.
"""

from enum import Enum


class Urgency(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def severity(self) -> int:
        """Sort rank, most urgent first (critical=0 ... low=3)."""
        return _SEVERITY[self]

    @property
    def is_urgent(self) -> bool:
        return self in (Urgency.HIGH, Urgency.CRITICAL)


_SEVERITY = {
    Urgency.CRITICAL: 0,
    Urgency.HIGH: 1,
    Urgency.MEDIUM: 2,
    Urgency.LOW: 3,
}

"""
Clock Port - Source of "now" for timestamps.

Injected into the aggregate so tests can pin time.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime: ...


class UtcClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)

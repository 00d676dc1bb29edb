"""
Customer Directory Port - Resolves a borrower identity for a new conversation.
Implementations: dealroom/infrastructure/external/ (HTTP and in-memory)

Raises NotFoundError for unknown customers, UpstreamError when the
directory cannot be reached.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from dealroom.domain.value_objects.risk_profile import BorrowerRiskProfile


@dataclass(frozen=True)
class CustomerProfile:
    customer_id: str
    name: str
    risk_profile: Optional[BorrowerRiskProfile] = None


class CustomerDirectory(ABC):
    @abstractmethod
    async def resolve(self, customer_id: str) -> CustomerProfile: ...

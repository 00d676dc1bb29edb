"""
HTTP Customer Directory - resolves borrowers from the host's customer service.

GET {base_url}/customers/{customer_id} ->
    {"id": "...", "name": "...",
     "riskProfile": {"creditScore": 720, "dscr": 1.4,
                     "yearsInBusiness": 6, "collateralCoverage": 130}}

404 -> NotFoundError; transport errors, other HTTP errors and malformed
bodies -> UpstreamError.
"""

import logging
from typing import Any, Optional

import httpx

from dealroom.domain.exceptions import NotFoundError, UpstreamError
from dealroom.domain.ports.customer_directory import CustomerDirectory, CustomerProfile
from dealroom.domain.value_objects.risk_profile import BorrowerRiskProfile

logger = logging.getLogger(__name__)

SERVICE = "customer_directory"


class HttpCustomerDirectory(CustomerDirectory):
    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._token = token
        self._transport = transport

    async def resolve(self, customer_id: str) -> CustomerProfile:
        url = f"{self._base_url}/customers/{customer_id}"
        headers = {"Authorization": f"Bearer {self._token}"} if self._token else {}

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.get(url, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"[CustomerDirectory] Request to {url} failed: {e}")
            raise UpstreamError(SERVICE, f"Request failed: {e}") from e

        if response.status_code == 404:
            raise NotFoundError(f"Customer {customer_id} not found")
        try:
            response.raise_for_status()
            body = response.json()
            return CustomerProfile(
                customer_id=str(body.get("id") or customer_id),
                name=body["name"],
                risk_profile=_risk_profile(body.get("riskProfile")),
            )
        except httpx.HTTPStatusError as e:
            logger.error(f"[CustomerDirectory] {url} returned {response.status_code}")
            raise UpstreamError(SERVICE, f"HTTP {response.status_code}") from e
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"[CustomerDirectory] Malformed response from {url}: {e}")
            raise UpstreamError(SERVICE, "Malformed customer record") from e


def _risk_profile(data: Optional[dict[str, Any]]) -> Optional[BorrowerRiskProfile]:
    if not data:
        return None
    return BorrowerRiskProfile(
        credit_score=data.get("creditScore"),
        dscr=data.get("dscr"),
        years_in_business=data.get("yearsInBusiness"),
        collateral_coverage=data.get("collateralCoverage"),
    )

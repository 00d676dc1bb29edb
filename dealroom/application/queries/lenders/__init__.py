"""Lender queries."""

from dealroom.application.queries.lenders.request_lender_matches import (
    RequestLenderMatchesQuery,
    RequestLenderMatchesHandler,
)

__all__ = [
    "RequestLenderMatchesQuery",
    "RequestLenderMatchesHandler",
]

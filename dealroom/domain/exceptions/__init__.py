"""
DOMAIN EXCEPTIONS - Business rule violations

These exceptions are raised by domain logic and caught by presentation layer.
Presentation layer maps them to HTTP status codes.
"""

from dealroom.domain.exceptions.validation_error import ValidationError
from dealroom.domain.exceptions.conflict_error import ConflictError
from dealroom.domain.exceptions.invalid_transition import InvalidTransitionError
from dealroom.domain.exceptions.entity_not_found import NotFoundError
from dealroom.domain.exceptions.access_denied import AccessDeniedError
from dealroom.domain.exceptions.upstream_error import UpstreamError

__all__ = [
    "ValidationError",
    "ConflictError",
    "InvalidTransitionError",
    "NotFoundError",
    "AccessDeniedError",
    "UpstreamError",
]

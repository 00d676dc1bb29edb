"""
AccessDeniedError - a participant tried something their permissions do not
allow (inviting, uploading, submitting to lenders, approving, changing
financials), or a non-participant tried to read a conversation.
Maps to: HTTP 403 Forbidden
"""

from typing import Optional


class AccessDeniedError(Exception):
    def __init__(self, message: str, permission: Optional[str] = None):
        super().__init__(message)
        self.permission = permission  # Permissions field that was missing, if any

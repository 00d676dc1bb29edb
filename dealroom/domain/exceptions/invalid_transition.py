"""
InvalidTransitionError - Raised when a conversation status change skips,
regresses or leaves a terminal stage.
Maps to: HTTP 409 Conflict
"""


class InvalidTransitionError(Exception):
    """Exception raised for illegal status transitions."""

    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot move conversation from '{current}' to '{requested}'")
        self.current = current
        self.requested = requested

"""
UpstreamError - Raised when an injected external collaborator fails
(customer directory, attachment store).
Maps to: HTTP 502 Bad Gateway
"""


class UpstreamError(Exception):
    """Exception raised when an external service call fails."""

    def __init__(self, service: str, message: str):
        super().__init__(f"{service}: {message}")
        self.service = service

"""
ValidationError - input breaks a deal rule: empty message, non-positive deal
amount, blank title, a message type only the system may post.
Maps to: HTTP 422 Unprocessable Entity

Not to be confused with pydantic's ValidationError (request shape, HTTP 400).
"""


class ValidationError(Exception):
    pass

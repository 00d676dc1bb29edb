"""
ConflictError - the same participant or attachment id already exists in the
conversation.
Maps to: HTTP 409 Conflict
"""


class ConflictError(Exception):
    pass

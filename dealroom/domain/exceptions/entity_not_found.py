"""
NotFoundError - unknown conversation, participant, customer or lender
recommendation.
Maps to: HTTP 404 Not Found
"""


class NotFoundError(Exception):
    pass

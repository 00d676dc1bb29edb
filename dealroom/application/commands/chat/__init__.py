"""Chat commands."""

from .send_message import (
    SendMessageCommand,
    SendMessageHandler,
    SendMessageResult,
    UploadedFile,
)

__all__ = [
    "SendMessageCommand",
    "SendMessageHandler",
    "SendMessageResult",
    "UploadedFile",
]

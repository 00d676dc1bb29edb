"""
Attachment Entity - File metadata attached to exactly one message.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from uuid import uuid4


@dataclass(frozen=True)
class Attachment:
    id: str
    file_name: str
    file_type: str  # MIME type
    file_size: int  # bytes
    url: str
    uploaded_at: datetime

    def __post_init__(self):
        if not self.id:
            raise ValueError("Attachment ID cannot be empty")
        if not self.file_name or not self.file_name.strip():
            raise ValueError("Attachment file name cannot be empty")
        if self.file_size < 0:
            raise ValueError(f"Invalid file size: {self.file_size}")

    @classmethod
    def create(
        cls,
        file_name: str,
        file_type: str,
        file_size: int,
        url: str,
        uploaded_at: datetime,
    ) -> Attachment:
        return cls(
            id=str(uuid4()),
            file_name=file_name,
            file_type=file_type or "application/octet-stream",
            file_size=file_size,
            url=url,
            uploaded_at=uploaded_at,
        )

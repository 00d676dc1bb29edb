"""
Attachment Store Port - Uploads raw file bytes, returns where they landed.
Implementation: dealroom/infrastructure/storage/local_attachment_store.py

The domain only records the returned metadata on the Attachment.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class StoredFile:
    url: str
    file_size: int
    file_type: str


class AttachmentStore(ABC):
    @abstractmethod
    async def upload(
        self, file_name: str, content: bytes, file_type: str
    ) -> StoredFile: ...

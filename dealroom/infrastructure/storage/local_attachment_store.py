"""
LocalAttachmentStore - Writes shared deal documents to disk.

Layout: {upload_base}/attachments/{timestamp}_{sanitized_name}
URL:    {public_base}/{timestamp}_{sanitized_name}

File I/O is synchronous; upload() runs it in a worker thread so the
event loop keeps serving other conversations.
"""

import asyncio
import logging
import os
import re
from datetime import datetime

from dealroom.domain.exceptions import UpstreamError
from dealroom.domain.ports.attachment_store import AttachmentStore, StoredFile

logger = logging.getLogger(__name__)


class LocalAttachmentStore(AttachmentStore):
    CATEGORY = "attachments"

    def __init__(self, upload_base: str, public_base: str = "/files"):
        self.upload_base = upload_base
        self.public_base = public_base.rstrip("/")

    async def upload(self, file_name: str, content: bytes, file_type: str) -> StoredFile:
        try:
            stored_name = await asyncio.to_thread(self._save_file, content, file_name)
        except OSError as e:
            logger.error(f"[AttachmentStore] Failed to store {file_name}: {e}")
            raise UpstreamError("attachment_store", f"Could not store {file_name}") from e

        return StoredFile(
            url=f"{self.public_base}/{stored_name}",
            file_size=len(content),
            file_type=file_type or "application/octet-stream",
        )

    def _save_file(self, content: bytes, filename: str) -> str:
        directory = os.path.join(self.upload_base, self.CATEGORY)
        os.makedirs(directory, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S%f")
        safe_filename = f"{timestamp}_{self._sanitize_filename(filename)}"
        file_path = os.path.join(directory, safe_filename)

        with open(file_path, "wb") as f:
            f.write(content)

        logger.debug(f"[AttachmentStore] Saved file: {file_path} ({len(content)} bytes)")
        return safe_filename

    @staticmethod
    def _sanitize_filename(filename: str) -> str:
        """Strip directory parts and anything outside [A-Za-z0-9._-]."""
        name = os.path.basename(filename.replace("\\", "/"))
        name = re.sub(r"[^A-Za-z0-9._-]+", "_", name).strip("._")
        return name or "file"

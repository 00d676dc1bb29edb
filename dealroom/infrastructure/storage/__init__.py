from dealroom.infrastructure.storage.local_attachment_store import LocalAttachmentStore

__all__ = ["LocalAttachmentStore"]

"""
PORTS - Interfaces that infrastructure implements

A "port" is an abstract interface that defines WHAT the domain needs,
without specifying HOW it's done.

Subfolders:
- repositories/        → Conversation persistence
- (root files)         → Clock, customer directory, attachment store
"""

from dealroom.domain.ports.clock import Clock, UtcClock
from dealroom.domain.ports.customer_directory import CustomerDirectory, CustomerProfile
from dealroom.domain.ports.attachment_store import AttachmentStore, StoredFile

__all__ = [
    "Clock",
    "UtcClock",
    "CustomerDirectory",
    "CustomerProfile",
    "AttachmentStore",
    "StoredFile",
]

"""
Per-conversation locks.

Every mutation of one conversation (append, status change, participant
change) runs while holding its lock; different conversations never block
each other. A lock is dropped once nobody holds or waits for it.
"""

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator

from dealroom.domain.value_objects.conversation_id import ConversationId


@dataclass
class _LockEntry:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


class ConversationLocks:
    def __init__(self):
        self._entries: dict[str, _LockEntry] = {}

    @asynccontextmanager
    async def for_conversation(self, conversation_id: ConversationId) -> AsyncIterator[None]:
        key = conversation_id.value
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries[key] = _LockEntry()
        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0 and self._entries.get(key) is entry:
                del self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)

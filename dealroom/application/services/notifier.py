"""
Conversation Notifier - Lets a host react to new messages and status changes.

Subscribers are plain callables (sync or async) taking a ConversationEvent.
A failing subscriber is logged and does not affect the mutation or other
subscribers.
"""

import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from dealroom.domain.entities.message import Message
from dealroom.domain.value_objects.conversation_id import ConversationId
from dealroom.domain.value_objects.message_type import MessageType

logger = logging.getLogger(__name__)


class ConversationEventType(str, Enum):
    MESSAGE_APPENDED = "message_appended"
    STATUS_CHANGED = "status_changed"


@dataclass(frozen=True)
class ConversationEvent:
    type: ConversationEventType
    conversation_id: ConversationId
    message: Message
    old_status: Optional[str] = None
    new_status: Optional[str] = None


Subscriber = Callable[[ConversationEvent], Any]


class ConversationNotifier:
    def __init__(self):
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback; returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    async def message_appended(self, message: Message) -> None:
        """Publish a new message, plus a status change when it records one."""
        await self._publish(
            ConversationEvent(
                type=ConversationEventType.MESSAGE_APPENDED,
                conversation_id=message.conversation_id,
                message=message,
            )
        )
        update = message.deal_update
        if message.message_type == MessageType.STATUS_UPDATE and update:
            await self._publish(
                ConversationEvent(
                    type=ConversationEventType.STATUS_CHANGED,
                    conversation_id=message.conversation_id,
                    message=message,
                    old_status=update.old_value,
                    new_status=update.new_value,
                )
            )

    async def _publish(self, event: ConversationEvent) -> None:
        for callback in list(self._subscribers):
            try:
                result = callback(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(
                    f"[Notifier] Subscriber failed on {event.type.value} "
                    f"for conversation {event.conversation_id.value}"
                )

"""Application services shared by command handlers."""

from dealroom.application.services.conversation_locks import ConversationLocks
from dealroom.application.services.notifier import (
    ConversationEvent,
    ConversationEventType,
    ConversationNotifier,
)
from dealroom.application.services.assistant_dispatcher import AssistantDispatcher

__all__ = [
    "ConversationLocks",
    "ConversationEvent",
    "ConversationEventType",
    "ConversationNotifier",
    "AssistantDispatcher",
]

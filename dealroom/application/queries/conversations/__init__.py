"""Conversation-related queries."""

from dealroom.application.queries.conversations.list_conversations import (
    ListConversationsQuery,
    ListConversationsHandler,
)
from dealroom.application.queries.conversations.get_conversation import (
    GetConversationQuery,
    GetConversationHandler,
)
from dealroom.application.queries.conversations.get_permissions import (
    GetPermissionsQuery,
    GetPermissionsHandler,
)

__all__ = [
    "ListConversationsQuery",
    "ListConversationsHandler",
    "GetConversationQuery",
    "GetConversationHandler",
    "GetPermissionsQuery",
    "GetPermissionsHandler",
]

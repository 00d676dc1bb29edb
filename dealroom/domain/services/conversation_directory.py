"""
Conversation Directory - Worklist filtering and sorting.

Pure functions over a sequence of conversations; inputs are never mutated.
Compose as filter then sort.
"""

from enum import Enum
from typing import Callable, Iterable, Optional

from dealroom.domain.entities.conversation import Conversation
from dealroom.domain.exceptions import ValidationError
from dealroom.domain.value_objects.deal_status import ACTIVE_STATUSES
from dealroom.domain.value_objects.user_id import UserId

OwnershipPredicate = Callable[[Conversation], bool]


class FilterMode(str, Enum):
    ALL = "all"
    ACTIVE = "active"
    URGENT = "urgent"
    MY_DEALS = "my_deals"


class SortKey(str, Enum):
    RECENT = "recent"
    AMOUNT = "amount"
    URGENCY = "urgency"


def owned_by(user_id: UserId) -> OwnershipPredicate:
    """A deal belongs to a user when they participate in its conversation."""
    return lambda conversation: conversation.has_participant(user_id)


def filter_conversations(
    conversations: Iterable[Conversation],
    mode: FilterMode,
    owner: Optional[OwnershipPredicate] = None,
) -> list[Conversation]:
    mode = FilterMode(mode)
    if mode == FilterMode.ACTIVE:
        return [c for c in conversations if c.status in ACTIVE_STATUSES]
    if mode == FilterMode.URGENT:
        return [c for c in conversations if c.urgency.is_urgent]
    if mode == FilterMode.MY_DEALS:
        if owner is None:
            raise ValidationError("The my_deals filter needs an ownership predicate")
        return [c for c in conversations if owner(c)]
    return list(conversations)


def sort_conversations(
    conversations: Iterable[Conversation], key: SortKey
) -> list[Conversation]:
    key = SortKey(key)
    if key == SortKey.AMOUNT:
        return sorted(conversations, key=lambda c: c.deal_amount, reverse=True)
    if key == SortKey.URGENCY:
        return sorted(conversations, key=lambda c: c.urgency.severity)
    return sorted(conversations, key=lambda c: c.updated_at, reverse=True)


def list_conversations(
    conversations: Iterable[Conversation],
    mode: FilterMode = FilterMode.ALL,
    key: SortKey = SortKey.RECENT,
    owner: Optional[OwnershipPredicate] = None,
    limit: Optional[int] = None,
) -> list[Conversation]:
    result = sort_conversations(filter_conversations(conversations, mode, owner), key)
    if limit is not None:
        result = result[:limit]
    return result

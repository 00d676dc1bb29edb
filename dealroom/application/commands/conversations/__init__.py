"""Conversation commands."""

from .create_conversation import (
    CreateConversationCommand,
    CreateConversationHandler,
    InvitedParticipant,
)
from .add_participant import AddParticipantCommand, AddParticipantHandler
from .advance_status import AdvanceStatusCommand, AdvanceStatusHandler
from .update_deal import UpdateDealCommand, UpdateDealHandler
from .mark_presence import MarkPresenceCommand, MarkPresenceHandler

__all__ = [
    "CreateConversationCommand",
    "CreateConversationHandler",
    "InvitedParticipant",
    "AddParticipantCommand",
    "AddParticipantHandler",
    "AdvanceStatusCommand",
    "AdvanceStatusHandler",
    "UpdateDealCommand",
    "UpdateDealHandler",
    "MarkPresenceCommand",
    "MarkPresenceHandler",
]

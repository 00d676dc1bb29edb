"""
ParticipantRole - Roles a conversation member can hold.
"""

from enum import Enum


class ParticipantRole(str, Enum):
    VENDOR = "vendor"
    FINANCE_MANAGER = "finance_manager"
    BROKER = "broker"
    LENDER = "lender"
    BORROWER = "borrower"
    ASSISTANT = "assistant"


# Sender role used by status_update / deal_update messages.
SYSTEM_SENDER_ROLE = "system"

"""
Participant Entity - A member of one deal conversation and what they may do.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from dealroom.domain.value_objects.participant_role import ParticipantRole
from dealroom.domain.value_objects.user_id import UserId, ASSISTANT_USER_ID


@dataclass(frozen=True)
class Permissions:
    can_invite_users: bool = False
    can_upload_documents: bool = False
    can_access_financials: bool = False
    can_submit_to_lenders: bool = False
    can_approve_deal: bool = False

    @classmethod
    def for_role(cls, role: ParticipantRole) -> Permissions:
        return _ROLE_DEFAULTS[role]


# The assistant is a read-only analyst.
ASSISTANT_PERMISSIONS = Permissions(can_access_financials=True)

_ROLE_DEFAULTS = {
    ParticipantRole.FINANCE_MANAGER: Permissions(
        can_invite_users=True,
        can_upload_documents=True,
        can_access_financials=True,
        can_submit_to_lenders=True,
    ),
    ParticipantRole.BROKER: Permissions(
        can_invite_users=True,
        can_upload_documents=True,
        can_access_financials=True,
        can_submit_to_lenders=True,
    ),
    ParticipantRole.LENDER: Permissions(
        can_upload_documents=True,
        can_access_financials=True,
        can_approve_deal=True,
    ),
    ParticipantRole.BORROWER: Permissions(can_upload_documents=True),
    ParticipantRole.VENDOR: Permissions(can_upload_documents=True),
    ParticipantRole.ASSISTANT: ASSISTANT_PERMISSIONS,
}


@dataclass(frozen=True)
class Participant:
    user_id: UserId
    name: str
    role: ParticipantRole
    company: str
    joined_at: datetime
    permissions: Permissions
    is_online: bool = False
    last_seen: Optional[datetime] = None

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Participant name cannot be empty")

    @property
    def is_assistant(self) -> bool:
        return self.role == ParticipantRole.ASSISTANT

    def with_presence(self, is_online: bool, at: datetime) -> Participant:
        return replace(self, is_online=is_online, last_seen=at)

    @classmethod
    def create(
        cls,
        user_id: UserId,
        name: str,
        role: ParticipantRole,
        joined_at: datetime,
        company: str = "",
        permissions: Optional[Permissions] = None,
        is_online: bool = False,
    ) -> Participant:
        """Create a participant, defaulting permissions from the role."""
        return cls(
            user_id=user_id,
            name=name,
            role=role,
            company=company,
            joined_at=joined_at,
            permissions=permissions or Permissions.for_role(role),
            is_online=is_online,
        )

    @classmethod
    def assistant(cls, joined_at: datetime) -> Participant:
        return cls(
            user_id=ASSISTANT_USER_ID,
            name="EVA",
            role=ParticipantRole.ASSISTANT,
            company="EVA Platform",
            joined_at=joined_at,
            permissions=ASSISTANT_PERMISSIONS,
            is_online=True,
        )

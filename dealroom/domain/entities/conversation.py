"""
Conversation Entity - Aggregate root for one deal's collaboration thread.

All mutation goes through the command methods below:
- append_message / add_participant / advance_status / update_deal / mark_presence

messages, participants and documents are tuples replaced on every change,
so a reader holding a reference always sees a complete snapshot.
"""

from __future__ import annotations
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Optional

from dealroom.domain.entities.attachment import Attachment
from dealroom.domain.entities.message import DealUpdate, Message, MessageMetadata
from dealroom.domain.entities.participant import ASSISTANT_PERMISSIONS, Participant
from dealroom.domain.exceptions import (
    AccessDeniedError,
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from dealroom.domain.ports.clock import Clock, UtcClock
from dealroom.domain.value_objects.conversation_id import ConversationId
from dealroom.domain.value_objects.deal_status import DealStatus
from dealroom.domain.value_objects.deal_type import DealType
from dealroom.domain.value_objects.message_type import MessageType
from dealroom.domain.value_objects.participant_role import SYSTEM_SENDER_ROLE
from dealroom.domain.value_objects.risk_profile import BorrowerRiskProfile
from dealroom.domain.value_objects.urgency import Urgency
from dealroom.domain.value_objects.user_id import ASSISTANT_USER_ID, SYSTEM_USER_ID, UserId

ATTACHMENT_ONLY_CONTENT = "Attachment"

# Message types only the system or the assistant may produce.
_SYSTEM_MESSAGE_TYPES = {MessageType.STATUS_UPDATE, MessageType.DEAL_UPDATE}

DEAL_FIELDS = ("title", "deal_amount", "urgency", "target_close_date")


@dataclass
class Conversation:
    id: ConversationId
    transaction_id: str
    title: str
    borrower_name: str
    deal_amount: float
    deal_type: DealType
    status: DealStatus
    created_at: datetime
    updated_at: datetime
    urgency: Urgency = Urgency.MEDIUM
    participants: tuple[Participant, ...] = ()
    messages: tuple[Message, ...] = ()
    documents: tuple[Attachment, ...] = ()
    target_close_date: Optional[datetime] = None
    risk_profile: Optional[BorrowerRiskProfile] = None
    clock: Clock = field(default_factory=UtcClock, repr=False, compare=False)

    @classmethod
    def create(
        cls,
        transaction_id: str,
        title: str,
        borrower_name: str,
        deal_amount: float,
        deal_type: DealType,
        initial_participants: Iterable[Participant],
        urgency: Urgency = Urgency.MEDIUM,
        target_close_date: Optional[datetime] = None,
        risk_profile: Optional[BorrowerRiskProfile] = None,
        clock: Optional[Clock] = None,
    ) -> Conversation:
        """Open a conversation for a transaction. The assistant joins automatically."""
        clock = clock or UtcClock()
        if not transaction_id or not transaction_id.strip():
            raise ValidationError("Transaction ID cannot be empty")
        _require_text(title, "Title")
        _require_text(borrower_name, "Borrower name")
        _require_positive_amount(deal_amount)

        participants: list[Participant] = []
        seen: set[UserId] = set()
        for participant in initial_participants:
            if participant.user_id in seen:
                raise ConflictError(
                    f"Participant {participant.user_id} listed more than once"
                )
            _check_identity(participant)
            seen.add(participant.user_id)
            participants.append(participant)

        if not any(not p.is_assistant for p in participants):
            raise ValidationError("A conversation needs at least one human participant")

        now = clock.now()
        if not any(p.is_assistant for p in participants):
            participants.append(Participant.assistant(joined_at=now))

        return cls(
            id=ConversationId.new(),
            transaction_id=transaction_id,
            title=title.strip(),
            borrower_name=borrower_name.strip(),
            deal_amount=float(deal_amount),
            deal_type=DealType(deal_type),
            status=DealStatus.PROSPECTING,
            created_at=now,
            updated_at=now,
            urgency=Urgency(urgency),
            participants=tuple(participants),
            target_close_date=target_close_date,
            risk_profile=risk_profile,
            clock=clock,
        )

    # ==================== READS ====================

    @property
    def last_message(self) -> Optional[Message]:
        return self.messages[-1] if self.messages else None

    def has_participant(self, user_id: UserId) -> bool:
        return any(p.user_id == user_id for p in self.participants)

    def get_participant(self, user_id: UserId) -> Participant:
        for participant in self.participants:
            if participant.user_id == user_id:
                return participant
        raise NotFoundError(
            f"User {user_id} is not a participant of conversation {self.id}"
        )

    def participant_permissions(self, user_id: UserId):
        return self.get_participant(user_id).permissions

    # ==================== COMMANDS ====================

    def add_participant(
        self, participant: Participant, invited_by: Optional[UserId] = None
    ) -> Participant:
        if invited_by is not None:
            inviter = self.get_participant(invited_by)
            if not inviter.permissions.can_invite_users:
                raise AccessDeniedError(f"{inviter.name} cannot invite users", "can_invite_users")
        if self.has_participant(participant.user_id):
            raise ConflictError(
                f"User {participant.user_id} already participates in conversation {self.id}"
            )
        _check_identity(participant)

        self.participants = self.participants + (participant,)
        return participant

    def append_message(
        self,
        sender_id: UserId,
        content: str,
        message_type: MessageType = MessageType.TEXT,
        attachments: Optional[Iterable[Attachment]] = None,
        metadata: Optional[MessageMetadata] = None,
    ) -> Message:
        attachments = tuple(attachments or ())
        content = (content or "").strip()
        if not content and not attachments:
            raise ValidationError("Message needs content or at least one attachment")

        sender = self.get_participant(sender_id)
        message_type = MessageType(message_type)
        if message_type in _SYSTEM_MESSAGE_TYPES:
            raise ValidationError(f"'{message_type.value}' messages are system generated")
        if message_type == MessageType.EVA_RECOMMENDATION and not sender.is_assistant:
            raise ValidationError("Only the assistant can post recommendations")

        if attachments:
            if not sender.permissions.can_upload_documents:
                raise AccessDeniedError(f"{sender.name} cannot upload documents", "can_upload_documents")
            self._check_attachment_ids(attachments)
            if message_type == MessageType.TEXT:
                message_type = MessageType.DOCUMENT_SHARE

        message = Message.create(
            conversation_id=self.id,
            sender_id=sender.user_id,
            sender_name=sender.name,
            sender_role=sender.role.value,
            content=content or ATTACHMENT_ONLY_CONTENT,
            message_type=message_type,
            timestamp=self._next_timestamp(),
            attachments=attachments,
            metadata=metadata,
        )
        self._append(message)
        if attachments:
            self.documents = self.documents + attachments
        return message

    def advance_status(self, next_status: DealStatus, acting_user_id: UserId) -> Message:
        """Move to the next lifecycle stage and record it as a status_update message."""
        next_status = DealStatus(next_status)
        actor = self.get_participant(acting_user_id)
        if not self.status.can_advance_to(next_status):
            raise InvalidTransitionError(self.status.value, next_status.value)
        self._check_status_permission(actor, next_status)

        old_status = self.status
        message = self._system_message(
            content=f"Status changed from {old_status.label} to {next_status.label} by {actor.name}",
            message_type=MessageType.STATUS_UPDATE,
            update=DealUpdate(
                field="status",
                old_value=old_status.value,
                new_value=next_status.value,
            ),
        )
        self.status = next_status
        self._append(message)
        return message

    def update_deal(self, acting_user_id: UserId, field_name: str, value: Any) -> Message:
        """Change one deal attribute and record it as a deal_update message."""
        actor = self.get_participant(acting_user_id)
        if actor.is_assistant:
            raise AccessDeniedError("The assistant cannot change deal terms")
        if field_name not in DEAL_FIELDS:
            raise ValidationError(f"Unknown deal field: {field_name}")
        if field_name == "deal_amount" and not actor.permissions.can_access_financials:
            raise AccessDeniedError(f"{actor.name} cannot change financials", "can_access_financials")

        new_value = _coerce_deal_value(field_name, value)
        old_value = getattr(self, field_name)
        if new_value == old_value:
            raise ValidationError(f"{field_name} is already {_display(old_value)}")

        label = field_name.replace("_", " ").capitalize()
        message = self._system_message(
            content=f"{label} changed from {_display(old_value)} to {_display(new_value)} by {actor.name}",
            message_type=MessageType.DEAL_UPDATE,
            update=DealUpdate(
                field=field_name,
                old_value=_serialize(old_value),
                new_value=_serialize(new_value),
            ),
        )
        setattr(self, field_name, new_value)
        self._append(message)
        return message

    def mark_presence(self, user_id: UserId, is_online: bool) -> Participant:
        participant = self.get_participant(user_id)
        updated = participant.with_presence(is_online, self.clock.now())
        self.participants = tuple(
            updated if p.user_id == user_id else p for p in self.participants
        )
        return updated

    # ==================== INTERNALS ====================

    def _append(self, message: Message) -> None:
        self.messages = self.messages + (message,)
        self._touch(message.timestamp)

    def _touch(self, at: datetime) -> None:
        self.updated_at = max(at, self.updated_at, self.created_at)

    def _next_timestamp(self) -> datetime:
        now = self.clock.now()
        last = self.last_message
        if last and now < last.timestamp:
            return last.timestamp
        return now

    def _system_message(
        self, content: str, message_type: MessageType, update: DealUpdate
    ) -> Message:
        return Message.create(
            conversation_id=self.id,
            sender_id=SYSTEM_USER_ID,
            sender_name="System",
            sender_role=SYSTEM_SENDER_ROLE,
            content=content,
            message_type=message_type,
            timestamp=self._next_timestamp(),
            is_system_message=True,
            metadata=MessageMetadata(deal_update=update),
        )

    def _check_attachment_ids(self, attachments: tuple[Attachment, ...]) -> None:
        known = {a.id for a in self.documents}
        for attachment in attachments:
            if attachment.id in known:
                raise ConflictError(f"Attachment {attachment.id} is already shared")
            known.add(attachment.id)

    def _check_status_permission(
        self, actor: Participant, next_status: DealStatus
    ) -> None:
        if actor.is_assistant:
            raise AccessDeniedError("The assistant cannot change deal status")
        if next_status == DealStatus.SUBMITTED and not actor.permissions.can_submit_to_lenders:
            raise AccessDeniedError(f"{actor.name} cannot submit deals to lenders", "can_submit_to_lenders")
        if next_status in (DealStatus.APPROVED, DealStatus.REJECTED) and not actor.permissions.can_approve_deal:
            raise AccessDeniedError(f"{actor.name} cannot decide on this deal", "can_approve_deal")


def _require_text(value: str, label: str) -> None:
    if not value or not value.strip():
        raise ValidationError(f"{label} cannot be empty")


def _require_positive_amount(amount: Any) -> None:
    if (
        isinstance(amount, bool)
        or not isinstance(amount, (int, float))
        or not math.isfinite(amount)
        or amount <= 0
    ):
        raise ValidationError(f"Deal amount must be positive, got {amount}")


def _check_identity(participant: Participant) -> None:
    """The assistant id belongs to EVA alone; nobody may join as the system."""
    if participant.user_id == SYSTEM_USER_ID:
        raise ValidationError(f"User id {SYSTEM_USER_ID} is reserved")
    if participant.is_assistant != (participant.user_id == ASSISTANT_USER_ID):
        raise ValidationError(
            f"Only the assistant may use the {ASSISTANT_USER_ID} user id and role"
        )
    if participant.is_assistant and participant.permissions != ASSISTANT_PERMISSIONS:
        raise ValidationError("The assistant participant is a read-only analyst")


def _coerce_deal_value(field_name: str, value: Any) -> Any:
    if field_name == "title":
        _require_text(value, "Title")
        return value.strip()
    if field_name == "deal_amount":
        if isinstance(value, str):
            try:
                value = float(value)
            except ValueError:
                raise ValidationError(f"Deal amount must be a number, got {value!r}")
        _require_positive_amount(value)
        return float(value)
    if field_name == "urgency":
        try:
            return Urgency(value)
        except ValueError:
            raise ValidationError(f"Unknown urgency: {value}")
    # target_close_date
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(f"Invalid target close date: {value}")


def _serialize(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, Urgency):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def _display(value: Any) -> str:
    if value is None:
        return "none"
    if isinstance(value, float):
        return f"${value:,.2f}"
    if isinstance(value, datetime):
        return value.date().isoformat()
    return _serialize(value)

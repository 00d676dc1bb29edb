"""
Command and query handler tests against in-memory adapters.

Run with: pytest tests/test_handlers.py -v
"""

import asyncio

import pytest

from conftest import BORROWER, FINANCE_MANAGER, LENDER, build_conversation
from dealroom.application.commands.chat import (
    SendMessageCommand,
    SendMessageHandler,
    UploadedFile,
)
from dealroom.application.commands.conversations import (
    AddParticipantCommand,
    AddParticipantHandler,
    AdvanceStatusCommand,
    AdvanceStatusHandler,
    CreateConversationCommand,
    CreateConversationHandler,
    InvitedParticipant,
)
from dealroom.application.commands.lenders import SelectLenderCommand, SelectLenderHandler
from dealroom.application.queries.conversations import (
    GetPermissionsHandler,
    GetPermissionsQuery,
    ListConversationsHandler,
    ListConversationsQuery,
)
from dealroom.application.queries.lenders import (
    RequestLenderMatchesHandler,
    RequestLenderMatchesQuery,
)
from dealroom.application.services import (
    AssistantDispatcher,
    ConversationEventType,
    ConversationLocks,
    ConversationNotifier,
)
from dealroom.domain.exceptions import (
    AccessDeniedError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from dealroom.domain.ports.attachment_store import AttachmentStore, StoredFile
from dealroom.domain.ports.customer_directory import CustomerProfile
from dealroom.domain.services.assistant_responder import AssistantResponder
from dealroom.domain.services.conversation_directory import FilterMode
from dealroom.domain.services.lender_matcher import LenderMatcher
from dealroom.domain.value_objects.deal_status import DealStatus
from dealroom.domain.value_objects.deal_type import DealType
from dealroom.domain.value_objects.message_type import MessageType, RecommendationType
from dealroom.domain.value_objects.participant_role import ParticipantRole
from dealroom.domain.value_objects.risk_profile import BorrowerRiskProfile
from dealroom.domain.value_objects.user_id import ASSISTANT_USER_ID, UserId
from dealroom.infrastructure.external import InMemoryCustomerDirectory
from dealroom.infrastructure.persistence import InMemoryConversationRepository


class RecordingAttachmentStore(AttachmentStore):
    def __init__(self):
        self.uploads = []

    async def upload(self, file_name, content, file_type):
        self.uploads.append(file_name)
        return StoredFile(url=f"/files/{file_name}", file_size=len(content), file_type=file_type)


class Harness:
    """Wires handlers the way the container does, minus the reply delay."""

    def __init__(self, clock, max_upload_bytes=1024):
        self.clock = clock
        self.repository = InMemoryConversationRepository()
        self.locks = ConversationLocks()
        self.notifier = ConversationNotifier()
        self.dispatcher = AssistantDispatcher(self.repository, self.locks, self.notifier)
        self.matcher = LenderMatcher()
        self.responder = AssistantResponder(self.matcher)
        self.store = RecordingAttachmentStore()
        self.directory = InMemoryCustomerDirectory(
            [
                CustomerProfile(
                    customer_id="cust-42",
                    name="Acme Construction",
                    risk_profile=BorrowerRiskProfile(credit_score=760, dscr=1.6),
                )
            ]
        )
        self.max_upload_bytes = max_upload_bytes
        self.events = []
        self.notifier.subscribe(self.events.append)

    def create(self):
        return CreateConversationHandler(self.repository, self.directory, self.clock)

    def send(self):
        return SendMessageHandler(
            self.repository, self.locks, self.notifier, self.dispatcher,
            self.responder, self.store, self.clock, self.max_upload_bytes,
        )

    def select(self):
        return SelectLenderHandler(
            self.repository, self.locks, self.notifier, self.dispatcher,
            self.responder, self.matcher,
        )

    async def saved_conversation(self):
        conversation = build_conversation(self.clock)
        await self.repository.save(conversation)
        return conversation


def run(coro):
    return asyncio.run(coro)


def participants():
    return (
        InvitedParticipant(FINANCE_MANAGER, "Alice Chen", ParticipantRole.FINANCE_MANAGER),
        InvitedParticipant(BORROWER, "Bob Rivera", ParticipantRole.BORROWER),
    )


class TestCreateConversation:
    def test_resolves_borrower_from_directory(self, clock):
        harness = Harness(clock)
        command = CreateConversationCommand(
            transaction_id="TX-2001",
            title="Crane purchase",
            deal_amount=400_000,
            deal_type=DealType.EQUIPMENT_FINANCING,
            participants=participants(),
            customer_id="cust-42",
        )

        conversation = run(harness.create().execute(command))

        assert conversation.borrower_name == "Acme Construction"
        assert conversation.risk_profile.credit_score == 760
        assert conversation.has_participant(ASSISTANT_USER_ID)
        assert len(conversation.participants) == 3

    def test_requires_a_borrower(self, clock):
        command = CreateConversationCommand(
            transaction_id="TX-2002",
            title="Crane purchase",
            deal_amount=400_000,
            deal_type=DealType.EQUIPMENT_FINANCING,
            participants=participants(),
        )
        with pytest.raises(ValidationError):
            run(Harness(clock).create().execute(command))

    def test_unknown_customer(self, clock):
        command = CreateConversationCommand(
            transaction_id="TX-2003",
            title="Crane purchase",
            deal_amount=400_000,
            deal_type=DealType.EQUIPMENT_FINANCING,
            participants=participants(),
            customer_id="nobody",
        )
        with pytest.raises(NotFoundError):
            run(Harness(clock).create().execute(command))


class TestSendMessage:
    def test_trigger_and_wait_returns_reply(self, clock):
        harness = Harness(clock)

        async def scenario():
            conversation = await harness.saved_conversation()
            result = await harness.send().execute(
                SendMessageCommand(
                    conversation_id=conversation.id,
                    sender_id=FINANCE_MANAGER,
                    content="EVA, can you find a lender match?",
                    wait_for_reply=True,
                )
            )
            return conversation, result

        conversation, result = run(scenario())

        assert result.reply is not None
        assert result.reply.message_type == MessageType.EVA_RECOMMENDATION
        assert result.reply.eva_recommendation.type == RecommendationType.LENDER_MATCH
        assert [m.sender_id for m in conversation.messages] == [FINANCE_MANAGER, ASSISTANT_USER_ID]
        assert [e.type for e in harness.events] == [
            ConversationEventType.MESSAGE_APPENDED,
            ConversationEventType.MESSAGE_APPENDED,
        ]

    def test_plain_message_gets_no_reply(self, clock):
        harness = Harness(clock)

        async def scenario():
            conversation = await harness.saved_conversation()
            result = await harness.send().execute(
                SendMessageCommand(conversation.id, BORROWER, "Invoice is on the way")
            )
            await harness.dispatcher.drain(conversation.id)
            return conversation, result

        conversation, result = run(scenario())

        assert result.reply is None
        assert result.reply_pending is False
        assert len(conversation.messages) == 1

    def test_reply_pending_without_wait(self, clock):
        harness = Harness(clock)

        async def scenario():
            conversation = await harness.saved_conversation()
            result = await harness.send().execute(
                SendMessageCommand(conversation.id, FINANCE_MANAGER, "EVA, help")
            )
            await harness.dispatcher.drain(conversation.id)
            return conversation, result

        conversation, result = run(scenario())

        assert result.reply_pending is True
        assert conversation.messages[-1].sender_id == ASSISTANT_USER_ID

    def test_replies_follow_trigger_order_with_slow_subscriber(self, clock):
        harness = Harness(clock)
        paused = []

        async def slow_subscriber(event):
            if not paused:
                paused.append(event)
                await asyncio.sleep(0.01)

        harness.notifier.subscribe(slow_subscriber)

        async def scenario():
            conversation = await harness.saved_conversation()
            handler = harness.send()
            await asyncio.gather(
                handler.execute(
                    SendMessageCommand(conversation.id, FINANCE_MANAGER, "find a lender match")
                ),
                handler.execute(
                    SendMessageCommand(conversation.id, BORROWER, "please analyze my credit")
                ),
            )
            await harness.dispatcher.drain(conversation.id)
            return conversation

        conversation = run(scenario())

        replies = [m for m in conversation.messages if m.sender_id == ASSISTANT_USER_ID]
        assert [m.eva_recommendation.type for m in replies] == [
            RecommendationType.LENDER_MATCH,
            RecommendationType.RISK_ASSESSMENT,
        ]
        senders = [m.sender_id for m in conversation.messages]
        positions = [conversation.messages.index(m) for m in replies]
        assert positions[0] > senders.index(FINANCE_MANAGER)
        assert positions[1] > senders.index(BORROWER)

    def test_files_become_attachments(self, clock):
        harness = Harness(clock)

        async def scenario():
            conversation = await harness.saved_conversation()
            result = await harness.send().execute(
                SendMessageCommand(
                    conversation.id,
                    BORROWER,
                    "",
                    files=(UploadedFile("invoice.pdf", b"%PDF-1.4", "application/pdf"),),
                )
            )
            return conversation, result

        conversation, result = run(scenario())

        assert harness.store.uploads == ["invoice.pdf"]
        assert result.message.message_type == MessageType.DOCUMENT_SHARE
        assert result.message.content == "Attachment"
        assert result.message.attachments[0].url == "/files/invoice.pdf"
        assert conversation.documents == result.message.attachments

    def test_oversized_file_rejected(self, clock):
        harness = Harness(clock, max_upload_bytes=4)

        async def scenario():
            conversation = await harness.saved_conversation()
            await harness.send().execute(
                SendMessageCommand(
                    conversation.id,
                    BORROWER,
                    "statements",
                    files=(UploadedFile("big.pdf", b"0123456789"),),
                )
            )

        with pytest.raises(ValidationError):
            run(scenario())
        assert harness.store.uploads == []

    def test_upload_needs_permission(self, clock):
        harness = Harness(clock)

        async def scenario():
            conversation = await harness.saved_conversation()
            await harness.send().execute(
                SendMessageCommand(
                    conversation.id,
                    ASSISTANT_USER_ID,
                    "notes",
                    files=(UploadedFile("notes.txt", b"hi", "text/plain"),),
                )
            )

        with pytest.raises(AccessDeniedError):
            run(scenario())
        assert harness.store.uploads == []

    def test_outsider_cannot_post(self, clock):
        harness = Harness(clock)

        async def scenario():
            conversation = await harness.saved_conversation()
            await harness.send().execute(
                SendMessageCommand(conversation.id, UserId("stranger"), "hello")
            )

        with pytest.raises(NotFoundError):
            run(scenario())


class TestSelectLender:
    def test_selection_and_confirmation(self, clock):
        harness = Harness(clock)

        async def scenario():
            conversation = await harness.saved_conversation()
            matches = await RequestLenderMatchesHandler(harness.repository, harness.matcher).execute(
                RequestLenderMatchesQuery(conversation.id, FINANCE_MANAGER)
            )
            result = await harness.select().execute(
                SelectLenderCommand(
                    conversation.id, FINANCE_MANAGER, matches[0].id, wait_for_reply=True
                )
            )
            return conversation, result

        conversation, result = run(scenario())

        assert result.recommendation.lender_name == "Growth Capital Partners"
        assert result.message.content == (
            "I'm submitting this deal to Growth Capital Partners based on EVA's recommendation."
        )
        assert result.message.metadata.lender_selection.recommendation_id == result.recommendation.id
        assert result.confirmation.content.endswith("closes in 3 days.")
        assert conversation.status == DealStatus.PROSPECTING

    def test_unknown_recommendation(self, clock):
        harness = Harness(clock)

        async def scenario():
            conversation = await harness.saved_conversation()
            await harness.select().execute(
                SelectLenderCommand(conversation.id, FINANCE_MANAGER, "not-a-recommendation")
            )

        with pytest.raises(NotFoundError):
            run(scenario())

    def test_borrower_cannot_submit(self, clock):
        harness = Harness(clock)

        async def scenario():
            conversation = await harness.saved_conversation()
            match = harness.matcher.match(conversation)[0]
            await harness.select().execute(
                SelectLenderCommand(conversation.id, BORROWER, match.id)
            )
            return conversation

        with pytest.raises(AccessDeniedError):
            run(scenario())


class TestConversationCommands:
    def test_advance_status_notifies(self, clock):
        harness = Harness(clock)

        async def scenario():
            conversation = await harness.saved_conversation()
            await AdvanceStatusHandler(harness.repository, harness.locks, harness.notifier).execute(
                AdvanceStatusCommand(conversation.id, FINANCE_MANAGER, DealStatus.PRE_QUALIFIED)
            )
            return conversation

        conversation = run(scenario())

        assert conversation.status == DealStatus.PRE_QUALIFIED
        assert harness.events[-1].type == ConversationEventType.STATUS_CHANGED

    def test_add_participant(self, clock):
        harness = Harness(clock)
        handler = AddParticipantHandler(harness.repository, harness.locks, clock)

        async def scenario():
            conversation = await harness.saved_conversation()
            command = AddParticipantCommand(
                conversation.id, FINANCE_MANAGER, UserId("vendor-1"), "Val Ortiz", ParticipantRole.VENDOR
            )
            added = await handler.execute(command)
            with pytest.raises(ConflictError):
                await handler.execute(command)
            with pytest.raises(AccessDeniedError):
                await handler.execute(
                    AddParticipantCommand(
                        conversation.id, BORROWER, UserId("guest"), "Guest", ParticipantRole.BROKER
                    )
                )
            return added

        added = run(scenario())
        assert added.permissions.can_upload_documents is True
        assert added.permissions.can_access_financials is False


class TestQueries:
    def test_my_deals(self, clock):
        harness = Harness(clock)

        async def scenario():
            await harness.saved_conversation()
            await harness.saved_conversation()
            handler = ListConversationsHandler(harness.repository)
            mine = await handler.execute(
                ListConversationsQuery(LENDER, filter_mode=FilterMode.MY_DEALS)
            )
            none = await handler.execute(
                ListConversationsQuery(UserId("stranger"), filter_mode=FilterMode.MY_DEALS)
            )
            return mine, none

        mine, none = run(scenario())
        assert len(mine) == 2
        assert none == []

    def test_permissions(self, clock):
        harness = Harness(clock)

        async def scenario():
            conversation = await harness.saved_conversation()
            handler = GetPermissionsHandler(harness.repository)
            lender = await handler.execute(
                GetPermissionsQuery(conversation.id, FINANCE_MANAGER, LENDER)
            )
            with pytest.raises(AccessDeniedError):
                await handler.execute(
                    GetPermissionsQuery(conversation.id, UserId("stranger"), LENDER)
                )
            return lender

        lender = run(scenario())
        assert lender.can_approve_deal is True
        assert lender.can_submit_to_lenders is False

"""
Dishka DI Container Setup.

- Registers all dependencies (repositories, services, handlers)
- Maps abstract ports to concrete implementations, chosen from Config
- Manages lifecycle:
    Scope.APP     = created once, shared across requests (repository, locks,
                    dispatcher, notifier, clock, engines, external adapters)
    Scope.REQUEST = new handler per HTTP request

Flow:
  Container → provides → ConversationRepository (in-memory or Redis)
                                    ↓
            → SendMessageHandler(repository, locks, notifier, dispatcher, ...)

The per-conversation locks and the dispatcher MUST be app-scoped: they are
what serializes work on one conversation across requests.
"""

import logging
from collections.abc import AsyncIterable
from typing import Optional

from dishka import AsyncContainer, Provider, Scope, make_async_container, provide

from dealroom.application.commands.chat import SendMessageHandler
from dealroom.application.commands.conversations import (
    AddParticipantHandler,
    AdvanceStatusHandler,
    CreateConversationHandler,
    MarkPresenceHandler,
    UpdateDealHandler,
)
from dealroom.application.commands.lenders import SelectLenderHandler
from dealroom.application.queries.conversations import (
    GetConversationHandler,
    GetPermissionsHandler,
    ListConversationsHandler,
)
from dealroom.application.queries.lenders import RequestLenderMatchesHandler
from dealroom.application.services import (
    AssistantDispatcher,
    ConversationLocks,
    ConversationNotifier,
)
from dealroom.config.settings import Config, get_config
from dealroom.domain.ports.attachment_store import AttachmentStore
from dealroom.domain.ports.clock import Clock, UtcClock
from dealroom.domain.ports.customer_directory import CustomerDirectory
from dealroom.domain.ports.repositories import ConversationRepository
from dealroom.domain.services.assistant_responder import AssistantResponder
from dealroom.domain.services.lender_matcher import LenderMatcher
from dealroom.infrastructure.cache import close_redis_client, create_redis_client
from dealroom.infrastructure.external import (
    HttpCustomerDirectory,
    InMemoryCustomerDirectory,
)
from dealroom.infrastructure.persistence import (
    InMemoryConversationRepository,
    RedisConversationRepository,
)
from dealroom.infrastructure.storage import LocalAttachmentStore

logger = logging.getLogger(__name__)


class AppProvider(Provider):
    """
    Application dependency provider.

    Receives the Config class so tests can build a container from
    TestingConfig (or a subclass of it).
    """

    def __init__(self, config: Optional[type[Config]] = None):
        super().__init__()
        self._config = config or get_config()

    # ==================== CORE ====================

    @provide(scope=Scope.APP)
    def get_clock(self) -> Clock:
        return UtcClock()

    @provide(scope=Scope.APP)
    def get_conversation_locks(self) -> ConversationLocks:
        return ConversationLocks()

    @provide(scope=Scope.APP)
    def get_notifier(self) -> ConversationNotifier:
        return ConversationNotifier()

    # ==================== REPOSITORIES ====================

    @provide(scope=Scope.APP)
    async def get_conversation_repository(
        self, clock: Clock
    ) -> AsyncIterable[ConversationRepository]:
        """
        Provide ConversationRepository implementation.

        - REDIS_URL set   → RedisConversationRepository (client closed on shutdown)
        - REDIS_URL empty → InMemoryConversationRepository
        """
        if not self._config.REDIS_URL:
            logger.info("[Container] Using in-memory conversation repository")
            yield InMemoryConversationRepository()
            return

        client = await create_redis_client(self._config.REDIS_URL)
        try:
            yield RedisConversationRepository(
                client, clock=clock, key_prefix=self._config.REDIS_KEY_PREFIX
            )
        finally:
            await close_redis_client(client)

    # ==================== EXTERNAL SERVICES ====================

    @provide(scope=Scope.APP)
    def get_customer_directory(self) -> CustomerDirectory:
        if self._config.CUSTOMER_DIRECTORY_URL:
            return HttpCustomerDirectory(
                base_url=self._config.CUSTOMER_DIRECTORY_URL,
                timeout=self._config.CUSTOMER_DIRECTORY_TIMEOUT,
                token=self._config.CUSTOMER_DIRECTORY_TOKEN or None,
            )
        return InMemoryCustomerDirectory()

    @provide(scope=Scope.APP)
    def get_attachment_store(self) -> AttachmentStore:
        return LocalAttachmentStore(
            upload_base=self._config.UPLOAD_BASE,
            public_base=self._config.UPLOAD_PUBLIC_BASE,
        )

    # ==================== DOMAIN SERVICES ====================

    @provide(scope=Scope.APP)
    def get_lender_matcher(self) -> LenderMatcher:
        return LenderMatcher(limit=self._config.LENDER_MATCH_LIMIT)

    @provide(scope=Scope.APP)
    def get_assistant_responder(self, lender_matcher: LenderMatcher) -> AssistantResponder:
        return AssistantResponder(lender_matcher)

    @provide(scope=Scope.APP)
    async def get_assistant_dispatcher(
        self,
        conversation_repository: ConversationRepository,
        locks: ConversationLocks,
        notifier: ConversationNotifier,
    ) -> AsyncIterable[AssistantDispatcher]:
        """Pending replies are cancelled when the container closes."""
        dispatcher = AssistantDispatcher(
            conversation_repository,
            locks,
            notifier,
            reply_delay=self._config.ASSISTANT_REPLY_DELAY_SECONDS,
        )
        try:
            yield dispatcher
        finally:
            await dispatcher.aclose()

    # ==================== CONVERSATION HANDLERS ====================

    @provide(scope=Scope.REQUEST)
    def get_create_conversation_handler(
        self,
        conversation_repository: ConversationRepository,
        customer_directory: CustomerDirectory,
        clock: Clock,
    ) -> CreateConversationHandler:
        return CreateConversationHandler(conversation_repository, customer_directory, clock)

    @provide(scope=Scope.REQUEST)
    def get_add_participant_handler(
        self,
        conversation_repository: ConversationRepository,
        locks: ConversationLocks,
        clock: Clock,
    ) -> AddParticipantHandler:
        return AddParticipantHandler(conversation_repository, locks, clock)

    @provide(scope=Scope.REQUEST)
    def get_advance_status_handler(
        self,
        conversation_repository: ConversationRepository,
        locks: ConversationLocks,
        notifier: ConversationNotifier,
    ) -> AdvanceStatusHandler:
        return AdvanceStatusHandler(conversation_repository, locks, notifier)

    @provide(scope=Scope.REQUEST)
    def get_update_deal_handler(
        self,
        conversation_repository: ConversationRepository,
        locks: ConversationLocks,
        notifier: ConversationNotifier,
    ) -> UpdateDealHandler:
        return UpdateDealHandler(conversation_repository, locks, notifier)

    @provide(scope=Scope.REQUEST)
    def get_mark_presence_handler(
        self,
        conversation_repository: ConversationRepository,
        locks: ConversationLocks,
    ) -> MarkPresenceHandler:
        return MarkPresenceHandler(conversation_repository, locks)

    @provide(scope=Scope.REQUEST)
    def get_list_conversations_handler(
        self, conversation_repository: ConversationRepository
    ) -> ListConversationsHandler:
        return ListConversationsHandler(conversation_repository)

    @provide(scope=Scope.REQUEST)
    def get_get_conversation_handler(
        self, conversation_repository: ConversationRepository
    ) -> GetConversationHandler:
        return GetConversationHandler(conversation_repository)

    @provide(scope=Scope.REQUEST)
    def get_get_permissions_handler(
        self, conversation_repository: ConversationRepository
    ) -> GetPermissionsHandler:
        return GetPermissionsHandler(conversation_repository)

    # ==================== CHAT HANDLERS ====================

    @provide(scope=Scope.REQUEST)
    def get_send_message_handler(
        self,
        conversation_repository: ConversationRepository,
        locks: ConversationLocks,
        notifier: ConversationNotifier,
        dispatcher: AssistantDispatcher,
        responder: AssistantResponder,
        attachment_store: AttachmentStore,
        clock: Clock,
    ) -> SendMessageHandler:
        return SendMessageHandler(
            conversation_repository=conversation_repository,
            locks=locks,
            notifier=notifier,
            dispatcher=dispatcher,
            responder=responder,
            attachment_store=attachment_store,
            clock=clock,
            max_upload_bytes=self._config.MAX_CONTENT_LENGTH,
        )

    # ==================== LENDER HANDLERS ====================

    @provide(scope=Scope.REQUEST)
    def get_request_lender_matches_handler(
        self,
        conversation_repository: ConversationRepository,
        lender_matcher: LenderMatcher,
    ) -> RequestLenderMatchesHandler:
        return RequestLenderMatchesHandler(conversation_repository, lender_matcher)

    @provide(scope=Scope.REQUEST)
    def get_select_lender_handler(
        self,
        conversation_repository: ConversationRepository,
        locks: ConversationLocks,
        notifier: ConversationNotifier,
        dispatcher: AssistantDispatcher,
        responder: AssistantResponder,
        lender_matcher: LenderMatcher,
    ) -> SelectLenderHandler:
        return SelectLenderHandler(
            conversation_repository,
            locks,
            notifier,
            dispatcher,
            responder,
            lender_matcher,
        )


def create_container(config: Optional[type[Config]] = None) -> AsyncContainer:
    """
    Create and configure the DI container.

    Call this ONCE per app; the app factory does it for you.
    """
    return make_async_container(AppProvider(config))

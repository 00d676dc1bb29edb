"""
Select Lender Command - Submit the deal to one of EVA's recommended lenders.

Handler:
1. Acting user needs can_submit_to_lenders
2. Recompute the (deterministic) ranking and find the recommendation by id
3. Append the user's selection message with lenderSelection metadata
4. Queue EVA's confirmation on the dispatcher before releasing the lock

The deal status is not changed here; submission is a separate status action.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from dealroom.application.common.interfaces import Command, CommandHandler
from dealroom.application.common.loading import load_conversation
from dealroom.application.services.assistant_dispatcher import AssistantDispatcher
from dealroom.application.services.conversation_locks import ConversationLocks
from dealroom.application.services.notifier import ConversationNotifier
from dealroom.domain.entities.lender_recommendation import LenderRecommendation
from dealroom.domain.entities.message import LenderSelection, Message, MessageMetadata
from dealroom.domain.exceptions import AccessDeniedError, NotFoundError
from dealroom.domain.ports.repositories import ConversationRepository
from dealroom.domain.services.assistant_responder import AssistantResponder
from dealroom.domain.services.lender_matcher import LenderMatcher
from dealroom.domain.value_objects.conversation_id import ConversationId
from dealroom.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectLenderResult:
    recommendation: LenderRecommendation
    message: Message
    confirmation: Optional[Message] = None
    confirmation_pending: bool = False


@dataclass(frozen=True)
class SelectLenderCommand(Command[SelectLenderResult]):
    conversation_id: ConversationId
    acting_user_id: UserId
    recommendation_id: str
    wait_for_reply: bool = False


class SelectLenderHandler(CommandHandler[SelectLenderResult]):
    def __init__(
        self,
        conversation_repository: ConversationRepository,
        locks: ConversationLocks,
        notifier: ConversationNotifier,
        dispatcher: AssistantDispatcher,
        responder: AssistantResponder,
        lender_matcher: LenderMatcher,
    ):
        self._conversation_repository = conversation_repository
        self._locks = locks
        self._notifier = notifier
        self._dispatcher = dispatcher
        self._responder = responder
        self._lender_matcher = lender_matcher

    async def execute(self, command: SelectLenderCommand) -> SelectLenderResult:
        async with self._locks.for_conversation(command.conversation_id):
            conversation = await load_conversation(
                self._conversation_repository, command.conversation_id
            )
            actor = conversation.get_participant(command.acting_user_id)
            if not actor.permissions.can_submit_to_lenders:
                raise AccessDeniedError(f"{actor.name} cannot submit deals to lenders", "can_submit_to_lenders")

            recommendation = self._find(conversation, command.recommendation_id)
            message = conversation.append_message(
                command.acting_user_id,
                f"I'm submitting this deal to {recommendation.lender_name} "
                f"based on EVA's recommendation.",
                metadata=MessageMetadata(
                    lender_selection=LenderSelection(
                        recommendation_id=recommendation.id,
                        lender_name=recommendation.lender_name,
                        time_to_close=recommendation.time_to_close,
                    )
                ),
            )
            await self._conversation_repository.save(conversation)
            future = self._dispatcher.submit(
                command.conversation_id,
                lambda latest: self._responder.lender_selected(recommendation),
            )

        logger.info(
            f"[SelectLender] {command.acting_user_id} selected "
            f"{recommendation.lender_name} for {command.conversation_id}"
        )
        await self._notifier.message_appended(message)

        if not command.wait_for_reply:
            return SelectLenderResult(
                recommendation=recommendation, message=message, confirmation_pending=True
            )
        return SelectLenderResult(
            recommendation=recommendation, message=message, confirmation=await future
        )

    def _find(self, conversation, recommendation_id: str) -> LenderRecommendation:
        for recommendation in self._lender_matcher.match(conversation):
            if recommendation.id == recommendation_id:
                return recommendation
        raise NotFoundError(
            f"Recommendation {recommendation_id} not found for conversation {conversation.id}"
        )

"""
Request Lender Matches Query.

Ranks the lender catalog for the conversation's deal. Recommendations are
not stored; the same conversation yields the same ids, which is what
SelectLender relies on.
"""

import logging
from dataclasses import dataclass

from dealroom.application.common.interfaces import Query, QueryHandler
from dealroom.application.common.loading import load_conversation, require_participant
from dealroom.domain.entities.lender_recommendation import LenderRecommendation
from dealroom.domain.ports.repositories import ConversationRepository
from dealroom.domain.services.lender_matcher import LenderMatcher
from dealroom.domain.value_objects.conversation_id import ConversationId
from dealroom.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestLenderMatchesQuery(Query[list[LenderRecommendation]]):
    conversation_id: ConversationId
    acting_user_id: UserId


class RequestLenderMatchesHandler(QueryHandler[list[LenderRecommendation]]):
    def __init__(
        self,
        conversation_repository: ConversationRepository,
        lender_matcher: LenderMatcher,
    ):
        self._conversation_repository = conversation_repository
        self._lender_matcher = lender_matcher

    async def execute(
        self, query: RequestLenderMatchesQuery
    ) -> list[LenderRecommendation]:
        conversation = await load_conversation(
            self._conversation_repository, query.conversation_id
        )
        require_participant(conversation, query.acting_user_id)
        matches = self._lender_matcher.match(conversation)
        logger.info(
            f"[LenderMatches] {query.conversation_id}: "
            f"{[m.lender_name for m in matches]}"
        )
        return matches

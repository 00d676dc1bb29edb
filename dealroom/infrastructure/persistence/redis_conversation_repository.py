"""
Redis Conversation Repository.

Redis Data Structure:
- Key "{prefix}conv:{conversation_id}" (STRING): JSON snapshot of the whole
  aggregate, serialized through ConversationDTO
- Key "{prefix}conversations" (SET): ids of all stored conversations

Redis Commands Used:
- GET / SET: read and write one snapshot
- SADD / SMEMBERS: maintain the id index
- MGET: load every snapshot for the worklist

Error Handling:
- Redis is the source of truth here, so failures are not swallowed:
  RedisError is re-raised as UpstreamError("redis", ...)
"""

import logging
from typing import Optional

from pydantic import ValidationError as PydanticValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError

from dealroom.application.dto.conversation import ConversationDTO
from dealroom.domain.entities.conversation import Conversation
from dealroom.domain.exceptions import UpstreamError
from dealroom.domain.ports.clock import Clock
from dealroom.domain.ports.repositories import ConversationRepository
from dealroom.domain.value_objects.conversation_id import ConversationId

logger = logging.getLogger(__name__)


class RedisConversationRepository(ConversationRepository):
    def __init__(self, redis: Redis, clock: Clock, key_prefix: str = "dealroom:"):
        self._redis = redis
        self._clock = clock
        self._prefix = key_prefix

    def _key(self, conversation_id: str) -> str:
        return f"{self._prefix}conv:{conversation_id}"

    @property
    def _index_key(self) -> str:
        return f"{self._prefix}conversations"

    def _serialize(self, conversation: Conversation) -> str:
        return ConversationDTO.from_entity(conversation).model_dump_json()

    def _deserialize(self, payload: str) -> Optional[Conversation]:
        try:
            return ConversationDTO.model_validate_json(payload).to_entity(self._clock)
        except (PydanticValidationError, ValueError) as e:
            logger.warning(f"[RedisRepo] Skipping unreadable conversation snapshot: {e}")
            return None

    async def get_by_id(
        self, conversation_id: ConversationId
    ) -> Optional[Conversation]:
        try:
            payload = await self._redis.get(self._key(conversation_id.value))
        except RedisError as e:
            raise UpstreamError("redis", str(e)) from e
        if payload is None:
            return None
        return self._deserialize(payload)

    async def list_all(self) -> list[Conversation]:
        try:
            ids = await self._redis.smembers(self._index_key)
            if not ids:
                return []
            payloads = await self._redis.mget([self._key(i) for i in sorted(ids)])
        except RedisError as e:
            raise UpstreamError("redis", str(e)) from e

        conversations = []
        for payload in payloads:
            if payload is None:
                continue
            conversation = self._deserialize(payload)
            if conversation is not None:
                conversations.append(conversation)
        return conversations

    async def save(self, conversation: Conversation) -> None:
        key = self._key(conversation.id.value)
        try:
            await self._redis.set(key, self._serialize(conversation))
            await self._redis.sadd(self._index_key, conversation.id.value)
        except RedisError as e:
            raise UpstreamError("redis", str(e)) from e
        logger.debug(
            f"[RedisRepo] Saved {key} ({len(conversation.messages)} messages)"
        )

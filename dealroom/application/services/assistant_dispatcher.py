"""
Assistant Dispatcher - Delivers EVA's replies one conversation at a time.

Guidelines:
- One FIFO queue + one worker task per conversation
- Each reply waits exactly once (the configured reply delay), then takes the
  conversation lock, composes the reply against the latest state and appends it
- User messages sent during the delay are appended first; replies keep the
  order of their triggers and are never dropped or duplicated
- cancel() discards everything pending for a conversation and ignores later
  submissions (the conversation is gone)

Flow:
  submit(conversation_id, compose) → queue → worker: sleep(delay) → lock →
  compose(conversation) → append → save → notify → future.set_result(message)

If compose raises, the generic fallback reply is appended instead.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable

from dealroom.application.common.loading import load_conversation
from dealroom.application.services.conversation_locks import ConversationLocks
from dealroom.application.services.notifier import ConversationNotifier
from dealroom.domain.entities.conversation import Conversation
from dealroom.domain.entities.message import Message
from dealroom.domain.ports.repositories import ConversationRepository
from dealroom.domain.services.assistant_responder import AssistantReply, AssistantResponder
from dealroom.domain.value_objects.conversation_id import ConversationId
from dealroom.domain.value_objects.user_id import ASSISTANT_USER_ID

logger = logging.getLogger(__name__)

ReplyComposer = Callable[[Conversation], AssistantReply]


@dataclass
class _ReplyJob:
    compose: ReplyComposer
    future: asyncio.Future


class AssistantDispatcher:
    def __init__(
        self,
        repository: ConversationRepository,
        locks: ConversationLocks,
        notifier: ConversationNotifier,
        reply_delay: float = 0.0,
    ):
        self._repository = repository
        self._locks = locks
        self._notifier = notifier
        self._reply_delay = reply_delay
        self._queues: dict[str, asyncio.Queue] = {}
        self._workers: dict[str, asyncio.Task] = {}
        self._cancelled: set[str] = set()
        self._active: dict[str, _ReplyJob] = {}

    def submit(
        self, conversation_id: ConversationId, compose: ReplyComposer
    ) -> asyncio.Future:
        """
        Queue a reply for the conversation.

        Returns a future resolving to the appended Message, or None when the
        reply was discarded by cancel().
        """
        key = conversation_id.value
        future = asyncio.get_running_loop().create_future()
        if key in self._cancelled:
            logger.info(f"[Dispatcher] Ignoring reply for cancelled conversation {key}")
            future.set_result(None)
            return future

        queue = self._queues.get(key)
        if queue is None:
            queue = self._queues[key] = asyncio.Queue()
        queue.put_nowait(_ReplyJob(compose=compose, future=future))

        worker = self._workers.get(key)
        if worker is None or worker.done():
            self._workers[key] = asyncio.create_task(
                self._run(conversation_id, queue), name=f"assistant-replies-{key}"
            )
        logger.debug(f"[Dispatcher] Queued reply for {key} (pending={queue.qsize()})")
        return future

    def __len__(self) -> int:
        """Conversations with a reply worker alive."""
        return len(self._workers)

    def pending(self, conversation_id: ConversationId) -> int:
        queue = self._queues.get(conversation_id.value)
        return queue.qsize() if queue else 0

    def cancel(self, conversation_id: ConversationId) -> int:
        """Discard pending replies for a conversation. Returns how many were dropped."""
        key = conversation_id.value
        self._cancelled.add(key)
        discarded = 0

        queue = self._queues.pop(key, None)
        while queue is not None and not queue.empty():
            job = queue.get_nowait()
            if not job.future.done():
                job.future.set_result(None)
            queue.task_done()
            discarded += 1

        worker = self._workers.pop(key, None)
        if worker is not None and not worker.done():
            worker.cancel()
        active = self._active.pop(key, None)
        if active is not None and not active.future.done():
            active.future.set_result(None)
            discarded += 1

        logger.info(f"[Dispatcher] Cancelled conversation {key}, discarded {discarded} replies")
        return discarded

    async def drain(self, conversation_id: ConversationId) -> None:
        """Wait until every queued reply of the conversation has been handled."""
        worker = self._workers.get(conversation_id.value)
        if worker is not None:
            await asyncio.gather(worker, return_exceptions=True)

    async def aclose(self) -> None:
        workers = list(self._workers.values())
        for worker in workers:
            worker.cancel()
        await asyncio.gather(*workers, return_exceptions=True)
        for queue in self._queues.values():
            while not queue.empty():
                job = queue.get_nowait()
                if not job.future.done():
                    job.future.set_result(None)
        self._workers.clear()
        self._queues.clear()
        self._active.clear()

    async def _run(self, conversation_id: ConversationId, queue: asyncio.Queue) -> None:
        key = conversation_id.value
        while not queue.empty():
            job = queue.get_nowait()
            self._active[key] = job
            try:
                message = await self._deliver(conversation_id, job.compose)
            except asyncio.CancelledError:
                if not job.future.done():
                    job.future.set_result(None)
                raise
            except Exception as e:
                logger.error(
                    f"[Dispatcher] Failed to deliver reply for {conversation_id.value}: {e}"
                )
                if not job.future.done():
                    job.future.set_exception(e)
            else:
                if not job.future.done():
                    job.future.set_result(message)
            finally:
                if self._active.get(key) is job:
                    del self._active[key]
                queue.task_done()

        # Idle: forget the conversation until its next submit
        if self._queues.get(key) is queue:
            del self._queues[key]
        if self._workers.get(key) is asyncio.current_task():
            del self._workers[key]

    async def _deliver(
        self, conversation_id: ConversationId, compose: ReplyComposer
    ) -> Message:
        await asyncio.sleep(self._reply_delay)

        async with self._locks.for_conversation(conversation_id):
            conversation = await load_conversation(self._repository, conversation_id)
            try:
                reply = compose(conversation)
            except Exception:
                logger.exception(
                    f"[Dispatcher] Reply synthesis failed for {conversation_id.value}, "
                    f"sending fallback"
                )
                reply = AssistantResponder.fallback()

            message = conversation.append_message(
                ASSISTANT_USER_ID,
                reply.content,
                reply.message_type,
                metadata=reply.metadata,
            )
            await self._repository.save(conversation)

        await self._notifier.message_appended(message)
        return message

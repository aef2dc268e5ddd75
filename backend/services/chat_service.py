"""
Chat Service - Conversation history with one streamed request in flight
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator

from models.prompt_to_code import ChatMessage, ChatRole
from services.llm_service import LLMService

logger = logging.getLogger(__name__)

# Queue markers
_FINISHED = object()


class _Failure:
    def __init__(self, error: Exception):
        self.error = error


class ChatService:
    """Owns the message history of one conversation and streams answers.

    The history starts with the system prompt and is only ever appended to.
    At most one request is in flight; `stop_receiving_message` ends it
    without an error.
    """

    def __init__(
        self,
        system_prompt: str,
        config: dict[str, Any],
        llm_service: LLMService | None = None,
        temperature: float | None = None,
        functions: list[dict[str, Any]] | None = None,
    ):
        self.history: list[ChatMessage] = [ChatMessage(role=ChatRole.SYSTEM, content=system_prompt)]
        self.config = config
        self.temperature = temperature
        self.functions = functions or []
        self._llm_service = llm_service or LLMService(config)
        self._task: asyncio.Task | None = None
        self._queue: asyncio.Queue | None = None
        self._consuming = False
        self.stopped = False

    @property
    def is_receiving(self) -> bool:
        """True while the provider request runs and its stream is still open"""
        return (
            self._consuming
            and not self.stopped
            and self._task is not None
            and not self._task.done()
        )

    def append(self, *messages: ChatMessage) -> None:
        """Append messages to the history"""
        self.history.extend(messages)

    async def send(self, content: str) -> AsyncIterator[str]:
        """Send a user message and return the answer as a stream of fragments.

        Provider configuration errors raise here and leave the history
        untouched; transport failures raise from the returned iterator after
        the fragments already delivered.
        """
        if self.is_receiving:
            raise RuntimeError("A request is already in flight")

        message = ChatMessage(role=ChatRole.USER, content=content)
        stream = self._llm_service.stream_chat(
            [*self.history, message],
            temperature=self.temperature,
            functions=self.functions,
        )
        self.history.append(message)

        self.stopped = False
        self._consuming = True
        self._queue = asyncio.Queue()
        self._task = asyncio.create_task(self._receive(stream, self._queue))
        return self._fragments(self._queue)

    async def _receive(self, stream: AsyncIterator[str], queue: asyncio.Queue) -> None:
        """Background task pumping provider fragments into the queue"""
        answer = []
        try:
            async for fragment in stream:
                answer.append(fragment)
                queue.put_nowait(fragment)
        except asyncio.CancelledError:
            logger.info("Request cancelled after %d fragments", len(answer))
            raise
        except Exception as e:
            logger.error("Request failed after %d fragments: %s", len(answer), e)
            queue.put_nowait(_Failure(e))
            return

        self.history.append(ChatMessage(role=ChatRole.ASSISTANT, content="".join(answer)))
        logger.info("Request finished with %d fragments", len(answer))
        queue.put_nowait(_FINISHED)

    async def _fragments(self, queue: asyncio.Queue) -> AsyncIterator[str]:
        try:
            while True:
                item = await queue.get()
                if item is _FINISHED:
                    return
                if isinstance(item, _Failure):
                    raise item.error
                yield item
        finally:
            # A newer request may have replaced this one
            if queue is self._queue:
                self._consuming = False
                self._cancel_task()

    def _cancel_task(self) -> bool:
        if self._task is None or self._task.done():
            return False
        self._task.cancel()
        return True

    def stop_receiving_message(self) -> bool:
        """Stop the in-flight request; returns False when nothing was active"""
        if not self._consuming or self.stopped or self._queue is None:
            return False

        self.stopped = True
        self._cancel_task()
        # Drop undelivered fragments so nothing is emitted after the stop
        while not self._queue.empty():
            self._queue.get_nowait()
        self._queue.put_nowait(_FINISHED)
        return True

"""The chat session: transcript plus the single in-flight request.

Hidden design decisions:
- At most one request is in flight; a new submit supersedes the old one
- A superseded request's bot message is removed, never shown as an error
- The per-request time ceiling covers the whole response, not single reads
- The thread id is adopted from the first response that carries one
"""

import asyncio
from collections.abc import Callable
from typing import Any, Protocol

from ..agent.errors import AgentError
from ..agent.models import QueryRequest
from ..memory import InMemorySessionMemory, SessionMemory
from .accumulator import StreamAccumulator
from .models import Message


class QueryTarget(Protocol):
    """What the session needs from an agent connection or client."""

    async def query(self, request: QueryRequest) -> dict[str, Any]: ...

    def query_stream(self, request: QueryRequest) -> Any: ...


class ChatSession:
    """Owns the transcript and the in-flight request.

    Usage:
        session = ChatSession(connection, on_change=refresh)
        task = session.submit("How many apples are in stock?")
        await task
    """

    def __init__(
        self,
        agent: QueryTarget,
        memory: SessionMemory | None = None,
        streaming: bool = True,
        request_timeout: float = 60.0,
        max_tokens: int | None = None,
        on_change: Callable[[], None] | None = None,
    ):
        """Initialize the session.

        Args:
            agent: AgentConnection (or client) used to send queries
            memory: Where the thread id is retained (in-memory by default)
            streaming: Use the streamed endpoint instead of the single-response one
            request_timeout: Ceiling in seconds for one whole request
            max_tokens: Optional generation limit sent with each query
            on_change: Called after every change to the transcript
        """
        if request_timeout <= 0:
            raise ValueError("request_timeout must be positive")

        self.messages: list[Message] = []
        self._agent = agent
        self._memory = memory or InMemorySessionMemory()
        self._streaming = streaming
        self._request_timeout = request_timeout
        self._max_tokens = max_tokens
        self._on_change = on_change
        self._task: asyncio.Task | None = None
        self._active: Message | None = None
        self._generation = 0
        self._debug_callback: Any | None = None

    @property
    def memory(self) -> SessionMemory:
        return self._memory

    @property
    def in_flight(self) -> bool:
        """Whether a request is currently running."""
        return self._task is not None and not self._task.done()

    @property
    def active_message(self) -> Message | None:
        """The bot message of the in-flight request, if any."""
        return self._active if self.in_flight else None

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback: Callable(level, component, message)."""
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Session", message)

    def _changed(self) -> None:
        if self._on_change:
            self._on_change()

    def _owns(self, generation: int) -> bool:
        return generation == self._generation

    def submit(self, query: str) -> asyncio.Task:
        """Start a request for a user query.

        Any in-flight request is cancelled and its bot message removed before
        the user message and the new placeholder are appended. Must be called
        from within a running event loop.

        Returns:
            The task running the request

        Raises:
            ValueError: If the query is blank
        """
        query = query.strip()
        if not query:
            raise ValueError("query must not be blank")

        self.cancel()

        self.messages.append(Message.user(query))
        placeholder = Message.placeholder()
        self.messages.append(placeholder)

        self._generation += 1
        self._active = placeholder
        self._task = asyncio.get_running_loop().create_task(
            self._run(query, placeholder, self._generation)
        )
        self._debug("info", f"Submitted query ({len(query)} chars)")
        self._changed()
        return self._task

    def cancel(self) -> bool:
        """Abort the in-flight request and discard its message.

        Returns:
            True if a request was cancelled
        """
        task, active = self._task, self._active
        self._task = None
        self._active = None
        if task is None or task.done():
            return False

        self._generation += 1
        task.cancel()
        if active is not None:
            self.messages[:] = [m for m in self.messages if m is not active]
        self._debug("debug", "Cancelled in-flight request")
        self._changed()
        return True

    async def new_chat(self) -> None:
        """Cancel any request, clear the transcript and forget the thread id."""
        self.cancel()
        self.messages.clear()
        await self._memory.clear()
        self._debug("info", "Started new chat")
        self._changed()

    async def thread_id(self) -> str | None:
        """The retained thread id, if any."""
        return await self._memory.get_thread_id()

    async def _run(self, query: str, message: Message, generation: int) -> Message:
        def on_update(_: Message) -> None:
            if self._owns(generation):
                self._changed()

        accumulator = StreamAccumulator(message, on_update=on_update)
        accumulator.set_debug_callback(self._debug_callback)

        try:
            request = QueryRequest(
                query=query,
                thread_id=await self._memory.get_thread_id(),
                max_tokens=self._max_tokens,
            )
            await asyncio.wait_for(
                self._consume(request, accumulator, generation),
                timeout=self._request_timeout,
            )
        except (AgentError, asyncio.TimeoutError) as e:
            if self._owns(generation):
                await self._settle(accumulator, e)
        except Exception as e:
            self._debug("error", f"Unexpected {type(e).__name__} during request")
            if self._owns(generation):
                await self._settle(accumulator, e)
        else:
            if self._owns(generation):
                await self._settle(accumulator, None)
        finally:
            if self._owns(generation):
                self._task = None
                self._active = None
                self._changed()
        return message

    async def _consume(
        self,
        request: QueryRequest,
        accumulator: StreamAccumulator,
        generation: int,
    ) -> None:
        if not self._streaming:
            payload = await self._agent.query(request)
            if self._owns(generation):
                accumulator.merge(payload)
            return

        stream = self._agent.query_stream(request)
        try:
            async for data in stream:
                if not self._owns(generation):
                    return
                accumulator.feed(data)
                if accumulator.done:
                    return
        finally:
            await stream.aclose()

    async def _settle(self, accumulator: StreamAccumulator, error: Exception | None) -> None:
        # A thread id seen before a failure is still kept
        if error is None:
            accumulator.finish()
        else:
            accumulator.fail(error)
        await self._adopt_thread_id(accumulator.thread_id)

    async def _adopt_thread_id(self, thread_id: str | None) -> None:
        if not thread_id:
            return
        if await self._memory.get_thread_id():
            return
        await self._memory.set_thread_id(thread_id)
        self._debug("debug", f"Thread id set to {thread_id}")

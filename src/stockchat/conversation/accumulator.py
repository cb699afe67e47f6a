"""Merging a streamed response into one evolving bot message.

Hidden design decisions:
- Delta fragments append while text or markup snapshots replace
- The first thread id wins
- The last non-null table wins
- Which user-facing text each failure kind turns into
"""

import asyncio
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..agent.errors import AgentResponseError, AgentStatusError, AgentTimeoutError
from ..extract import extract_table, extract_text, finalize_text
from ..extract.models import Row
from ..stream import Chunk, LineDecoder, is_sentinel, parse_frame
from .models import (
    CONNECTION_ERROR_TEXT,
    TIMEOUT_TEXT,
    UNPARSEABLE_RESPONSE_TEXT,
    Message,
    MessageState,
    MessageStatus,
    status_error_text,
)


class StreamState(BaseModel):
    """Running result of a stream after some number of chunks."""

    model_config = ConfigDict(frozen=True)

    text: str = ""
    table: list[Row] | None = None
    thread_id: str | None = None
    chunks: int = Field(default=0, description="Number of chunks merged")
    card: bool = Field(default=False, description="Current text came from card markup")


def merge_chunk(state: StreamState, chunk: Chunk | Mapping[str, Any]) -> StreamState:
    """Fold one chunk into the running state.

    Args:
        state: State before the chunk
        chunk: Parsed chunk, or a raw payload mapping

    Returns:
        New state; the input state is not modified
    """
    if not isinstance(chunk, Chunk):
        chunk = Chunk.from_payload(dict(chunk))

    thread_id = state.thread_id or chunk.thread_id or None

    text, card = state.text, state.card
    if chunk.is_delta:
        text += chunk.delta
    else:
        snapshot = extract_text(chunk)
        if snapshot:
            text = snapshot
            card = not (chunk.text and chunk.text.strip())

    table = extract_table(chunk)
    if table is None:
        table = state.table

    return StreamState(
        text=text,
        table=table,
        thread_id=thread_id,
        chunks=state.chunks + 1,
        card=card,
    )


def failure_text(error: BaseException) -> str:
    """User-facing text for a failed request."""
    if isinstance(error, (AgentTimeoutError, asyncio.TimeoutError, TimeoutError)):
        return TIMEOUT_TEXT
    if isinstance(error, AgentStatusError):
        return status_error_text(error.status_code)
    if isinstance(error, AgentResponseError):
        return UNPARSEABLE_RESPONSE_TEXT
    return CONNECTION_ERROR_TEXT


class StreamAccumulator:
    """Owns one bot message while its response streams in.

    Feed raw body bytes as they arrive, then call finish() at end of stream
    or fail() when the request failed. A superseded request is simply
    abandoned; its message is removed by the session.
    """

    def __init__(
        self,
        message: Message,
        on_update: Callable[[Message], None] | None = None,
        encoding: str = "utf-8",
    ):
        self.message = message
        self._on_update = on_update
        self._decoder = LineDecoder(encoding)
        self._state = StreamState()
        self._done = False
        self._debug_callback: Any | None = None

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def thread_id(self) -> str | None:
        return self._state.thread_id

    @property
    def done(self) -> bool:
        """Whether the end-of-stream sentinel has been seen."""
        return self._done

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback: Callable(level, component, message)."""
        self._debug_callback = callback

    def _notify(self) -> None:
        if self._on_update:
            self._on_update(self.message)

    def feed(self, data: bytes) -> int:
        """Merge every complete frame contained in a body fragment.

        Returns:
            Number of chunks merged
        """
        if self._done:
            return 0
        merged = 0
        for line in self._decoder.feed(data):
            if is_sentinel(line):
                self._done = True
                break
            chunk = parse_frame(line, self._debug_callback)
            if chunk is not None:
                self.merge(chunk)
                merged += 1
        return merged

    def merge(self, chunk: Chunk | Mapping[str, Any]) -> None:
        """Merge one chunk and publish the running text."""
        self._state = merge_chunk(self._state, chunk)
        self.message.state = MessageState.STREAMING
        if self._state.text:
            self.message.text = self._state.text
            self.message.table = self._state.table
            self.message.card = self._state.card
            self._notify()

    def finish(self) -> Message:
        """Complete the message at end of stream."""
        residual = self._decoder.flush()
        if not self._done:
            for line in residual:
                if is_sentinel(line):
                    break
                chunk = parse_frame(line, self._debug_callback)
                if chunk is not None:
                    self._state = merge_chunk(self._state, chunk)

        state = self._state
        self.message.text = finalize_text(state.text, state.table)
        self.message.table = state.table
        self.message.card = state.card and bool(state.text)
        self.message.status = MessageStatus.OK
        self.message.streaming = False
        self.message.state = MessageState.COMPLETE
        self._notify()
        return self.message

    def fail(self, error: BaseException) -> Message:
        """Turn the message into a terminal error."""
        if self._debug_callback:
            self._debug_callback("error", "Session", f"Request failed: {error}")
        self.message.text = failure_text(error)
        self.message.table = None
        self.message.card = False
        self.message.status = MessageStatus.ERROR
        self.message.streaming = False
        self.message.state = MessageState.ERROR
        self._notify()
        return self.message

"""Event frame parsing for the agent's newline-delimited stream.

Hidden design decisions:
- Frames are bare JSON objects or "data:"-prefixed JSON objects
- The "[DONE]" sentinel ends a stream
- Malformed frames are dropped without aborting the stream
"""

import json
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator
from typing import Any

from .models import Chunk

EVENT_PREFIX = "data:"
DONE_SENTINEL = "[DONE]"

# Server-sent-event fields that never carry a JSON payload
_NON_DATA_FIELDS = ("event:", "id:", "retry:")


def _strip_prefix(line: str) -> str:
    if line.startswith(EVENT_PREFIX):
        return line[len(EVENT_PREFIX):].strip()
    return line


def is_sentinel(line: str) -> bool:
    """Check whether a line is the end-of-stream sentinel."""
    return _strip_prefix(line.strip()) == DONE_SENTINEL


def parse_frame(line: str, debug_callback: Any | None = None) -> Chunk | None:
    """Parse one event line into a chunk.

    Args:
        line: Raw text line (terminator already removed)
        debug_callback: Optional Callable(level, component, message)

    Returns:
        Parsed chunk, or None for blank, sentinel, non-data or malformed lines
    """
    stripped = line.strip()
    if not stripped or stripped.startswith(":") or stripped.startswith(_NON_DATA_FIELDS):
        return None

    body = _strip_prefix(stripped)
    if not body or body == DONE_SENTINEL:
        return None

    try:
        payload = json.loads(body)
    except ValueError:
        if debug_callback:
            debug_callback("debug", "Stream", f"Dropped malformed frame: {body[:80]!r}")
        return None

    if not isinstance(payload, dict):
        if debug_callback:
            debug_callback("debug", "Stream", f"Dropped non-object frame: {body[:80]!r}")
        return None

    return Chunk.from_payload(payload)


def iter_chunks(
    lines: Iterable[str],
    stop_at_sentinel: bool = False,
    debug_callback: Any | None = None,
) -> Iterator[Chunk]:
    """Yield chunks from event lines in arrival order.

    Args:
        lines: Event lines as produced by the line decoder
        stop_at_sentinel: End iteration at the first "[DONE]" frame
        debug_callback: Optional Callable(level, component, message)
    """
    for line in lines:
        if stop_at_sentinel and is_sentinel(line):
            return
        chunk = parse_frame(line, debug_callback)
        if chunk is not None:
            yield chunk


async def aiter_chunks(
    lines: AsyncIterable[str],
    stop_at_sentinel: bool = False,
    debug_callback: Any | None = None,
) -> AsyncIterator[Chunk]:
    """Async counterpart of iter_chunks."""
    async for line in lines:
        if stop_at_sentinel and is_sentinel(line):
            return
        chunk = parse_frame(line, debug_callback)
        if chunk is not None:
            yield chunk

"""Byte stream to text line decoding.

Hidden design decisions:
- Incremental UTF-8 decoding so characters split across network buffers survive
- Line terminator is a bare newline; the unterminated tail is held back
- Invalid byte sequences are replaced rather than aborting the stream
"""

import codecs
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator

LINE_TERMINATOR = "\n"


class LineDecoder:
    """Stateful decoder turning arbitrarily chunked bytes into complete lines.

    Usage:
        decoder = LineDecoder()
        for data in buffers:
            for line in decoder.feed(data):
                handle(line)
        for line in decoder.flush():
            handle(line)
    """

    def __init__(self, encoding: str = "utf-8"):
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""

    @property
    def pending(self) -> str:
        """Text received after the last line terminator."""
        return self._buffer

    def feed(self, data: bytes) -> list[str]:
        """Decode one buffer and return the lines it completed.

        Args:
            data: Raw bytes as received from the transport

        Returns:
            Complete lines in arrival order, without terminators
        """
        if not data:
            return []
        self._buffer += self._decoder.decode(data)
        if LINE_TERMINATOR not in self._buffer:
            return []
        *lines, self._buffer = self._buffer.split(LINE_TERMINATOR)
        return lines

    def flush(self) -> list[str]:
        """Signal end of stream and return the residual line, if any."""
        self._buffer += self._decoder.decode(b"", final=True)
        lines = []
        if LINE_TERMINATOR in self._buffer:
            *lines, self._buffer = self._buffer.split(LINE_TERMINATOR)
        if self._buffer:
            lines.append(self._buffer)
        self._buffer = ""
        return lines


def decode(chunks: Iterable[bytes], encoding: str = "utf-8") -> Iterator[str]:
    """Yield text lines from an iterable of byte buffers."""
    decoder = LineDecoder(encoding)
    for data in chunks:
        yield from decoder.feed(data)
    yield from decoder.flush()


async def adecode(
    chunks: AsyncIterable[bytes],
    encoding: str = "utf-8",
) -> AsyncIterator[str]:
    """Yield text lines from an async iterable of byte buffers."""
    decoder = LineDecoder(encoding)
    async for data in chunks:
        for line in decoder.feed(data):
            yield line
    for line in decoder.flush():
        yield line

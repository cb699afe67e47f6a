"""Unit tests for the stream decoder and frame parser."""
import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from stockchat.stream import (
    DONE_SENTINEL,
    Chunk,
    LineDecoder,
    adecode,
    aiter_chunks,
    decode,
    is_sentinel,
    iter_chunks,
    parse_frame,
)


def _split(data: bytes, cuts: list[int]) -> list[bytes]:
    points = sorted({min(cut, len(data)) for cut in cuts})
    pieces = []
    start = 0
    for point in points:
        pieces.append(data[start:point])
        start = point
    pieces.append(data[start:])
    return pieces


class TestLineDecoder:
    """Tests for LineDecoder."""

    def test_lines_split_across_buffers(self):
        """Test that a line is emitted only once its terminator arrives."""
        decoder = LineDecoder()

        assert decoder.feed(b"hel") == []
        assert decoder.pending == "hel"
        assert decoder.feed(b"lo\nwor") == ["hello"]
        assert decoder.feed(b"ld\n") == ["world"]
        assert decoder.flush() == []

    def test_multibyte_character_split_mid_sequence(self):
        """Test that a UTF-8 character split between buffers decodes intact."""
        data = "café ☕\n".encode("utf-8")
        decoder = LineDecoder()

        lines = []
        for index in range(len(data)):
            lines.extend(decoder.feed(data[index:index + 1]))

        assert lines == ["café ☕"]

    def test_flush_emits_unterminated_residual(self):
        """Test that the trailing line without a terminator is not lost."""
        decoder = LineDecoder()

        assert decoder.feed(b'{"delta": "a"}\n{"delta": "b"}') == ['{"delta": "a"}']
        assert decoder.flush() == ['{"delta": "b"}']

    def test_invalid_bytes_are_replaced(self):
        """Test that invalid UTF-8 does not abort decoding."""
        assert list(decode([b"ok\xff\n"])) == ["ok�"]

    def test_empty_feed_is_noop(self):
        """Test that empty buffers produce nothing."""
        decoder = LineDecoder()
        assert decoder.feed(b"") == []
        assert decoder.flush() == []

    @pytest.mark.asyncio
    async def test_adecode_matches_decode(self):
        """Test the async generator against the sync one."""
        buffers = [b"one\ntw", b"o\n", b"three"]

        async def source():
            for data in buffers:
                yield data

        assert [line async for line in adecode(source())] == list(decode(buffers))


class TestParseFrame:
    """Tests for parse_frame."""

    def test_bare_json_object(self):
        """Test that a bare JSON line parses."""
        chunk = parse_frame('{"delta": "Hi"}')

        assert isinstance(chunk, Chunk)
        assert chunk.delta == "Hi"
        assert chunk.is_delta

    @pytest.mark.parametrize("line", ['data: {"text": "x"}', 'data:{"text": "x"}', '  data: {"text": "x"}  '])
    def test_data_prefix_variants(self, line: str):
        """Test that the event prefix is optional and space tolerant."""
        assert parse_frame(line).text == "x"

    @pytest.mark.parametrize("line", ["", "   ", "[DONE]", "data: [DONE]", ": keep-alive", "event: end", "id: 7", "retry: 100"])
    def test_non_payload_lines_are_skipped(self, line: str):
        """Test that blank, sentinel and non-data lines produce no chunk."""
        assert parse_frame(line) is None

    def test_malformed_json_is_dropped_and_logged(self):
        """Test that a malformed frame is dropped with a debug message."""
        messages = []

        chunk = parse_frame("data: {not json", lambda *args: messages.append(args))

        assert chunk is None
        assert messages and messages[0][0] == "debug" and messages[0][1] == "Stream"

    @pytest.mark.parametrize("line", ["[1, 2]", '"text"', "42", "null"])
    def test_non_object_json_is_dropped(self, line: str):
        """Test that JSON values other than objects are dropped."""
        assert parse_frame(line) is None

    def test_mistyped_fields_are_ignored(self):
        """Test that wrongly typed fields do not fail the frame."""
        chunk = parse_frame('{"delta": 5, "text": "ok", "threadId": ["x"], "toolInteractions": {}}')

        assert chunk.delta is None
        assert chunk.text == "ok"
        assert chunk.thread_id is None
        assert chunk.tool_interactions is None
        assert chunk.payload["delta"] == 5

    def test_thread_id_alias(self):
        """Test that the wire name threadId maps onto thread_id."""
        assert parse_frame('{"threadId": "t-9"}').thread_id == "t-9"

    def test_is_sentinel(self):
        """Test sentinel detection with and without prefix."""
        assert is_sentinel(DONE_SENTINEL)
        assert is_sentinel("data: [DONE]")
        assert not is_sentinel('{"text": "[DONE]"}')


class TestIterChunks:
    """Tests for iter_chunks / aiter_chunks."""

    def test_malformed_frame_does_not_stop_stream(self):
        """Test that chunks after a malformed frame still arrive."""
        lines = ['{"delta": "a"}', "{oops", '{"delta": "b"}']

        assert [chunk.delta for chunk in iter_chunks(lines)] == ["a", "b"]

    def test_stop_at_sentinel(self):
        """Test that the sentinel ends iteration only when asked to."""
        lines = ['{"delta": "a"}', "data: [DONE]", '{"delta": "b"}']

        assert [c.delta for c in iter_chunks(lines)] == ["a", "b"]
        assert [c.delta for c in iter_chunks(lines, stop_at_sentinel=True)] == ["a"]

    @pytest.mark.asyncio
    async def test_aiter_chunks(self):
        """Test the async counterpart."""
        async def lines():
            for line in ['data: {"delta": "x"}', "data: [DONE]", '{"delta": "y"}']:
                yield line

        chunks = [chunk async for chunk in aiter_chunks(lines(), stop_at_sentinel=True)]
        assert [chunk.delta for chunk in chunks] == ["x"]

    @given(
        st.lists(
            st.fixed_dictionaries({"delta": st.text(max_size=12)}),
            max_size=8,
        ),
        st.lists(st.integers(min_value=0, max_value=400), max_size=12),
    )
    def test_chunking_is_split_invariant(self, payloads: list[dict], cuts: list[int]):
        """Property test: any byte split yields the same chunk sequence."""
        body = "".join(
            f"data: {json.dumps(payload, ensure_ascii=False)}\n" for payload in payloads
        ).encode("utf-8")

        whole = [chunk.delta for chunk in iter_chunks(decode([body]))]
        pieces = [chunk.delta for chunk in iter_chunks(decode(_split(body, cuts)))]

        assert pieces == whole == [payload["delta"] for payload in payloads]

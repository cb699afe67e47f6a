"""Tests for ChatSession request ownership, supersede and failure handling."""
import asyncio
import json

import httpx
import pytest

from conftest import HANG, frame
from stockchat.agent import AgentConnection, AgentNetworkError, HttpAgentClient
from stockchat.conversation import (
    CONNECTION_ERROR_TEXT,
    TIMEOUT_TEXT,
    UNPARSEABLE_RESPONSE_TEXT,
    ChatSession,
    MessageState,
    Role,
    status_error_text,
)
from stockchat.memory import InMemorySessionMemory

AGENT_URL = "http://agent.test"


async def _until(predicate, attempts: int = 200) -> None:
    """Yield to the event loop until predicate() holds."""
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


def _bot_messages(session: ChatSession):
    return [m for m in session.messages if m.role is Role.BOT]


class TestSubmit:
    """Tests for a single successful request."""

    @pytest.mark.asyncio
    async def test_streamed_answer(self, fake_agent_factory):
        """Test that fragments merge into one completed bot message."""
        agent = fake_agent_factory(streams=[[
            frame({"delta": "Hel"}),
            frame({"delta": "lo", "threadId": "t-1"}),
            b"data: [DONE]\n",
        ]])
        changes = []
        session = ChatSession(agent, on_change=lambda: changes.append(len(session.messages)))

        message = await session.submit("  apples?  ")

        assert [m.role for m in session.messages] == [Role.USER, Role.BOT]
        assert session.messages[0].text == "apples?"
        assert message.text == "Hello"
        assert message.state is MessageState.COMPLETE
        assert agent.requests[0].query == "apples?"
        assert agent.requests[0].thread_id is None
        assert agent.closed_streams == 1
        assert not session.in_flight
        assert changes

    @pytest.mark.asyncio
    async def test_thread_id_adopted_once(self, fake_agent_factory):
        """Test that the first thread id is kept and sent on later requests."""
        agent = fake_agent_factory(streams=[
            [frame({"text": "one", "threadId": "t-1"})],
            [frame({"text": "two", "threadId": "t-2"})],
        ])
        session = ChatSession(agent)

        await session.submit("first")
        await session.submit("second")

        assert await session.thread_id() == "t-1"
        assert agent.requests[1].thread_id == "t-1"

    @pytest.mark.asyncio
    async def test_single_response_mode(self, fake_agent_factory, stored_rows_payload):
        """Test the non-streaming path with a table payload."""
        agent = fake_agent_factory(payload=stored_rows_payload)
        session = ChatSession(agent, streaming=False, max_tokens=256)

        message = await session.submit("list stock")

        assert message.text == "Here is the current stock."
        assert len(message.table) == 2
        assert agent.requests[0].max_tokens == 256
        assert await session.thread_id() == "thread-1"

    @pytest.mark.asyncio
    async def test_blank_query_rejected(self, fake_agent_factory):
        """Test that a blank query is refused without touching the transcript."""
        session = ChatSession(fake_agent_factory())

        with pytest.raises(ValueError):
            session.submit("   ")
        assert session.messages == []

    def test_request_timeout_must_be_positive(self, fake_agent_factory):
        """Test constructor validation."""
        with pytest.raises(ValueError):
            ChatSession(fake_agent_factory(), request_timeout=0)


class TestSupersede:
    """Tests for cancellation of the in-flight request."""

    @pytest.mark.asyncio
    async def test_new_submit_discards_previous_message(self, fake_agent_factory):
        """Test that superseding leaves exactly one bot message and no error."""
        agent = fake_agent_factory(streams=[
            [frame({"delta": "old answer"}), HANG],
            [frame({"delta": "new answer"})],
        ])
        session = ChatSession(agent)

        first = session.submit("first")
        await _until(lambda: session.active_message is not None and session.active_message.text)
        second = session.submit("second")
        message = await second

        with pytest.raises(asyncio.CancelledError):
            await first

        bots = _bot_messages(session)
        assert bots == [message]
        assert message.text == "new answer"
        assert not any(m.is_error for m in session.messages)
        assert agent.closed_streams == 2

    @pytest.mark.asyncio
    async def test_cancel(self, fake_agent_factory):
        """Test explicit cancellation of a pending request."""
        agent = fake_agent_factory(streams=[[HANG]])
        session = ChatSession(agent)

        task = session.submit("slow question")
        await _until(lambda: agent.requests)

        assert session.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert _bot_messages(session) == []
        assert not session.in_flight
        assert not session.cancel()

    @pytest.mark.asyncio
    async def test_new_chat_clears_transcript_and_thread(self, fake_agent_factory):
        """Test that a new chat forgets messages and the thread id."""
        memory = InMemorySessionMemory()
        agent = fake_agent_factory(streams=[[frame({"text": "hi", "threadId": "t-1"})]])
        session = ChatSession(agent, memory=memory)
        await session.submit("hello")

        await session.new_chat()

        assert session.messages == []
        assert await session.thread_id() is None


class TestFailures:
    """Tests for failed requests."""

    @pytest.mark.asyncio
    async def test_timeout(self, fake_agent_factory):
        """Test that a stalled stream ends with the timeout message."""
        agent = fake_agent_factory(streams=[[frame({"delta": "partial"}), HANG]])
        session = ChatSession(agent, request_timeout=0.05)

        message = await session.submit("slow")

        assert message.state is MessageState.ERROR
        assert message.text == TIMEOUT_TEXT
        assert message.table is None
        assert not session.in_flight

    @pytest.mark.asyncio
    async def test_network_error_mid_stream(self, fake_agent_factory):
        """Test that a transport failure replaces partial text."""
        agent = fake_agent_factory(
            streams=[[frame({"delta": "half"})]],
            error=AgentNetworkError("connection reset"),
        )
        session = ChatSession(agent)

        message = await session.submit("question")

        assert message.is_error
        assert message.text == CONNECTION_ERROR_TEXT

    @pytest.mark.asyncio
    async def test_unexpected_error_settles_message(self, fake_agent_factory):
        """Test that an error outside the agent hierarchy still ends the message."""
        agent = fake_agent_factory(
            streams=[[frame({"delta": "half"})]],
            error=RuntimeError("stream already consumed"),
        )
        logs = []
        session = ChatSession(agent)
        session.set_debug_callback(lambda *args: logs.append(args))

        message = await session.submit("question")

        assert message.state is MessageState.ERROR
        assert not message.streaming
        assert message.text == CONNECTION_ERROR_TEXT
        assert not session.in_flight
        assert any(level == "error" and "RuntimeError" in text for level, _, text in logs)

    @pytest.mark.asyncio
    async def test_thread_id_kept_after_failure(self, fake_agent_factory):
        """Test that a thread id delivered before a failure is retained."""
        agent = fake_agent_factory(
            streams=[[frame({"delta": "partial", "threadId": "t-1"})], []],
            error=AgentNetworkError("connection reset"),
        )
        session = ChatSession(agent)

        message = await session.submit("first")
        await session.submit("second")

        assert message.is_error
        assert await session.thread_id() == "t-1"
        assert agent.requests[1].thread_id == "t-1"

    @pytest.mark.asyncio
    async def test_literal_table_single_response(self, fake_agent_factory):
        """Test a single response whose preview is an int-keyed literal."""
        payload = {
            "text": "Two fruits.",
            "toolInteractions": [{"result": {"stored": [{"preview": "{1: 'apple', 2: 'pear'}"}]}}],
        }
        session = ChatSession(fake_agent_factory(payload=payload), streaming=False)

        message = await session.submit("fruit?")

        assert message.state is MessageState.COMPLETE
        assert not message.streaming
        assert message.table == [{"1": "apple", "2": "pear"}]

    @pytest.mark.asyncio
    async def test_non_json_body_single_response(self):
        """Test a non-JSON body on the single-response endpoint."""
        client = HttpAgentClient(
            AGENT_URL,
            transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html>oops</html>")),
        )
        session = ChatSession(client, streaming=False)

        try:
            message = await session.submit("question")
        finally:
            await client.close()

        assert message.text == UNPARSEABLE_RESPONSE_TEXT
        assert message.is_error

    @pytest.mark.asyncio
    async def test_error_status_on_stream(self):
        """Test that a non-success status surfaces the status code."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="waking up")

        connection = AgentConnection(
            lambda: HttpAgentClient(AGENT_URL, transport=httpx.MockTransport(handler))
        )
        session = ChatSession(connection)

        async with connection:
            message = await session.submit("question")

        assert message.text == status_error_text(503)


class TestEndToEnd:
    """Session over a real AgentConnection and HTTP client with a mock transport."""

    @pytest.mark.asyncio
    async def test_streamed_table_answer(self, stored_rows_payload):
        """Test the whole pipeline from HTTP body to completed message."""
        seen = []
        table_chunk = dict(stored_rows_payload)
        del table_chunk["text"]
        body = (
            frame({"delta": "Here "})
            + b"\n"
            + frame({"delta": "you go", "threadId": "t-9"})
            + frame(table_chunk)
            + b"data: [DONE]\n\n"
        )

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append((request.url.path, json.loads(request.content), request.headers.get("X-API-Key")))
            return httpx.Response(200, content=body, headers={"Content-Type": "text/event-stream"})

        connection = AgentConnection(
            lambda: HttpAgentClient(AGENT_URL, api_key="k", transport=httpx.MockTransport(handler))
        )
        session = ChatSession(connection)

        async with connection:
            message = await session.submit("what is low?")

        assert seen == [("/agent/query/stream", {"query": "what is low?"}, "k")]
        assert message.text == "Here you go"
        assert [row["sku"] for row in message.table] == ["A-1", "B-2"]
        assert await session.thread_id() == "t-9"

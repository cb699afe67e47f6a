"""Pytest configuration and shared fixtures."""
import asyncio
import json
import os
from typing import Any

import pytest

# Marker value inside a scripted stream: block until cancelled
HANG = None


def frame(payload: dict[str, Any], prefix: str = "data: ") -> bytes:
    """Encode one payload as a newline-terminated stream frame."""
    return f"{prefix}{json.dumps(payload, ensure_ascii=False)}\n".encode("utf-8")


class FakeAgent:
    """Scripted stand-in for an AgentConnection.

    Each call to query_stream() consumes the next script: a list of byte
    buffers, where HANG blocks until the consuming task is cancelled.
    """

    def __init__(
        self,
        streams: list[list[bytes | None]] | None = None,
        payload: dict[str, Any] | None = None,
        error: Exception | None = None,
    ):
        self.streams = list(streams or [])
        self.payload = payload
        self.error = error
        self.requests: list[Any] = []
        self.closed_streams = 0

    async def query(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.payload

    async def query_stream(self, request):
        self.requests.append(request)
        script = self.streams.pop(0) if self.streams else []
        try:
            for item in script:
                if item is HANG:
                    await asyncio.Event().wait()
                    continue
                yield item
            if self.error is not None:
                raise self.error
        finally:
            self.closed_streams += 1


@pytest.fixture
def fake_agent_factory():
    """Return the FakeAgent class for building scripted agents."""
    return FakeAgent


@pytest.fixture
def stored_rows_payload():
    """A payload whose tool interaction stores a row-level table preview."""
    return {
        "text": "Here is the current stock.",
        "threadId": "thread-1",
        "toolInteractions": [
            {
                "result": {
                    "stored": [
                        {
                            "var_name": "products",
                            "preview": json.dumps([
                                {"sku": "A-1", "name": "Apple", "quantity": 12},
                                {"sku": "B-2", "name": "Banana", "quantity": 0},
                            ]),
                        }
                    ]
                }
            }
        ],
    }


@pytest.fixture
def summary_payload():
    """A payload whose only stored preview is an aggregate summary."""
    return {
        "toolInteractions": [
            {
                "result": {
                    "stored": [
                        {"preview": "{'totalProducts': 2, 'totalQuantity': 12, 'totalValue': 30.5}"}
                    ]
                }
            }
        ],
    }


@pytest.fixture(scope="session")
def agent_url():
    """Agent server for integration tests."""
    return os.getenv("STOCKCHAT_AGENT_URL")

"""Explicit lifecycle management for the agent connection.

Following Parnas principles, this module hides:
- When the underlying client is created and torn down
- How concurrent connect attempts are serialized
- Reconnecting after a network failure
"""

import asyncio
from collections.abc import AsyncIterator, Callable
from typing import Any

from .base import AgentClient
from .errors import AgentNetworkError, AgentNotConnectedError
from .models import ConnectionState, HealthReport, HealthStatus, QueryRequest


class AgentConnection:
    """Owned, explicitly constructed connection to the hosted agent.

    State transitions:
        DISCONNECTED -> CONNECTING -> CONNECTED
        CONNECTING -> DISCONNECTED      (connect failed)
        CONNECTED -> DISCONNECTED       (disconnect, or network failure)

    A request issued while DISCONNECTED connects first, so a network failure
    followed by a new request is an explicit reconnect.

    Usage:
        async with AgentConnection(lambda: HttpAgentClient(url)) as connection:
            payload = await connection.query(QueryRequest(query="stock of apples"))
    """

    def __init__(
        self,
        client_factory: Callable[[], AgentClient],
        verify_on_connect: bool = False,
        on_state_change: Callable[[ConnectionState], None] | None = None,
    ) -> None:
        """Initialize without connecting.

        Args:
            client_factory: Builds a fresh AgentClient for each connect
            verify_on_connect: Probe liveness during connect and fail when offline
            on_state_change: Called with the new state after every transition
        """
        self._client_factory = client_factory
        self._verify_on_connect = verify_on_connect
        self._on_state_change = on_state_change
        self._client: AgentClient | None = None
        self._state = ConnectionState.DISCONNECTED
        self._lock = asyncio.Lock()
        self._debug_callback: Any | None = None

    @property
    def state(self) -> ConnectionState:
        """Current connection state."""
        return self._state

    @property
    def client(self) -> AgentClient:
        """The connected client.

        Raises:
            AgentNotConnectedError: If the connection is not CONNECTED
        """
        if self._state is not ConnectionState.CONNECTED or self._client is None:
            raise AgentNotConnectedError(self._state.value)
        return self._client

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback: Callable(level, component, message)."""
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Agent", message)

    def _transition(self, state: ConnectionState) -> None:
        if state is self._state:
            return
        self._debug("debug", f"Connection {self._state.value} -> {state.value}")
        self._state = state
        if self._on_state_change:
            self._on_state_change(state)

    async def connect(self) -> AgentClient:
        """Connect if needed and return the client."""
        async with self._lock:
            if self._state is ConnectionState.CONNECTED and self._client is not None:
                return self._client

            self._transition(ConnectionState.CONNECTING)
            client = self._client_factory()
            try:
                if self._verify_on_connect:
                    report = await client.health()
                    if report.status is not HealthStatus.ONLINE:
                        raise AgentNetworkError(report.error or "agent offline")
            except BaseException:
                await client.close()
                self._transition(ConnectionState.DISCONNECTED)
                raise

            self._client = client
            self._transition(ConnectionState.CONNECTED)
            self._debug("info", "Agent connected")
            return client

    async def disconnect(self) -> None:
        """Close the client and return to DISCONNECTED."""
        async with self._lock:
            await self._drop_client()

    async def reconnect(self) -> AgentClient:
        """Force a fresh client."""
        await self.disconnect()
        return await self.connect()

    async def _drop_client(self) -> None:
        client, self._client = self._client, None
        self._transition(ConnectionState.DISCONNECTED)
        if client is not None:
            await client.close()

    async def _mark_failed(self, error: Exception) -> None:
        self._debug("warning", f"Connection lost: {error}")
        async with self._lock:
            await self._drop_client()

    async def query(self, request: QueryRequest) -> dict[str, Any]:
        """Send a single-response query, connecting first if needed."""
        client = await self.connect()
        try:
            return await client.query(request)
        except AgentNetworkError as e:
            await self._mark_failed(e)
            raise

    async def query_stream(self, request: QueryRequest) -> AsyncIterator[bytes]:
        """Stream a query's raw body, connecting first if needed."""
        client = await self.connect()
        stream = client.query_stream(request)
        try:
            async for data in stream:
                yield data
        except AgentNetworkError as e:
            await self._mark_failed(e)
            raise
        finally:
            await stream.aclose()

    async def health(self) -> HealthReport:
        """Probe liveness through a connected client."""
        try:
            client = await self.connect()
        except AgentNetworkError as e:
            return HealthReport(status=HealthStatus.OFFLINE, error=str(e))
        return await client.health()

    async def __aenter__(self) -> "AgentConnection":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.disconnect()

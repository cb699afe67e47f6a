from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import Any

from .models import HealthReport, QueryRequest


class AgentClient(ABC):
    """Abstract base class for agent transports.

    This module hides the design decision of how the hosted agent is reached.
    Implementations must handle transport-specific details like:
    - Client setup and authentication headers
    - Mapping transport failures onto AgentError subclasses
    - Closing the underlying connection pool

    Supports async context manager protocol for proper resource cleanup:
        async with client:
            payload = await client.query(request)
    """

    @abstractmethod
    async def query(self, request: QueryRequest) -> dict[str, Any]:
        """Send a query and return the single JSON payload.

        Raises:
            AgentTimeoutError: The request timed out
            AgentNetworkError: The agent could not be reached
            AgentStatusError: The agent answered with a non-success status
            AgentResponseError: The body was not a JSON object
        """

    @abstractmethod
    def query_stream(self, request: QueryRequest) -> AsyncIterator[bytes]:
        """Send a query and yield the raw response body as it arrives.

        Closing the iterator (or cancelling the consuming task) aborts the
        underlying request.

        Raises:
            AgentTimeoutError, AgentNetworkError, AgentStatusError
        """

    @abstractmethod
    async def health(self) -> HealthReport:
        """Probe the agent's liveness endpoint. Never raises."""

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "AgentClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup, a known
        harmless race in httpx/anyio shutdown.
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise

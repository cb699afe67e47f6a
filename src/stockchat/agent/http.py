from collections.abc import AsyncIterator
from typing import Any

import httpx

from .base import AgentClient
from .errors import AgentNetworkError, AgentResponseError, AgentStatusError, AgentTimeoutError
from .models import HealthReport, HealthStatus, QueryRequest


class HttpAgentClient(AgentClient):
    """Agent client speaking JSON over HTTP with httpx.

    Hidden design decisions:
    - Endpoint paths for single and streamed queries
    - API key header
    - Translation of httpx failures into AgentError subclasses
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        query_path: str = "/agent/query",
        stream_path: str = "/agent/query/stream",
        health_path: str = "/",
        timeout: float = 60.0,
        health_timeout: float = 10.0,
        **client_kwargs: Any
    ):
        """Initialize the HTTP agent client.

        Args:
            base_url: Agent server base URL
            api_key: Optional key sent as the X-API-Key header
            query_path: Path of the single-response query endpoint
            stream_path: Path of the streamed query endpoint
            health_path: Path of the liveness endpoint
            timeout: Per-read network timeout in seconds
            health_timeout: Timeout for the liveness probe
            **client_kwargs: Additional kwargs for httpx.AsyncClient (e.g. transport)
        """
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["X-API-Key"] = api_key

        self._base_url = base_url
        self._query_path = query_path
        self._stream_path = stream_path
        self._health_path = health_path
        self._health_timeout = health_timeout
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=httpx.Timeout(timeout, connect=10.0),
            **client_kwargs
        )

    @property
    def base_url(self) -> str:
        """Get the agent server base URL."""
        return self._base_url

    async def query(self, request: QueryRequest) -> dict[str, Any]:
        """Send a query and return the decoded JSON payload."""
        try:
            response = await self._client.post(self._query_path, json=request.to_body())
        except httpx.TimeoutException as e:
            raise AgentTimeoutError(str(e) or "query timed out") from e
        except httpx.HTTPError as e:
            raise AgentNetworkError(str(e) or type(e).__name__) from e

        if response.is_error:
            raise AgentStatusError(response.status_code, response.text[:200])

        try:
            payload = response.json()
        except ValueError as e:
            raise AgentResponseError("body is not valid JSON") from e

        if not isinstance(payload, dict):
            raise AgentResponseError(f"expected a JSON object, got {type(payload).__name__}")
        return payload

    async def query_stream(self, request: QueryRequest) -> AsyncIterator[bytes]:
        """Send a query to the streaming endpoint and yield raw body bytes."""
        try:
            async with self._client.stream(
                "POST",
                self._stream_path,
                json=request.to_body(),
                headers={"Accept": "text/event-stream"},
            ) as response:
                if response.is_error:
                    body = await response.aread()
                    raise AgentStatusError(
                        response.status_code,
                        body.decode("utf-8", errors="replace")[:200],
                    )
                async for data in response.aiter_bytes():
                    yield data
        except httpx.TimeoutException as e:
            raise AgentTimeoutError(str(e) or "stream timed out") from e
        except httpx.HTTPError as e:
            raise AgentNetworkError(str(e) or type(e).__name__) from e

    async def health(self) -> HealthReport:
        """Probe the liveness endpoint; any failure reports OFFLINE."""
        try:
            response = await self._client.get(self._health_path, timeout=self._health_timeout)
        except httpx.HTTPError as e:
            return HealthReport(status=HealthStatus.OFFLINE, error=str(e) or type(e).__name__)

        if response.is_error:
            return HealthReport(
                status=HealthStatus.OFFLINE,
                error=f"HTTP {response.status_code}",
            )

        try:
            detail = response.json()
        except ValueError:
            return HealthReport(status=HealthStatus.OFFLINE, error="Server not responding with JSON")

        return HealthReport(
            status=HealthStatus.ONLINE,
            detail=detail if isinstance(detail, dict) else {"body": detail},
        )

    async def close(self) -> None:
        """Close the underlying httpx client."""
        await self._client.aclose()

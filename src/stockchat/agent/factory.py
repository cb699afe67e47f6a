from typing import Any

from .base import AgentClient
from .http import HttpAgentClient


def create_agent_client(transport: str, **config: Any) -> AgentClient:
    """Create an agent client instance.

    This factory function hides the instantiation logic for different transports.

    Args:
        transport: Transport type (currently only 'http')
        **config: Transport-specific configuration
            For HTTP:
                - base_url: str (required)
                - api_key: str | None
                - timeout: float (default: 60.0)
                - health_timeout: float (default: 10.0)
                - transport: httpx.AsyncBaseTransport (tests)

    Returns:
        Initialized agent client instance

    Raises:
        ValueError: If transport type is not supported
        TypeError: If required configuration is missing

    Examples:
        >>> client = create_agent_client(
        ...     "http",
        ...     base_url="http://localhost:3000",
        ...     api_key="secret"
        ... )
    """
    transport_lower = transport.lower()

    if transport_lower in ("http", "https"):
        if "base_url" not in config:
            raise TypeError("HTTP agent client requires 'base_url' in config")
        return HttpAgentClient(**config)

    raise ValueError(
        f"Unsupported agent transport: {transport}. "
        f"Supported transports: 'http'"
    )

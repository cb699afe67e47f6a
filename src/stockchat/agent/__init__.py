from .base import AgentClient
from .connection import AgentConnection
from .errors import (
    AgentError,
    AgentNetworkError,
    AgentNotConnectedError,
    AgentResponseError,
    AgentStatusError,
    AgentTimeoutError,
)
from .factory import create_agent_client
from .http import HttpAgentClient
from .models import ConnectionState, HealthReport, HealthStatus, QueryRequest

__all__ = [
    "AgentClient",
    "AgentConnection",
    "create_agent_client",
    "HttpAgentClient",
    "AgentError",
    "AgentNetworkError",
    "AgentNotConnectedError",
    "AgentResponseError",
    "AgentStatusError",
    "AgentTimeoutError",
    "ConnectionState",
    "HealthReport",
    "HealthStatus",
    "QueryRequest",
]

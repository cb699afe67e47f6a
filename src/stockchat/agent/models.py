from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ConnectionState(str, Enum):
    """Lifecycle of an agent connection."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class HealthStatus(str, Enum):
    """Liveness of the agent server as last probed."""

    IDLE = "idle"          # Not probed yet
    CHECKING = "checking"  # Probe in flight
    ONLINE = "online"
    OFFLINE = "offline"


class QueryRequest(BaseModel):
    """A query sent to the agent endpoint."""

    model_config = ConfigDict(frozen=True)

    query: str = Field(min_length=1, description="Free-text user query")
    thread_id: str | None = Field(default=None, description="Conversation correlator")
    context: dict[str, Any] | None = Field(default=None, description="Optional structured context")
    max_tokens: int | None = Field(default=None, ge=1, description="Generation limit")

    def to_body(self) -> dict[str, Any]:
        """JSON body for the query endpoint, omitting unset fields."""
        return self.model_dump(exclude_none=True)


class HealthReport(BaseModel):
    """Result of a liveness probe."""

    status: HealthStatus = Field(description="Probe outcome")
    detail: dict[str, Any] | None = Field(default=None, description="JSON body returned by the probe")
    error: str | None = Field(default=None, description="Failure reason when offline")

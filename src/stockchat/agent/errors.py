"""Errors raised by the agent client layer."""


class AgentError(Exception):
    """Base class for agent request errors."""

    def is_retryable(self) -> bool:
        """Override in subclasses to control retry behavior."""
        return False


class AgentTimeoutError(AgentError):
    """The request exceeded its time ceiling (retryable)."""

    def __init__(self, message: str = "request timed out"):
        super().__init__(f"Timeout: {message}")

    def is_retryable(self) -> bool:
        return True


class AgentNetworkError(AgentError):
    """Network or connection error (retryable)."""

    def __init__(self, message: str):
        super().__init__(f"Network error: {message}")

    def is_retryable(self) -> bool:
        return True


class AgentStatusError(AgentError):
    """The agent answered with a non-success HTTP status."""

    def __init__(self, status_code: int, detail: str = ""):
        msg = f"Agent returned HTTP {status_code}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
        self.status_code = status_code
        self.detail = detail

    def is_retryable(self) -> bool:
        return self.status_code >= 500


class AgentResponseError(AgentError):
    """The agent's response body could not be interpreted (non-retryable)."""

    def __init__(self, message: str):
        super().__init__(f"Invalid response: {message}")


class AgentNotConnectedError(AgentError):
    """A request was issued on a connection that is not connected."""

    def __init__(self, state: str):
        super().__init__(f"Agent connection is {state}")
        self.state = state

"""Abstract base class for session memory backends.

This module defines the interface for retaining the agent thread id.
The abstraction hides:
- Persistence mechanism (process memory, SQLite file)
- Connection management
"""

from abc import ABC, abstractmethod

from .models import SessionState


class SessionMemory(ABC):
    """Abstract session memory backend.

    Every method takes an optional session id; None means the backend's
    default session.
    """

    @abstractmethod
    async def connect(self) -> None:
        """Initialize the memory backend."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the memory backend gracefully."""

    @abstractmethod
    async def get_state(self, session_id: str | None = None) -> SessionState:
        """Retrieve (or create) the state of a session."""

    @abstractmethod
    async def set_thread_id(self, thread_id: str | None, session_id: str | None = None) -> None:
        """Store the thread id of a session."""

    @abstractmethod
    async def clear(self, session_id: str | None = None) -> None:
        """Forget the thread id of a session (new chat)."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""

    async def get_thread_id(self, session_id: str | None = None) -> str | None:
        """Get the stored thread id of a session."""
        state = await self.get_state(session_id)
        return state.thread_id

    async def __aenter__(self) -> "SessionMemory":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()

"""In-memory session memory backend.

Dict-based storage; the thread id is lost when the application exits.
"""

from uuid import uuid4

from .base import SessionMemory
from .models import SessionState


class InMemorySessionMemory(SessionMemory):
    """Session memory kept in process.

    Suitable for a single interactive session or testing.
    """

    def __init__(self, default_session_id: str | None = None):
        self._default_session_id = default_session_id or str(uuid4())
        self._states: dict[str, SessionState] = {}

    async def connect(self) -> None:
        """Initialize memory (no-op for in-memory)."""
        pass

    async def disconnect(self) -> None:
        """Close memory (no-op for in-memory)."""
        pass

    async def get_state(self, session_id: str | None = None) -> SessionState:
        sid = session_id or self._default_session_id
        if sid not in self._states:
            self._states[sid] = SessionState(session_id=sid)
        return self._states[sid]

    async def set_thread_id(self, thread_id: str | None, session_id: str | None = None) -> None:
        state = await self.get_state(session_id)
        state.remember(thread_id)

    async def clear(self, session_id: str | None = None) -> None:
        await self.set_thread_id(None, session_id)

    @property
    def backend_type(self) -> str:
        return "memory"

    @property
    def default_session_id(self) -> str:
        return self._default_session_id

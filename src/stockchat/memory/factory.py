"""Factory for session memory backends.

The backend name comes from STOCKCHAT_MEMORY_BACKEND: "memory" keeps the
thread id for the life of the process, "sqlite" keeps it on disk so that
separate `stockchat ask` invocations continue the same agent thread.
"""

from typing import Any

from .base import SessionMemory

MEMORY_BACKENDS = ("memory", "sqlite")


def create_session_memory(backend: str = "memory", **kwargs: Any) -> SessionMemory:
    """Create the memory that retains a session's thread id.

    Args:
        backend: "memory" or "sqlite" (case-insensitive)
        **kwargs: Passed to the backend
            memory: default_session_id
            sqlite: path (database file), default_session_id

    Returns:
        An unconnected SessionMemory; call connect() or use `async with`

    Raises:
        ValueError: If the backend is not one of MEMORY_BACKENDS

    Example:
        >>> memory = create_session_memory("sqlite", path="stockchat_session.db")
        >>> async with memory:
        ...     await memory.get_thread_id()
    """
    name = backend.strip().lower()
    if name == "memory":
        from .in_memory import InMemorySessionMemory
        return InMemorySessionMemory(**kwargs)
    if name == "sqlite":
        from .sqlite import SQLiteSessionMemory
        return SQLiteSessionMemory(**kwargs)

    raise ValueError(
        f"Unsupported memory backend: {backend!r}. "
        f"Supported backends: {', '.join(MEMORY_BACKENDS)}"
    )

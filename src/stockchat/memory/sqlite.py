"""SQLite session memory backend.

Keeps the thread id in a SQLite file so separate CLI invocations can
continue one conversation. Uses aiosqlite for async access.
"""

from datetime import datetime, timezone
from pathlib import Path

import aiosqlite

from .base import SessionMemory
from .models import SessionState

DEFAULT_SESSION_ID = "default"


class SQLiteSessionMemory(SessionMemory):
    """SQLite-backed session memory."""

    def __init__(
        self,
        path: str | Path = "./stockchat_session.db",
        default_session_id: str | None = None
    ):
        self._db_path = Path(path)
        self._default_session_id = default_session_id or DEFAULT_SESSION_ID
        self._connection: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """Initialize database connection and schema."""
        if self._connection is not None:
            return
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._connection = await aiosqlite.connect(self._db_path)
        await self._connection.execute("""
            CREATE TABLE IF NOT EXISTS sessions (
                session_id TEXT PRIMARY KEY,
                thread_id TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        await self._connection.commit()

    async def disconnect(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    def _require_connection(self) -> aiosqlite.Connection:
        if self._connection is None:
            raise RuntimeError("SQLite session memory is not connected. Call connect() first.")
        return self._connection

    async def get_state(self, session_id: str | None = None) -> SessionState:
        sid = session_id or self._default_session_id
        connection = self._require_connection()

        async with connection.execute(
            "SELECT thread_id, created_at, updated_at FROM sessions WHERE session_id = ?",
            (sid,)
        ) as cursor:
            row = await cursor.fetchone()

        if row is None:
            state = SessionState(session_id=sid)
            await connection.execute("""
                INSERT OR IGNORE INTO sessions (session_id, thread_id, created_at, updated_at)
                VALUES (?, NULL, ?, ?)
            """, (sid, state.created_at.isoformat(), state.updated_at.isoformat()))
            await connection.commit()
            return state

        thread_id, created_at, updated_at = row
        return SessionState(
            session_id=sid,
            thread_id=thread_id,
            created_at=datetime.fromisoformat(created_at),
            updated_at=datetime.fromisoformat(updated_at),
        )

    async def set_thread_id(self, thread_id: str | None, session_id: str | None = None) -> None:
        sid = session_id or self._default_session_id
        connection = self._require_connection()
        now = datetime.now(timezone.utc).isoformat()

        await connection.execute("""
            INSERT INTO sessions (session_id, thread_id, created_at, updated_at)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(session_id) DO UPDATE SET
                thread_id = excluded.thread_id,
                updated_at = excluded.updated_at
        """, (sid, thread_id, now, now))
        await connection.commit()

    async def clear(self, session_id: str | None = None) -> None:
        await self.set_thread_id(None, session_id)

    @property
    def backend_type(self) -> str:
        return "sqlite"

    @property
    def default_session_id(self) -> str:
        return self._default_session_id

    @property
    def db_path(self) -> Path:
        return self._db_path

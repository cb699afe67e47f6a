"""Data models for session memory.

The session state is what outlives a single request: the conversation's
thread id, independent of the storage backend used.
"""

from datetime import datetime, timezone
from uuid import uuid4

from pydantic import BaseModel, Field


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SessionState(BaseModel):
    """Retained state of one chat session."""

    session_id: str = Field(default_factory=lambda: str(uuid4()))
    thread_id: str | None = Field(default=None, description="Agent conversation correlator")
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    def remember(self, thread_id: str | None) -> None:
        """Replace the thread id and bump the update time."""
        self.thread_id = thread_id
        self.updated_at = _now()

"""Session memory module for stockchat.

Retains the agent thread id for the lifetime of a chat session.
"""

from .base import SessionMemory
from .factory import create_session_memory
from .in_memory import InMemorySessionMemory
from .models import SessionState

__all__ = [
    "InMemorySessionMemory",
    "SessionMemory",
    "SessionState",
    "create_session_memory",
]

"""Conversation state: messages, stream merging and the request owner.

Module structure:
- models.py: Message, content parts and user-facing failure texts
- accumulator.py: Pure chunk merge and the per-message accumulator
- session.py: ChatSession, owner of the transcript and in-flight request
"""

from .accumulator import StreamAccumulator, StreamState, failure_text, merge_chunk
from .models import (
    CONNECTION_ERROR_TEXT,
    TIMEOUT_TEXT,
    UNPARSEABLE_RESPONSE_TEXT,
    CardContent,
    ContentPart,
    ErrorContent,
    MarkdownContent,
    Message,
    MessageState,
    MessageStatus,
    Role,
    TableContent,
    TextContent,
    status_error_text,
)
from .session import ChatSession

__all__ = [
    "CONNECTION_ERROR_TEXT",
    "TIMEOUT_TEXT",
    "UNPARSEABLE_RESPONSE_TEXT",
    "CardContent",
    "ChatSession",
    "ContentPart",
    "ErrorContent",
    "MarkdownContent",
    "Message",
    "MessageState",
    "MessageStatus",
    "Role",
    "StreamAccumulator",
    "StreamState",
    "TableContent",
    "TextContent",
    "failure_text",
    "merge_chunk",
    "status_error_text",
]

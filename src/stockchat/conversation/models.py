"""Data models for the conversation.

These models define the chat transcript as the UI sees it: messages with a
lifecycle, and the content parts a message is displayed as.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Literal, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from ..extract.models import Row, table_columns

TIMEOUT_TEXT = "The agent took too long to respond. Please try again."
CONNECTION_ERROR_TEXT = "Connection error. Please check your network and try again."
UNPARSEABLE_RESPONSE_TEXT = "Unable to process server response. Please try again."


def status_error_text(status_code: int) -> str:
    """User-facing text for a non-success HTTP status."""
    return f"The agent returned an error (HTTP {status_code}). Please try again."


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, Enum):
    USER = "user"
    BOT = "bot"


class MessageStatus(str, Enum):
    OK = "ok"
    ERROR = "error"


class MessageState(str, Enum):
    """Lifecycle of a bot message.

    pending -> streaming -> complete | error. A superseded message is removed
    from the transcript instead of transitioning.
    """

    PENDING = "pending"
    STREAMING = "streaming"
    COMPLETE = "complete"
    ERROR = "error"


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class MarkdownContent(BaseModel):
    type: Literal["markdown"] = "markdown"
    text: str
    streaming: bool = False


class TableContent(BaseModel):
    type: Literal["table"] = "table"
    columns: list[str]
    rows: list[Row]


class CardContent(BaseModel):
    type: Literal["card"] = "card"
    title: str
    lines: list[str] = Field(default_factory=list)


class ErrorContent(BaseModel):
    type: Literal["error"] = "error"
    text: str


ContentPart = Annotated[
    Union[TextContent, MarkdownContent, TableContent, CardContent, ErrorContent],
    Field(discriminator="type"),
]


class Message(BaseModel):
    """One entry in the chat transcript.

    Bot messages are mutated in place while their request streams and are
    left untouched once ``streaming`` is false.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    role: Role
    text: str = ""
    table: list[Row] | None = Field(default=None, description="Current table, last writer wins")
    status: MessageStatus = MessageStatus.OK
    streaming: bool = False
    timestamp: datetime = Field(default_factory=_now)
    state: MessageState = MessageState.COMPLETE
    card: bool = Field(default=False, description="Text was derived from card markup")

    @classmethod
    def user(cls, text: str) -> "Message":
        return cls(role=Role.USER, text=text)

    @classmethod
    def placeholder(cls) -> "Message":
        """An empty bot message awaiting its first chunk."""
        return cls(role=Role.BOT, streaming=True, state=MessageState.PENDING)

    @property
    def is_pending(self) -> bool:
        return self.state is MessageState.PENDING

    @property
    def is_error(self) -> bool:
        return self.status is MessageStatus.ERROR

    def parts(self) -> list[Any]:
        """Display parts of this message, in order.

        Returns:
            A list of ContentPart variants
        """
        if self.is_error:
            return [ErrorContent(text=self.text)]
        if self.role is Role.USER:
            return [TextContent(text=self.text)]

        parts: list[Any] = []
        if self.card and not self.streaming and self.text:
            title, *lines = self.text.split("\n")
            parts.append(CardContent(title=title, lines=lines))
        elif self.text or self.streaming:
            parts.append(MarkdownContent(text=self.text, streaming=self.streaming))
        if self.table:
            parts.append(TableContent(columns=table_columns(self.table), rows=self.table))
        return parts

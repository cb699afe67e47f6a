from typing import Any

from pydantic import BaseModel, ConfigDict, Field

Row = dict[str, Any]

NO_RESPONSE_TEXT = "The agent returned no readable response. Please try rephrasing your question."


class Extraction(BaseModel):
    """Text and table derived from one agent payload."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(default="", description="Readable answer text")
    table: list[Row] | None = Field(default=None, description="Row-level data, if any")

    @property
    def is_empty(self) -> bool:
        """Whether neither text nor table could be derived."""
        return not self.text and not self.table


def table_columns(rows: list[Row] | None) -> list[str]:
    """Column names of a table, defined by its first row."""
    if not rows:
        return []
    return list(rows[0].keys())


def finalize_text(text: str, table: list[Row] | None) -> str:
    """Apply the empty-text fallback.

    Args:
        text: Text derived so far
        table: Retained table, if any

    Returns:
        The text itself, a result count when only a table exists,
        or the fixed no-response notice
    """
    if text:
        return text
    if table:
        return f"Found {len(table)} results."
    return NO_RESPONSE_TEXT

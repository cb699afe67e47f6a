from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def _string_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


class Chunk(BaseModel):
    """One decoded JSON record from a streamed agent response.

    Only fields with the expected JSON type are populated; the untouched
    payload stays available for extraction heuristics.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    delta: str | None = Field(default=None, description="Incremental text fragment to append")
    text: str | None = Field(default=None, description="Full plain-text snapshot")
    jsx: str | None = Field(default=None, description="Full markup snapshot")
    thread_id: str | None = Field(
        default=None,
        alias="threadId",
        description="Conversation correlator",
    )
    tool_interactions: list[Any] | None = Field(
        default=None,
        alias="toolInteractions",
        description="Tool call records with stored previews and results",
    )
    payload: dict[str, Any] = Field(default_factory=dict, description="Raw parsed payload")

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Chunk":
        """Build a chunk from a parsed JSON object, ignoring mistyped fields."""
        interactions = payload.get("toolInteractions")
        return cls(
            delta=_string_or_none(payload.get("delta")),
            text=_string_or_none(payload.get("text")),
            jsx=_string_or_none(payload.get("jsx")),
            thread_id=_string_or_none(payload.get("threadId")),
            tool_interactions=interactions if isinstance(interactions, list) else None,
            payload=payload,
        )

    @property
    def is_delta(self) -> bool:
        """Whether this chunk carries an incremental fragment."""
        return self.delta is not None

"""Text and table extraction from agent payloads.

Hidden design decisions:
- Which payload fields carry answer text, and in which priority
- Where tool results live inside a payload and how previews are parsed
- The preference of row-level tables over aggregate summary rows
"""

from collections.abc import Mapping
from typing import Any

from ..stream.models import Chunk
from .jsx import jsx_to_text
from .literals import as_row, is_summary, normalize_rows, parse_preview, strip_meta
from .models import Extraction, Row, finalize_text


def _as_payload(payload: Chunk | Mapping[str, Any] | None) -> Mapping[str, Any]:
    if payload is None:
        return {}
    if isinstance(payload, Chunk):
        return payload.payload
    return payload


def extract_text(payload: Chunk | Mapping[str, Any] | None) -> str:
    """Derive answer text from a payload.

    Priority: the plain "text" field, then the "jsx" markup snapshot.

    Returns:
        Trimmed text, or an empty string when neither field is usable
    """
    data = _as_payload(payload)

    text = data.get("text")
    if isinstance(text, str) and text.strip():
        return text.strip()

    markup = data.get("jsx")
    if isinstance(markup, str) and markup.strip():
        return jsx_to_text(markup)

    return ""


def _tool_results(data: Mapping[str, Any]) -> list[Any]:
    interactions = data.get("toolInteractions")
    if not isinstance(interactions, list):
        return []
    return [
        record.get("result")
        for record in interactions
        if isinstance(record, Mapping)
    ]


def _stored_table(results: list[Any]) -> list[Row] | None:
    retained: list[Row] | None = None
    for result in results:
        if not isinstance(result, Mapping):
            continue
        stored = result.get("stored")
        if not isinstance(stored, list):
            continue
        for item in stored:
            if not isinstance(item, Mapping) or item.get("preview") is None:
                continue
            rows = normalize_rows(parse_preview(item["preview"]))
            if rows is None:
                continue
            if not is_summary(rows):
                retained = rows
            elif retained is None:
                retained = rows
    return retained


def _direct_table(results: list[Any]) -> list[Row] | None:
    retained: list[Row] | None = None
    for result in results:
        if isinstance(result, list):
            rows = normalize_rows(result)
        elif isinstance(result, Mapping):
            nested = result.get("result")
            if not isinstance(nested, Mapping) or "error" in nested:
                continue
            row = strip_meta(as_row(nested))
            rows = [row] if row else None
        else:
            continue
        if rows is not None:
            retained = rows
    return retained


def extract_table(payload: Chunk | Mapping[str, Any] | None) -> list[Row] | None:
    """Derive a table from a payload's tool interactions.

    Stored-item previews are preferred; a direct nested result object is
    the fallback when no preview produced a table.

    Returns:
        Non-empty list of rows, or None
    """
    results = _tool_results(_as_payload(payload))
    if not results:
        return None
    return _stored_table(results) or _direct_table(results)


def extract_response(payload: Chunk | Mapping[str, Any] | None) -> Extraction:
    """Extract the final text and table from one complete payload.

    Empty text falls back to a result count when a table exists, or to
    the fixed no-response notice otherwise.
    """
    table = extract_table(payload)
    text = finalize_text(extract_text(payload), table)
    return Extraction(text=text, table=table)

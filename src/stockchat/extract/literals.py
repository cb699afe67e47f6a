"""Structured preview parsing and row normalization.

Hidden design decisions:
- Strict JSON is tried first; Python literal syntax second
- The literal fallback is ast.literal_eval, which only builds literals
  (strings, numbers, tuples, lists, dicts, sets, booleans, None) and never
  evaluates names, calls or attribute access
- Tables are lists of dicts; anything else is filtered out
"""

import ast
import json
from collections.abc import Mapping
from typing import Any

from .models import Row

META_KEY = "meta"

# Aggregate, timing, error and meta fields that do not describe a row of data
SUMMARY_KEYS = frozenset({
    "total",
    "count",
    "totalCount",
    "totalItems",
    "totalProducts",
    "totalQuantity",
    "totalValue",
    "totalCategories",
    "totalResults",
    "lowStockCount",
    "outOfStockCount",
    "executionTime",
    "executionTimeMs",
    "duration",
    "durationMs",
    "elapsedMs",
    "timestamp",
    "error",
    "errors",
    "meta",
})

_LITERAL_ERRORS = (ValueError, TypeError, SyntaxError, MemoryError, RecursionError)


def parse_preview(preview: Any) -> Any | None:
    """Parse a stored-item preview into structured data.

    Args:
        preview: Preview string, or an already structured value

    Returns:
        Parsed value, or None if the preview is not a structured literal
    """
    if isinstance(preview, (list, dict)):
        return preview
    if not isinstance(preview, str) or not preview.strip():
        return None

    text = preview.strip()
    try:
        return json.loads(text)
    except ValueError:
        pass

    try:
        return ast.literal_eval(text)
    except _LITERAL_ERRORS:
        return None


def as_row(item: Mapping[Any, Any]) -> Row:
    """Copy a mapping into a row, stringifying keys (literals allow `{1: 'a'}`)."""
    return {str(key): value for key, value in item.items()}


def strip_meta(row: dict[str, Any]) -> Row:
    return {key: value for key, value in row.items() if key != META_KEY}


def normalize_rows(value: Any) -> list[Row] | None:
    """Normalize a parsed value into a list of row dicts.

    Arrays keep only their object elements; a bare object becomes a
    single row after dropping its meta key. Keys are always strings.

    Returns:
        Non-empty list of rows, or None
    """
    if isinstance(value, (list, tuple)):
        rows = [as_row(item) for item in value if isinstance(item, dict)]
    elif isinstance(value, dict):
        row = strip_meta(as_row(value))
        rows = [row] if row else []
    else:
        return None
    return rows or None


def is_summary(rows: list[Row]) -> bool:
    """Check whether every key of every row is an aggregate/meta field."""
    return all(row and set(row) <= SUMMARY_KEYS for row in rows)

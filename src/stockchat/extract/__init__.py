"""Response extraction: payload to readable text and tabular rows.

Module structure:
- extractor.py: Priority-ordered text and table derivation
- jsx.py: Card markup to readable text
- literals.py: Preview parsing, row normalization, summary detection
- models.py: Extraction result, Row alias, fallback texts
"""

from .extractor import extract_response, extract_table, extract_text
from .jsx import jsx_to_text, strip_tags
from .literals import SUMMARY_KEYS, is_summary, normalize_rows, parse_preview
from .models import NO_RESPONSE_TEXT, Extraction, Row, finalize_text, table_columns

__all__ = [
    "Extraction",
    "NO_RESPONSE_TEXT",
    "Row",
    "SUMMARY_KEYS",
    "extract_response",
    "extract_table",
    "extract_text",
    "finalize_text",
    "is_summary",
    "jsx_to_text",
    "normalize_rows",
    "parse_preview",
    "strip_tags",
    "table_columns",
]

"""
Stockchat: a terminal chat client for a hosted inventory agent.

This package follows Parnas's information hiding principles,
where each module hides a specific design decision.
"""

__version__ = "0.1.0"

# The ingestion and rendering pipeline, usable without the UI
from .conversation import merge_chunk
from .extract import extract_response
from .markdown import parse_markdown
from .sheet import parse_csv
from .stream import decode

__all__ = [
    "decode",
    "extract_response",
    "merge_chunk",
    "parse_csv",
    "parse_markdown",
]

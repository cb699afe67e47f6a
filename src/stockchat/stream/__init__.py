"""Streaming ingestion: bytes to lines to chunks.

Module structure:
- decoder.py: Incremental byte/line decoding
- frames.py: Event frame parsing into Chunk records
- models.py: The Chunk record
"""

from .decoder import LineDecoder, adecode, decode
from .frames import DONE_SENTINEL, EVENT_PREFIX, aiter_chunks, is_sentinel, iter_chunks, parse_frame
from .models import Chunk

__all__ = [
    "Chunk",
    "DONE_SENTINEL",
    "EVENT_PREFIX",
    "LineDecoder",
    "adecode",
    "aiter_chunks",
    "decode",
    "is_sentinel",
    "iter_chunks",
    "parse_frame",
]

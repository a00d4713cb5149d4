"""
Streaming support for the vendor clients.

This package contains:
- SSE decoding with a carry buffer across chunk boundaries
- Decode session state and termination tracking
- The chunk source protocol consumed by the decoder
"""

from .models import (
    ChunkSource,
    DecodeSession,
    DecodeState,
    StreamDelta,
    TerminationReason,
)
from .parser import DATA_PREFIX, DONE_SENTINEL, StreamDecoder

__all__ = [
    "DATA_PREFIX",
    "DONE_SENTINEL",
    "ChunkSource",
    "DecodeSession",
    "DecodeState",
    "StreamDecoder",
    "StreamDelta",
    "TerminationReason",
]

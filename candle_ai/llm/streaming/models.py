"""
Streaming-specific dataclasses for the SSE decoder.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable

# Sink receives (text, is_final); may be a plain function or a coroutine function.
DeltaSink = Callable[[str, bool], Awaitable[None] | None]

# Diagnostic hook for suppressed events: (payload, error).
MalformedHook = Callable[[str, Exception], None]

# Pulls the incremental text out of one parsed event.
DeltaExtractor = Callable[[Any], str | None]


class DecodeState(Enum):
    """Decode session states. TERMINATED is final."""
    STREAMING = "streaming"
    TERMINATED = "terminated"


class TerminationReason(Enum):
    """Why a decode session ended."""
    SENTINEL = "sentinel"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


@runtime_checkable
class ChunkSource(Protocol):
    """Sequential supplier of body chunks; iteration ends at end-of-stream."""

    def __aiter__(self) -> AsyncIterator[bytes | str]: ...


@dataclass(frozen=True)
class StreamDelta:
    """One sink invocation worth of output."""
    text: str
    is_final: bool = False


@dataclass
class DecodeSession:
    """Mutable state owned by a single decode call."""
    carry: str = ""
    state: DecodeState = DecodeState.STREAMING
    termination: TerminationReason | None = None

    # Diagnostics
    events: int = 0
    deltas: int = 0
    malformed_events: int = 0
    ignored_lines: int = 0

    @property
    def terminated(self) -> bool:
        return self.state is DecodeState.TERMINATED

    def terminate(self, reason: TerminationReason) -> None:
        """Move to TERMINATED; the first reason recorded wins."""
        if self.state is DecodeState.TERMINATED:
            return
        self.state = DecodeState.TERMINATED
        self.termination = reason

"""
SSE stream decoder shared by every vendor client.

Turns an incrementally delivered ``data: <json>`` event stream into text
deltas. Chunk boundaries may fall anywhere: inside a line, inside the
``data: `` prefix or inside a multi-byte UTF-8 sequence. The unresolved tail
is carried over to the next read until a newline completes it.
"""

from __future__ import annotations

import codecs
import inspect
import json
from collections.abc import AsyncGenerator, AsyncIterable
from typing import Any

import structlog

from ..exceptions import FrameTooLargeError, MalformedEventError
from ..extraction import CHAT_DELTA
from .models import (
    DecodeSession,
    DeltaExtractor,
    DeltaSink,
    MalformedHook,
    StreamDelta,
    TerminationReason,
)

# Constants
DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"
DEFAULT_MAX_CARRY_CHARS = 1024 * 1024

logger = structlog.get_logger(__name__)


class StreamDecoder:
    """
    Decodes chat-completion SSE bodies into (text, is_final) deltas.

    A decoder holds configuration and cumulative statistics only; all
    per-stream state lives in the ``DecodeSession`` created for each call,
    so one decoder can serve any number of sequential or concurrent streams.
    """

    def __init__(
        self,
        extract_delta: DeltaExtractor = CHAT_DELTA,
        *,
        max_carry_chars: int | None = DEFAULT_MAX_CARRY_CHARS,
        on_malformed: MalformedHook | None = None,
        encoding: str = "utf-8",
        provider: str = "unknown",
        model: str = "unknown",
    ):
        if max_carry_chars is not None and max_carry_chars < 1:
            raise ValueError("max_carry_chars must be positive or None")
        self.extract_delta = extract_delta
        self.max_carry_chars = max_carry_chars
        self.on_malformed = on_malformed
        self.encoding = encoding
        self.provider = provider
        self.model = model
        self.stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> dict[str, int]:
        return {
            'sessions': 0,
            'events': 0,
            'deltas': 0,
            'malformed_events': 0,
            'ignored_lines': 0,
            'failed_sessions': 0,
        }

    async def decode(
        self,
        source: AsyncIterable[bytes | str],
        on_delta: DeltaSink,
    ) -> DecodeSession:
        """
        Feed every delta of ``source`` to ``on_delta``.

        The sink is called with ``(text, False)`` for each non-empty delta and
        exactly once with ``("", True)`` on clean completion. If the source
        fails or the call is cancelled, the error propagates and no final
        call is made. The next chunk is not read until the sink returns.

        Returns:
            The finished session, for diagnostics.
        """
        session = DecodeSession()
        deltas = self.iter_deltas(source, session)
        try:
            async for delta in deltas:
                result = on_delta(delta.text, delta.is_final)
                if inspect.isawaitable(result):
                    await result
        finally:
            await deltas.aclose()
        return session

    async def iter_deltas(
        self,
        source: AsyncIterable[bytes | str],
        session: DecodeSession | None = None,
    ) -> AsyncGenerator[StreamDelta, None]:
        """
        Yield deltas from ``source``; the last one has ``is_final=True``.

        Nothing further is read from ``source`` once the sentinel is seen.
        """
        session = session if session is not None else DecodeSession()
        text_decoder = codecs.getincrementaldecoder(self.encoding)(errors="replace")
        self.stats['sessions'] += 1

        try:
            async for chunk in source:
                if isinstance(chunk, str):
                    # Pending partial bytes belong before this text.
                    session.carry += text_decoder.decode(b"", final=True)
                    session.carry += chunk
                else:
                    session.carry += text_decoder.decode(bytes(chunk))

                *lines, session.carry = session.carry.split("\n")

                for line in lines:
                    delta = self._process_line(line, session)
                    if delta is None:
                        continue
                    if delta.is_final:
                        session.terminate(TerminationReason.SENTINEL)
                        self._log_session(session)
                        yield delta
                        return
                    yield delta

                self._check_carry(session)

            session.carry += text_decoder.decode(b"", final=True)
            if session.carry:
                # Unterminated last line: never completed, so never an event.
                logger.debug(
                    "Discarding unterminated stream tail",
                    provider=self.provider,
                    tail_length=len(session.carry),
                )
                session.carry = ""

        except BaseException:
            if not session.terminated:
                session.terminate(TerminationReason.FAILED)
                self.stats['failed_sessions'] += 1
                self._log_session(session)
            raise

        session.terminate(TerminationReason.EXHAUSTED)
        self._log_session(session)
        yield StreamDelta("", is_final=True)

    def _process_line(self, line: str, session: DecodeSession) -> StreamDelta | None:
        """Resolve one complete line into a delta, the final marker, or nothing."""
        if line.endswith("\r"):
            line = line[:-1]

        if not line.startswith(DATA_PREFIX):
            session.ignored_lines += 1
            self.stats['ignored_lines'] += 1
            return None

        payload = line[len(DATA_PREFIX):]
        session.events += 1
        self.stats['events'] += 1

        if payload == DONE_SENTINEL:
            return StreamDelta("", is_final=True)

        try:
            event = self._parse_event(payload)
        except MalformedEventError as e:
            session.malformed_events += 1
            self.stats['malformed_events'] += 1
            if self.on_malformed is not None:
                self.on_malformed(payload, e)
            return None

        text = self.extract_delta(event)
        if not isinstance(text, str) or not text:
            return None

        session.deltas += 1
        self.stats['deltas'] += 1
        return StreamDelta(text)

    def _parse_event(self, payload: str) -> Any:
        try:
            return json.loads(payload)
        except (ValueError, RecursionError) as e:
            # JSONDecodeError, oversized integer literals and deep nesting
            raise MalformedEventError(
                f"Invalid JSON in stream event: {e}",
                payload=payload,
                provider=self.provider,
                model=self.model,
            ) from e

    def _check_carry(self, session: DecodeSession) -> None:
        if self.max_carry_chars is None:
            return
        size = len(session.carry)
        if size > self.max_carry_chars:
            raise FrameTooLargeError(
                f"Unterminated SSE line grew to {size} characters "
                f"(limit {self.max_carry_chars})",
                limit=self.max_carry_chars,
                size=size,
                provider=self.provider,
                model=self.model,
            )

    def _log_session(self, session: DecodeSession) -> None:
        logger.debug(
            "Stream decode finished",
            provider=self.provider,
            model=self.model,
            termination=session.termination.value if session.termination else None,
            events=session.events,
            deltas=session.deltas,
            malformed_events=session.malformed_events,
            ignored_lines=session.ignored_lines,
        )

    def get_stats(self) -> dict[str, int]:
        """Get streaming statistics for monitoring."""
        return self.stats.copy()

    def reset_stats(self) -> None:
        """Reset statistics counters."""
        self.stats = self._empty_stats()

"""
Centralized logging and error classification for candle-ai.

Every vendor call is logged through structlog with the provider and model it
ran against, so one request can be followed from request assembly to the last
stream delta.

Features:
- structlog rendered through stdlib logging, configured from config.yaml
- Error categories derived from the LLM exception hierarchy
- ``operation_context`` / ``log_operation`` for start, finish and failure
  records with ``duration_ms``
- ``ContextualLogger`` carrying provider/model context for a client's lifetime
"""

from __future__ import annotations

import asyncio
import functools
import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any, ParamSpec, TypeVar

import structlog
from pydantic import ValidationError

from candle_ai.llm.exceptions import (
    LLMError,
    OHLCVParseError,
    StreamingError,
    TransportError,
    UnparsableResponseError,
)

P = ParamSpec("P")
T = TypeVar("T")

DEFAULT_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def _configure_structlog(colors: bool = True) -> None:
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=colors),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


_configure_structlog()

logger = structlog.get_logger(__name__)


def configure_logging(logging_config: dict[str, Any] | None = None) -> None:
    """
    Apply the ``logging`` section of config.yaml.

    Keys: ``level`` (stdlib level name), ``format`` (stdlib format string)
    and ``colors`` (console colors, default on).

    Raises:
        ValueError: Unknown level name.
    """
    logging_config = logging_config or {}
    level = str(logging_config.get("level", "INFO")).upper()
    if level not in logging.getLevelNamesMapping():
        raise ValueError(f"Unknown log level '{level}'")

    logging.basicConfig(
        level=level,
        format=logging_config.get("format", DEFAULT_LOG_FORMAT),
    )
    if "colors" in logging_config:
        _configure_structlog(colors=bool(logging_config["colors"]))


class ErrorClassifier:
    """Maps exceptions onto the categories used in failure records."""

    @staticmethod
    def classify_error(error: BaseException) -> tuple[int | None, str]:
        """
        Return the HTTP status (when the error carries one) and a category.

        Timeouts are checked before transport errors because
        ``RequestTimeoutError`` is both.
        """
        status_code = error.status_code if isinstance(error, LLMError) else None

        if isinstance(error, asyncio.CancelledError):
            category = "cancelled"
        elif isinstance(error, TimeoutError):
            category = "timeout_error"
        elif isinstance(error, TransportError):
            category = "transport_error"
        elif isinstance(error, StreamingError):
            category = "streaming_error"
        elif isinstance(error, UnparsableResponseError):
            category = "response_error"
        elif isinstance(error, OHLCVParseError | ValidationError):
            category = "validation_error"
        elif isinstance(error, LLMError):
            category = "llm_error"
        elif isinstance(error, OSError):
            category = "connection_error"
        elif isinstance(error, ValueError | TypeError):
            category = "parameter_error"
        else:
            category = "unknown_error"
        return status_code, category

    @staticmethod
    def describe(error: BaseException) -> dict[str, Any]:
        """Structured fields for a failure record."""
        status_code, category = ErrorClassifier.classify_error(error)
        fields: dict[str, Any] = {
            "error_type": type(error).__name__,
            "error_category": category,
            "error_message": str(error),
        }
        if status_code is not None:
            fields["status_code"] = status_code
        return fields


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


def _client_context(args: tuple[Any, ...]) -> dict[str, Any]:
    """Provider of the client a method was called on."""
    provider = getattr(args[0], "provider", None) if args else None
    if provider is None:
        return {}
    return {"provider": getattr(provider, "value", provider)}


@asynccontextmanager
async def operation_context(operation: str, **context: Any) -> AsyncIterator[Any]:
    """
    Log the start, completion or failure of one operation.

    Failures are logged with their category and re-raised unchanged;
    cancellation is logged as a warning and re-raised.

    Yields:
        structlog logger bound to ``operation`` and ``context``
    """
    op_logger = logger.bind(operation=operation, **context)
    op_logger.debug("Operation started")
    started = time.perf_counter()

    try:
        yield op_logger
    except asyncio.CancelledError:
        op_logger.warning("Operation cancelled", duration_ms=_elapsed_ms(started))
        raise
    except Exception as e:
        op_logger.error(
            "Operation failed",
            **ErrorClassifier.describe(e),
            duration_ms=_elapsed_ms(started),
        )
        raise

    op_logger.debug("Operation completed", duration_ms=_elapsed_ms(started))


def log_operation(
    operation: str, *, log_result: bool = False
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """
    Run an async client method inside ``operation_context``.

    When the first argument is a client, its provider is bound to every
    record.
    """
    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            async with operation_context(
                operation, function=func.__name__, **_client_context(args)
            ) as op_logger:
                result = await func(*args, **kwargs)
                if log_result:
                    op_logger.debug("Operation result", result=result)
                return result

        return wrapper
    return decorator


class ContextualLogger:
    """structlog logger with context that outlives a single operation."""

    def __init__(self, base_context: dict[str, Any] | None = None):
        self.base_context = dict(base_context or {})
        self._logger = logger.bind(**self.base_context)

    def bind(self, **context: Any) -> ContextualLogger:
        """New logger with ``context`` merged over the current one."""
        return ContextualLogger({**self.base_context, **context})

    def debug(self, message: str, **context: Any) -> None:
        self._logger.debug(message, **context)

    def info(self, message: str, **context: Any) -> None:
        self._logger.info(message, **context)

    def warning(self, message: str, **context: Any) -> None:
        self._logger.warning(message, **context)

    def error(self, message: str, **context: Any) -> None:
        self._logger.error(message, **context)

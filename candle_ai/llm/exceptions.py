"""
Error hierarchy for vendor LLM operations.

Every error carries the provider and model it happened against so callers
can log or branch without parsing messages:
- Transport failures with the HTTP status when one was received
- Timeouts that also satisfy ``except TimeoutError``
- Streaming failures that end a decode session
- Response-shape and OHLCV validation failures
"""

from __future__ import annotations


class LLMError(Exception):
    """Base LLM error with rich context."""

    def __init__(
        self,
        message: str,
        provider: str = "unknown",
        model: str = "unknown",
        status_code: int | None = None,
        response_data: dict | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.model = model
        self.status_code = status_code
        self.response_data = response_data or {}


class TransportError(LLMError):
    """HTTP call failed or returned a non-2xx status."""
    pass


class RequestTimeoutError(TransportError, TimeoutError):
    """No response (or no further body data) within the configured timeout."""

    def __init__(self, message: str, timeout: float | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.timeout = timeout


class StreamingError(LLMError):
    """Streaming-specific errors."""
    pass


class FrameTooLargeError(StreamingError):
    """The unresolved carry buffer grew past the configured limit."""

    def __init__(self, message: str, limit: int, size: int, **kwargs):
        super().__init__(message, **kwargs)
        self.limit = limit
        self.size = size


class MalformedEventError(StreamingError):
    """An SSE payload was not valid JSON. Never escapes the decoder."""

    def __init__(self, message: str, payload: str, **kwargs):
        super().__init__(message, **kwargs)
        self.payload = payload


class UnparsableResponseError(LLMError):
    """None of the known response shapes matched."""
    pass


class ProviderError(LLMError):
    """Provider-specific configuration or setup errors."""
    pass


class UnsupportedModelError(ProviderError):
    """Model is not in the catalog or cannot serve the requested operation."""
    pass


class OHLCVParseError(LLMError):
    """Model reply could not be turned into valid OHLCV candles."""
    pass

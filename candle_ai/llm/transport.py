"""
HTTP transport for vendor chat-completion APIs.

One POST per call with a static bearer token. Non-streaming calls return the
decoded JSON body (or raw bytes for binary endpoints); streaming calls return
an ``HttpChunkSource`` that the stream decoder consumes.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator, Mapping
from typing import Any

import httpx

from candle_ai.logging_utils import ContextualLogger

from .exceptions import RequestTimeoutError, TransportError, UnparsableResponseError

MAX_ERROR_BODY_CHARS = 2000


def _error_message(body: bytes) -> tuple[str, dict[str, Any] | None]:
    """Pick the human-readable message out of a vendor error body."""
    text = body.decode("utf-8", errors="replace")
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return text[:MAX_ERROR_BODY_CHARS], None

    if not isinstance(data, dict):
        return text[:MAX_ERROR_BODY_CHARS], None

    error = data.get("error")
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"], data
    if isinstance(error, str):
        return error, data
    if isinstance(data.get("message"), str):
        return data["message"], data
    return text[:MAX_ERROR_BODY_CHARS], data


class HttpChunkSource:
    """
    Response body of a streaming call, read chunk by chunk.

    Iterating yields raw bytes as they arrive. Read failures surface as
    ``TransportError`` (or ``RequestTimeoutError``). Always closed by its
    owner, either with ``aclose()`` or ``async with``.
    """

    def __init__(
        self,
        response: httpx.Response,
        provider: str = "unknown",
        model: str = "unknown",
    ):
        self.response = response
        self.provider = provider
        self.model = model

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self.response.headers

    async def __aiter__(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self.response.aiter_bytes():
                yield chunk
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(
                f"Stream read timed out: {e!s}",
                provider=self.provider,
                model=self.model,
            ) from e
        except (httpx.HTTPError, httpx.StreamError) as e:
            raise TransportError(
                f"Stream read failed: {e!s}",
                provider=self.provider,
                model=self.model,
            ) from e

    async def aclose(self) -> None:
        await self.response.aclose()

    async def __aenter__(self) -> HttpChunkSource:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()


class HttpTransport:
    """POSTs JSON payloads to one vendor with bearer authentication."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str,
        timeout: float = 30.0,
        provider: str = "unknown",
        headers: Mapping[str, str] | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be positive")

        self.provider = provider
        self.timeout = timeout
        self.client: httpx.AsyncClient = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {api_key}", **(headers or {})},
            timeout=timeout,
            transport=http_transport,
        )
        self._log = ContextualLogger({"provider": provider})

    async def send(
        self,
        endpoint: str,
        payload: dict[str, Any],
        wants_stream: bool = False,
        *,
        binary: bool = False,
    ) -> Any:
        """
        POST ``payload`` to ``endpoint``.

        Returns:
            Decoded JSON, raw bytes when ``binary`` is set, or an
            ``HttpChunkSource`` when ``wants_stream`` is set.

        Raises:
            RequestTimeoutError: No response headers within the timeout.
            TransportError: Connection failure or non-2xx status.
            UnparsableResponseError: A JSON response body was not JSON.
        """
        model = str(payload.get("model", "unknown"))
        accept = "text/event-stream" if wants_stream else "application/json"
        request = self.client.build_request(
            "POST", endpoint, json=payload, headers={"Accept": accept}
        )

        self._log.debug(
            "Sending request", endpoint=endpoint, model=model, stream=wants_stream
        )

        try:
            async with asyncio.timeout(self.timeout):
                response = await self.client.send(request, stream=True)
        except (TimeoutError, httpx.TimeoutException) as e:
            raise RequestTimeoutError(
                f"Request timeout ({self.timeout}s)",
                timeout=self.timeout,
                provider=self.provider,
                model=model,
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(
                f"HTTP error: {e!s}", provider=self.provider, model=model
            ) from e

        if not response.is_success:
            try:
                body = await response.aread()
            finally:
                await response.aclose()
            message, data = _error_message(body)
            self._log.warning(
                "Request rejected",
                endpoint=endpoint,
                model=model,
                status_code=response.status_code,
            )
            raise TransportError(
                f"HTTP {response.status_code}: {message}",
                provider=self.provider,
                model=model,
                status_code=response.status_code,
                response_data=data,
            )

        if wants_stream:
            return HttpChunkSource(response, provider=self.provider, model=model)

        try:
            body = await response.aread()
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(
                f"Response read timed out: {e!s}",
                timeout=self.timeout,
                provider=self.provider,
                model=model,
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(
                f"HTTP error: {e!s}", provider=self.provider, model=model
            ) from e
        finally:
            await response.aclose()

        if binary:
            return body

        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise UnparsableResponseError(
                f"Response body is not valid JSON: {e}",
                provider=self.provider,
                model=model,
                status_code=response.status_code,
            ) from e

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> HttpTransport:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

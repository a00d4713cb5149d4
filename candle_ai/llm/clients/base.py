"""
Shared chat-completion client.

Vendor clients differ only in their catalog, base URL, defaults, extraction
order and request shape; everything else (request assembly, transport,
streaming, OHLCV prediction, logging) lives here.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any, ClassVar

import httpx

from candle_ai.logging_utils import ContextualLogger, operation_context

from ..catalog.base import ModelCatalog
from ..exceptions import LLMError, OHLCVParseError, UnsupportedModelError
from ..extraction import CHAT_DELTA, ContentExtractor, ExtractionStrategy
from ..models import (
    OHLCV,
    ChatOptions,
    MessageLike,
    ModelFormat,
    ModelSpec,
    ProviderType,
    message_payload,
)
from ..ohlcv import coerce_candles, parse_ohlcv_response, validate_count
from ..prompts import build_prediction_messages
from ..streaming import DecodeSession, StreamDecoder
from ..streaming.models import DeltaSink
from ..transport import HttpTransport

if TYPE_CHECKING:
    from candle_ai.config import Configuration

CONNECTION_TEST_PROMPT = 'Hello, respond with "OK" if you can hear me.'

# Output budget per predicted candle, plus a fixed margin
TOKENS_PER_CANDLE = 50
PREDICTION_TOKEN_MARGIN = 100


class ChatClient:
    """
    Async client for one vendor's chat-completion API.

    Subclasses set the class attributes below. A client owns its HTTP
    transport; close it with ``close()`` or use ``async with``.
    """

    provider: ClassVar[ProviderType]
    catalog: ClassVar[ModelCatalog]
    default_model: ClassVar[str]
    default_base_url: ClassVar[str]
    strategies: ClassVar[tuple[ExtractionStrategy, ...]]
    default_temperature: ClassVar[float] = 0.7
    default_max_tokens: ClassVar[int] = 1000
    prediction_temperature: ClassVar[float] = 0.3
    prediction_model: ClassVar[str | None] = None

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        *,
        timeout: float = 30.0,
        base_url: str | None = None,
        transport: HttpTransport | None = None,
        decoder: StreamDecoder | None = None,
        models: ModelCatalog | Iterable[ModelSpec] | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("API Key cannot be empty")

        provider = self.provider.value
        if models is None:
            self.models = self.catalog
        elif isinstance(models, ModelCatalog):
            self.models = models
        else:
            self.models = ModelCatalog(provider, models)

        self.model = self.models.get_model(model or self.default_model).name
        self.timeout = timeout
        self.base_url = base_url or self.default_base_url
        self.transport = transport or HttpTransport(
            api_key,
            base_url=self.base_url,
            timeout=timeout,
            provider=provider,
            headers=self._default_headers(),
            http_transport=http_transport,
        )
        self.decoder = decoder or StreamDecoder(CHAT_DELTA, provider=provider)
        self.extractor = ContentExtractor(self.strategies, provider=provider)
        self._log = ContextualLogger({"provider": provider})

    @classmethod
    def from_config(cls, config: Configuration, **overrides: Any) -> ChatClient:
        """Build a client from config.yaml and the provider's API key variable."""
        provider = cls.provider.value
        provider_config = config.get_provider_config(provider)
        streaming_config = config.get_streaming_config()

        kwargs: dict[str, Any] = {
            "model": provider_config.get("model"),
            "timeout": provider_config.get("timeout", 30.0),
            "base_url": provider_config.get("base_url"),
        }
        kwargs.update(cls._config_kwargs(provider_config))
        if "decoder" not in overrides:
            kwargs["decoder"] = StreamDecoder(
                CHAT_DELTA,
                max_carry_chars=streaming_config["max_carry_chars"],
                provider=provider,
            )
        kwargs.update(overrides)
        return cls(config.get_api_key(provider), **kwargs)

    @classmethod
    def _config_kwargs(cls, provider_config: dict[str, Any]) -> dict[str, Any]:
        """Vendor-specific constructor arguments read from the provider config."""
        return {}

    def _default_headers(self) -> dict[str, str]:
        return {}

    def _sampling_defaults(self) -> dict[str, Any]:
        """Optional request fields sent even when the caller leaves them unset."""
        return {}

    # ------------------------------------------------------------------
    # Request assembly
    # ------------------------------------------------------------------

    def _resolve_model(self, model: str | None) -> ModelSpec:
        return self.models.get_model(model or self.model)

    def _prepare_messages(
        self, messages: Sequence[MessageLike], **vendor_options: Any
    ) -> list[dict[str, Any]]:
        if vendor_options:
            raise TypeError(f"Unexpected options: {', '.join(vendor_options)}")
        return [message_payload(message) for message in messages]

    def _build_request(
        self,
        spec: ModelSpec,
        messages: list[dict[str, Any]],
        *,
        temperature: float,
        max_tokens: int,
        stream: bool,
        extra: dict[str, Any],
    ) -> dict[str, Any]:
        if spec.format is ModelFormat.DASHSCOPE:
            return {
                "model": spec.name,
                "input": {"messages": messages},
                "parameters": {
                    "temperature": temperature,
                    "max_tokens": max_tokens,
                    "result_format": "message",
                },
            }
        return {
            "model": spec.name,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "stream": stream,
            **extra,
        }

    def _completion_request(
        self,
        messages: Sequence[MessageLike],
        *,
        stream: bool,
        temperature: float | None,
        max_tokens: int | None,
        model: str | None,
        top_p: float | None,
        frequency_penalty: float | None,
        presence_penalty: float | None,
        stop: list[str] | None,
        tools: list[dict[str, Any]] | None,
        tool_choice: str | dict[str, Any] | None,
        vendor_options: dict[str, Any],
    ) -> tuple[ModelSpec, dict[str, Any]]:
        spec = self._resolve_model(model)
        if stream and spec.format is not ModelFormat.OPENAI:
            raise UnsupportedModelError(
                "Streaming conversation only supports OpenAI format models",
                provider=self.provider.value,
                model=spec.name,
            )

        given = {
            "top_p": top_p,
            "frequency_penalty": frequency_penalty,
            "presence_penalty": presence_penalty,
            "stop": stop,
            "tools": tools,
            "tool_choice": tool_choice,
        }
        extra = {
            **self._sampling_defaults(),
            **{key: value for key, value in given.items() if value is not None},
        }

        payload = self._build_request(
            spec,
            self._prepare_messages(messages, **vendor_options),
            temperature=self.default_temperature if temperature is None else temperature,
            max_tokens=self.default_max_tokens if max_tokens is None else max_tokens,
            stream=stream,
            extra=extra,
        )
        return spec, payload

    # ------------------------------------------------------------------
    # Chat operations
    # ------------------------------------------------------------------

    async def chat_completion(
        self,
        messages: Sequence[MessageLike],
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
        stream: bool = False,
        model: str | None = None,
        top_p: float | None = None,
        frequency_penalty: float | None = None,
        presence_penalty: float | None = None,
        stop: list[str] | None = None,
        tools: list[dict[str, Any]] | None = None,
        tool_choice: str | dict[str, Any] | None = None,
        **vendor_options: Any,
    ) -> Any:
        """
        Send a multi-turn completion request.

        Returns:
            The decoded response JSON, or an ``HttpChunkSource`` when
            ``stream`` is set. The caller must close a returned source.
        """
        spec, payload = self._completion_request(
            messages,
            stream=stream,
            temperature=temperature,
            max_tokens=max_tokens,
            model=model,
            top_p=top_p,
            frequency_penalty=frequency_penalty,
            presence_penalty=presence_penalty,
            stop=stop,
            tools=tools,
            tool_choice=tool_choice,
            vendor_options=vendor_options,
        )
        async with operation_context(
            "chat_completion",
            provider=self.provider.value,
            model=spec.name,
        ):
            return await self.transport.send(spec.endpoint, payload, wants_stream=stream)

    async def chat(
        self,
        message: str,
        options: ChatOptions | None = None,
        **vendor_options: Any,
    ) -> str:
        """Single-turn conversation; returns the reply text."""
        options = options or ChatOptions()
        messages: list[MessageLike] = []
        if options.system_prompt:
            messages.append({"role": "system", "content": options.system_prompt})
        messages.append({"role": "user", "content": message})

        response = await self.chat_completion(
            messages, **options.sampling(), **vendor_options
        )
        return self.extract_content(response, options.model or self.model)

    async def chat_stream(
        self,
        messages: Sequence[MessageLike],
        callback: DeltaSink,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
        model: str | None = None,
        top_p: float | None = None,
        frequency_penalty: float | None = None,
        presence_penalty: float | None = None,
        stop: list[str] | None = None,
        tools: list[dict[str, Any]] | None = None,
        tool_choice: str | dict[str, Any] | None = None,
        **vendor_options: Any,
    ) -> DecodeSession:
        """
        Stream a completion into ``callback(text, is_final)``.

        The callback sees every non-empty delta followed by exactly one
        ``("", True)``, unless the request or the stream fails, in which case
        the error propagates and no final call is made.

        Raises:
            UnsupportedModelError: The model is not served in OpenAI format.
        """
        spec, payload = self._completion_request(
            messages,
            stream=True,
            temperature=temperature,
            max_tokens=max_tokens,
            model=model,
            top_p=top_p,
            frequency_penalty=frequency_penalty,
            presence_penalty=presence_penalty,
            stop=stop,
            tools=tools,
            tool_choice=tool_choice,
            vendor_options=vendor_options,
        )
        async with operation_context(
            "chat_stream",
            provider=self.provider.value,
            model=spec.name,
        ) as op_logger:
            source = await self.transport.send(spec.endpoint, payload, wants_stream=True)
            try:
                session = await self.decoder.decode(source, callback)
            finally:
                await source.aclose()
            op_logger.debug(
                "Stream finished",
                deltas=session.deltas,
                malformed_events=session.malformed_events,
            )
            return session

    def extract_content(self, response: Any, model: str | None = None) -> str:
        return self.extractor.extract(response, model or self.model)

    # ------------------------------------------------------------------
    # Model management
    # ------------------------------------------------------------------

    def set_model(self, model: str) -> None:
        """Switch the default model; it must be in the catalog."""
        self.model = self.models.get_model(model).name
        self._log.info("Model switched", model=self.model)

    def current_model(self) -> dict[str, str]:
        return self.models.get_model(self.model).summary()

    async def test_connection(self) -> dict[str, Any]:
        """Send a trivial prompt; report success or the error message."""
        try:
            response = await self.chat(CONNECTION_TEST_PROMPT)
        except LLMError as e:
            self._log.warning("Connection test failed", model=self.model, error=str(e))
            return {"success": False, "model": self.model, "error": str(e)}
        return {"success": True, "model": self.model, "response": response}

    # ------------------------------------------------------------------
    # OHLCV
    # ------------------------------------------------------------------

    async def predict_ohlcv(
        self,
        candles: Sequence[OHLCV | dict[str, Any]],
        instructions: str | None = None,
        count: int = 1,
        options: ChatOptions | None = None,
    ) -> list[OHLCV]:
        """
        Ask the model for the next ``count`` candles.

        Raises:
            ValueError: ``count`` is not an integer in 1..50.
            OHLCVParseError: The reply was not a valid array of ``count`` candles.
        """
        validate_count(count)
        history = coerce_candles(candles)
        options = options or ChatOptions()

        sampling = options.sampling()
        sampling["max_tokens"] = max(
            options.max_tokens or self.default_max_tokens,
            count * TOKENS_PER_CANDLE + PREDICTION_TOKEN_MARGIN,
        )
        sampling.setdefault("temperature", self.prediction_temperature)
        sampling.setdefault("model", self.prediction_model or self.model)

        messages = build_prediction_messages(history, instructions, count)

        async with operation_context(
            "predict_ohlcv",
            provider=self.provider.value,
            model=sampling["model"],
            count=count,
        ):
            response = await self.chat_completion(messages, **sampling)
            content = self.extract_content(response, sampling["model"])
            result = parse_ohlcv_response(content)
            if len(result) != count:
                raise OHLCVParseError(
                    f"AI returned {len(result)} OHLCV objects, but expected {count}.",
                    provider=self.provider.value,
                    model=sampling["model"],
                )
            return result

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.transport.close()

    async def __aenter__(self) -> ChatClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

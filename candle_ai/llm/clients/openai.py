"""OpenAI client: chat plus images, embeddings, moderation and speech."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, Literal

import httpx

from candle_ai.logging_utils import log_operation

from ..catalog.base import ModelCatalog
from ..catalog.openai import (
    CUSTOM_DIMENSIONS_MODEL,
    DEFAULT_EMBEDDING_MODEL,
    DEFAULT_IMAGE_MODEL,
    DEFAULT_MODEL,
    DEFAULT_MODERATION_MODEL,
    DEFAULT_SPEECH_MODEL,
    OPENAI_BASE_URL,
    OPENAI_MODELS,
)
from ..catalog.openai import estimate_cost as catalog_estimate_cost
from ..exceptions import UnparsableResponseError, UnsupportedModelError
from ..extraction import OPENAI_STRATEGIES
from ..models import OHLCV, ChatOptions, CostEstimate, ModelSpec, ProviderType
from ..streaming import StreamDecoder
from ..transport import HttpTransport
from .base import ChatClient

ImageSize = Literal["256x256", "512x512", "1024x1024", "1792x1024", "1024x1792"]
ImageFormat = Literal["url", "b64_json"]
Voice = Literal["alloy", "echo", "fable", "onyx", "nova", "shimmer"]
AudioFormat = Literal["mp3", "opus", "aac", "flac", "wav", "pcm"]


class OpenAIClient(ChatClient):
    """OpenAI chat completions and the auxiliary model endpoints."""

    provider = ProviderType.OPENAI
    catalog = OPENAI_MODELS
    default_model = DEFAULT_MODEL
    default_base_url = OPENAI_BASE_URL
    strategies = OPENAI_STRATEGIES
    default_max_tokens = 1000

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        *,
        organization: str | None = None,
        timeout: float = 30.0,
        base_url: str | None = None,
        transport: HttpTransport | None = None,
        decoder: StreamDecoder | None = None,
        models: ModelCatalog | Iterable[ModelSpec] | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.organization = organization
        super().__init__(
            api_key,
            model,
            timeout=timeout,
            base_url=base_url,
            transport=transport,
            decoder=decoder,
            models=models,
            http_transport=http_transport,
        )

    @classmethod
    def _config_kwargs(cls, provider_config: dict[str, Any]) -> dict[str, Any]:
        organization = provider_config.get("organization")
        return {"organization": organization} if organization else {}

    def _default_headers(self) -> dict[str, str]:
        if self.organization:
            return {"OpenAI-Organization": self.organization}
        return {}

    def _model_for(self, model: str, capability: str, operation: str) -> ModelSpec:
        spec = self.models.get_model(model)
        if not spec.has_capability(capability):
            raise UnsupportedModelError(
                f"{operation} is not supported by model '{model}'",
                provider=self.provider.value,
                model=model,
            )
        return spec

    def _data_items(self, response: Any, operation: str, model: str) -> list[Any]:
        data = response.get("data") if isinstance(response, dict) else None
        if not isinstance(data, list):
            raise UnparsableResponseError(
                f"Invalid response format from {operation}",
                provider=self.provider.value,
                model=model,
                response_data=response if isinstance(response, dict) else None,
            )
        return data

    @log_operation("generate_image")
    async def generate_image(
        self,
        prompt: str,
        *,
        model: str = DEFAULT_IMAGE_MODEL,
        n: int = 1,
        size: ImageSize = "1024x1024",
        quality: Literal["standard", "hd"] = "standard",
        style: Literal["vivid", "natural"] = "vivid",
        response_format: ImageFormat = "url",
    ) -> list[str]:
        """Generate images; returns URLs or base64 payloads per ``response_format``."""
        spec = self._model_for(model, "image-generation", "Image generation")
        payload = {
            "model": spec.name,
            "prompt": prompt,
            "n": n,
            "size": size,
            "quality": quality,
            "style": style,
            "response_format": response_format,
        }
        response = await self.transport.send(spec.endpoint, payload)
        key = "b64_json" if response_format == "b64_json" else "url"
        return [item.get(key) for item in self._data_items(response, "image generation", spec.name)]

    @log_operation("create_embeddings")
    async def create_embeddings(
        self,
        input: str | list[str],
        *,
        model: str = DEFAULT_EMBEDDING_MODEL,
        dimensions: int | None = None,
    ) -> list[list[float]]:
        """Embedding vectors, one per input text."""
        spec = self._model_for(model, "embeddings", "Embedding creation")
        payload: dict[str, Any] = {"model": spec.name, "input": input}
        if dimensions and spec.name == CUSTOM_DIMENSIONS_MODEL:
            payload["dimensions"] = dimensions
        response = await self.transport.send(spec.endpoint, payload)
        return [item["embedding"] for item in self._data_items(response, "embeddings", spec.name)]

    @log_operation("moderate_content")
    async def moderate_content(
        self, input: str, *, model: str = DEFAULT_MODERATION_MODEL
    ) -> list[dict[str, Any]]:
        """Moderation results; empty when the response carries none."""
        spec = self._model_for(model, "content-moderation", "Content moderation")
        response = await self.transport.send(spec.endpoint, {"model": spec.name, "input": input})
        results = response.get("results") if isinstance(response, dict) else None
        return results or []

    @log_operation("text_to_speech")
    async def text_to_speech(
        self,
        text: str,
        *,
        model: str = DEFAULT_SPEECH_MODEL,
        voice: Voice = "alloy",
        response_format: AudioFormat = "mp3",
        speed: float = 1.0,
    ) -> bytes:
        """Synthesized audio bytes in ``response_format``."""
        spec = self._model_for(model, "speech-synthesis", "Text-to-speech conversion")
        payload = {
            "model": spec.name,
            "input": text,
            "voice": voice,
            "response_format": response_format,
            "speed": speed,
        }
        return await self.transport.send(spec.endpoint, payload, binary=True)

    def estimate_cost(
        self, input_tokens: int, output_tokens: int = 0, model: str | None = None
    ) -> CostEstimate:
        """USD estimate for a request against ``model`` (default: current model)."""
        return catalog_estimate_cost(
            self.models.get_model(model or self.model), input_tokens, output_tokens
        )

    async def analyze_ohlcv(
        self,
        candles: Sequence[OHLCV | dict[str, Any]],
        instructions: str | None = None,
        count: int = 1,
        options: ChatOptions | None = None,
    ) -> list[OHLCV]:
        """Alias of ``predict_ohlcv``."""
        return await self.predict_ohlcv(candles, instructions, count, options)


def create_openai_client(
    api_key: str, model: str | None = None, **kwargs: Any
) -> OpenAIClient:
    """Factory for quick instance creation."""
    return OpenAIClient(api_key, model, **kwargs)

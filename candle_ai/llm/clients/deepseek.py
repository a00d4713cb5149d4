"""DeepSeek client with per-call response language control."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from candle_ai.logging_utils import operation_context

from ..catalog.deepseek import (
    DEEPSEEK_BASE_URL,
    DEEPSEEK_MODELS,
    DEFAULT_MODEL,
    FINANCE_MODEL,
)
from ..extraction import DEEPSEEK_STRATEGIES
from ..models import (
    OHLCV,
    AnalysisType,
    ChatOptions,
    Language,
    MessageLike,
    ProviderType,
    StructuredAnalysis,
)
from ..ohlcv import coerce_candles, parse_structured_analysis
from ..prompts import (
    apply_language_prompt,
    build_analysis_messages,
    build_structured_analysis_messages,
)
from .base import ChatClient

ANALYSIS_TEMPERATURE = 0.5
ANALYSIS_MAX_TOKENS = 1500
STRUCTURED_TEMPERATURE = 0.4
STRUCTURED_MAX_TOKENS = 1200


class DeepSeekClient(ChatClient):
    """
    DeepSeek chat models.

    Every chat call takes ``language`` ("en" or "cn", default "en"); the
    matching instruction is appended to each system message, or sent as a
    new leading system message when there is none.
    """

    provider = ProviderType.DEEPSEEK
    catalog = DEEPSEEK_MODELS
    default_model = DEFAULT_MODEL
    default_base_url = DEEPSEEK_BASE_URL
    strategies = DEEPSEEK_STRATEGIES
    default_max_tokens = 2000
    prediction_model = FINANCE_MODEL

    def _sampling_defaults(self) -> dict[str, Any]:
        return {"top_p": 1.0, "frequency_penalty": 0.0, "presence_penalty": 0.0}

    def _prepare_messages(
        self,
        messages: Sequence[MessageLike],
        *,
        language: Language = "en",
        **vendor_options: Any,
    ) -> list[dict[str, Any]]:
        if vendor_options:
            raise TypeError(f"Unexpected options: {', '.join(vendor_options)}")
        return apply_language_prompt(super()._prepare_messages(messages), language)

    async def _analysis_request(
        self,
        operation: str,
        messages: list[dict[str, str]],
        language: Language,
        options: ChatOptions,
        temperature: float,
        max_tokens: int,
    ) -> str:
        sampling = options.sampling()
        sampling.setdefault("temperature", temperature)
        sampling.setdefault("max_tokens", max_tokens)
        sampling.setdefault("model", FINANCE_MODEL)

        async with operation_context(
            operation,
            provider=self.provider.value,
            model=sampling["model"],
            language=language,
        ):
            response = await self.chat_completion(messages, language=language, **sampling)
            return self.extract_content(response, sampling["model"])

    async def analyze_ohlcv(
        self,
        candles: Sequence[OHLCV | dict[str, Any]],
        language: Language = "en",
        analysis_type: AnalysisType = "comprehensive",
        message: str | None = None,
        options: ChatOptions | None = None,
    ) -> str:
        """Free-text analysis of a candle series, focused by ``analysis_type``."""
        messages = build_analysis_messages(
            coerce_candles(candles), language, analysis_type, message
        )
        return await self._analysis_request(
            "analyze_ohlcv",
            messages,
            language,
            options or ChatOptions(),
            ANALYSIS_TEMPERATURE,
            ANALYSIS_MAX_TOKENS,
        )

    async def analyze_ohlcv_structured(
        self,
        candles: Sequence[OHLCV | dict[str, Any]],
        language: Language = "en",
        message: str | None = None,
        options: ChatOptions | None = None,
    ) -> StructuredAnalysis | str:
        """
        Summary, details and recommendations as a ``StructuredAnalysis``.

        Falls back to the raw reply text when it is not the expected JSON.
        """
        messages = build_structured_analysis_messages(
            coerce_candles(candles), language, message
        )
        content = await self._analysis_request(
            "analyze_ohlcv_structured",
            messages,
            language,
            options or ChatOptions(),
            STRUCTURED_TEMPERATURE,
            STRUCTURED_MAX_TOKENS,
        )
        structured = parse_structured_analysis(content)
        if structured is None:
            self._log.info("Structured analysis reply was not JSON, returning text")
            return content
        return structured


def create_deepseek_client(
    api_key: str, model: str | None = None, **kwargs: Any
) -> DeepSeekClient:
    """Factory for quick instance creation."""
    return DeepSeekClient(api_key, model, **kwargs)

"""
candle-ai: async vendor LLM clients with OHLCV prediction and analysis helpers.
"""

from .llm import (
    OHLCV,
    AliyunClient,
    ChatOptions,
    DeepSeekClient,
    LLMError,
    OpenAIClient,
    StreamDecoder,
    StructuredAnalysis,
    create_aliyun_client,
    create_deepseek_client,
    create_openai_client,
)

__version__ = "0.1.0"

__all__ = [
    "OHLCV",
    "AliyunClient",
    "ChatOptions",
    "DeepSeekClient",
    "LLMError",
    "OpenAIClient",
    "StreamDecoder",
    "StructuredAnalysis",
    "create_aliyun_client",
    "create_deepseek_client",
    "create_openai_client",
]

"""
Vendor LLM integration.

This package provides:
- Async clients for Aliyun DashScope, DeepSeek and OpenAI
- A shared SSE stream decoder
- Static model catalogs per vendor
- OHLCV prompt builders and reply validation
"""

from __future__ import annotations

from .exceptions import (
    FrameTooLargeError,
    LLMError,
    MalformedEventError,
    OHLCVParseError,
    ProviderError,
    RequestTimeoutError,
    StreamingError,
    TransportError,
    UnparsableResponseError,
    UnsupportedModelError,
)
from .models import (
    OHLCV,
    ChatMessage,
    ChatOptions,
    CostEstimate,
    MessageRole,
    ModelFormat,
    ModelSpec,
    ProviderType,
    StructuredAnalysis,
)
from .clients import (
    AliyunClient,
    ChatClient,
    DeepSeekClient,
    OpenAIClient,
    create_aliyun_client,
    create_deepseek_client,
    create_openai_client,
)
from .streaming import StreamDecoder

__all__ = [
    # Clients
    "AliyunClient",
    "ChatClient",
    "ChatMessage",
    "ChatOptions",
    "CostEstimate",
    "DeepSeekClient",
    # Exceptions
    "FrameTooLargeError",
    "LLMError",
    "MalformedEventError",
    "MessageRole",
    "ModelFormat",
    "ModelSpec",
    "OHLCV",
    "OHLCVParseError",
    "OpenAIClient",
    "ProviderError",
    "ProviderType",
    "RequestTimeoutError",
    "StreamDecoder",
    "StreamingError",
    "StructuredAnalysis",
    "TransportError",
    "UnparsableResponseError",
    "UnsupportedModelError",
    "create_aliyun_client",
    "create_deepseek_client",
    "create_openai_client",
]

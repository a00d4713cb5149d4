"""
Core LLM dataclasses shared by the vendor clients.

This module provides:
- Provider and message enums
- Model catalog entries
- Per-call chat options
- OHLCV candle and structured analysis models
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ProviderType(Enum):
    """Supported LLM providers."""
    ALIYUN = "aliyun"
    DEEPSEEK = "deepseek"
    OPENAI = "openai"


class MessageRole(Enum):
    """OpenAI-compatible message roles."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class ModelFormat(Enum):
    """Request/response wire format a model is served with."""
    OPENAI = "openai"
    DASHSCOPE = "dashscope"


Language = Literal["en", "cn"]
AnalysisType = Literal["trend", "volume", "technical", "comprehensive"]


@dataclass(frozen=True)
class ChatMessage:
    """OpenAI-compatible message structure."""
    role: MessageRole
    content: str
    name: str | None = None
    tool_call_id: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"role": self.role.value, "content": self.content}
        if self.name is not None:
            payload["name"] = self.name
        if self.tool_call_id is not None:
            payload["tool_call_id"] = self.tool_call_id
        return payload


MessageLike = ChatMessage | dict[str, Any]


def message_payload(message: MessageLike) -> dict[str, Any]:
    """Normalize a ChatMessage or plain dict into request JSON."""
    if isinstance(message, ChatMessage):
        return message.to_payload()
    if "role" not in message or "content" not in message:
        raise ValueError("Chat messages need both 'role' and 'content'")
    payload = dict(message)
    if isinstance(payload["role"], MessageRole):
        payload["role"] = payload["role"].value
    return payload


@dataclass(frozen=True)
class ModelSpec:
    """One entry of a vendor model catalog."""
    name: str
    display_name: str
    endpoint: str
    format: ModelFormat = ModelFormat.OPENAI
    description: str = ""
    max_tokens: int | None = None
    context_length: int | None = None
    capabilities: tuple[str, ...] = ()
    input_cost_per_1k: float | None = None
    output_cost_per_1k: float | None = None
    supported_features: tuple[str, ...] = ()
    version: str | None = None

    def has_capability(self, *capabilities: str) -> bool:
        """True if the model advertises any of ``capabilities``."""
        return any(cap in self.capabilities for cap in capabilities)

    def summary(self) -> dict[str, str]:
        return {
            "name": self.name,
            "display_name": self.display_name,
            "description": self.description,
        }


@dataclass
class ChatOptions:
    """Per-call options; ``None`` means "use the client default"."""
    temperature: float | None = None
    max_tokens: int | None = None
    system_prompt: str | None = None
    model: str | None = None
    top_p: float | None = None
    frequency_penalty: float | None = None
    presence_penalty: float | None = None
    stop: list[str] | None = None
    tools: list[dict[str, Any]] | None = None
    tool_choice: str | dict[str, Any] | None = None

    def sampling(self) -> dict[str, Any]:
        """Options forwarded to ``chat_completion`` (system prompt excluded)."""
        data = asdict(self)
        data.pop("system_prompt")
        return {key: value for key, value in data.items() if value is not None}


@dataclass(frozen=True)
class CostEstimate:
    """USD cost estimate for one request."""
    input_tokens: int
    output_tokens: int
    input_cost: float
    output_cost: float
    total_cost: float = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "total_cost", self.input_cost + self.output_cost)


FiniteNumber = Annotated[float, Field(allow_inf_nan=False)]


class OHLCV(BaseModel):
    """One candle. Numbers only: strings and booleans are rejected."""
    model_config = ConfigDict(strict=True, frozen=True)

    open: FiniteNumber
    high: FiniteNumber
    low: FiniteNumber
    close: FiniteNumber
    volume: FiniteNumber

    @model_validator(mode="after")
    def _check_ranges(self) -> OHLCV:
        if self.high < self.low:
            raise ValueError("high cannot be lower than low")
        if self.close < self.low or self.close > self.high:
            raise ValueError("close must be between low and high")
        return self


class StructuredAnalysis(BaseModel):
    """Summary/details/recommendations reply of a structured analysis."""
    summary: str = Field(min_length=1)
    details: list[str]
    recommendations: list[str]

"""DeepSeek model table and task-based model selection."""

from __future__ import annotations

from ..models import ModelFormat, ModelSpec
from .base import ModelCatalog

DEEPSEEK_BASE_URL = "https://api.deepseek.com"
CHAT_ENDPOINT = "/v1/chat/completions"

DEFAULT_MODEL = "deepseek-chat"
FINANCE_MODEL = "deepseek-finance"


def _deepseek(
    name: str,
    display_name: str,
    description: str,
    max_tokens: int,
    context_length: int,
    *capabilities: str,
    version: str = "2025-01",
) -> ModelSpec:
    return ModelSpec(
        name=name,
        display_name=display_name,
        endpoint=CHAT_ENDPOINT,
        format=ModelFormat.OPENAI,
        description=description,
        max_tokens=max_tokens,
        context_length=context_length,
        capabilities=capabilities,
        version=version,
    )


DEEPSEEK_MODELS = ModelCatalog("deepseek", [
    # Chat
    _deepseek("deepseek-chat", "DeepSeek Chat",
              "General purpose chat model for everyday conversations and tasks",
              4096, 16000, "chat", "text-generation", "reasoning"),
    _deepseek("deepseek-chat-lite", "DeepSeek Chat Lite",
              "Lightweight chat model optimized for speed and efficiency",
              2048, 8000, "chat", "text-generation"),
    _deepseek("deepseek-chat-pro", "DeepSeek Chat Pro",
              "Professional chat model with enhanced reasoning capabilities",
              8192, 32000, "chat", "text-generation", "complex-reasoning", "analysis"),
    _deepseek("deepseek-chat-max", "DeepSeek Chat Max",
              "Maximum capability chat model for most demanding tasks",
              16384, 64000, "chat", "text-generation", "expert-analysis", "research"),
    # Coder
    _deepseek("deepseek-coder", "DeepSeek Coder",
              "Specialized model for code generation and programming tasks",
              16384, 64000, "code-generation", "programming", "debugging", "code-review"),
    _deepseek("deepseek-coder-lite", "DeepSeek Coder Lite",
              "Lightweight code generation model",
              4096, 16000, "code-generation", "programming"),
    _deepseek("deepseek-coder-pro", "DeepSeek Coder Pro",
              "Professional code generation model with advanced features",
              32768, 128000, "code-generation", "programming", "system-design",
              "architecture"),
    # Math
    _deepseek("deepseek-math", "DeepSeek Math",
              "Specialized model for mathematical reasoning and problem solving",
              8192, 32000, "mathematical-reasoning", "problem-solving", "calculations"),
    _deepseek("deepseek-math-pro", "DeepSeek Math Pro",
              "Advanced mathematical reasoning model for complex problems",
              16384, 64000, "mathematical-reasoning", "advanced-calculus", "statistics"),
    # Reasoning
    _deepseek("deepseek-reasoner", "DeepSeek Reasoner",
              "Dedicated reasoning model for logical analysis",
              8192, 32000, "logical-reasoning", "analysis", "decision-making"),
    _deepseek("deepseek-reasoner-pro", "DeepSeek Reasoner Pro",
              "Advanced reasoning model for complex logical problems",
              16384, 64000, "complex-reasoning", "scientific-analysis", "research"),
    # Vision
    _deepseek("deepseek-vision", "DeepSeek Vision",
              "Vision model for image understanding and analysis",
              4096, 16000, "image-understanding", "visual-qa", "document-analysis"),
    _deepseek("deepseek-vision-pro", "DeepSeek Vision Pro",
              "Advanced vision model for complex visual tasks",
              8192, 32000, "image-understanding", "video-analysis", "visual-reasoning"),
    # Specialized
    _deepseek("deepseek-finance", "DeepSeek Finance",
              "Specialized for financial analysis, market prediction, and "
              "investment insights",
              8192, 32000, "financial-analysis", "market-prediction", "risk-assessment",
              "investment-advice"),
    _deepseek("deepseek-law", "DeepSeek Law",
              "Specialized for legal analysis, contract review, and legal research",
              16384, 64000, "legal-analysis", "contract-review", "legal-research"),
    _deepseek("deepseek-medical", "DeepSeek Medical",
              "Specialized for medical consultation, diagnosis support, and health "
              "analysis",
              8192, 32000, "medical-consultation", "diagnostic-support", "health-analysis"),
    _deepseek("deepseek-research", "DeepSeek Research",
              "Specialized for academic research and scientific analysis",
              32768, 128000, "academic-research", "scientific-analysis", "paper-writing"),
    # Multimodal
    _deepseek("deepseek-omni", "DeepSeek Omni",
              "Multimodal model supporting text, image, and audio",
              16384, 64000, "text-generation", "image-understanding", "audio-processing",
              "multimodal"),
    _deepseek("deepseek-omni-pro", "DeepSeek Omni Pro",
              "Professional multimodal model with advanced capabilities",
              32768, 128000, "text-generation", "multimodal", "complex-reasoning",
              "expert-analysis"),
    # Legacy
    _deepseek("deepseek-llm", "DeepSeek LLM", "Base large language model",
              4096, 16000, "text-generation", version="2024-12"),
])

SPECIALIZED_CAPABILITIES = (
    "financial-analysis",
    "medical-consultation",
    "mathematical-reasoning",
    "legal-analysis",
    "academic-research",
)

_TASK_MODELS = {
    "chat": "deepseek-chat-pro",
    "conversation": "deepseek-chat-pro",
    "coding": "deepseek-coder",
    "programming": "deepseek-coder",
    "reasoning": "deepseek-reasoner-pro",
    "analysis": "deepseek-reasoner-pro",
    "finance": FINANCE_MODEL,
    "financial": FINANCE_MODEL,
    "math": "deepseek-math-pro",
    "mathematics": "deepseek-math-pro",
    "vision": "deepseek-vision-pro",
    "image": "deepseek-vision-pro",
    "multimodal": "deepseek-omni-pro",
    "research": "deepseek-research",
}


def best_model_for_task(task_type: str) -> ModelSpec:
    """Recommended model for a task keyword; general chat for anything else."""
    name = _TASK_MODELS.get(task_type.lower(), DEFAULT_MODEL)
    return DEEPSEEK_MODELS.get_model(name)


def text_models() -> list[ModelSpec]:
    return DEEPSEEK_MODELS.models_without_capability(
        "text-generation", "image-understanding", "audio-processing"
    )


def coding_models() -> list[ModelSpec]:
    return DEEPSEEK_MODELS.models_with_capability("code-generation", "programming")


def reasoning_models() -> list[ModelSpec]:
    return DEEPSEEK_MODELS.models_with_capability(
        "reasoning", "logical-reasoning", "complex-reasoning"
    )


def financial_models() -> list[ModelSpec]:
    return DEEPSEEK_MODELS.models_with_capability("financial-analysis", "market-prediction")


def specialized_models() -> list[ModelSpec]:
    return DEEPSEEK_MODELS.models_with_capability(*SPECIALIZED_CAPABILITIES)


def multimodal_models() -> list[ModelSpec]:
    return DEEPSEEK_MODELS.models_with_capability("multimodal")

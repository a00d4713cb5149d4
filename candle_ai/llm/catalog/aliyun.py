"""Aliyun DashScope model table."""

from __future__ import annotations

from ..models import ModelFormat, ModelSpec
from .base import ModelCatalog

ALIYUN_BASE_URL = "https://dashscope.aliyuncs.com"
COMPATIBLE_ENDPOINT = "/compatible-mode/v1/chat/completions"
DASHSCOPE_ENDPOINT = "/api/v1/services/aigc/text-generation/generation"

DEFAULT_MODEL = "qwen-turbo"


def _qwen(
    name: str,
    display_name: str,
    description: str,
    max_tokens: int,
    context_length: int,
    *capabilities: str,
) -> ModelSpec:
    return ModelSpec(
        name=name,
        display_name=display_name,
        endpoint=COMPATIBLE_ENDPOINT,
        format=ModelFormat.OPENAI,
        description=description,
        max_tokens=max_tokens,
        context_length=context_length,
        capabilities=capabilities,
    )


ALIYUN_MODELS = ModelCatalog("aliyun", [
    _qwen("qwen-turbo", "Qwen-Turbo",
          "Lightweight version, fast response speed, suitable for general "
          "conversation scenarios",
          2000, 8000, "text-generation", "chat"),
    _qwen("qwen-plus", "Qwen-Plus",
          "Enhanced version, suitable for complex tasks and long text processing",
          6000, 32000, "text-generation", "chat", "reasoning"),
    _qwen("qwen-max", "Qwen-Max",
          "Maximum version, strongest capabilities, suitable for high-demand "
          "professional tasks",
          8000, 32000, "text-generation", "chat", "reasoning", "coding", "analysis"),
    _qwen("qwen-max-longcontext", "Qwen-Max-LongContext",
          "Supports 128K long context, suitable for long document processing",
          8000, 128000, "text-generation", "chat", "document-analysis"),
    # Qwen2.5
    _qwen("qwen2.5-0.5b", "Qwen2.5-0.5B",
          "Ultra-lightweight 0.5B parameter model for edge devices",
          4000, 32000, "text-generation", "chat"),
    _qwen("qwen2.5-0.5b-instruct", "Qwen2.5-0.5B-Instruct",
          "Instruction-tuned 0.5B model for specific tasks",
          4000, 32000, "instruction-following", "chat"),
    _qwen("qwen2.5-7b", "Qwen2.5-7B",
          "7B parameter base model, balanced performance and efficiency",
          6000, 32000, "text-generation", "reasoning"),
    _qwen("qwen2.5-7b-instruct", "Qwen2.5-7B-Instruct",
          "Instruction-tuned 7B model for chat and tasks",
          6000, 32000, "chat", "instruction-following", "coding"),
    _qwen("qwen2.5-14b", "Qwen2.5-14B",
          "14B parameter model with enhanced capabilities",
          8000, 32000, "text-generation", "analysis", "reasoning"),
    _qwen("qwen2.5-32b", "Qwen2.5-32B",
          "32B parameter high-performance model",
          8000, 32000, "text-generation", "complex-reasoning", "analysis"),
    _qwen("qwen2.5-72b", "Qwen2.5-72B",
          "72B parameter state-of-the-art model",
          8000, 32000, "text-generation", "expert-analysis", "research"),
    # Coder
    _qwen("qwen2.5-coder", "Qwen2.5-Coder",
          "Specialized code generation model",
          8000, 32000, "code-generation", "code-explanation", "debugging"),
    _qwen("qwen2.5-coder-7b", "Qwen2.5-Coder-7B",
          "7B parameter code generation model",
          8000, 32000, "code-generation", "programming"),
    _qwen("qwen2.5-coder-14b", "Qwen2.5-Coder-14B",
          "14B parameter advanced code generation model",
          8000, 32000, "code-generation", "code-review", "optimization"),
    # Vision-language
    _qwen("qwen-vl-lite", "Qwen-VL-Lite",
          "Lightweight vision-language model for basic image understanding",
          2000, 8000, "image-understanding", "visual-qa"),
    _qwen("qwen-vl-plus", "Qwen-VL-Plus",
          "Vision-language model supporting image understanding",
          4000, 32000, "image-understanding", "document-analysis", "visual-reasoning"),
    _qwen("qwen-vl-max", "Qwen-VL-Max",
          "Most powerful vision-language model",
          8000, 32000, "image-understanding", "video-analysis", "multimodal-reasoning"),
    # Audio
    _qwen("qwen-audio-turbo", "Qwen-Audio-Turbo",
          "Fast audio processing and speech-to-text model",
          2000, 8000, "speech-recognition", "audio-analysis"),
    _qwen("qwen-audio-chat", "Qwen-Audio-Chat",
          "Audio conversation and processing model",
          4000, 32000, "audio-chat", "voice-assistant", "speech-synthesis"),
    # Specialized
    _qwen("qwen-math-7b", "Qwen-Math-7B",
          "Specialized for mathematical reasoning and problem solving",
          4000, 32000, "mathematical-reasoning", "problem-solving"),
    _qwen("llama2-7b-chat-v2", "LLaMA2-7B-Chat",
          "Meta's LLaMA2-7B model",
          2000, 8000, "chat", "text-generation"),
    _qwen("baichuan2-7b-chat-v1", "Baichuan2-7B-Chat",
          "Baichuan AI's Baichuan2-7B model",
          2000, 8000, "chat", "chinese-nlp"),
    _qwen("qwen-financial", "Qwen-Financial",
          "Specialized for financial analysis and market insights",
          6000, 32000, "financial-analysis", "market-prediction", "risk-assessment"),
    _qwen("qwen-medical", "Qwen-Medical",
          "Specialized for medical consultation and health analysis",
          6000, 32000, "medical-consultation", "health-analysis", "diagnostic-support"),
    # Omni
    _qwen("qwen-omni", "Qwen-Omni",
          "Omnidirectional multimodal model supporting text, image, audio",
          8000, 64000, "text-generation", "image-understanding", "audio-processing",
          "multimodal"),
    _qwen("qwen-omni-pro", "Qwen-Omni-Pro",
          "Professional omnidirectional multimodal model with advanced capabilities",
          16000, 128000, "text-generation", "multimodal", "complex-reasoning",
          "expert-analysis"),
])

SPECIALIZED_CAPABILITIES = (
    "financial-analysis",
    "medical-consultation",
    "mathematical-reasoning",
)


def text_models() -> list[ModelSpec]:
    return ALIYUN_MODELS.models_without_capability(
        "text-generation", "image-understanding", "audio-processing"
    )


def vision_models() -> list[ModelSpec]:
    return ALIYUN_MODELS.models_with_capability("image-understanding")


def audio_models() -> list[ModelSpec]:
    return ALIYUN_MODELS.models_with_capability("audio-processing", "speech-recognition")


def coding_models() -> list[ModelSpec]:
    return ALIYUN_MODELS.models_with_capability("code-generation", "programming")


def specialized_models() -> list[ModelSpec]:
    return ALIYUN_MODELS.models_with_capability(*SPECIALIZED_CAPABILITIES)


def multimodal_models() -> list[ModelSpec]:
    return ALIYUN_MODELS.models_with_capability("multimodal")

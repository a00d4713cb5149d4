"""OpenAI model table, cost estimation and model suggestion."""

from __future__ import annotations

from collections.abc import Sequence

from ..models import CostEstimate, ModelFormat, ModelSpec
from .base import ModelCatalog

OPENAI_BASE_URL = "https://api.openai.com/v1"

DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_IMAGE_MODEL = "dall-e-3"
DEFAULT_EMBEDDING_MODEL = "text-embedding-ada-002"
DEFAULT_SPEECH_MODEL = "tts-1-hd"
DEFAULT_MODERATION_MODEL = "text-moderation-latest"

# Only this embedding model accepts a custom output size
CUSTOM_DIMENSIONS_MODEL = "text-embedding-3-small"

MAX_SUGGESTIONS = 5

OPENAI_MODELS = ModelCatalog("openai", [
    # GPT-4
    ModelSpec(
        name="gpt-4",
        display_name="GPT-4",
        endpoint="/chat/completions",
        format=ModelFormat.OPENAI,
        description="Powerful multi-purpose model for complex tasks",
        max_tokens=8192,
        context_length=8192,
        capabilities=("chat", "text-generation", "reasoning", "analysis"),
        input_cost_per_1k=0.03,
        output_cost_per_1k=0.06,
        supported_features=("chat", "function-calling"),
    ),
    ModelSpec(
        name="gpt-4-turbo",
        display_name="GPT-4 Turbo",
        endpoint="/chat/completions",
        description="Enhanced GPT-4 with 128K context, knowledge cutoff April 2023",
        max_tokens=4096,
        context_length=128000,
        capabilities=("chat", "text-generation", "reasoning", "analysis", "vision"),
        input_cost_per_1k=0.01,
        output_cost_per_1k=0.03,
        supported_features=("chat", "function-calling", "vision", "json-mode"),
    ),
    ModelSpec(
        name="gpt-4o",
        display_name="GPT-4o",
        endpoint="/chat/completions",
        description="Versatile model supporting text, images, audio with fast response",
        max_tokens=4096,
        context_length=128000,
        capabilities=("chat", "text-generation", "vision", "audio-processing", "multimodal"),
        input_cost_per_1k=0.005,
        output_cost_per_1k=0.015,
        supported_features=("chat", "function-calling", "vision", "audio", "json-mode"),
    ),
    ModelSpec(
        name="gpt-4o-mini",
        display_name="GPT-4o Mini",
        endpoint="/chat/completions",
        description="Compact and efficient version of GPT-4o with lower cost",
        max_tokens=16384,
        context_length=128000,
        capabilities=("chat", "text-generation", "vision"),
        input_cost_per_1k=0.00015,
        output_cost_per_1k=0.0006,
        supported_features=("chat", "function-calling", "vision", "json-mode"),
    ),
    # GPT-3.5
    ModelSpec(
        name="gpt-3.5-turbo",
        display_name="GPT-3.5 Turbo",
        endpoint="/chat/completions",
        description="Fast and cost-effective, suitable for most conversational tasks",
        max_tokens=4096,
        context_length=16385,
        capabilities=("chat", "text-generation", "code-generation"),
        input_cost_per_1k=0.0005,
        output_cost_per_1k=0.0015,
        supported_features=("chat", "function-calling"),
    ),
    ModelSpec(
        name="gpt-3.5-turbo-instruct",
        display_name="GPT-3.5 Turbo Instruct",
        endpoint="/completions",
        description="Instruction-tuned version for text completion tasks",
        max_tokens=4096,
        context_length=4097,
        capabilities=("text-completion", "instruction-following"),
        input_cost_per_1k=0.0015,
        output_cost_per_1k=0.0020,
        supported_features=("completions",),
    ),
    # Embeddings
    ModelSpec(
        name="text-embedding-ada-002",
        display_name="Text Embedding Ada 002",
        endpoint="/embeddings",
        description="Text embedding model, 1536 dimensions, suitable for retrieval "
                    "and similarity",
        context_length=8191,
        capabilities=("embeddings", "semantic-search"),
        input_cost_per_1k=0.0001,
        supported_features=("embeddings",),
    ),
    ModelSpec(
        name="text-embedding-3-small",
        display_name="Text Embedding 3 Small",
        endpoint="/embeddings",
        description="Small text embedding model, 1536 dimensions, balance of "
                    "performance and cost",
        context_length=8191,
        capabilities=("embeddings", "semantic-search"),
        input_cost_per_1k=0.00002,
        supported_features=("embeddings",),
    ),
    # Images (cost is per image)
    ModelSpec(
        name="dall-e-3",
        display_name="DALL-E 3",
        endpoint="/images/generations",
        description="Advanced image generation model producing high-quality, "
                    "high-resolution images",
        capabilities=("image-generation", "creative-design"),
        input_cost_per_1k=0.04,
        supported_features=("image-generation", "variations", "edits"),
    ),
    # Speech recognition (cost is per minute of audio)
    ModelSpec(
        name="whisper-1",
        display_name="Whisper",
        endpoint="/audio/transcriptions",
        description="Speech recognition model supporting multilingual transcription "
                    "and translation",
        capabilities=("speech-recognition", "audio-transcription", "translation"),
        input_cost_per_1k=0.006,
        supported_features=("transcriptions", "translations"),
    ),
    # Text-to-speech (cost is per thousand characters)
    ModelSpec(
        name="tts-1-hd",
        display_name="TTS-1 HD",
        endpoint="/audio/speech",
        description="High-quality text-to-speech with multiple voice options",
        capabilities=("speech-synthesis", "text-to-speech"),
        input_cost_per_1k=0.015,
        supported_features=("speech", "voice-selection"),
    ),
    # Moderation
    ModelSpec(
        name="text-moderation-latest",
        display_name="Moderation Latest",
        endpoint="/moderations",
        description="Content moderation model for detecting harmful content",
        capabilities=("content-moderation", "safety"),
        input_cost_per_1k=0.0001,
        supported_features=("moderation",),
    ),
])

LATEST_MODELS = (
    "gpt-4o",
    "gpt-4o-mini",
    "gpt-4-turbo",
    "gpt-3.5-turbo",
    "text-embedding-3-small",
    "dall-e-3",
)

_TASK_CAPABILITIES: dict[str, tuple[str, ...]] = {
    "chat": ("chat",),
    "completion": ("text-completion",),
    "embedding": ("embeddings",),
    "image": ("image-generation", "vision"),
    "audio": ("speech-recognition", "speech-synthesis"),
}


def chat_models() -> list[ModelSpec]:
    return OPENAI_MODELS.models_with_capability("chat")


def embedding_models() -> list[ModelSpec]:
    return OPENAI_MODELS.models_with_capability("embeddings")


def latest_models() -> list[ModelSpec]:
    return [spec for spec in OPENAI_MODELS if spec.name in LATEST_MODELS]


def cost_efficient_models() -> list[ModelSpec]:
    """Models under $0.001 per 1K input tokens, cheapest first."""
    cheap = [
        spec for spec in OPENAI_MODELS
        if spec.input_cost_per_1k and spec.input_cost_per_1k < 0.001
    ]
    return sorted(cheap, key=lambda spec: spec.input_cost_per_1k or 0)


def high_context_models() -> list[ModelSpec]:
    """Models with at least 128K context, largest first."""
    large = [
        spec for spec in OPENAI_MODELS
        if spec.context_length and spec.context_length >= 128000
    ]
    return sorted(large, key=lambda spec: spec.context_length or 0, reverse=True)


def estimate_cost(
    model: ModelSpec, input_tokens: int, output_tokens: int = 0
) -> CostEstimate:
    """USD cost of one request; missing prices count as free."""
    input_cost = ((model.input_cost_per_1k or 0) / 1000) * input_tokens
    output_cost = ((model.output_cost_per_1k or 0) / 1000) * output_tokens
    return CostEstimate(
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        input_cost=input_cost,
        output_cost=output_cost,
    )


def suggest_model(
    task_type: str,
    budget: float | None = None,
    context_length: int | None = None,
    features: Sequence[str] | None = None,
) -> list[ModelSpec]:
    """
    Recommend up to five models for a task.

    Args:
        task_type: One of chat, completion, embedding, image, audio
        budget: When given, cheapest input price first
        context_length: Minimum context window
        features: Every feature must be supported or advertised as a capability
    """
    if task_type not in _TASK_CAPABILITIES:
        raise ValueError(
            f"Unknown task type '{task_type}', expected one of "
            f"{', '.join(_TASK_CAPABILITIES)}"
        )

    candidates = OPENAI_MODELS.models_with_capability(*_TASK_CAPABILITIES[task_type])

    if context_length:
        candidates = [
            spec for spec in candidates
            if spec.context_length and spec.context_length >= context_length
        ]

    if features:
        candidates = [
            spec for spec in candidates
            if all(
                feature in spec.supported_features or feature in spec.capabilities
                for feature in features
            )
        ]

    if budget:
        candidates.sort(key=lambda spec: spec.input_cost_per_1k or 0)

    return candidates[:MAX_SUGGESTIONS]

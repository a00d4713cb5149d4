"""Aliyun DashScope (Qwen) client."""

from __future__ import annotations

from typing import Any

from ..catalog.aliyun import ALIYUN_BASE_URL, ALIYUN_MODELS, DEFAULT_MODEL
from ..extraction import ALIYUN_STRATEGIES
from ..models import ProviderType
from .base import ChatClient


class AliyunClient(ChatClient):
    """
    Qwen models through DashScope.

    Models listed with the ``dashscope`` format are sent as
    ``{model, input: {messages}, parameters: {...}}`` and cannot stream.
    """

    provider = ProviderType.ALIYUN
    catalog = ALIYUN_MODELS
    default_model = DEFAULT_MODEL
    default_base_url = ALIYUN_BASE_URL
    strategies = ALIYUN_STRATEGIES
    default_max_tokens = 1000


def create_aliyun_client(api_key: str, model: str | None = None, **kwargs: Any) -> AliyunClient:
    """Factory for quick instance creation."""
    return AliyunClient(api_key, model, **kwargs)

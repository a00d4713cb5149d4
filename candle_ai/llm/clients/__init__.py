"""
Vendor chat clients.
"""

from .aliyun import AliyunClient, create_aliyun_client
from .base import ChatClient
from .deepseek import DeepSeekClient, create_deepseek_client
from .openai import OpenAIClient, create_openai_client

__all__ = [
    "AliyunClient",
    "ChatClient",
    "DeepSeekClient",
    "OpenAIClient",
    "create_aliyun_client",
    "create_deepseek_client",
    "create_openai_client",
]

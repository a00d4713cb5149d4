"""
Per-vendor model catalogs.
"""

from .aliyun import ALIYUN_MODELS
from .base import ModelCatalog
from .deepseek import DEEPSEEK_MODELS, best_model_for_task
from .openai import OPENAI_MODELS, estimate_cost, suggest_model

__all__ = [
    "ALIYUN_MODELS",
    "DEEPSEEK_MODELS",
    "OPENAI_MODELS",
    "ModelCatalog",
    "best_model_for_task",
    "estimate_cost",
    "suggest_model",
]

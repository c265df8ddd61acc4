"""Scent Trail：基于信息气味的代码导航推荐。"""

from __future__ import annotations

from .config import ModelType, RecommenderConfig
from .core.orchestrator import UpdateOrchestrator
from .models.history import NavigationHistory

__all__ = [
    "ModelType",
    "NavigationHistory",
    "RecommenderConfig",
    "UpdateOrchestrator",
]

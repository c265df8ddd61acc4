"""推荐结果与固定列表。"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from ..config import ModelType


@dataclass
class RecommendationResult:
    """一次排序产出的推荐，按名次排列。

    cues 与 keys 一一对应；关闭提示词时每项都是空列表。
    """

    current_key: str
    model_type: ModelType
    keys: List[str] = field(default_factory=list)
    cues: List[List[str]] = field(default_factory=list)

    def pairs(self) -> List[Tuple[str, List[str]]]:
        return list(zip(self.keys, self.cues))

    def __len__(self) -> int:
        return len(self.keys)


class PinnedMethods:
    """用户固定下来的方法及其提示词，保持固定顺序。"""

    def __init__(self) -> None:
        self._items: Dict[str, List[str]] = {}

    def add(self, key: str, cues: List[str] | None = None) -> bool:
        if key in self._items:
            return False
        self._items[key] = list(cues or [])
        return True

    def remove(self, key: str) -> bool:
        return self._items.pop(key, None) is not None

    def contains(self, key: str) -> bool:
        return key in self._items

    def keys(self) -> List[str]:
        return list(self._items)

    def cues(self) -> List[List[str]]:
        return [list(words) for words in self._items.values()]

    def __len__(self) -> int:
        return len(self._items)

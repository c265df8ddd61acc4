"""TF-IDF 余弦相似度模型。"""

from __future__ import annotations

import threading
from typing import AbstractSet, Dict, List, Sequence

import numpy

from ..models.history import NavigationHistory
from .ranker import select_balanced_top_n

HISTORY_DECAY = 0.9


class SimilarityMatrix:
    """方法 × 方法 的余弦相似度方阵，加一份方法键索引。

    cosine[i][j] 是 method_index[i] 与 method_index[j] 的相似度。
    矩阵由批处理一次构建（或从快照加载），之后只读，直到 reset 或整体替换。
    """

    def __init__(
        self,
        navigation: NavigationHistory | None = None,
        history_decay: float = HISTORY_DECAY,
    ) -> None:
        self.navigation = navigation if navigation is not None else NavigationHistory()
        self.history_decay = history_decay
        self._method_index: List[str] = []
        self._positions: Dict[str, int] = {}
        self._cosine = numpy.zeros((0, 0), dtype=numpy.float32)
        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def reset(self) -> None:
        with self._lock:
            self._method_index = []
            self._positions = {}
            self._cosine = numpy.zeros((0, 0), dtype=numpy.float32)

    def is_empty(self) -> bool:
        return not self._method_index

    @property
    def method_index(self) -> List[str]:
        return list(self._method_index)

    @property
    def cosine(self) -> numpy.ndarray:
        return self._cosine

    @property
    def size(self) -> int:
        return len(self._method_index)

    def set_method_index(self, keys: Sequence[str]) -> None:
        with self._lock:
            self._method_index = list(keys)
            self._positions = {key: position for position, key in enumerate(self._method_index)}

    def set_cosine_similarity_matrix(self, matrix: Sequence[Sequence[float]] | numpy.ndarray) -> None:
        array = numpy.asarray(matrix, dtype=numpy.float32)
        if array.size == 0:
            array = array.reshape((0, 0))
        if array.ndim != 2 or array.shape[0] != array.shape[1]:
            raise ValueError(f"cosine similarity matrix must be square, got shape {array.shape}")
        with self._lock:
            self._cosine = array

    def load(self, keys: Sequence[str], matrix: Sequence[Sequence[float]] | numpy.ndarray) -> None:
        """同时替换索引与矩阵，二者尺寸必须一致。"""

        array = numpy.asarray(matrix, dtype=numpy.float32)
        if array.size == 0:
            array = array.reshape((0, 0))
        if array.shape != (len(keys), len(keys)):
            raise ValueError(
                f"matrix shape {array.shape} does not match index of {len(keys)} methods"
            )
        with self._lock:
            self.set_method_index(keys)
            self.set_cosine_similarity_matrix(array)

    def index_of(self, key: str) -> int:
        """方法键在矩阵中的下标，找不到返回 -1。"""

        return self._positions.get(key, -1)

    def row(self, key: str) -> numpy.ndarray | None:
        position = self.index_of(key)
        if position < 0:
            return None
        return self._cosine[position].copy()

    def get_combined_history_column(self, decay: float, num_history_steps: int) -> numpy.ndarray:
        """把最近 num_history_steps 步历史的相似度行按衰减叠加。

        最近一步系数 1.0，往前每一步乘以 decay；
        不在索引里的方法直接跳过，不占用衰减。
        """

        combined = numpy.zeros(self.size, dtype=numpy.float32)
        total_decay = 1.0
        last_step = self.navigation.length() - 1
        for step in range(last_step, max(last_step - num_history_steps, -1), -1):
            key = self.navigation.get_key_at_step(step)
            if key is None:
                continue
            position = self.index_of(key)
            if position < 0:
                continue
            combined += self._cosine[position] * numpy.float32(total_decay)
            total_decay *= decay
        return combined

    def get_top_n_recommendations(
        self,
        current_key: str,
        n: int,
        num_history_steps: int,
        visited: AbstractSet[str] | None = None,
    ) -> List[str]:
        """历史加权后的平衡前 N 名；当前方法自身不参与，分数须大于 0。"""

        with self._lock:
            if self.is_empty():
                return []
            combined = self.get_combined_history_column(self.history_decay, num_history_steps)
            current_position = self.index_of(current_key)
            candidates = [
                (key, float(combined[position]))
                for position, key in enumerate(self._method_index)
                if position != current_position
            ]
            if visited is None:
                visited = self.navigation.get_distinct_visited()
            return select_balanced_top_n(candidates, visited, n, threshold=0.0)

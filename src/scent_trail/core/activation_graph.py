"""扩散激活模型（PFIS 拓扑）。"""

from __future__ import annotations

import threading
from typing import AbstractSet, Iterable, List, Sequence, Tuple

from ..models.history import NavigationHistory
from ..models.node import Node, NodeKind, NodeList
from .ranker import select_balanced_top_n

HISTORY_DECAY = 0.9
SPREAD_DECAY = 0.85
# 每轮排序前所有节点的基线权重；只有被激活到基线之上的方法才会被推荐
BASELINE_WEIGHT = 1.0


class ActivationGraph:
    """三层图：历史节点 → 词节点 → 方法节点。

    设计要点：
    - 历史表允许同名节点重复出现，每次导航都新建一个节点，保留“最近”的语义；
    - 词表与方法表按名字去重；
    - 只有历史节点指向词节点、词节点指向方法节点，图恰好三层、无环；
    - 排序时从最近的历史节点往回走，先衰减历史，再两跳扩散到方法节点。
    """

    def __init__(
        self,
        navigation: NavigationHistory | None = None,
        history_decay: float = HISTORY_DECAY,
        spread_decay: float = SPREAD_DECAY,
    ) -> None:
        self.navigation = navigation if navigation is not None else NavigationHistory()
        self.history_decay = history_decay
        self.spread_decay = spread_decay
        self.history_list = NodeList(NodeKind.METHOD, unique=False)
        self.word_list = NodeList(NodeKind.WORD)
        self.method_list = NodeList(NodeKind.METHOD)
        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        """模型变更与排序共用的可重入锁。"""

        return self._lock

    def reset(self) -> None:
        """清空三张表，重建前调用。"""

        with self._lock:
            self.history_list.clear()
            self.word_list.clear()
            self.method_list.clear()

    def is_empty(self) -> bool:
        return len(self.method_list) == 0

    def add_word_node(self, word: str) -> Node:
        return self.word_list.add(word)

    def add_method_node(self, key: str) -> Node:
        return self.method_list.add(key)

    def link(self, word: str, method_key: str) -> Node:
        """建立 词 → 方法 的边，返回词节点。"""

        word_node = self.add_word_node(word)
        word_node.add_child(self.add_method_node(method_key))
        return word_node

    def add_to_history(self, key: str, words: Iterable[str]) -> Node:
        """追加一个历史节点（权重 1），并连到它包含的词节点。"""

        with self._lock:
            node = self.history_list.add(key)
            node.weight = BASELINE_WEIGHT
            for word in words:
                node.add_child(self.add_word_node(word))
            return node

    def set_history(self, entries: Iterable[Tuple[str, Sequence[str]]]) -> None:
        """用 (方法键, 词列表) 序列整体替换历史表，模型重建/加载后使用。"""

        with self._lock:
            self.history_list.clear()
            for key, words in entries:
                self.add_to_history(key, words)

    def reset_weights(self) -> None:
        for node_list in (self.history_list, self.word_list, self.method_list):
            node_list.reset_weights(BASELINE_WEIGHT)

    def _recent_history(self, num_nodes: int) -> List[Node]:
        """最近的 num_nodes 个历史节点，最近的在前。"""

        if num_nodes <= 0:
            return []
        nodes = self.history_list.nodes()
        return nodes[::-1][:num_nodes]

    def decay_history(self, decay: float, num_nodes: int) -> None:
        """衰减历史节点。

        最近的节点不动（但计入 num_nodes）；往前每一步的衰减系数是上一步的平方：
        d, d², d⁴ ...，越早的节点衰减得越快。
        """

        factor = decay
        for node in self._recent_history(num_nodes)[1:]:
            node.decay(factor)
            factor *= factor

    def spread_activation(self, decay: float, num_nodes: int) -> None:
        """从最近的 num_nodes 个历史节点出发，两跳扩散到方法节点。"""

        for history_node in self._recent_history(num_nodes):
            for word_node in history_node.iter_children():
                word_node.receive(history_node.weight, decay)
                for method_node in word_node.iter_children():
                    method_node.receive(word_node.weight, decay)

    def method_scores(self) -> List[Tuple[str, float]]:
        return [(node.name, node.weight) for node in self.method_list]

    def get_top_n_recommendations(
        self,
        current_key: str,
        n: int,
        num_spread_nodes: int,
        visited: AbstractSet[str] | None = None,
    ) -> List[str]:
        """完整的一轮排序：重置 → 衰减 → 扩散 → 平衡选取。

        只返回权重严格大于基线 1 的方法，当前方法除外；结果可能少于 n 个。
        """

        with self._lock:
            self.reset_weights()
            self.decay_history(self.history_decay, num_spread_nodes)
            self.spread_activation(self.spread_decay, num_spread_nodes)
            if visited is None:
                visited = self.navigation.get_distinct_visited()
            return select_balanced_top_n(
                self.method_scores(),
                visited,
                n,
                exclude=current_key,
                threshold=BASELINE_WEIGHT,
            )

    def word_nodes(self) -> List[Node]:
        return self.word_list.nodes()

    def method_nodes(self) -> List[Node]:
        return self.method_list.nodes()

    def history_nodes(self) -> List[Node]:
        return self.history_list.nodes()

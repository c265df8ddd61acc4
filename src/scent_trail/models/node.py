"""扩散激活图的节点与分区列表。"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterator, List


class NodeKind(str, Enum):
    """节点类型。

    WORD: 词节点，名字是词本身
    METHOD: 方法节点，名字是方法键（历史节点也记作 METHOD）
    """

    WORD = "WORD"
    METHOD = "METHOD"


class Node:
    """图节点：名字、类型、权重与有序去重的子节点。

    子节点按名字去重：重复添加时返回已有引用，不会产生重复边。
    """

    __slots__ = ("name", "kind", "weight", "_children")

    def __init__(self, name: str, kind: NodeKind, weight: float = 0.0) -> None:
        self.name = name
        self.kind = kind
        self.weight = weight
        self._children: Dict[str, Node] = {}

    def add_child(self, node: Node) -> Node:
        existing = self._children.get(node.name)
        if existing is not None:
            return existing
        self._children[node.name] = node
        return node

    @property
    def children(self) -> List[Node]:
        return list(self._children.values())

    def iter_children(self) -> Iterator[Node]:
        return iter(self._children.values())

    def decay(self, factor: float) -> None:
        self.weight = factor * self.weight

    def receive(self, incoming_weight: float, decay: float) -> None:
        """扩散规则：累加而非赋值，多次接触会叠加。"""

        self.weight = self.weight + incoming_weight * decay

    def __repr__(self) -> str:
        return f"Node({self.kind.value}, {self.name!r}, {self.weight})"


class NodeList:
    """按插入顺序保存的节点分区。

    unique=True 时按名字去重（词表、方法表）；历史表允许同名节点重复出现。
    名字 → 下标的映射保证 O(1) 查找。
    """

    def __init__(self, kind: NodeKind, unique: bool = True) -> None:
        self.kind = kind
        self.unique = unique
        self._nodes: List[Node] = []
        self._index: Dict[str, int] = {}

    def add(self, name: str) -> Node:
        if self.unique:
            position = self._index.get(name)
            if position is not None:
                return self._nodes[position]
        node = Node(name, self.kind)
        self._index[name] = len(self._nodes)
        self._nodes.append(node)
        return node

    def get(self, name: str) -> Node | None:
        """按名字查找；历史表中返回最近一次出现的节点。"""

        position = self._index.get(name)
        if position is None:
            return None
        return self._nodes[position]

    def reset_weights(self, value: float = 1.0) -> None:
        for node in self._nodes:
            node.weight = value

    def clear(self) -> None:
        self._nodes.clear()
        self._index.clear()

    def nodes(self) -> List[Node]:
        return list(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, name: object) -> bool:
        return name in self._index

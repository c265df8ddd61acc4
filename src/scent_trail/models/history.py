"""导航历史模型。"""

from __future__ import annotations

from typing import Dict, List, Set


class NavigationHistory:
    """按时间顺序记录访问过的方法键。

    说明：
    - 列表末尾是最近一次导航，下标 0 是最早的导航；
    - 与末尾相同的键不会重复追加（原地刷新不算一次导航）；
    - step 只随“真正的变化”递增，step → 列表位置单独记一张表；
    - 另维护一个去重集合，用于区分“看过/没看过”的推荐。
    """

    def __init__(self) -> None:
        self._keys: List[str] = []
        self._step_to_position: Dict[int, int] = {}
        self._distinct: Set[str] = set()
        self._step = 0

    def add_key(self, key: str) -> bool:
        """追加一次导航，返回是否真的追加。"""

        if self._keys and self._keys[-1] == key:
            return False
        self._step_to_position[self._step] = len(self._keys)
        self._step += 1
        self._keys.append(key)
        self._distinct.add(key)
        return True

    def get_key_at_step(self, step: int) -> str | None:
        """返回某一步的方法键；无历史或越界时返回 None。"""

        if self._step == 0 or step < 0 or step + 1 > self._step:
            return None
        return self._keys[self._step_to_position[step]]

    def get_most_recent_key(self) -> str | None:
        return self.get_key_at_step(self._step - 1)

    def get_all_keys(self) -> List[str]:
        return list(self._keys)

    def get_distinct_visited(self) -> Set[str]:
        return set(self._distinct)

    def contains(self, key: str) -> bool:
        return key in self._distinct

    def length(self) -> int:
        return len(self._keys)

    def is_empty(self) -> bool:
        return not self._keys

    def clear(self) -> None:
        """会话重置时清空全部历史。"""

        self._keys.clear()
        self._step_to_position.clear()
        self._distinct.clear()
        self._step = 0

    def __len__(self) -> int:
        return len(self._keys)

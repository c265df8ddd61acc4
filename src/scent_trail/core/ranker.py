"""兼顾“看过/没看过”的前 N 名选取。"""

from __future__ import annotations

from typing import AbstractSet, List, Sequence, Tuple


def slot_counts(num_distinct_visited: int, n: int) -> Tuple[int, int]:
    """返回 (看过的名额, 没看过的名额)。

    目标是一半对一半；当前方法本身也在“看过”集合里，所以减一。
    看过的方法不够半数时，剩余名额全部让给没看过的方法；
    新会话（集合为空）自然退化为全部推荐没看过的方法。
    """

    half = n // 2
    visited_slots = max(num_distinct_visited - 1, 0)
    if visited_slots <= half:
        return visited_slots, n - visited_slots
    return half, n - half


def select_balanced_top_n(
    candidates: Sequence[Tuple[str, float]],
    visited: AbstractSet[str],
    n: int,
    exclude: str | None = None,
    threshold: float = 0.0,
) -> List[str]:
    """从 (方法键, 分数) 候选中按分数挑出至多 n 个。

    每一轮扫描全部候选，取所属类别仍有名额的最高分者；
    最高分不超过 threshold 时提前结束。已选中的候选不会再被选。
    同分时先出现者胜出。
    """

    if n <= 0:
        return []
    visited_left, unvisited_left = slot_counts(len(visited), n)
    chosen: set[int] = set()
    picks: List[str] = []

    for _round in range(n):
        best_index = -1
        best_score = threshold
        best_visited = False
        for index, (key, score) in enumerate(candidates):
            if index in chosen or key == exclude or score <= best_score:
                continue
            is_visited = key in visited
            if (is_visited and visited_left > 0) or (not is_visited and unvisited_left > 0):
                best_index = index
                best_score = score
                best_visited = is_visited
        if best_index < 0:
            break
        chosen.add(best_index)
        picks.append(candidates[best_index][0])
        if best_visited:
            visited_left -= 1
        else:
            unvisited_left -= 1
    return picks

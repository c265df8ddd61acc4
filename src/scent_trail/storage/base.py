"""语料库存储的公共接口与派生查询。"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class MethodData:
    """方法的登记信息。"""

    key: str
    name: str
    path: str


def term_weight(count: int, total: int, num_methods: int, method_frequency: int) -> float:
    """TF-IDF 权重：(词次 / 方法总词数) × (方法总数 / 含该词的方法数)。

    不取对数，与既有快照保持一致；任何分母为 0 时记 0。
    """

    if total <= 0 or method_frequency <= 0:
        return 0.0
    return (count / total) * (num_methods / method_frequency)


class CorpusStore(ABC):
    """方法 ⇄ 词统计的存储。

    查不到的键一律返回空值（None、空列表、空字典），不抛异常；
    只有存储本身不可用时才抛 CorpusStoreError。
    """

    # ---- 写入（预加载阶段） ----

    @abstractmethod
    def add_method(self, key: str, name: str = "", path: str = "") -> None:
        """登记方法；重复的键忽略。"""

    @abstractmethod
    def add_word(self, method_key: str, word: str) -> None:
        """记一次词出现（小写化），未登记的方法忽略。"""

    @abstractmethod
    def clear(self) -> None:
        """清空全部数据。"""

    # ---- 基本查询 ----

    @abstractmethod
    def method_id(self, key: str) -> int | None: ...

    @abstractmethod
    def method_data(self, key: str) -> MethodData | None: ...

    @abstractmethod
    def word_counts(self, method_key: str) -> Dict[str, int]:
        """某方法的 词 → 出现次数，按词登记顺序。"""

    @abstractmethod
    def methods_containing_word(self, word: str) -> List[str]: ...

    @abstractmethod
    def all_words_and_ids(self) -> List[Tuple[int, str]]: ...

    @abstractmethod
    def all_methods_and_keys(self) -> List[Tuple[int, str]]: ...

    @abstractmethod
    def term_count(self, method_id: int, word_id: int) -> int: ...

    @abstractmethod
    def method_count(self) -> int:
        """IDF 分子：方法总数。"""

    @abstractmethod
    def method_frequency(self, word: str) -> int:
        """IDF 分母：包含该词的方法数。"""

    @abstractmethod
    def num_words(self) -> int: ...

    # ---- 派生查询 ----

    def words_of_method(self, method_key: str) -> List[str]:
        return list(self.word_counts(method_key))

    def total_terms(self, method_key: str) -> int:
        """TF 分母：方法内全部词出现次数之和。"""

        return sum(self.word_counts(method_key).values())

    def weight_vector(self, method_key: str) -> Dict[str, float]:
        """某方法的稀疏 词 → TF-IDF 权重向量。"""

        counts = self.word_counts(method_key)
        if not counts:
            return {}
        total = sum(counts.values())
        num_methods = self.method_count()
        return {
            word: term_weight(count, total, num_methods, self.method_frequency(word))
            for word, count in counts.items()
        }

    def top_words_for(
        self,
        method_key: str,
        other_key: str | None = None,
        limit: int = 8,
    ) -> List[str]:
        """为推荐挑选提示词，按相关度降序。

        - 只给一个方法：取它自己 TF-IDF 权重最高的词；
        - 给两个方法：只取二者共有的词，按权重乘积排序，
          用来说明“为什么从当前位置推荐到这里”。
        同分时保持词的登记顺序（sorted 是稳定排序）。
        """

        if limit <= 0:
            return []
        weights = self.weight_vector(method_key)
        if other_key is None:
            scored = list(weights.items())
        else:
            other = self.weight_vector(other_key)
            scored = [(word, value * other[word]) for word, value in weights.items() if word in other]
        scored.sort(key=lambda item: -item[1])
        return [word for word, _score in scored[:limit]]

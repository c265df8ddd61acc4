"""内存级语料库存储实现。"""

from __future__ import annotations

from typing import Dict, List, Tuple

from .base import CorpusStore, MethodData


class InMemoryCorpusStore(CorpusStore):
    """简单内存存储：方法表、词表、词频表三套结构。"""

    def __init__(self) -> None:
        self.methods: Dict[str, MethodData] = {}
        self.method_ids: Dict[str, int] = {}
        self.word_ids: Dict[str, int] = {}
        # method_key → {word: count}
        self.counts: Dict[str, Dict[str, int]] = {}
        # word → [method_key]，按首次出现顺序
        self.word_methods: Dict[str, List[str]] = {}

    def add_method(self, key: str, name: str = "", path: str = "") -> None:
        if key in self.methods:
            return
        self.methods[key] = MethodData(key=key, name=name, path=path)
        self.method_ids[key] = len(self.method_ids) + 1
        self.counts[key] = {}

    def add_word(self, method_key: str, word: str) -> None:
        word = word.lower()
        counts = self.counts.get(method_key)
        if counts is None or not word:
            return
        if word not in self.word_ids:
            self.word_ids[word] = len(self.word_ids) + 1
        if word not in counts:
            counts[word] = 0
            self.word_methods.setdefault(word, []).append(method_key)
        counts[word] += 1

    def clear(self) -> None:
        self.methods.clear()
        self.method_ids.clear()
        self.word_ids.clear()
        self.counts.clear()
        self.word_methods.clear()

    def method_id(self, key: str) -> int | None:
        return self.method_ids.get(key)

    def method_data(self, key: str) -> MethodData | None:
        return self.methods.get(key)

    def word_counts(self, method_key: str) -> Dict[str, int]:
        counts = self.counts.get(method_key, {})
        return {word: counts[word] for word in sorted(counts, key=self.word_ids.__getitem__)}

    def methods_containing_word(self, word: str) -> List[str]:
        keys = self.word_methods.get(word.lower(), [])
        return sorted(keys, key=self.method_ids.__getitem__)

    def all_words_and_ids(self) -> List[Tuple[int, str]]:
        return [(word_id, word) for word, word_id in self.word_ids.items()]

    def all_methods_and_keys(self) -> List[Tuple[int, str]]:
        return [(method_id, key) for key, method_id in self.method_ids.items()]

    def term_count(self, method_id: int, word_id: int) -> int:
        key = next((k for k, value in self.method_ids.items() if value == method_id), None)
        word = next((w for w, value in self.word_ids.items() if value == word_id), None)
        if key is None or word is None:
            return 0
        return self.counts[key].get(word, 0)

    def method_count(self) -> int:
        return len(self.methods)

    def method_frequency(self, word: str) -> int:
        return len(self.word_methods.get(word.lower(), []))

    def num_words(self) -> int:
        return len(self.word_ids)

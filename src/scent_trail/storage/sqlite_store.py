"""SQLite 持久化语料库存储实现。"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Tuple

from ..errors import CorpusStoreError
from .base import CorpusStore, MethodData, term_weight


class SQLiteCorpusStore(CorpusStore):
    """使用 SQLite 持久化：方法表、词表、词频表分表保存。

    每次调用单独开连接，工作线程与预加载线程可以并发读。
    """

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as exc:
            raise CorpusStoreError(f"{self.db_path}: {exc}") from exc
        try:
            with conn:
                yield conn
        except sqlite3.Error as exc:
            raise CorpusStoreError(f"{self.db_path}: {exc}") from exc
        finally:
            conn.close()

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS methods (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    method_key TEXT NOT NULL UNIQUE,
                    name TEXT NOT NULL,
                    path TEXT NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS words (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    word TEXT NOT NULL UNIQUE
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS word_counts (
                    method_id INTEGER NOT NULL REFERENCES methods(id),
                    word_id INTEGER NOT NULL REFERENCES words(id),
                    word_count INTEGER NOT NULL,
                    PRIMARY KEY (method_id, word_id)
                )
                """
            )
            conn.execute("CREATE INDEX IF NOT EXISTS word_counts_by_word ON word_counts(word_id)")

    def add_method(self, key: str, name: str = "", path: str = "") -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT OR IGNORE INTO methods (method_key, name, path) VALUES (?, ?, ?)",
                (key, name, path),
            )

    def add_word(self, method_key: str, word: str) -> None:
        word = word.lower()
        if not word:
            return
        with self._connect() as conn:
            row = conn.execute("SELECT id FROM methods WHERE method_key = ?", (method_key,)).fetchone()
            if row is None:
                return
            method_id = row[0]
            conn.execute("INSERT OR IGNORE INTO words (word) VALUES (?)", (word,))
            word_id = conn.execute("SELECT id FROM words WHERE word = ?", (word,)).fetchone()[0]
            conn.execute(
                """
                INSERT INTO word_counts (method_id, word_id, word_count) VALUES (?, ?, 1)
                ON CONFLICT (method_id, word_id) DO UPDATE SET word_count = word_count + 1
                """,
                (method_id, word_id),
            )

    def clear(self) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM word_counts")
            conn.execute("DELETE FROM words")
            conn.execute("DELETE FROM methods")

    def method_id(self, key: str) -> int | None:
        with self._connect() as conn:
            row = conn.execute("SELECT id FROM methods WHERE method_key = ?", (key,)).fetchone()
        return row[0] if row else None

    def method_data(self, key: str) -> MethodData | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT method_key, name, path FROM methods WHERE method_key = ?", (key,)
            ).fetchone()
        if row is None:
            return None
        return MethodData(key=row[0], name=row[1], path=row[2])

    def word_counts(self, method_key: str) -> Dict[str, int]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT w.word, wc.word_count
                FROM word_counts wc
                JOIN methods m ON m.id = wc.method_id
                JOIN words w ON w.id = wc.word_id
                WHERE m.method_key = ?
                ORDER BY w.id
                """,
                (method_key,),
            ).fetchall()
        return {word: count for word, count in rows}

    def methods_containing_word(self, word: str) -> List[str]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT m.method_key
                FROM word_counts wc
                JOIN methods m ON m.id = wc.method_id
                JOIN words w ON w.id = wc.word_id
                WHERE w.word = ?
                ORDER BY m.id
                """,
                (word.lower(),),
            ).fetchall()
        return [row[0] for row in rows]

    def all_words_and_ids(self) -> List[Tuple[int, str]]:
        with self._connect() as conn:
            return [(row[0], row[1]) for row in conn.execute("SELECT id, word FROM words ORDER BY id")]

    def all_methods_and_keys(self) -> List[Tuple[int, str]]:
        with self._connect() as conn:
            return [
                (row[0], row[1]) for row in conn.execute("SELECT id, method_key FROM methods ORDER BY id")
            ]

    def term_count(self, method_id: int, word_id: int) -> int:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT word_count FROM word_counts WHERE method_id = ? AND word_id = ?",
                (method_id, word_id),
            ).fetchone()
        return row[0] if row else 0

    def method_count(self) -> int:
        with self._connect() as conn:
            return conn.execute("SELECT COUNT(*) FROM methods").fetchone()[0]

    def method_frequency(self, word: str) -> int:
        with self._connect() as conn:
            return conn.execute(
                """
                SELECT COUNT(*) FROM word_counts wc
                JOIN words w ON w.id = wc.word_id
                WHERE w.word = ?
                """,
                (word.lower(),),
            ).fetchone()[0]

    def num_words(self) -> int:
        with self._connect() as conn:
            return conn.execute("SELECT COUNT(*) FROM words").fetchone()[0]

    def weight_vector(self, method_key: str) -> Dict[str, float]:
        """一次查询取回词次与文档频率，避免逐词往返。"""

        with self._connect() as conn:
            num_methods = conn.execute("SELECT COUNT(*) FROM methods").fetchone()[0]
            rows = conn.execute(
                """
                SELECT w.word, wc.word_count,
                       (SELECT COUNT(*) FROM word_counts d WHERE d.word_id = wc.word_id)
                FROM word_counts wc
                JOIN methods m ON m.id = wc.method_id
                JOIN words w ON w.id = wc.word_id
                WHERE m.method_key = ?
                ORDER BY w.id
                """,
                (method_key,),
            ).fetchall()
        total = sum(row[1] for row in rows)
        return {word: term_weight(count, total, num_methods, df) for word, count, df in rows}

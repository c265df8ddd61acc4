"""模型构建与快照读写任务。

每个任务都是一次性的：成功或失败都返回 JobResult，不重试、不向上抛。
失败时目标模型被重置为空，不会留下构建到一半的图或矩阵。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Tuple

from ..errors import CorpusStoreError, SnapshotError
from ..models.history import NavigationHistory
from ..storage.base import CorpusStore
from ..storage.snapshots import (
    read_graph_snapshot,
    read_matrix_snapshot,
    write_graph_snapshot,
    write_matrix_snapshot,
)
from .activation_graph import ActivationGraph
from .similarity_matrix import SimilarityMatrix
from .tfidf import build_cosine_matrix, build_weight_vectors

logger = logging.getLogger(__name__)

JOB_ERRORS = (OSError, SnapshotError, CorpusStoreError)


@dataclass
class JobResult:
    """任务结果：ok 为 False 时 message 是给人看的失败原因。"""

    ok: bool
    message: str = ""

    def __bool__(self) -> bool:
        return self.ok


def history_entries(
    store: CorpusStore | None, navigation: NavigationHistory
) -> List[Tuple[str, List[str]]]:
    """把导航历史展开成 (方法键, 词列表)，用于重建图的历史表。"""

    entries: List[Tuple[str, List[str]]] = []
    for key in navigation.get_all_keys():
        words = store.words_of_method(key) if store is not None else []
        entries.append((key, words))
    return entries


def _populate_graph(graph: ActivationGraph, links: Sequence[Tuple[str, Sequence[str]]]) -> None:
    for word, method_keys in links:
        graph.add_word_node(word)
        for method_key in method_keys:
            graph.link(word, method_key)


def create_activation_graph(store: CorpusStore, graph: ActivationGraph) -> JobResult:
    """从语料库重建整张图：每个词连到包含它的所有方法，再补上历史。"""

    with graph.lock:
        try:
            links = [
                (word, store.methods_containing_word(word))
                for _word_id, word in store.all_words_and_ids()
            ]
            entries = history_entries(store, graph.navigation)
        except JOB_ERRORS as exc:
            graph.reset()
            logger.error("Failed to create activation graph: %s", exc)
            return JobResult(False, f"创建扩散激活图失败：{exc}")
        graph.reset()
        _populate_graph(graph, links)
        graph.set_history(entries)
    logger.info(
        "Created activation graph with %d words and %d methods",
        len(graph.word_list),
        len(graph.method_list),
    )
    return JobResult(True, f"已创建扩散激活图：{len(graph.word_list)} 个词节点")


def create_similarity_matrix(store: CorpusStore, matrix: SimilarityMatrix) -> JobResult:
    try:
        method_index, vectors = build_weight_vectors(store)
    except JOB_ERRORS as exc:
        matrix.reset()
        logger.error("Failed to create similarity matrix: %s", exc)
        return JobResult(False, f"创建相似度矩阵失败：{exc}")
    cosine = build_cosine_matrix(vectors)
    matrix.load(method_index, cosine)
    return JobResult(True, f"已创建相似度矩阵：{len(method_index)} 个方法")


def load_graph_snapshot_job(
    path: str | Path, graph: ActivationGraph, store: CorpusStore | None = None
) -> JobResult:
    """读取图快照；历史表按当前导航历史重新生成。"""

    with graph.lock:
        try:
            links = read_graph_snapshot(path)
            entries = history_entries(store, graph.navigation)
        except JOB_ERRORS as exc:
            graph.reset()
            logger.error("Failed to load graph snapshot %s: %s", path, exc)
            return JobResult(False, f"读取图快照失败：{exc}")
        graph.reset()
        _populate_graph(graph, links)
        graph.set_history(entries)
    logger.info("Loaded graph snapshot %s (%d words)", path, len(links))
    return JobResult(True, f"已读取图快照：{len(links)} 个词节点")


def save_graph_snapshot_job(path: str | Path, graph: ActivationGraph) -> JobResult:
    with graph.lock:
        word_nodes = graph.word_nodes()
        try:
            write_graph_snapshot(path, word_nodes)
        except OSError as exc:
            logger.error("Failed to save graph snapshot %s: %s", path, exc)
            return JobResult(False, f"保存图快照失败：{exc}")
    logger.info("Saved graph snapshot %s (%d words)", path, len(word_nodes))
    return JobResult(True, f"已保存图快照：{path}")


def load_matrix_snapshot_job(path: str | Path, matrix: SimilarityMatrix) -> JobResult:
    try:
        method_index, cosine = read_matrix_snapshot(path)
    except JOB_ERRORS as exc:
        matrix.reset()
        logger.error("Failed to load matrix snapshot %s: %s", path, exc)
        return JobResult(False, f"读取矩阵快照失败：{exc}")
    matrix.load(method_index, cosine)
    logger.info("Loaded matrix snapshot %s (%d methods)", path, len(method_index))
    return JobResult(True, f"已读取矩阵快照：{len(method_index)} 个方法")


def save_matrix_snapshot_job(path: str | Path, matrix: SimilarityMatrix) -> JobResult:
    try:
        write_matrix_snapshot(path, matrix.method_index, matrix.cosine)
    except OSError as exc:
        logger.error("Failed to save matrix snapshot %s: %s", path, exc)
        return JobResult(False, f"保存矩阵快照失败：{exc}")
    logger.info("Saved matrix snapshot %s (%d methods)", path, matrix.size)
    return JobResult(True, f"已保存矩阵快照：{path}")

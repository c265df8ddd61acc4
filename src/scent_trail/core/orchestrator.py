"""推荐编排：导航事件 → 历史 → 模型排序 → 提示词 → 发布。"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import AbstractSet, Callable, Dict, List

from ..config import ModelType, RecommenderConfig
from ..errors import CorpusStoreError
from ..event_log import EventLogger, configure_error_log, release_error_log
from ..models.history import NavigationHistory
from ..models.recommendation import PinnedMethods, RecommendationResult
from ..storage import create_store
from ..storage.base import CorpusStore
from .activation_graph import ActivationGraph
from .jobs import (
    JobResult,
    create_activation_graph,
    create_similarity_matrix,
    history_entries,
    load_graph_snapshot_job,
    load_matrix_snapshot_job,
    save_graph_snapshot_job,
    save_matrix_snapshot_job,
)
from .playback import LogPlayback
from .similarity_matrix import SimilarityMatrix

logger = logging.getLogger(__name__)


def safe_words_of_method(store: CorpusStore, key: str) -> List[str]:
    try:
        return store.words_of_method(key)
    except CorpusStoreError as exc:
        logger.warning("Word lookup for %s failed: %s", key, exc)
        return []


class RecommendationModel:
    """两种模型的公共能力：记录导航、排序、给出提示词。"""

    model_type: ModelType

    def __init__(self, store: CorpusStore) -> None:
        self.store = store

    def add_event(self, key: str) -> None:
        """新的一步导航；默认不需要做任何事。"""

    def reseed(self, navigation: NavigationHistory) -> None:
        """模型切换回来时，按导航历史补齐模型内部的历史。"""

    def is_ready(self) -> bool:
        raise NotImplementedError

    def top_n(
        self, current_key: str, n: int, window: int, visited: AbstractSet[str]
    ) -> List[str]:
        raise NotImplementedError

    def cue_words(self, current_key: str, rec_key: str, limit: int) -> List[str]:
        """先取两处共有的词；没有共有词时退回推荐目标自身的高权重词。"""

        try:
            words = self.store.top_words_for(rec_key, current_key, limit)
            if not words:
                words = self.store.top_words_for(rec_key, None, limit)
        except CorpusStoreError as exc:
            logger.warning("Cue lookup for %s failed: %s", rec_key, exc)
            return []
        return words


class GraphRecommendationModel(RecommendationModel):
    model_type = ModelType.PFIS

    def __init__(self, store: CorpusStore, graph: ActivationGraph) -> None:
        super().__init__(store)
        self.graph = graph

    def add_event(self, key: str) -> None:
        self.graph.add_to_history(key, safe_words_of_method(self.store, key))

    def reseed(self, navigation: NavigationHistory) -> None:
        try:
            entries = history_entries(self.store, navigation)
        except CorpusStoreError as exc:
            logger.warning("Could not rebuild graph history: %s", exc)
            entries = [(key, []) for key in navigation.get_all_keys()]
        self.graph.set_history(entries)

    def is_ready(self) -> bool:
        return not self.graph.is_empty()

    def top_n(
        self, current_key: str, n: int, window: int, visited: AbstractSet[str]
    ) -> List[str]:
        return self.graph.get_top_n_recommendations(current_key, n, window, visited)


class MatrixRecommendationModel(RecommendationModel):
    """矩阵模型直接读导航历史，add_event 无需处理。"""

    model_type = ModelType.TFIDF

    def __init__(self, store: CorpusStore, matrix: SimilarityMatrix) -> None:
        super().__init__(store)
        self.matrix = matrix

    def is_ready(self) -> bool:
        return not self.matrix.is_empty()

    def top_n(
        self, current_key: str, n: int, window: int, visited: AbstractSet[str]
    ) -> List[str]:
        return self.matrix.get_top_n_recommendations(current_key, n, window, visited)


@dataclass
class NavigationEvent:
    key: str
    offset: int | None = None
    filename: str | None = None


_STOP = object()


class RankingWorker:
    """单线程排序队列。

    每次醒来把队列里积压的事件一次取完交给 process：
    所有事件都要更新历史，但只有最新的一个需要排序并发布。
    """

    def __init__(
        self,
        process: Callable[[List[NavigationEvent]], None],
        name: str = "ranking-worker",
    ) -> None:
        self._process = process
        self._queue: queue.Queue = queue.Queue()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    def start(self) -> None:
        self._thread.start()

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def submit(self, event: NavigationEvent) -> None:
        self._queue.put(event)

    def wait_idle(self) -> None:
        """阻塞到已提交的事件全部处理完。"""

        self._queue.join()

    def stop(self, timeout: float | None = 5.0) -> None:
        if not self._thread.is_alive():
            return
        self._queue.put(_STOP)
        self._thread.join(timeout)

    def _drain(self) -> List[object]:
        items = [self._queue.get()]
        while True:
            try:
                items.append(self._queue.get_nowait())
            except queue.Empty:
                return items

    def _run(self) -> None:
        running = True
        while running:
            items = self._drain()
            events: List[NavigationEvent] = []
            for item in items:
                if item is _STOP:
                    running = False
                    break
                events.append(item)
            try:
                if events:
                    self._process(events)
            except Exception:
                logger.exception("Ranking pass for %s failed", events[-1].key)
            finally:
                for _item in items:
                    self._queue.task_done()


class UpdateOrchestrator:
    """持有导航历史、两种模型、语料库与事件日志的唯一实例。

    一次完整更新（改历史 → 模型计算 → 平衡选取 → 发布）在同一把锁内完成；
    模型的创建、加载、重置也走这把锁，不会与进行中的排序交错。
    """

    def __init__(
        self,
        config: RecommenderConfig | None = None,
        store: CorpusStore | None = None,
        history: NavigationHistory | None = None,
        graph: ActivationGraph | None = None,
        matrix: SimilarityMatrix | None = None,
        event_log: EventLogger | None = None,
        on_update: Callable[[RecommendationResult], None] | None = None,
    ) -> None:
        self.config = config if config is not None else RecommenderConfig()
        self.store = store if store is not None else create_store(self.config)
        self.history = history if history is not None else NavigationHistory()
        self.graph = graph if graph is not None else ActivationGraph(
            self.history, self.config.history_decay, self.config.spread_decay
        )
        self.matrix = matrix if matrix is not None else SimilarityMatrix(
            self.history, self.config.history_decay
        )
        self.event_log = event_log if event_log is not None else EventLogger(self.config.event_log_path)
        self.on_update = on_update
        self.pinned = PinnedMethods()
        self._models: Dict[ModelType, RecommendationModel] = {
            ModelType.PFIS: GraphRecommendationModel(self.store, self.graph),
            ModelType.TFIDF: MatrixRecommendationModel(self.store, self.matrix),
        }
        self._lock = threading.RLock()
        self._worker_lock = threading.Lock()
        self._error_log = configure_error_log(self.config.error_log_path)
        self._current: RecommendationResult | None = None
        self._worker: RankingWorker | None = None

    # ---- 配置 ----

    @property
    def model_type(self) -> ModelType | None:
        return self.config.model_type

    def active_model(self) -> RecommendationModel | None:
        if self.config.model_type is None:
            return None
        return self._models[self.config.model_type]

    def set_model_type(self, model_type: ModelType | None) -> None:
        with self._lock:
            self.config.model_type = model_type
            if model_type is None:
                logger.warning("Model type cleared; ranking disabled until one is set")
                return
            self._models[model_type].reseed(self.history)
            self.event_log.model(model_type.value, self.config.history_enabled)

    def set_history_enabled(self, enabled: bool) -> None:
        with self._lock:
            self.config.history_enabled = enabled
            if self.config.model_type is not None:
                self.event_log.model(self.config.model_type.value, enabled)

    # ---- 导航 ----

    @property
    def current(self) -> RecommendationResult | None:
        return self._current

    def handle_navigation(
        self, key: str, offset: int | None = None, filename: str | None = None
    ) -> RecommendationResult | None:
        """同步完成一次更新，返回发布的结果；无法排序时返回 None。"""

        with self._lock:
            if not self._record(NavigationEvent(key, offset, filename)):
                return self._current
            return self._rank(key)

    def submit(self, key: str, offset: int | None = None, filename: str | None = None) -> None:
        """把导航交给后台排序线程，立即返回。"""

        with self._worker_lock:
            if self._worker is None or not self._worker.is_alive():
                self._worker = RankingWorker(self._process_batch)
                self._worker.start()
            self._worker.submit(NavigationEvent(key, offset, filename))

    def wait_idle(self) -> None:
        if self._worker is not None:
            self._worker.wait_idle()

    def _process_batch(self, events: List[NavigationEvent]) -> None:
        with self._lock:
            appended = [event for event in events if self._record(event)]
            if not appended:
                return
            if len(appended) > 1:
                logger.debug("Dropped %d superseded ranking passes", len(appended) - 1)
            self._rank(appended[-1].key)

    def _record(self, event: NavigationEvent) -> bool:
        """记录一次导航，返回是否真的进入了历史。

        停在同一个方法里只记 cursor，不记 current，也不触发排序。
        """

        if event.offset is not None and event.filename:
            self.event_log.cursor(event.offset, event.filename)
        if not self.history.add_key(event.key):
            return False
        self.event_log.current(event.key)
        model = self.active_model()
        if model is not None:
            model.add_event(event.key)
        return True

    def _rank(self, key: str) -> RecommendationResult | None:
        model = self.active_model()
        if model is None:
            logger.warning("No model type configured; not ranking for %s", key)
            return None
        if not model.is_ready():
            logger.warning("%s model is not built or loaded; not ranking for %s", model.model_type.value, key)
            return None

        keys = model.top_n(
            key,
            self.config.num_recommendations,
            self.config.window(),
            self.history.get_distinct_visited(),
        )
        cues: List[List[str]] = []
        for rec_key in keys:
            if self.config.words_enabled:
                cues.append(model.cue_words(key, rec_key, self.config.cue_word_limit))
            else:
                cues.append([])
        result = RecommendationResult(key, model.model_type, keys, cues)
        self._publish(result)
        return result

    def _publish(self, result: RecommendationResult) -> None:
        self._current = result
        for rank, (rec_key, words) in enumerate(result.pairs()):
            self.event_log.recommendation(rec_key, rank)
            if words:
                self.event_log.words(words)
        if self.on_update is not None:
            self.on_update(result)

    # ---- 模型任务 ----

    def create_model(self) -> JobResult:
        with self._lock:
            if self.config.model_type is ModelType.PFIS:
                return create_activation_graph(self.store, self.graph)
            if self.config.model_type is ModelType.TFIDF:
                return create_similarity_matrix(self.store, self.matrix)
            return JobResult(False, "未设置模型类型")

    def load_model(self, path: str | Path | None = None) -> JobResult:
        path = path or self.config.model_load_path
        with self._lock:
            if self.config.model_type is ModelType.PFIS:
                return load_graph_snapshot_job(path, self.graph, self.store)
            if self.config.model_type is ModelType.TFIDF:
                return load_matrix_snapshot_job(path, self.matrix)
            return JobResult(False, "未设置模型类型")

    def save_model(self, path: str | Path | None = None) -> JobResult:
        path = path or self.config.model_save_path
        with self._lock:
            if self.config.model_type is ModelType.PFIS:
                return save_graph_snapshot_job(path, self.graph)
            if self.config.model_type is ModelType.TFIDF:
                return save_matrix_snapshot_job(path, self.matrix)
            return JobResult(False, "未设置模型类型")

    def prepare_model(self) -> JobResult:
        """按配置决定从快照加载还是从语料库重建。"""

        if self.config.load_model_on_start:
            return self.load_model()
        return self.create_model()

    # ---- 会话 ----

    def reset_session(self) -> None:
        """清空导航历史、图的历史表、固定列表与当前结果；模型本身保留。"""

        with self._lock:
            self.history.clear()
            self.graph.set_history([])
            self.pinned = PinnedMethods()
            self._current = None

    def playback(self, sleep: Callable[[float], None] | None = None) -> LogPlayback:
        """按配置的间隔把日志里的导航重新送进后台排序。"""

        if sleep is None:
            return LogPlayback(self.submit, self.config.playback_interval)
        return LogPlayback(self.submit, self.config.playback_interval, sleep)

    def record_double_click(self, key: str) -> None:
        self.event_log.double_click(key)

    def pin(self, key: str, cues: List[str] | None = None) -> bool:
        if not self.pinned.add(key, cues):
            return False
        self.event_log.pinned(key)
        return True

    def unpin(self, key: str) -> bool:
        if not self.pinned.remove(key):
            return False
        self.event_log.deleted(key)
        return True

    def close(self) -> None:
        with self._worker_lock:
            if self._worker is not None:
                self._worker.stop()
                self._worker = None
        self.event_log.close()
        release_error_log(self._error_log)
        self._error_log = None

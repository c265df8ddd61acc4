"""事件日志回放：按固定节奏重演 current 导航。"""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Callable, Iterator

from ..event_log import EventKind

logger = logging.getLogger(__name__)


def iter_current_keys(path: str | Path) -> Iterator[str]:
    """逐行读取日志，产出每条 current 记录的方法键；空行与残缺行跳过。"""

    with Path(path).open("r", encoding="utf-8") as handle:
        for line in handle:
            tokens = line.rstrip("\r\n").split("\t")
            if len(tokens) < 3 or tokens[1] != EventKind.CURRENT.value or not tokens[2]:
                continue
            yield tokens[2]


class LogPlayback:
    """把日志里的导航交给 navigate 回调，不经过排序流程。"""

    def __init__(
        self,
        navigate: Callable[[str], None],
        interval: float = 5.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.navigate = navigate
        self.interval = interval
        self.sleep = sleep
        self._thread: threading.Thread | None = None

    def replay(self, path: str | Path) -> int:
        count = 0
        for key in iter_current_keys(path):
            self.navigate(key)
            count += 1
            self.sleep(self.interval)
        logger.info("Replayed %d navigations from %s", count, path)
        return count

    def _run(self, path: str | Path) -> None:
        try:
            self.replay(path)
        except OSError as exc:
            logger.error("Playback of %s failed: %s", path, exc)

    def start(self, path: str | Path) -> threading.Thread:
        self._thread = threading.Thread(target=self._run, args=(path,), name="log-playback", daemon=True)
        self._thread.start()
        return self._thread

"""事件日志与错误日志。

事件日志每行一条记录：``<时间戳>\\t<类型>\\t<字段>...``，只追加、UTF-8。
回放工具按第二列识别 ``current`` 记录，因此时间戳里不能出现制表符。
"""

from __future__ import annotations

import itertools
import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Iterable

PACKAGE_LOGGER = "scent_trail"
_logger_ids = itertools.count()


class EventKind(str, Enum):
    CURSOR = "cursor"
    CURRENT = "current"
    RECOMMENDATION = "rec"
    WORDS = "words"
    DOUBLE_CLICK = "doubleclick"
    PINNED = "pinned"
    DELETED = "deleted"
    MODEL = "model"


class EventFormatter(logging.Formatter):
    """时间戳格式：2024-01-31 09:15:02.417 +0800。"""

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        moment = datetime.fromtimestamp(record.created).astimezone()
        return f"{moment:%Y-%m-%d %H:%M:%S}.{int(record.msecs):03d} {moment:%z}"

    def format(self, record: logging.LogRecord) -> str:
        return f"{self.formatTime(record)}\t{record.getMessage()}"


class EventLogger:
    """面向用户行为的事件日志。

    path 为空时所有方法都是空操作，方便测试与无界面运行。
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = str(path) if path else ""
        self._handler: logging.Handler | None = None
        self._logger = logging.getLogger(f"{PACKAGE_LOGGER}.events.{next(_logger_ids)}")
        self._logger.propagate = False
        self._logger.setLevel(logging.INFO)
        if self.path:
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
            self._handler = logging.FileHandler(self.path, mode="a", encoding="utf-8")
            self._handler.setFormatter(EventFormatter())
            self._logger.addHandler(self._handler)

    @property
    def enabled(self) -> bool:
        return self._handler is not None

    def _write(self, tag: str, fields: Iterable[object]) -> None:
        if self._handler is None:
            return
        self._logger.info("\t".join([tag, *(str(value) for value in fields)]))

    def cursor(self, offset: int, filename: str) -> None:
        self._write(EventKind.CURSOR.value, (offset, filename))

    def current(self, method_key: str) -> None:
        self._write(EventKind.CURRENT.value, (method_key,))

    def recommendation(self, method_key: str, rank: int) -> None:
        self._write(f"{EventKind.RECOMMENDATION.value}{rank}", (method_key,))

    def words(self, words: Iterable[str]) -> None:
        self._write(EventKind.WORDS.value, words)

    def double_click(self, method_key: str) -> None:
        self._write(EventKind.DOUBLE_CLICK.value, (method_key,))

    def pinned(self, method_key: str) -> None:
        self._write(EventKind.PINNED.value, (method_key,))

    def deleted(self, method_key: str) -> None:
        self._write(EventKind.DELETED.value, (method_key,))

    def model(self, model_type: str, history_enabled: bool) -> None:
        self._write(EventKind.MODEL.value, (model_type, "hist" if history_enabled else "noHist"))

    def close(self) -> None:
        if self._handler is None:
            return
        self._logger.removeHandler(self._handler)
        self._handler.close()
        self._handler = None


def configure_error_log(path: str | Path | None) -> logging.Handler | None:
    """把包内 WARNING 及以上的日志追加写入错误日志文件。"""

    if not path:
        return None
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(str(path), mode="a", encoding="utf-8")
    handler.setLevel(logging.WARNING)
    handler.setFormatter(
        logging.Formatter("%(asctime)s\t%(levelname)s\t%(name)s\t%(message)s")
    )
    logging.getLogger(PACKAGE_LOGGER).addHandler(handler)
    return handler


def release_error_log(handler: logging.Handler | None) -> None:
    if handler is None:
        return
    logging.getLogger(PACKAGE_LOGGER).removeHandler(handler)
    handler.close()

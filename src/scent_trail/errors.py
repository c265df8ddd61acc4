"""异常类型。

约定：查不到数据不算错误（返回空值）；只有存储不可用、快照损坏这类
“持久化错误”才抛出，并在任务边界统一转成失败状态。
"""

from __future__ import annotations


class ScentTrailError(Exception):
    """本包所有异常的基类。"""


class CorpusStoreError(ScentTrailError):
    """语料库存储不可用或查询失败。"""


class SnapshotError(ScentTrailError):
    """模型快照缺失或格式损坏。"""

    def __init__(self, message: str, path: str | None = None, line_number: int | None = None) -> None:
        self.path = path
        self.line_number = line_number
        location = path or "<unknown>"
        if line_number is not None:
            location = f"{location}:{line_number}"
        super().__init__(f"{location}: {message}")

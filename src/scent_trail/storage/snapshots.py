"""模型快照的读写。

两种格式都是按行的纯文本（UTF-8），字段用制表符分隔：

图快照::

    <词节点数>
    WORD	<词>
    METHOD	<方法键>
    METHOD	<方法键>
    WORD	<词>
    ...

矩阵快照::

    <size>
    <方法键1>	<方法键2>	...
    <相似度>	<相似度>	...    （共 size 行，行优先）

历史节点不落盘；读取方全部解析完才返回，调用方据此再修改模型。
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence, Tuple

import numpy

from ..errors import SnapshotError
from ..models.node import Node

GraphEntries = List[Tuple[str, List[str]]]

WORD_TAG = "WORD"
METHOD_TAG = "METHOD"


def _format_float(value: float) -> str:
    """输出 float32 的最短表示：常规区间用定点，否则写成 1.0E-5 形式。

    10⁻³ ≤ |v| < 10⁷ 用定点（0.8、1.0），其余用科学计数（1.0E-5、1.2345E7）。
    """

    number = numpy.float32(value)
    if numpy.isnan(number):
        return "NaN"
    if numpy.isinf(number):
        return "-Infinity" if number < 0 else "Infinity"
    magnitude = abs(float(number))
    if magnitude == 0.0 or 1e-3 <= magnitude < 1e7:
        return numpy.format_float_positional(number, trim="0")
    mantissa, exponent = numpy.format_float_scientific(number, trim="0").split("e")
    return f"{mantissa}E{int(exponent)}"


def _read_lines(path: str | Path) -> List[str]:
    location = str(path)
    try:
        return Path(path).read_text(encoding="utf-8").splitlines()
    except FileNotFoundError as exc:
        raise SnapshotError("snapshot file not found", location) from exc
    except UnicodeDecodeError as exc:
        raise SnapshotError(f"snapshot is not valid UTF-8 text: {exc}", location) from exc


def write_graph_snapshot(path: str | Path, word_nodes: Sequence[Node]) -> None:
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with file_path.open("w", encoding="utf-8", newline="\n") as handle:
        handle.write(f"{len(word_nodes)}\n")
        for word_node in word_nodes:
            handle.write(f"{WORD_TAG}\t{word_node.name}\n")
            for method_node in word_node.iter_children():
                handle.write(f"{METHOD_TAG}\t{method_node.name}\n")


def read_graph_snapshot(path: str | Path) -> GraphEntries:
    """返回 [(词, [方法键, ...]), ...]，顺序与文件一致。

    兼容旧快照在名字后面多带的一列权重。
    """

    location = str(path)
    lines = _read_lines(path)
    if not lines:
        raise SnapshotError("empty snapshot", location, 1)
    try:
        expected = int(lines[0].strip())
    except ValueError as exc:
        raise SnapshotError(f"invalid word count {lines[0]!r}", location, 1) from exc

    entries: GraphEntries = []
    for line_number, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        fields = line.split("\t")
        if len(fields) < 2 or not fields[1]:
            raise SnapshotError(f"malformed line {line!r}", location, line_number)
        tag, name = fields[0], fields[1]
        if tag == WORD_TAG:
            entries.append((name, []))
        elif tag == METHOD_TAG:
            if not entries:
                raise SnapshotError("METHOD line before any WORD line", location, line_number)
            entries[-1][1].append(name)
        else:
            raise SnapshotError(f"unknown tag {tag!r}", location, line_number)

    if len(entries) != expected:
        raise SnapshotError(
            f"header declares {expected} words but {len(entries)} were read", location, 1
        )
    return entries


def write_matrix_snapshot(path: str | Path, method_index: Sequence[str], matrix: numpy.ndarray) -> None:
    size = len(method_index)
    if matrix.shape != (size, size):
        raise ValueError(f"matrix shape {matrix.shape} does not match index of {size} methods")
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with file_path.open("w", encoding="utf-8", newline="\n") as handle:
        handle.write(f"{size}\n")
        handle.write("\t".join(method_index) + "\n")
        for row in matrix:
            handle.write("\t".join(_format_float(value) for value in row) + "\n")


def read_matrix_snapshot(path: str | Path) -> Tuple[List[str], numpy.ndarray]:
    location = str(path)
    lines = _read_lines(path)
    if not lines:
        raise SnapshotError("empty snapshot", location, 1)
    try:
        size = int(lines[0].strip())
    except ValueError as exc:
        raise SnapshotError(f"invalid size {lines[0]!r}", location, 1) from exc
    if size < 0:
        raise SnapshotError(f"negative size {size}", location, 1)
    if size == 0:
        return [], numpy.zeros((0, 0), dtype=numpy.float32)

    if len(lines) < size + 2:
        raise SnapshotError(f"expected {size} matrix rows, file is truncated", location, len(lines))
    method_index = lines[1].split("\t")
    if len(method_index) != size:
        raise SnapshotError(
            f"index has {len(method_index)} keys, expected {size}", location, 2
        )

    matrix = numpy.zeros((size, size), dtype=numpy.float32)
    for row_number in range(size):
        line_number = row_number + 3
        values = lines[row_number + 2].split("\t")
        if len(values) != size:
            raise SnapshotError(f"row has {len(values)} values, expected {size}", location, line_number)
        try:
            matrix[row_number] = [float(value) for value in values]
        except ValueError as exc:
            raise SnapshotError(f"invalid float in row: {exc}", location, line_number) from exc
    return method_index, matrix

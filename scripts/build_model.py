"""从语料库构建推荐模型并保存快照。"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from scent_trail.config import ModelType, RecommenderConfig
from scent_trail.core.orchestrator import UpdateOrchestrator
from scent_trail.storage.loader import index_method


def _index_methods(orchestrator: UpdateOrchestrator, methods_path: Path) -> int:
    """methods_path 是 JSON 数组：[{"key", "name", "path", "text", "comments"}...]"""

    entries = json.loads(methods_path.read_text(encoding="utf-8"))
    total = 0
    for entry in entries:
        total += index_method(
            orchestrator.store,
            entry["key"],
            entry.get("name", ""),
            entry.get("path", ""),
            entry.get("text", ""),
            entry.get("comments", []),
        )
    return total


def main() -> None:
    parser = argparse.ArgumentParser(description="构建推荐模型快照")
    parser.add_argument("--db", required=True, help="SQLite 语料库路径")
    parser.add_argument("--model", default="PFIS", choices=[item.value for item in ModelType])
    parser.add_argument("--out", required=True, help="快照输出路径")
    parser.add_argument("--methods", help="可选：先把 JSON 中的方法文本写入语料库")
    parser.add_argument("--error-log", default="", help="错误日志路径")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    config = RecommenderConfig(
        model_type=ModelType(args.model),
        storage_path=args.db,
        event_log_path="",
        error_log_path=args.error_log,
        model_save_path=args.out,
    )
    orchestrator = UpdateOrchestrator(config)

    if args.methods:
        words = _index_methods(orchestrator, Path(args.methods))
        print(f"已写入语料库：{words} 个词次")

    result = orchestrator.create_model()
    print(result.message)
    if not result.ok:
        raise SystemExit(1)

    result = orchestrator.save_model()
    print(result.message)
    orchestrator.close()
    if not result.ok:
        raise SystemExit(1)


if __name__ == "__main__":
    main()

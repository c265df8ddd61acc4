"""依次导航到给定方法，输出最后一次的推荐结果。"""

from __future__ import annotations

import argparse

from scent_trail.config import ModelType, RecommenderConfig
from scent_trail.core.orchestrator import UpdateOrchestrator


def main() -> None:
    parser = argparse.ArgumentParser(description="导航推荐")
    parser.add_argument("keys", nargs="+", help="按时间顺序访问的方法键")
    parser.add_argument("--db", required=True, help="SQLite 语料库路径")
    parser.add_argument("--model", default="PFIS", choices=[item.value for item in ModelType])
    parser.add_argument("--snapshot", help="从快照加载模型；不给则从语料库构建")
    parser.add_argument("--count", type=int, default=10, help="推荐数量")
    parser.add_argument("--no-history", action="store_true", help="只看当前位置")
    parser.add_argument("--log", default="", help="事件日志路径")
    parser.add_argument("--error-log", default="", help="错误日志路径")
    args = parser.parse_args()

    config = RecommenderConfig(
        model_type=ModelType(args.model),
        history_enabled=not args.no_history,
        storage_path=args.db,
        event_log_path=args.log,
        error_log_path=args.error_log,
    )
    config.set_num_recommendations(args.count)
    if args.snapshot:
        config.model_load_path = args.snapshot
        config.load_model_on_start = True

    orchestrator = UpdateOrchestrator(config)
    prepared = orchestrator.prepare_model()
    if not prepared.ok:
        orchestrator.close()
        raise SystemExit(prepared.message)

    result = None
    for key in args.keys:
        result = orchestrator.handle_navigation(key)
    orchestrator.close()

    if result is None or not result.keys:
        print("没有可推荐的方法。")
        return

    print(f"当前位置：{result.current_key}（{result.model_type.value}）")
    for rank, (key, cues) in enumerate(result.pairs(), start=1):
        cue_text = ", ".join(cues) if cues else "无"
        print(f"{rank}. {key} (提示词: {cue_text})")


if __name__ == "__main__":
    main()

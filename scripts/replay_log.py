"""回放事件日志中的导航记录。"""

from __future__ import annotations

import argparse
from pathlib import Path

from scent_trail.config import RecommenderConfig, load_config
from scent_trail.core.playback import LogPlayback


def main() -> None:
    parser = argparse.ArgumentParser(description="事件日志回放")
    parser.add_argument("log", help="事件日志路径")
    parser.add_argument("--config", help="JSON 配置文件；回放间隔默认取其中的 playback_interval")
    parser.add_argument("--interval", type=float, help="两次导航之间的间隔（秒），覆盖配置")
    args = parser.parse_args()

    log_path = Path(args.log)
    if not log_path.exists():
        raise SystemExit(f"日志不存在：{log_path}")

    interval = args.interval
    if interval is None:
        config = load_config(args.config) if args.config else RecommenderConfig()
        interval = config.playback_interval
    playback = LogPlayback(lambda key: print(f"导航到：{key}"), interval=interval)
    count = playback.replay(log_path)
    print(f"共回放 {count} 次导航。")


if __name__ == "__main__":
    main()

"""全局配置与默认参数。"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parents[2] / "data"


class ModelType(str, Enum):
    """推荐模型类型。

    PFIS: 扩散激活图（History → Word → Method 三层）
    TFIDF: TF-IDF 余弦相似度矩阵
    """

    PFIS = "PFIS"
    TFIDF = "TFIDF"


@dataclass
class RecommenderConfig:
    """系统可调参数集合。

    注意：衰减系数 0.9 / 0.85 是固定策略，改动后排序结果将与既有日志不可比。
    """

    # 当前使用的模型；None 表示尚未配置，此时拒绝排序
    model_type: ModelType | None = ModelType.PFIS
    # 是否启用历史：启用时看最近 history_window 步，否则只看当前位置
    history_enabled: bool = True
    # 是否为每条推荐取提示词
    words_enabled: bool = True
    num_recommendations: int = 10
    history_window: int = 10
    # 提示词槽位上限
    cue_word_limit: int = 8
    # 历史节点衰减与扩散衰减
    history_decay: float = 0.9
    spread_decay: float = 0.85
    # 语料库存储后端：sqlite 或 memory
    storage_backend: str = "sqlite"
    storage_path: str = field(default_factory=lambda: str(DATA_DIR / "corpus.db"))
    # 事件日志与错误日志路径（空字符串表示不落盘）
    event_log_path: str = field(default_factory=lambda: str(DATA_DIR / "rs_logger.txt"))
    error_log_path: str = field(default_factory=lambda: str(DATA_DIR / "rs_errorLogger.txt"))
    # 模型快照读写路径
    model_load_path: str = field(default_factory=lambda: str(DATA_DIR / "rs_pfis.sav"))
    model_save_path: str = field(default_factory=lambda: str(DATA_DIR / "rs_pfis.sav"))
    # 启动时是否从快照加载模型（否则从语料库重建）
    load_model_on_start: bool = False
    # 日志回放节奏（秒）
    playback_interval: float = 5.0

    def window(self) -> int:
        """当前模式下参与计算的历史步数。"""

        return self.history_window if self.history_enabled else 1

    def set_num_recommendations(self, count: int) -> None:
        if count > 0:
            self.num_recommendations = count


def _parse_model_type(value: object) -> ModelType | None:
    if value is None:
        return None
    try:
        return ModelType(str(value).upper())
    except ValueError:
        logger.warning("Unknown model type %r in configuration; model left unset", value)
        return None


def load_config(path: str | Path) -> RecommenderConfig:
    """从 JSON 读取配置；文件不存在时返回默认值，未知字段忽略。"""

    file_path = Path(path)
    config = RecommenderConfig()
    if not file_path.exists():
        return config
    payload = json.loads(file_path.read_text(encoding="utf-8"))
    known = {item.name for item in fields(RecommenderConfig)}
    for key, value in payload.items():
        if key not in known:
            continue
        if key == "model_type":
            value = _parse_model_type(value)
        setattr(config, key, value)
    return config


def save_config(path: str | Path, config: RecommenderConfig) -> None:
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    payload = asdict(config)
    payload["model_type"] = config.model_type.value if config.model_type else None
    file_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")

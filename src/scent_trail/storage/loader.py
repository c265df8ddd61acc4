"""把方法文本灌入语料库。

解析源码、定位方法体不在这里做；调用方给出方法键和文本即可。
"""

from __future__ import annotations

import logging
from typing import Iterable

from ..core.text_utils import tokenize, tokenize_all
from .base import CorpusStore

logger = logging.getLogger(__name__)


def index_method(
    store: CorpusStore,
    key: str,
    name: str,
    path: str,
    text: str,
    comments: Iterable[str] = (),
) -> int:
    """登记一个方法并写入它的词，返回写入的词次数。"""

    store.add_method(key, name, path)
    words = tokenize(text) + tokenize_all(comments)
    for word in words:
        store.add_word(key, word)
    logger.debug("Indexed %s with %d words", key, len(words))
    return len(words)

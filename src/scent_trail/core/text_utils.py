"""标识符切分与停用词处理工具。"""

from __future__ import annotations

import re
from typing import Iterable, List

# 非字母数字一律视为分隔符（下划线、点号、括号、运算符等）。
SEPARATOR_PATTERN = re.compile(r"[^0-9A-Za-z]+")

# 驼峰边界：HTTPServer → HTTP Server，parseXml2Json → parse Xml 2 Json
CAMEL_PATTERN = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")

# 英文虚词 + 常见 Java 关键字，另加 "string" 与 "null"。
STOP_WORDS = frozenset(
    """
    a about above abstract across after afterwards again against all almost alone along
    already also although always am among amongst amount an and another any anyhow anyone
    anything anyway anywhere are around as assert at back be became because become becomes
    becoming been before beforehand behind being below beside besides between beyond both
    bottom boolean break but by byte call can cannot cant case catch char class co com con
    const continue could couldnt de default describe detail do done double down due during
    each eg eight either eleven else elsewhere empty enough enum etc even ever every
    everyone everything everywhere except extends false few fifteen fifty fill final
    finally find first five float for former formerly forty found four from front full
    further get give go goto had has hasnt have he hence her here hereafter hereby herein
    hereupon hers herself him himself his how however hundred ie if implements import in
    inc indeed instanceof int interest interface into is it its itself java keep lang last
    latter latterly least less long ltd made many may me meanwhile might mine more moreover
    most mostly move much must my myself name native neither never nevertheless new next
    nine no nobody none noone nor not nothing now nowhere null of off often on once one
    only onto or org other others otherwise our ours ourselves out over own package part
    per perhaps please private protected public put rather re return same see seem seemed
    seeming seems serious several she short should show side since sincere six sixty so
    some somehow someone something sometime sometimes somewhere static still strictfp
    string such super switch synchronized system take ten than that the their them
    themselves then thence there thereafter thereby therefore therein thereupon these they
    thick thin third this those though three through throughout throw throws thru thus to
    together too top toward towards transient true try twelve twenty two un under until
    up upon us very via void volatile was we well were what whatever when whence whenever
    where whereafter whereas whereby wherein whereupon wherever whether which while whither
    who whoever whole whom whose why will with within without would www yet you your yours
    yourself yourselves
    """.split()
)


def split_identifier(text: str) -> List[str]:
    """把标识符拆成词：驼峰、下划线、数字边界都算分隔。"""

    if not text:
        return []
    words: List[str] = []
    for chunk in SEPARATOR_PATTERN.split(text):
        if chunk:
            words.extend(CAMEL_PATTERN.findall(chunk))
    return words


def is_stop_word(word: str) -> bool:
    return word.strip().lower() in STOP_WORDS


def tokenize(text: str) -> List[str]:
    """源码/注释文本 → 小写词序列。

    规则：先按标识符拆分，再丢掉纯数字、单字符和停用词。
    保留重复出现的词，词频统计依赖它们。
    """

    tokens: List[str] = []
    for word in split_identifier(text):
        lowered = word.lower()
        if len(lowered) < 2 or lowered.isdigit():
            continue
        if lowered in STOP_WORDS:
            continue
        tokens.append(lowered)
    return tokens


def tokenize_all(texts: Iterable[str]) -> List[str]:
    tokens: List[str] = []
    for text in texts:
        tokens.extend(tokenize(text))
    return tokens

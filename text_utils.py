"""
Text helpers shared by the content synthesizer and the AI adapter:
bias filtering and JSON extraction from free-form model output.
"""
from __future__ import annotations

import re
from typing import NamedTuple, Optional

# 偏见过滤规则库 - applied in this order
BIAS_FILTER_RULES = (
    # 婚姻
    ("克夫", "婚姻中需要更多沟通理解"),
    ("旺夫", "能为伴侣带来正面影响"),
    ("命硬", "性格坚强独立"),
    ("不利婚姻", "在感情中需要更多耐心"),
    ("婚姻不顺", "感情路上可能遇到挑战"),
    # 性格
    ("性格刚烈", "性格坚定有主见"),
    ("不够温柔", "个性直率真诚"),
    ("太过强势", "领导能力强"),
    ("不适合做妻子", "更适合发展事业"),
    ("缺乏女性魅力", "有独特的个人魅力"),
    # 事业
    ("不宜抛头露面", "适合多元化发展"),
    ("应该在家相夫教子", "可以选择适合自己的生活方式"),
    ("女子无才便是德", "有很好的学习和发展潜力"),
    ("不适合从商", "具备商业头脑"),
    # 生育
    ("子息艰难", "在生育方面可能需要更多关注"),
    ("无子命", "可能更专注于其他人生目标"),
    ("不利生育", "在家庭规划上需要综合考虑"),
    # 消极词汇
    ("命运不好", "人生中会遇到一些挑战"),
    ("运势低迷", "目前处于蓄势待发的阶段"),
    ("诸事不顺", "需要更多耐心等待时机"),
    ("灾祸连连", "可能会遇到一些考验"),
    ("孤独终老", "享受独立自主的生活"),
    ("一生劳碌", "勤劳努力，收获满满"),
    ("贫穷潦倒", "在财务管理上需要更多规划"),
)

_COMPILED_RULES = tuple(
    (re.compile(re.escape(phrase), re.IGNORECASE), replacement)
    for phrase, replacement in BIAS_FILTER_RULES
)

_CODE_FENCE_OPEN_RE = re.compile(r'^```(?:json)?\s*', re.IGNORECASE)
_CODE_FENCE_CLOSE_RE = re.compile(r'\s*```$')


class FilterResult(NamedTuple):
    content: str
    was_modified: bool


def filter_content(text: str) -> FilterResult:
    """
    Replace regressive phrasing with neutral wording.
    Every rule is a global, case-insensitive literal substitution.
    """
    if not text:
        return FilterResult(text or "", False)

    was_modified = False
    for pattern, replacement in _COMPILED_RULES:
        # lambda keeps the replacement literal (no backslash expansion)
        text, count = pattern.subn(lambda _m, r=replacement: r, text)
        if count:
            was_modified = True
    return FilterResult(text, was_modified)


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` markdown fence if present."""
    if not text:
        return ""
    text = text.strip()
    text = _CODE_FENCE_OPEN_RE.sub('', text)
    text = _CODE_FENCE_CLOSE_RE.sub('', text)
    return text.strip()


def extract_json_object(text: str) -> Optional[str]:
    """
    Return the first balanced top-level {...} block in text, or None.
    Braces inside JSON string literals are ignored.
    """
    if not text:
        return None

    start = text.find('{')
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for pos in range(start, len(text)):
        ch = text[pos]
        if in_string:
            if escaped:
                escaped = False
            elif ch == '\\':
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == '{':
            depth += 1
        elif ch == '}':
            depth -= 1
            if depth == 0:
                return text[start:pos + 1]
    return None

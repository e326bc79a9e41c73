"""
文本变换：HTML 转义、长音符号替换、智能引号、上标数字
"""

import re

# 长音标记（已转义形式）→ 预组合长元音
# 转写中只有 eta、omega 需要长音符
MACRON_MAP = {"e&gt;": "ē", "o&gt;": "ō"}

SUPERSCRIPTS = str.maketrans("0123456789", "⁰¹²³⁴⁵⁶⁷⁸⁹")

_CONTRACTION_RE = re.compile(r"(\w)'(\w)")
_OPENING_SINGLE_RE = re.compile(r"(^|\s)'")


def escape_html(text):
    """转义 & < > "（正文与属性值通用）"""
    return (text.replace("&", "&amp;")
                .replace("<", "&lt;")
                .replace(">", "&gt;")
                .replace('"', "&quot;"))


def macronize(text):
    """
    长音标记替换：me&gt;nis → mēnis

    作用于已转义的文本，所以匹配的是 "e&gt;" 而不是 "e>"。
    """
    for marker, vowel in MACRON_MAP.items():
        text = text.replace(marker, vowel)
    return text


def smartquotes(text):
    """直引号 → 弯引号"""
    # 1. 词中撇号（缩略形式 word'word）
    text = _CONTRACTION_RE.sub("\\1\u2019\\2", text)
    # 2. 双引号按出现顺序交替开/合
    text = _toggle_double_quotes(text)
    # 3. 行首或空白后的单引号 → 左单引号
    text = _OPENING_SINGLE_RE.sub("\\1\u2018", text)
    # 4. 其余单引号 → 右单引号（所有格、闭合引号）
    return text.replace("'", "\u2019")


def _toggle_double_quotes(text):
    parts = text.split('"')
    out = [parts[0]]
    for i, segment in enumerate(parts[1:]):
        out.append("\u201C" if i % 2 == 0 else "\u201D")
        out.append(segment)
    return "".join(out)


def to_superscript(n):
    """12 → ¹²"""
    return str(n).translate(SUPERSCRIPTS)

"""
译文行记录（由外部的纯文本译文解析器产出，渲染器消费）
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field

# 注释类型
GLOSS = "gloss"
NOTE = "note"
VARIANT = "variant"
CROSS_REF = "cross-ref"
EDITORIAL = "editorial"

# 行内以上标数字标注、附弹出框的注释类型
MARKER_KINDS = (NOTE, VARIANT, EDITORIAL)

_LABEL_RE = re.compile(r"^\s*(\d+)(.*)$")


@dataclass
class Annotation:
    kind: str
    content: str = ""
    refs: list[str] = field(default_factory=list)


def line_sort_key(label) -> tuple[int, str]:
    """
    行号排序键：整数升序，再按后缀字典序，无后缀排在任何后缀之前。
    "40a" → (40, "a")，"302 v.l." → (302, " v.l.")；不含数字的标签排在最后。
    """
    m = _LABEL_RE.match(str(label))
    if not m:
        return (sys.maxsize, str(label))
    return (int(m.group(1)), m.group(2))


@dataclass
class Line:
    number: str
    text: str
    annotations: list[Annotation] = field(default_factory=list)
    sort_key: tuple[int, str] | None = None

    def __post_init__(self):
        if self.sort_key is None:
            self.sort_key = line_sort_key(self.number)

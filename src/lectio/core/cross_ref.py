"""
交叉引用解析与链接生成

两种记法并存，不可混用：
- 前缀记法 "I-1.372"：前缀可配置（默认 "I"），在字符串任意位置匹配
- 裸记法   "1.372"  ：用于已限定作品的引用列表，整串锚定匹配

解析失败一律返回 None / "#" / 原字符串，不抛异常 —
失效的引用不能导致页面渲染失败。
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from lectio import config

log = logging.getLogger(__name__)

BARE_REF_PATTERN = re.compile(r"(\d+)\.(\d+[a-z]?)", re.ASCII)


@dataclass(frozen=True)
class CrossReference:
    work_slug: str
    book: int
    line: str


def line_id(book, line) -> str:
    """行锚点 id，如 line-1-372"""
    return f"line-{book}-{line}"


class CrossRefResolver:
    def __init__(self, prefix: str | None = None, default_slug: str | None = None):
        self.prefix = prefix if prefix is not None else config.CROSS_REF_PREFIX
        self.default_slug = default_slug or config.CROSS_REF_DEFAULT_SLUG
        self._prefixed = re.compile(rf"{re.escape(self.prefix)}-(\d+)\.(\d+[a-z]?)", re.ASCII)

    def parse(self, text: str) -> CrossReference | None:
        """解析前缀记法，如 "I-1.372" → CrossReference(book=1, line="372")"""
        m = self._prefixed.search(text)
        if not m:
            return None
        return CrossReference(self.default_slug, int(m.group(1)), m.group(2))

    def parse_bare(self, text: str) -> CrossReference | None:
        """解析裸记法 "3.45a"，必须整串匹配"""
        m = BARE_REF_PATTERN.fullmatch(text)
        if not m:
            return None
        return CrossReference(self.default_slug, int(m.group(1)), m.group(2))

    def href_for(self, ref, slug: str | None = None) -> str:
        """
        生成引用链接：/passages/<slug>/<book>.html#line-<book>-<line>

        ref 可以是 CrossReference、(book, line) 元组，或前缀记法字符串；
        字符串无法解析时返回 "#"。
        """
        if isinstance(ref, str):
            parsed = self.parse(ref)
            if parsed is None:
                log.debug(f"无法解析的交叉引用: {ref!r}")
                return "#"
            ref = parsed

        if isinstance(ref, CrossReference):
            book, line = ref.book, ref.line
            slug = slug or ref.work_slug
        else:
            book, line = ref

        slug = slug or self.default_slug
        return f"/passages/{slug}/{book}.html#{line_id(book, line)}"

    def anchor_id(self, book, line) -> str:
        return line_id(book, line)

    def render_link(self, text: str) -> str:
        """把 "book.line" 渲染为链接；不匹配时原样返回"""
        ref = self.parse_bare(text)
        if ref is None:
            return text
        href = self.href_for(ref)
        return f'<a href="{href}" class="cross-ref">{text}</a>'

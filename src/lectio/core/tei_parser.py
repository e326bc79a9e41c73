"""
TEI XML 结构解析器（事件驱动，单遍）

通过 lxml 的 parser target 接口接收 start / end / data 事件，
不构建 DOM，直接生成带引用地址的文档模型：
- 结构分区（<div type="textpart">）：book → card 等层级，地址形如 urn:...:1.2
- 行内元素（<p>、<l>、<note>、<milestone> 等）：地址形如 urn:...:1.2@<p>[0]
- 文本片段：元素内的字符数据

只处理 <body> 内的内容；teiHeader 等区域的事件一律丢弃。
"""

import logging
from pathlib import Path

from lxml import etree

from lectio.core.model import (
    CHARACTERS_OUTSIDE_ELEMENT,
    MISSING_DIVISION,
    ORPHANED_ELEMENT,
    Diagnostic,
    Division,
    Document,
    Element,
    TextRun,
)

log = logging.getLogger(__name__)

# ============================================================
# 标签分类
# ============================================================
EDITION_TYPES = {"edition", "translation"}
TEXTPART_TYPE = "textpart"

# 已知的行内元素；其余标签照常入树，只记一条 debug 日志
KNOWN_ELEMENTS = {
    "choice", "corr", "del", "foreign", "gap", "head", "hi", "l", "label",
    "lb", "lg", "milestone", "note", "num", "p", "pb", "q", "quote", "sic",
    "sp", "speaker",
}

# 每个 body 内开始标签所做的操作，结束标签据此精确撤销
_PUSHED_DIVISION = "division"
_PUSHED_ELEMENT = "element"
_IGNORED = "ignored"


class MalformedDocument(ValueError):
    """XML 不是良构文档（致命错误，解析中止）"""

    def __init__(self, message, line=None, column=None):
        super().__init__(f"TEI XML 解析错误 (行 {line}, 列 {column}): {message}")
        self.line = line
        self.column = column


def _local_name(name):
    """去除命名空间，{http://...}lang → lang"""
    if "}" in name:
        return name.split("}", 1)[1]
    return name


class _TEITarget:
    """lxml parser target：逐个事件维护分区栈与元素栈"""

    def __init__(self):
        self.doc = Document()
        self.in_body = False

        self.division_stack: list[Division] = []
        self.element_stack: list[Element] = []
        self._opened: list[str] = []

        self._division_count = 0
        self._global_index = 0
        self._ordinals: dict[tuple[str | None, str], int] = {}
        self._pending_text: list[str] = []

    # ---- lxml target 接口 ----

    def start(self, tag, attrib):
        self._flush_text()
        name = _local_name(tag)

        if name == "body":
            self.in_body = True
            return
        if not self.in_body:
            return

        attrs = {_local_name(k): v for k, v in attrib.items()}
        if name == "div":
            self._opened.append(self._start_div(attrs))
        else:
            self._opened.append(self._start_element(name, attrs))

    def end(self, tag):
        self._flush_text()
        name = _local_name(tag)

        if name == "body":
            self.in_body = False
            return
        if not self.in_body or not self._opened:
            return

        action = self._opened.pop()
        if action == _PUSHED_DIVISION:
            self._end_div()
        elif action == _PUSHED_ELEMENT:
            self._end_element()

    def data(self, text):
        if self.in_body:
            self._pending_text.append(text)

    def close(self):
        self._flush_text()
        if self.element_stack or self.division_stack:
            log.debug(f"{self.doc.edition_address}\n文档结束时仍有未闭合标签: "
                      f"{len(self.division_stack)} 个分区, {len(self.element_stack)} 个元素")
        return self.doc

    # ---- 分区 ----

    def _start_div(self, attrs):
        div_type = attrs.get("type")

        if div_type in EDITION_TYPES:
            # 记录版本元数据，并压入一个隐式分区，
            # 使没有再细分的内容（如短篇颂诗）也有所属分区
            self.doc.language = attrs.get("lang")
            self.doc.edition_address = attrs.get("n")
            self._push_division(Division(
                kind=div_type,
                subtype=None,
                n=None,
                index=self._next_division_index(),
                location=[],
                address=self.doc.edition_address,
            ))
            return _PUSHED_DIVISION

        if div_type == TEXTPART_TYPE:
            subtype = attrs.get("subtype")
            if subtype and subtype not in self.doc.division_subtypes:
                self.doc.division_subtypes.append(subtype)

            n = attrs.get("n")
            location = [d.n for d in self.division_stack if d.n]
            if n:
                location.append(n)

            address = None
            if self.doc.edition_address:
                address = f"{self.doc.edition_address}:{'.'.join(location)}"

            self._push_division(Division(
                kind=div_type,
                subtype=subtype,
                n=n,
                index=self._next_division_index(),
                location=location,
                address=address,
            ))
            return _PUSHED_DIVISION

        return _IGNORED

    def _next_division_index(self):
        index = self._division_count
        self._division_count += 1
        return index

    def _push_division(self, division):
        self.division_stack.append(division)

    def _end_div(self):
        if not self.division_stack:
            return
        self.doc.divisions.append(self.division_stack.pop())

    # ---- 元素 ----

    def _start_element(self, tag, attrs):
        if tag not in KNOWN_ELEMENTS:
            log.debug(f"{self.doc.edition_address}\n未知元素: {tag} "
                      f"in {self._current_address()}")

        owner = self._owner_division(tag, attrs)
        if owner is None:
            return _IGNORED

        key = (owner.address, tag)
        ordinal = self._ordinals.get(key, 0)
        self._ordinals[key] = ordinal + 1

        element = Element(
            tag=tag,
            index=self._next_global_index(),
            attrs=attrs,
            children=[],
            division_index=owner.index,
            division_address=owner.address,
            address=f"{owner.address or ''}@<{tag}>[{ordinal}]",
        )
        self.element_stack.append(element)
        return _PUSHED_ELEMENT

    def _owner_division(self, tag, attrs):
        """当前所属分区；栈空时退回最近闭合的分区，都没有则丢弃该元素"""
        if self.division_stack:
            return self.division_stack[-1]

        if self.doc.divisions:
            self._report(MISSING_DIVISION, f"分区外的元素: {tag}, {attrs}")
            return self.doc.divisions[-1]

        self._report(ORPHANED_ELEMENT, f"孤立元素: {tag} — 没有可归属的分区")
        return None

    def _end_element(self):
        if not self.element_stack:
            return
        element = self.element_stack.pop()
        if self.element_stack:
            self.element_stack[-1].children.append(element)
        else:
            self.doc.elements.append(element)

    # ---- 文本 ----

    def _flush_text(self):
        """把两个标签事件之间的字符数据合并为一个文本片段"""
        if not self._pending_text:
            return
        text = "".join(self._pending_text)
        self._pending_text = []

        if not self.element_stack:
            if text.strip():
                self._report(CHARACTERS_OUTSIDE_ELEMENT, f"元素外的文本: {text!r}")
            return

        run = TextRun(text=text, index=self._next_global_index())
        self.element_stack[-1].children.append(run)

    # ---- 工具方法 ----

    def _next_global_index(self):
        index = self._global_index
        self._global_index += 1
        return index

    def _current_address(self):
        if self.division_stack:
            return self.division_stack[-1].address
        return None

    def _report(self, kind, message):
        log.warning(f"{self.doc.edition_address}\n{message}")
        self.doc.diagnostics.append(Diagnostic(kind=kind, message=message))


# ============================================================
# 公开接口
# ============================================================
def parse(xml) -> Document:
    """
    解析 TEI XML（bytes 或 str）为 Document。

    XML 不良构时抛出 MalformedDocument（带行列位置）；
    分区缺失、孤立元素等问题只记录诊断信息，不中断解析。
    """
    target = _TEITarget()
    parser = etree.XMLParser(target=target, resolve_entities=False, no_network=True)
    try:
        parser.feed(xml)
        return parser.close()
    except etree.XMLSyntaxError as e:
        line, column = e.position
        raise MalformedDocument(e.msg, line, column) from e


def parse_file(path) -> Document:
    """读取并解析 TEI XML 文件"""
    return parse(Path(path).read_bytes())

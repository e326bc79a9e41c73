"""
文档模型：结构分区（textpart）、元素、文本片段、文档。

解析器按事件顺序构建这些对象；解析完成后整棵树只读，
可被任意多次渲染共享。
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

# 注释容器标签 — base_text 时整棵子树排除
ANNOTATION_TAGS = {"note"}

# 可恢复问题的分类（记录到 Document.diagnostics）
ORPHANED_ELEMENT = "OrphanedElement"
MISSING_DIVISION = "MissingDivision"
CHARACTERS_OUTSIDE_ELEMENT = "CharactersOutsideElement"

_WS_RE = re.compile(r"\s+")


@dataclass
class Division:
    """结构分区（book / card / section 等），对应 <div type="textpart">"""

    kind: str | None
    subtype: str | None
    n: str | None
    index: int
    location: list[str] = field(default_factory=list)
    address: str | None = None


@dataclass
class TextRun:
    """元素内的一段字符数据（未转义）"""

    text: str
    index: int


@dataclass
class Element:
    """行内元素（<p>、<note>、<milestone> 等），children 为 Element 或 TextRun"""

    tag: str
    index: int
    attrs: dict[str, str] = field(default_factory=dict)
    children: list[Element | TextRun] = field(default_factory=list)
    division_index: int | None = None
    division_address: str | None = None
    address: str | None = None


@dataclass
class Diagnostic:
    """解析过程中遇到的可恢复问题"""

    kind: str
    message: str


@dataclass
class Document:
    edition_address: str | None = None
    language: str | None = None
    division_subtypes: list[str] = field(default_factory=list)
    divisions: list[Division] = field(default_factory=list)
    elements: list[Element] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)


# ============================================================
# 文本提取
# ============================================================
def base_text(node: Element | TextRun) -> str:
    """
    提取阅读正文：排除 <note> 等注释容器（含其整棵子树）。

    例: <p>The anger <note>Greek: mēnis</note> of Achilles</p>
        → "The anger  of Achilles"
    """
    if isinstance(node, TextRun):
        return node.text
    parts = []
    for child in node.children:
        if isinstance(child, Element) and child.tag in ANNOTATION_TAGS:
            continue
        parts.append(base_text(child))
    return "".join(parts)


def full_text(node: Element | TextRun) -> str:
    """提取全部文本，包括注释内容"""
    if isinstance(node, TextRun):
        return node.text
    return "".join(full_text(child) for child in node.children)


def find_descendants(element: Element, tag: str) -> list[Element]:
    """先序查找所有指定标签的后代元素；命中的元素也继续向下查找"""
    found = []
    for child in element.children:
        if not isinstance(child, Element):
            continue
        if child.tag == tag:
            found.append(child)
        found.extend(find_descendants(child, tag))
    return found


def collapse_whitespace(text: str) -> str:
    """将连续空白压缩为单个空格，并去除首尾空白"""
    return _WS_RE.sub(" ", text).strip()


# ============================================================
# 查询
# ============================================================
def elements_for_division(document: Document, address: str) -> list[Element]:
    """按分区地址筛选顶层元素"""
    return [el for el in document.elements if el.division_address == address]


def elements_for_division_index(document: Document, index: int) -> list[Element]:
    """按分区序号筛选顶层元素"""
    return [el for el in document.elements if el.division_index == index]

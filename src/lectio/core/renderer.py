"""
HTML 渲染

两类输入：
1) TEI 文档模型 — render_element / render_children 递归渲染，
   每个标签对应一个 Jinja2 模板（elements/<tag>.html），
   找不到时回退到 elements/default.html；
2) 译文行记录 — render_line_text 依次执行：
   智能引号 → 转义 → 释义样式 → 交叉引用列表 → 长音替换 → 注释标记。

模板查找顺序：覆盖目录（LECTIO_TEMPLATES_DIR）→ 内置模板。
"""

from __future__ import annotations

import logging
from pathlib import Path

from jinja2 import ChoiceLoader, Environment, FileSystemLoader
from markupsafe import Markup

from lectio import config
from lectio.core.cross_ref import CrossRefResolver
from lectio.core.lines import CROSS_REF, GLOSS, MARKER_KINDS, VARIANT, Annotation, Line
from lectio.core.model import Document, Element, TextRun, elements_for_division
from lectio.core.richtext import render_draftjs
from lectio.core.text_utils import escape_html, macronize, smartquotes, to_superscript

log = logging.getLogger(__name__)

DEFAULT_ELEMENT_TEMPLATE = "elements/default.html"
TEXT_RUN_TEMPLATE = "elements/text_run.html"
POPOVER_TEMPLATE = "components/popover.html"

NOTE_TYPE_LABELS = {
    "note": "Note",
    "variant": "Variant",
    "editorial": "Editorial",
}


def note_type_label(kind) -> str:
    """注释类型的显示名称"""
    return NOTE_TYPE_LABELS.get(kind, "Note")


class Renderer:
    def __init__(self, templates_dir=None, cross_refs: CrossRefResolver | None = None):
        templates_dir = templates_dir or config.TEMPLATES_DIR

        loaders = []
        if templates_dir is not None and Path(templates_dir).is_dir():
            loaders.append(FileSystemLoader(str(templates_dir)))
        elif templates_dir is not None:
            log.warning(f"模板覆盖目录不存在，已忽略: {templates_dir}")
        loaders.append(FileSystemLoader(str(config.DEFAULT_TEMPLATES_DIR)))

        self.templates_dir = templates_dir
        self.env = Environment(loader=ChoiceLoader(loaders), autoescape=True)
        self.cross_refs = cross_refs or CrossRefResolver()

    # ============================================================
    # 模板查找
    # ============================================================
    def resolve_template_path(self, name) -> str:
        """返回实际使用的模板文件路径（覆盖目录 → 内置 → default）"""
        return self._template(name).filename

    def _template(self, name):
        return self.env.select_template([name, DEFAULT_ELEMENT_TEMPLATE])

    # ============================================================
    # TEI 元素渲染
    # ============================================================
    def render_element(self, node: Element | TextRun) -> str:
        """文本片段 → 转义文本；元素 → 先渲染子节点，再套用该标签的模板"""
        if isinstance(node, TextRun):
            template = self._template(TEXT_RUN_TEMPLATE)
            return template.render(text=Markup(escape_html(node.text)), element=None, children=None)

        children_html = self.render_children(node.children)
        template = self._template(f"elements/{node.tag}.html")
        return template.render(element=node, children=Markup(children_html), text=None)

    def render_children(self, children) -> str:
        return "".join(self.render_element(child) for child in children)

    def render_division(self, document: Document, address: str) -> str:
        """渲染某个分区下的全部顶层元素"""
        return self.render_children(elements_for_division(document, address))

    # ============================================================
    # 译文行渲染
    # ============================================================
    def render_line_text(self, line: Line) -> str:
        """渲染一行译文：行内释义样式 + 交叉引用 + 注释弹出框"""
        text = escape_html(smartquotes(line.text))

        # 释义：每条只替换第一次出现
        for ann in line.annotations:
            if ann.kind != GLOSS or not ann.content:
                continue
            gloss = escape_html(ann.content)
            text = text.replace(gloss, f'<span class="gloss">[{gloss}]</span>', 1)

        ref_links = [
            self.cross_refs.render_link(ref)
            for ann in line.annotations if ann.kind == CROSS_REF
            for ref in ann.refs
        ]
        if ref_links:
            text += f' <span class="cross-refs">[{", ".join(ref_links)}]</span>'

        text = macronize(text)

        popovers = []
        markers = [ann for ann in line.annotations if ann.kind in MARKER_KINDS]
        for idx, ann in enumerate(markers, 1):
            popovers.append(self.render_popover(
                superscript=to_superscript(idx),
                type_label=note_type_label(ann.kind),
                content=self.render_annotation_content(ann),
            ))

        return text + "".join(popovers)

    def render_popover(self, superscript, type_label, content) -> str:
        template = self.env.get_template(POPOVER_TEMPLATE)
        return template.render(superscript=superscript, type_label=type_label,
                               content=Markup(content))

    def render_annotation_content(self, ann: Annotation) -> str:
        """异读加 v.l. 前缀；带引用的注释在内容后附链接"""
        if ann.kind == VARIANT:
            return f"<em>v.l.</em> {escape_html(ann.content)}"
        if ann.refs:
            links = ", ".join(self.cross_refs.render_link(ref) for ref in ann.refs)
            return f"{escape_html(ann.content)} {links}"
        return escape_html(ann.content)

    # ============================================================
    # 富文本评注
    # ============================================================
    def render_commentary(self, content) -> str:
        return render_draftjs(content)

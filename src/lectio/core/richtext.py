"""
富文本评注渲染（DraftJS 块 + 行内范围）

每个块有纯文本和两组 (offset, length) 范围：样式范围（粗体/斜体/下划线）
和实体范围（链接/图片）。逐字符累积"字符前打开"与"字符后关闭"的标记：
- 同一位置的打开标记按处理顺序追加（样式范围先于实体范围）
- 同一位置的关闭标记新来的放在前面

部分重叠（非嵌套）的范围不会自动修正为合法嵌套，
例如 [0,3) 粗体 与 [2,5) 斜体 输出 <strong>ab<em>c</strong>de</em>。
"""

from __future__ import annotations

from dataclasses import dataclass

from lectio.core.text_utils import escape_html

STYLE_TAGS = {
    "ITALIC": ("<em>", "</em>"),
    "BOLD": ("<strong>", "</strong>"),
    "UNDERLINE": ("<u>", "</u>"),
}

BLOCK_WRAPPERS = {
    "blockquote": ("<blockquote>", "</blockquote>"),
    "header-two": ("<h4>", "</h4>"),
}


@dataclass
class FormattingRange:
    start: int
    end: int
    open_markup: str
    close_markup: str


def style_range(item) -> FormattingRange:
    offset = item["offset"]
    open_tag, close_tag = STYLE_TAGS.get(item.get("style"), ("", ""))
    return FormattingRange(offset, offset + item["length"], open_tag, close_tag)


def entity_range(item, entity_map) -> FormattingRange | None:
    """LINK → <a>，IMAGE → <img>；未知实体返回 None"""
    offset = item["offset"]
    end = offset + item["length"]
    entity = entity_map.get(str(item["key"]), {})
    entity_type = entity.get("type")
    data = entity.get("data") or {}

    if entity_type == "LINK" and "url" in data:
        return FormattingRange(offset, end, f'<a href="{escape_html(data["url"])}">', "</a>")
    if entity_type == "IMAGE":
        src = escape_html(data.get("src") or "")
        alt = escape_html(data.get("alt") or "")
        return FormattingRange(offset, end, f'<img src="{src}" alt="{alt}" loading="lazy">', "")
    return None


def overlay(text: str, ranges: list[FormattingRange]) -> str:
    """把格式范围叠加到纯文本上，逐字符转义输出"""
    length = len(text)
    if length == 0:
        return ""

    opens: dict[int, str] = {}
    closes: dict[int, str] = {}
    for r in ranges:
        end = min(r.end, length)
        start = min(r.start, length - 1)
        opens[start] = opens.get(start, "") + r.open_markup
        closes[end - 1] = r.close_markup + closes.get(end - 1, "")

    return "".join(
        f"{opens.get(i, '')}{escape_html(ch)}{closes.get(i, '')}"
        for i, ch in enumerate(text)
    )


def render_block(block, entity_map) -> str:
    ranges = [style_range(s) for s in block.get("inlineStyleRanges", [])]
    for e in block.get("entityRanges", []):
        r = entity_range(e, entity_map)
        if r is not None:
            ranges.append(r)

    body = overlay(block.get("text", ""), ranges)
    open_tag, close_tag = BLOCK_WRAPPERS.get(block.get("type"), ("<p>", "</p>"))
    return f"{open_tag}{body}{close_tag}"


def render_draftjs(content) -> str:
    """渲染 {"blocks": [...], "entityMap": {...}} 为 HTML，块之间以换行分隔"""
    entity_map = content.get("entityMap", {})
    return "\n".join(render_block(block, entity_map) for block in content.get("blocks", []))

from __future__ import annotations

from lectio.core.richtext import FormattingRange, overlay, render_block, render_draftjs


def _block(text, styles=(), entities=(), block_type="unstyled"):
    return {
        "text": text,
        "type": block_type,
        "inlineStyleRanges": list(styles),
        "entityRanges": list(entities),
    }


def test_plain_block_is_escaped_paragraph():
    assert render_block(_block("A < B"), {}) == "<p>A &lt; B</p>"


def test_single_style_range():
    block = _block("Hello world", styles=[{"offset": 0, "length": 5, "style": "BOLD"}])
    assert render_block(block, {}) == "<p><strong>Hello</strong> world</p>"


def test_partially_overlapping_ranges_keep_accumulation_order():
    block = _block("abcde", styles=[
        {"offset": 0, "length": 3, "style": "BOLD"},
        {"offset": 2, "length": 3, "style": "ITALIC"},
    ])
    assert render_block(block, {}) == "<p><strong>ab<em>c</strong>de</em></p>"


def test_ranges_sharing_bounds_nest():
    block = _block("abc", styles=[
        {"offset": 0, "length": 3, "style": "BOLD"},
        {"offset": 0, "length": 3, "style": "UNDERLINE"},
    ])
    assert render_block(block, {}) == "<p><strong><u>abc</u></strong></p>"


def test_out_of_range_offsets_are_clamped():
    ranges = [FormattingRange(1, 99, "<em>", "</em>"), FormattingRange(10, 20, "<u>", "</u>")]
    assert overlay("abc", ranges) == "a<em>b<u>c</u></em>"


def test_unknown_style_is_a_no_op():
    block = _block("abc", styles=[{"offset": 0, "length": 2, "style": "STRIKETHROUGH"}])
    assert render_block(block, {}) == "<p>abc</p>"


def test_link_entity():
    entity_map = {"0": {"type": "LINK", "data": {"url": "https://example.org/?a=1&b=2"}}}
    block = _block("see here", entities=[{"offset": 4, "length": 4, "key": 0}])
    assert render_block(block, entity_map) == (
        '<p>see <a href="https://example.org/?a=1&amp;b=2">here</a></p>'
    )


def test_image_entity_and_unknown_entity():
    entity_map = {
        "0": {"type": "IMAGE", "data": {"src": "/img/shield.png", "alt": "Shield"}},
        "1": {"type": "MENTION", "data": {}},
    }
    block = _block("xy", entities=[
        {"offset": 0, "length": 1, "key": 0},
        {"offset": 1, "length": 1, "key": 1},
    ])
    assert render_block(block, entity_map) == (
        '<p><img src="/img/shield.png" alt="Shield" loading="lazy">xy</p>'
    )


def test_styles_open_before_entities_at_same_index():
    entity_map = {"0": {"type": "LINK", "data": {"url": "/a"}}}
    block = _block(
        "ab",
        styles=[{"offset": 0, "length": 2, "style": "ITALIC"}],
        entities=[{"offset": 0, "length": 2, "key": 0}],
    )
    assert render_block(block, entity_map) == '<p><em><a href="/a">ab</a></em></p>'


def test_block_wrappers():
    assert render_block(_block("q", block_type="blockquote"), {}) == "<blockquote>q</blockquote>"
    assert render_block(_block("h", block_type="header-two"), {}) == "<h4>h</h4>"
    assert render_block(_block("", block_type="unstyled"), {}) == "<p></p>"


def test_render_draftjs_joins_blocks():
    content = {
        "blocks": [_block("First"), _block("Second", block_type="header-two")],
        "entityMap": {},
    }
    assert render_draftjs(content) == "<p>First</p>\n<h4>Second</h4>"

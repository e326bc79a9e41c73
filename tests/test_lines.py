from __future__ import annotations

from lectio.core.lines import Line, line_sort_key


def test_sort_key_parses_number_and_suffix():
    assert line_sort_key("40") == (40, "")
    assert line_sort_key("40a") == (40, "a")
    assert line_sort_key("302 v.l.") == (302, " v.l.")


def test_labels_sort_numerically_with_suffixes_after_plain():
    labels = ["41", "302 v.l.", "40a", "9", "40", "302"]
    assert sorted(labels, key=line_sort_key) == ["9", "40", "40a", "41", "302", "302 v.l."]


def test_labels_without_digits_sort_last():
    assert sorted(["preface", "1"], key=line_sort_key) == ["1", "preface"]


def test_line_computes_sort_key():
    assert Line(number="12b", text="x").sort_key == (12, "b")
    assert Line(number="1", text="x", sort_key=(5, "")).sort_key == (5, "")

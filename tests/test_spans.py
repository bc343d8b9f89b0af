"""Tests for line-boundary span expansion."""

from __future__ import annotations

import pytest

from docgraph.hierarchy.spans import expand_to_line_bounds, extract_original_text

TEXT = "alpha line\n  beta line\ngamma"


class TestExpandToLineBounds:
    """Tests for expand_to_line_bounds."""

    def test_expands_mid_line_span(self):
        start = TEXT.index("beta")
        assert expand_to_line_bounds(TEXT, start, start + 4) == (11, 22)

    def test_first_line_starts_at_zero(self):
        assert expand_to_line_bounds(TEXT, 2, 5) == (0, 10)

    def test_last_line_runs_to_end_of_text(self):
        start = TEXT.index("gamma")
        assert expand_to_line_bounds(TEXT, start + 1, start + 3) == (start, len(TEXT))

    def test_multi_line_span(self):
        assert expand_to_line_bounds(TEXT, 3, TEXT.index("beta") + 2) == (0, 22)

    def test_span_ending_on_newline_extends_to_next_line(self):
        assert expand_to_line_bounds(TEXT, 0, 11) == (0, 22)

    def test_idempotent(self):
        first = expand_to_line_bounds(TEXT, 14, 16)
        assert first is not None
        assert expand_to_line_bounds(TEXT, *first) == first

    @pytest.mark.parametrize(
        "start,end",
        [(-1, 3), (0, len(TEXT) + 1), (5, 5), (6, 2)],
    )
    def test_invalid_ranges_return_none(self, start, end):
        assert expand_to_line_bounds(TEXT, start, end) is None

    def test_empty_text(self):
        assert expand_to_line_bounds("", 0, 0) is None


class TestExtractOriginalText:
    """Tests for extract_original_text."""

    def test_returns_whole_lines(self):
        start = TEXT.index("beta")
        assert extract_original_text(TEXT, start, start + 4) == "  beta line"

    def test_contains_raw_content(self):
        source = "# Title\n\nSome *body* text here.\n"
        start = source.index("Some")
        original = extract_original_text(source, start, start + 4)
        assert "Some *body* text here." in original

    def test_trailing_newline_takes_following_line(self):
        assert extract_original_text("abc\ndef\n", 0, 4) == "abc\ndef"

    def test_invalid_range_is_empty(self):
        assert extract_original_text(TEXT, 10, 3) == ""

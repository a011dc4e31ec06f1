"""Tests for message/cursor.py - immutable cursor and span computation."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from localekit.message.cursor import Cursor, ParseResult


class TestCursor:
    """Immutable navigation."""

    def test_advance_returns_new_cursor(self) -> None:
        cursor = Cursor("abc", 0)
        advanced = cursor.advance()
        assert cursor.pos == 0
        assert advanced.pos == 1
        assert advanced.current == "b"

    def test_advance_clamps_at_eof(self) -> None:
        assert Cursor("ab", 1).advance(10).pos == 2

    def test_current_at_eof_raises(self) -> None:
        with pytest.raises(EOFError):
            _ = Cursor("", 0).current

    def test_peek(self) -> None:
        cursor = Cursor("abc", 1)
        assert cursor.peek() == "b"
        assert cursor.peek(1) == "c"
        assert cursor.peek(2) is None

    def test_skip_whitespace_unicode(self) -> None:
        cursor = Cursor(" \t\n x", 0).skip_whitespace()
        assert cursor.current == "x"

    def test_slice_to(self) -> None:
        assert Cursor("{name}", 1).slice_to(5) == "name"


class TestCursorSpans:
    """line:column computed on demand for diagnostics."""

    @pytest.mark.parametrize(
        ("source", "pos", "expected"),
        [
            ("abc", 0, (1, 1)),
            ("abc", 2, (1, 3)),
            ("a\nbc", 2, (2, 1)),
            ("a\nbc", 3, (2, 2)),
            ("\n\n", 2, (3, 1)),
        ],
    )
    def test_line_col(self, source: str, pos: int, expected: tuple[int, int]) -> None:
        assert Cursor(source, pos).compute_line_col() == expected

    def test_span_default_is_one_char(self) -> None:
        span = Cursor("a\nbc", 2).span()
        assert (span.start, span.end, span.line, span.column) == (2, 3, 2, 1)

    def test_span_at_eof_is_empty(self) -> None:
        span = Cursor("ab", 2).span()
        assert span.start == span.end == 2

    @given(st.text(max_size=40), st.data())
    def test_line_count_matches_newlines(self, source: str, data: st.DataObject) -> None:
        pos = data.draw(st.integers(min_value=0, max_value=len(source)))
        line, column = Cursor(source, pos).compute_line_col()
        assert line == source[:pos].count("\n") + 1
        assert column >= 1


def test_parse_result_is_immutable() -> None:
    result = ParseResult("a", Cursor("a", 1))
    with pytest.raises(AttributeError):
        result.value = "b"  # type: ignore[misc]

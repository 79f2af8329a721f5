from __future__ import annotations

from ronpy.cursor import Cursor
from ronpy.spans import Position, Span


def test_advance_tracks_bytes_lines_and_columns() -> None:
    cur = Cursor(src="aé\nb")
    mid = cur.advance(2)
    assert (mid.index, mid.offset, mid.line, mid.column) == (2, 3, 1, 3)

    nl = cur.advance(3)
    assert (nl.index, nl.offset, nl.line, nl.column) == (3, 4, 2, 1)

    # the original is untouched
    assert (cur.index, cur.offset, cur.line, cur.column) == (0, 0, 1, 1)


def test_advance_stops_at_end_of_input() -> None:
    cur = Cursor(src="ab").advance(10)
    assert cur.at_end()
    assert cur.index == 2
    assert cur.peek() == ""
    assert cur.advance() is cur


def test_peek_and_startswith() -> None:
    cur = Cursor(src="Some(1)")
    assert cur.peek() == "S"
    assert cur.peek(4) == "("
    assert cur.startswith("Some")
    assert not cur.advance(1).startswith("Some")
    assert cur.advance(5).rest() == "1)"


def test_spans_from_marks() -> None:
    cur = Cursor(src="x: 10", file="a.ron")
    start = cur.advance(3).mark()
    span = cur.advance(5).span_from(start)
    assert span.format() == "a.ron:1:4"
    assert span.slice(cur.src) == "10"
    assert not span.is_empty
    assert cur.here().is_empty


def test_span_helpers() -> None:
    src = "ab\ncd"
    cur = Cursor(src=src)
    whole = cur.advance(5).span_from(Position.start())
    first = cur.advance(2).span_from(Position.start())
    assert whole.is_multiline
    assert not first.is_multiline
    assert whole.contains(first)
    assert not first.contains(whole)
    assert first.collapse().is_empty
    second = Span(file="<string>", start=cur.advance(3).mark(), end=cur.advance(5).mark())
    assert first.join(second) == whole


def test_nesting_depth_is_part_of_the_value() -> None:
    cur = Cursor(src="[]", max_depth=4)
    inner = cur.nested().nested()
    assert inner.depth == 2
    assert cur.depth == 0
    assert inner.with_depth(0) == cur

from __future__ import annotations

import pytest

from ronpy import (
    I32,
    STR,
    DeserializeError,
    Diagnostic,
    Field,
    ParseError,
    StructShape,
    from_str,
    parse_source,
    render,
)
from ronpy.cursor import Cursor
from ronpy.spans import Span


def _span(src: str, start: int, end: int, file: str = "<string>") -> Span:
    cur = Cursor(src=src, file=file)
    return Span(file=file, start=cur.advance(start).mark(), end=cur.advance(end).mark())


POINT = StructShape("Point", (Field("x", I32), Field("y", STR)))


def test_single_line_underline() -> None:
    src = "(x: 1, y: true)"
    with pytest.raises(DeserializeError) as e:
        from_str(src, POINT)
    expected = "\n".join(
        [
            "error: invalid type: boolean `true`, expected a string",
            " --> <string>:1:11",
            "  |",
            "1 | (x: 1, y: true)",
            "  |           ^^^^",
            "",
        ]
    )
    assert e.value.render(src) == expected


def test_multi_line_box() -> None:
    src = "(x: 1, y: (\n  a: 1,\n  b: 2,\n))"
    with pytest.raises(DeserializeError) as e:
        from_str(src, POINT)
    assert e.value.message == "invalid type: map, expected a string"
    expected = "\n".join(
        [
            "error: invalid type: map, expected a string",
            " --> <string>:1:11",
            "  |",
            "1 |   (x: 1, y: (",
            "  |  ___________^",
            "2 | |   a: 1,",
            "3 | |   b: 2,",
            "4 | | ))",
            "  | |_^",
            "",
        ]
    )
    assert e.value.render(src) == expected


def test_long_multi_line_spans_are_elided() -> None:
    src = "[\n" + "1,\n" * 8 + "]"
    node = parse_source(src)
    expected = "\n".join(
        [
            "error: too long",
            "  --> <string>:1:1",
            "   |",
            " 1 |   [",
            "   |  _^",
            " 2 | | 1,",
            "...",
            " 9 | | 1,",
            "10 | | ]",
            "   | |_^",
            "",
        ]
    )
    assert render(src, node.span, "too long") == expected


def test_zero_width_span_gets_one_caret() -> None:
    src = "1 2"
    with pytest.raises(ParseError) as e:
        parse_source(src)
    expected = "\n".join(
        [
            "error: expected end of input",
            " --> <string>:1:3",
            "  |",
            "1 | 1 2",
            "  |   ^",
            "",
        ]
    )
    assert e.value.render(src) == expected


def test_hint_line() -> None:
    src = "/* open"
    with pytest.raises(ParseError) as e:
        parse_source(src)
    expected = "\n".join(
        [
            "error: unterminated block comment",
            " --> <string>:1:8",
            "  |",
            "1 | /* open",
            "  |        ^",
            "  = hint: add the closing `*/`",
            "",
        ]
    )
    assert e.value.render(src) == expected


@pytest.mark.parametrize(
    ("tab_width", "line", "carets"),
    [
        (4, "1 |     foo", "  |     ^^^"),
        (2, "1 |   foo", "  |   ^^^"),
    ],
)
def test_tabs_are_expanded(tab_width: int, line: str, carets: str) -> None:
    src = "\tfoo"
    out = render(src, _span(src, 1, 4), "bad", tab_width=tab_width)
    assert out.splitlines()[3:] == [line, carets]


def test_span_ending_after_a_newline_stays_on_its_line() -> None:
    src = "ab\ncd"
    out = render(src, _span(src, 0, 3), "msg")
    assert out.splitlines()[3:] == ["1 | ab", "  | ^^"]


def test_box_closing_on_an_empty_line_sits_at_the_rail() -> None:
    src = "ab\n\ncd"
    out = render(src, _span(src, 0, 4), "msg")
    assert out.splitlines()[3:] == ["1 |   ab", "  |  _^", "2 | |", "  | |^"]


def test_rendering_is_stable() -> None:
    src = "Point(\n    x: 1,\n\ty: 'c',\n)"
    span = _span(src, 0, len(src), file="p.ron")
    assert render(src, span, "m", hint="h") == render(src, span, "m", hint="h")


def test_structured_diagnostic() -> None:
    src = "[1, x]"
    span = _span(src, 4, 5, file="d.ron")
    diag = Diagnostic(span=span, message="bad item", severity="warning", hint="remove it")
    assert diag.to_dict() == {
        "severity": "warning",
        "message": "bad item",
        "hint": "remove it",
        "file": "d.ron",
        "start": {"offset": 4, "line": 1, "column": 5},
        "end": {"offset": 5, "line": 1, "column": 6},
    }
    assert diag.render(src).startswith("warning: bad item\n --> d.ron:1:5\n")

    err = ParseError(span=span, message="bad item", hint="remove it")
    assert err.diagnostic() == Diagnostic(span=span, message="bad item", hint="remove it")
    assert str(err) == "d.ron:1:5: bad item\nhint: remove it"

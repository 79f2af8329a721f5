from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

from ronpy import (
    I32,
    DeserializeError,
    Deserializer,
    Field,
    ParseError,
    ParseOptions,
    SeqShape,
    StructShape,
    ast,
    from_file,
    from_str,
    parse_document,
    parse_file,
    parse_source,
)


def test_parse_file_uses_the_resolved_path(tmp_path: Path) -> None:
    p = tmp_path / "conf.ron"
    p.write_text("Config(items: [1, 2])\n", encoding="utf-8")
    node = parse_file(p)
    assert isinstance(node, ast.NamedFields)
    assert node.span.file == str(p.resolve())


def test_parse_file_errors_name_the_file(tmp_path: Path) -> None:
    p = tmp_path / "bad.ron"
    p.write_text("[1,\n 2", encoding="utf-8")
    with pytest.raises(ParseError) as e:
        parse_file(p)
    assert str(e.value).startswith(f"{p.resolve()}:2:3: ")


def test_from_file(tmp_path: Path) -> None:
    p = tmp_path / "nums.ron"
    p.write_text("#![enable(implicit_some)]\n[1, 2, 3]", encoding="utf-8")
    assert from_file(p, SeqShape(I32)) == [1, 2, 3]

    p.write_text('["x"]', encoding="utf-8")
    with pytest.raises(DeserializeError) as e:
        from_file(p, SeqShape(I32))
    assert e.value.span.file == str(p.resolve())


def test_file_name_for_strings() -> None:
    with pytest.raises(ParseError) as e:
        parse_source("[", file="inline.ron")
    assert e.value.span.file == "inline.ron"


def test_document_span_covers_the_input() -> None:
    src = "\n\n  5  \n"
    doc = parse_document(src)
    assert doc.span.slice(src) == src
    assert doc.value.span.start.line == 3


@pytest.mark.parametrize("field", ["max_depth", "tab_width"])
def test_options_are_validated(field: str) -> None:
    with pytest.raises(ValueError):
        ParseOptions(**{field: 0})


def test_deep_nesting_within_a_raised_limit() -> None:
    depth = 150
    src = "[" * depth + "1" + "]" * depth
    opts = ParseOptions(max_depth=200)
    node = parse_source(src, options=opts)
    for _ in range(depth):
        assert isinstance(node, ast.Sequence)
        node = node.items[0]
    assert node.value == 1


def test_raised_recursion_limit_is_restored() -> None:
    before = sys.getrecursionlimit()
    parse_source("1", options=ParseOptions(max_depth=5000))
    assert sys.getrecursionlimit() == before

    with pytest.raises(ParseError):
        parse_source("[1", options=ParseOptions(max_depth=5000))
    assert sys.getrecursionlimit() == before

    assert from_str("[[1]]", SeqShape(SeqShape(I32)), options=ParseOptions(max_depth=5000)) == [[1]]
    assert sys.getrecursionlimit() == before

def test_deserializer_shares_the_depth_limit() -> None:
    depth = 32
    src = "[" * depth + "1" + "]" * depth
    shape = I32
    for _ in range(depth):
        shape = SeqShape(shape)

    value = from_str(src, shape)
    for _ in range(depth):
        (value,) = value
    assert value == 1

    shallow = StructShape("S", (Field("a", SeqShape(SeqShape(I32))),))
    assert from_str("(a: [[1]])", shallow, options=ParseOptions(max_depth=3)) == {"a": [[1]]}
    with pytest.raises(ParseError):
        from_str("(a: [[1]])", shallow, options=ParseOptions(max_depth=2))

    with pytest.raises(DeserializeError) as e:
        Deserializer(max_depth=depth - 1).deserialize(parse_source(src), shape)
    assert e.value.message == "exceeded maximum nesting depth of 31"
    assert e.value.span.start.column == depth


def test_debug_logging(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="ronpy")
    with pytest.raises(ParseError):
        parse_source("[1", file="log.ron")
    messages = [r.getMessage() for r in caplog.records]
    assert any(m.startswith("parsing log.ron") for m in messages)
    assert any(m.startswith("parse failed at log.ron:1:3") for m in messages)

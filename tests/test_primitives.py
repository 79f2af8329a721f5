from __future__ import annotations

import math

import pytest

from ronpy import ParseError, ast, parse_source


@pytest.mark.parametrize(
    ("src", "expected"),
    [
        ("42", 42),
        ("-7", -7),
        ("+7", 7),
        ("1_000_000", 1_000_000),
        ("0x1F", 31),
        ("-0x1f", -31),
        ("0o17", 15),
        ("0b1010", 10),
        ("18446744073709551615", 2**64 - 1),
    ],
)
def test_integers(src: str, expected: int) -> None:
    node = parse_source(src)
    assert isinstance(node, ast.Integer)
    assert node.value == expected
    assert node.suffix is None
    assert node.span.slice(src) == src


def test_integer_suffixes() -> None:
    node = parse_source("255u8")
    assert isinstance(node, ast.Integer)
    assert (node.value, node.suffix) == (255, "u8")

    big = parse_source("18446744073709551616u128")
    assert isinstance(big, ast.Integer)
    assert big.value == 2**64


@pytest.mark.parametrize(
    ("src", "expected"),
    [
        ("1.5", 1.5),
        ("-2.25", -2.25),
        ("1.", 1.0),
        (".5", 0.5),
        ("1e3", 1000.0),
        ("1.5E-2", 0.015),
        ("1_0.0_1", 10.01),
    ],
)
def test_floats(src: str, expected: float) -> None:
    node = parse_source(src)
    assert isinstance(node, ast.Float)
    assert node.value == expected


def test_special_floats_and_float_suffixes() -> None:
    assert parse_source("inf").value == math.inf
    assert parse_source("-inf").value == -math.inf
    assert math.isnan(parse_source("NaN").value)

    node = parse_source("3f32")
    assert isinstance(node, ast.Float)
    assert (node.value, node.suffix) == (3.0, "f32")


@pytest.mark.parametrize(
    ("src", "message"),
    [
        ("18446744073709551616", "integer literal does not fit in 64 bits"),
        ("1x", "invalid number suffix `x`"),
        ("1.5u8", "integer suffix `u8` on a float literal"),
        ("0x", "expected a base-16 digit"),
        ("0b102", "invalid number suffix `2`"),
    ],
)
def test_number_errors(src: str, message: str) -> None:
    with pytest.raises(ParseError) as e:
        parse_source(src, file="n.ron")
    assert message in str(e.value)
    assert "n.ron:1:" in str(e.value)


def test_very_long_integer_literals() -> None:
    with pytest.raises(ParseError) as e:
        parse_source("1" * 5000)
    assert e.value.message == "integer literal does not fit in 64 bits"
    assert e.value.span.end.offset == 5000

    with pytest.raises(ParseError) as e:
        parse_source("9" * 5000 + "u128")
    assert e.value.message == "integer literal does not fit in 128 bits"

    padded = parse_source("0" * 5000 + "7")
    assert isinstance(padded, ast.Integer)
    assert padded.value == 7


@pytest.mark.parametrize(
    ("src", "expected"),
    [
        ('"plain"', "plain"),
        ('"a\\nb\\tc"', "a\nb\tc"),
        ('"q\\"q\\\\"', 'q"q\\'),
        ('"\\x41\\/"', "A/"),
        ('"\\u{1F600}"', "\U0001F600"),
        ('"\\u{e9}"', "é"),
        ('"joined \\\n     line"', "joined line"),
        ('"héllo"', "héllo"),
        ('""', ""),
    ],
)
def test_strings(src: str, expected: str) -> None:
    node = parse_source(src)
    assert isinstance(node, ast.String)
    assert node.value == expected
    assert not node.raw
    assert node.span.slice(src) == src


def test_raw_strings() -> None:
    node = parse_source('r"no \\escapes"')
    assert isinstance(node, ast.String)
    assert node.value == "no \\escapes"
    assert node.raw

    src = 'r##"has "# inside"##'
    node = parse_source(src)
    assert node.value == 'has "# inside'
    assert node.span.slice(src) == src


@pytest.mark.parametrize(
    ("src", "message"),
    [
        ('"abc', "unterminated string"),
        ('r#"abc"', "unterminated raw string"),
        ('"\\q"', "expected an escape sequence"),
        ('"\\x80"', "invalid ASCII escape"),
        ('"\\u{D800}"', "invalid unicode escape"),
        ('"\\u{1234567}"', "invalid unicode escape"),
    ],
)
def test_string_errors(src: str, message: str) -> None:
    with pytest.raises(ParseError) as e:
        parse_source(src)
    assert message in e.value.message


def test_chars() -> None:
    node = parse_source("'a'")
    assert isinstance(node, ast.Char)
    assert node.value == "a"
    assert parse_source("'\\n'").value == "\n"
    assert parse_source("'é'").value == "é"
    assert parse_source("'\\''").value == "'"


def test_char_errors() -> None:
    with pytest.raises(ParseError) as e:
        parse_source("'ab'")
    assert e.value.message == "a char literal holds exactly one character"
    assert e.value.hint is not None

    with pytest.raises(ParseError) as e:
        parse_source("'a")
    assert e.value.message == "unterminated char literal"


def test_identifiers_and_booleans() -> None:
    node = parse_source("some_name1")
    assert isinstance(node, ast.Identifier)
    assert node.name == "some_name1"
    assert not node.raw

    raw = parse_source("r#foo.bar-baz")
    assert isinstance(raw, ast.Identifier)
    assert raw.name == "foo.bar-baz"
    assert raw.raw

    assert parse_source("true") == ast.Bool(span=parse_source("true").span, value=True)
    assert parse_source("false").value is False
    # keywords need a word boundary
    assert isinstance(parse_source("trueish"), ast.Identifier)
    assert isinstance(parse_source("Nonesuch"), ast.Identifier)


def test_comments_are_insignificant() -> None:
    src = "/* a /* nested */ comment */ 5 // trailing"
    node = parse_source(src)
    assert isinstance(node, ast.Integer)
    assert node.span.slice(src) == "5"


def test_unterminated_block_comment() -> None:
    with pytest.raises(ParseError) as e:
        parse_source("/* open")
    assert e.value.message == "unterminated block comment"
    assert e.value.span.start.column == 8
    assert e.value.hint == "add the closing `*/`"

"""
Scalar rules: insignificant whitespace and comments, identifiers, booleans,
numbers, strings and characters. Every rule that yields a node captures its
span from entry to exit and nothing around it.
"""

from __future__ import annotations

from . import ast as A
from . import combinators as C
from .chars import is_digit, is_ident_first, is_ident_other, is_ident_raw, is_ws, radix_digit
from .combinators import Outcome, Parsed, Parser
from .cursor import Cursor
from .errors import ParseError
from .spans import Span


# ---------------------------------------------------------------------------
# Whitespace and comments
# ---------------------------------------------------------------------------


def skip_ws(cur: Cursor) -> Outcome:
    """Skip whitespace, `// line` and nested `/* block */` comments."""
    src = cur.src
    n = len(src)
    i = cur.index
    while i < n:
        if is_ws(src[i]):
            i += 1
        elif src.startswith("//", i):
            j = src.find("\n", i)
            i = n if j < 0 else j
        elif src.startswith("/*", i):
            depth = 1
            i += 2
            while i < n and depth:
                if src.startswith("/*", i):
                    depth += 1
                    i += 2
                elif src.startswith("*/", i):
                    depth -= 1
                    i += 2
                else:
                    i += 1
            if depth:
                return ParseError(
                    span=cur.advance(n - cur.index).here(),
                    message="unterminated block comment",
                    fatal=True,
                    hint="add the closing `*/`",
                )
        else:
            break
    return Parsed(None, cur.advance(i - cur.index))


def token(p: Parser) -> Parser:
    """Treat `p` as one lexical token: forget the failures it absorbed inside."""

    def parse(cur: Cursor) -> Outcome:
        out = p(cur)
        if isinstance(out, ParseError) or out.discarded is None:
            return out
        return Parsed(out.value, out.cursor)

    return parse


def ws(p: Parser) -> Parser:
    """`p` preceded by insignificant whitespace."""
    return C.preceded(skip_ws, p)


def punct(text: str) -> Parser:
    """A punctuation token after optional whitespace."""
    return ws(C.literal(text))


# ---------------------------------------------------------------------------
# Identifiers and keywords
# ---------------------------------------------------------------------------


def keyword(text: str) -> Parser:
    return C.keyword(text, is_ident_other)


_bare_identifier = C.recognize(
    C.sequence(C.char_class(is_ident_first, "an identifier"), C.take_while(is_ident_other))
)
_raw_identifier = C.preceded(C.literal("r#"), C.take_while1(is_ident_raw, "a raw identifier"))

identifier = C.label(
    C.choice(
        C.spanned(_raw_identifier, lambda name, span: A.Identifier(span=span, name=name, raw=True)),
        C.spanned(_bare_identifier, lambda name, span: A.Identifier(span=span, name=name)),
    ),
    "an identifier",
)

boolean = C.spanned(
    C.choice(keyword("true"), keyword("false")),
    lambda text, span: A.Bool(span=span, value=text == "true"),
)


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------

INTEGER_SUFFIXES = ("i8", "i16", "i32", "i64", "i128", "u8", "u16", "u32", "u64", "u128")
FLOAT_SUFFIXES = ("f32", "f64")

_sign = C.optional(C.char_class(lambda c: c in "+-", "a sign"))
_digits = C.recognize(C.sequence(C.char_class(is_digit, "a digit"), C.take_while(radix_digit(10))))
_exponent = C.sequence(
    C.char_class(lambda c: c in "eE", "an exponent"),
    C.optional(C.char_class(lambda c: c in "+-", "a sign")),
    _digits,
)


def _radix_integer(prefix: str, radix: int) -> Parser:
    first = C.char_class(lambda c: c != "_" and radix_digit(radix)(c), f"a base-{radix} digit")
    body = C.recognize(C.sequence(first, C.take_while(radix_digit(radix))))
    return C.preceded(C.literal(prefix), C.cut(C.map(body, lambda digits: ("int", radix, digits))))


_number_body = C.choice(
    _radix_integer("0x", 16),
    _radix_integer("0o", 8),
    _radix_integer("0b", 2),
    C.map(C.choice(keyword("inf"), keyword("NaN")), lambda text: ("special", 10, text)),
    C.map(
        C.recognize(
            C.choice(
                C.sequence(
                    _digits,
                    C.optional(C.sequence(C.literal("."), C.take_while(radix_digit(10)))),
                    C.optional(_exponent),
                ),
                C.sequence(C.literal("."), _digits, C.optional(_exponent)),
            )
        ),
        lambda text: ("float" if any(c in text for c in ".eE") else "int", 10, text),
    ),
)


def _too_large(span: Span, bits: int) -> ParseError:
    return ParseError(
        span=span,
        message=f"integer literal does not fit in {bits} bits",
        fatal=True,
        hint="use an i128/u128 suffix or a float" if bits == 64 else None,
    )


def _build_number(parts: tuple[str | None, tuple[str, int, str], str], span: Span) -> A.Value | ParseError:
    sign, (form, radix, text), suffix = parts
    suffix = suffix or None
    negative = sign == "-"

    if suffix is not None and suffix not in INTEGER_SUFFIXES and suffix not in FLOAT_SUFFIXES:
        return ParseError(
            span=span,
            message=f"invalid number suffix `{suffix}`",
            fatal=True,
            hint="valid suffixes are " + ", ".join(INTEGER_SUFFIXES + FLOAT_SUFFIXES),
        )

    if form == "special":
        value = float("inf") if text == "inf" else float("nan")
        if suffix in INTEGER_SUFFIXES:
            return ParseError(span=span, message=f"integer suffix `{suffix}` on a float literal", fatal=True)
        return A.Float(span=span, value=-value if negative else value, suffix=suffix)

    if form == "float" or suffix in FLOAT_SUFFIXES:
        if radix != 10:
            return ParseError(span=span, message=f"float suffix `{suffix}` on a base-{radix} literal", fatal=True)
        if suffix in INTEGER_SUFFIXES:
            return ParseError(span=span, message=f"integer suffix `{suffix}` on a float literal", fatal=True)
        value = float(text.replace("_", ""))
        return A.Float(span=span, value=-value if negative else value, suffix=suffix)

    digits = text.replace("_", "").lstrip("0") or "0"
    bits = 128 if suffix in ("i128", "u128") else 64
    # In any radix, more than `bits` significant digits is at least 2**bits.
    if len(digits) > bits:
        return _too_large(span, bits)
    magnitude = int(digits, radix)
    if magnitude >= 1 << bits:
        return _too_large(span, bits)
    return A.Integer(span=span, value=-magnitude if negative else magnitude, suffix=suffix)


number = token(
    C.try_map(
        C.sequence(_sign, _number_body, C.take_while(is_ident_other)),
        _build_number,
    )
)


# ---------------------------------------------------------------------------
# Strings and characters
# ---------------------------------------------------------------------------

_SIMPLE_ESCAPES = {
    "\\": "\\",
    '"': '"',
    "'": "'",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "0": "\0",
    "b": "\b",
    "f": "\f",
    "/": "/",
}

_hex = C.char_class(lambda c: c in "0123456789abcdefABCDEF", "a hex digit")


def _ascii_escape(digits: tuple[str, str], span: Span) -> str | ParseError:
    code = int("".join(digits), 16)
    if code > 0x7F:
        return ParseError(
            span=span,
            message=f"invalid ASCII escape `\\x{''.join(digits)}`",
            fatal=True,
            hint="use \\u{...} for code points above 7F",
        )
    return chr(code)


def _unicode_escape(digits: str, span: Span) -> str | ParseError:
    code = int(digits, 16)
    if len(digits) > 6 or code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
        return ParseError(span=span, message=f"invalid unicode escape `\\u{{{digits}}}`", fatal=True)
    return chr(code)


_line_continuation = C.map(
    C.sequence(C.optional(C.literal("\r")), C.literal("\n"), C.take_while(is_ws)),
    lambda _: "",
)

_escape_body = C.label(
    C.choice(
        C.map(C.char_class(_SIMPLE_ESCAPES.__contains__, "an escape character"), _SIMPLE_ESCAPES.__getitem__),
        C.try_map(C.preceded(C.literal("x"), C.sequence(_hex, _hex)), _ascii_escape),
        C.try_map(
            C.delimited(
                C.literal("u{"),
                C.take_while1(lambda c: c in "0123456789abcdefABCDEF", "a hex digit"),
                C.literal("}"),
            ),
            _unicode_escape,
        ),
        _line_continuation,
    ),
    "an escape sequence",
)

escape = C.preceded(C.literal("\\"), C.cut(_escape_body))


def _unterminated(what: str, closing: str) -> Parser:
    def parse(cur: Cursor) -> Outcome:
        return ParseError(
            span=cur.here(),
            message=f"unterminated {what}",
            fatal=True,
            hint=f"close it with {closing}",
        )

    return parse


_string_chunk = C.take_while1(lambda c: c not in '"\\', "string contents")

_escaped_string = C.spanned(
    C.delimited(
        C.literal('"'),
        C.many(C.choice(_string_chunk, escape)),
        C.choice(C.literal('"'), _unterminated("string", '`"`')),
    ),
    lambda chunks, span: A.String(span=span, value="".join(chunks)),
)

_raw_open = C.sequence(C.literal("r"), C.take_while(lambda c: c == "#"), C.literal('"'))


def raw_string(cur: Cursor) -> Outcome:
    """`r"..."`, `r#"..."#`, ...: closed by a quote and the same number of `#`."""
    start = cur.mark()
    out = _raw_open(cur)
    if isinstance(out, ParseError):
        return out
    body = out.cursor
    closing = '"' + out.value[1]
    j = cur.src.find(closing, body.index)
    if j < 0:
        return _unterminated("raw string", f"`{closing}`")(body.advance(len(cur.src)))
    end = body.advance(j - body.index + len(closing))
    return Parsed(A.String(span=end.span_from(start), value=cur.src[body.index : j], raw=True), end)


string = token(C.choice(_escaped_string, raw_string))


def _single_char(chunks: tuple[str, ...], span: Span) -> A.Char | ParseError:
    text = "".join(chunks)
    if len(text) != 1:
        return ParseError(
            span=span,
            message="a char literal holds exactly one character",
            fatal=True,
            hint='use a string ("...") for text',
        )
    return A.Char(span=span, value=text)


_char_body = C.choice(
    C.char_class(lambda c: c not in "'\\\n", "a character"),
    escape,
)

char = token(
    C.try_map(
        C.delimited(
            C.literal("'"),
            C.cut(C.many(_char_body)),
            C.choice(C.literal("'"), _unterminated("char literal", "`'`")),
        ),
        _single_char,
    )
)

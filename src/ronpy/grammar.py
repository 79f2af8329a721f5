"""
Container rules and the top-level `value` / `document` rules.

    document := ws attribute* value ws EOF
    attribute := "#" "!" "[" "enable" "(" extension ("," extension)* ","? ")" "]"
    value := option | bool | number | char | string
           | identifier_or_struct_or_enum | sequence | tuple | map
    identifier_or_struct_or_enum := identifier ( "(" body ")" | "{" fields "}" )?
    sequence := "[" (value ("," value)* ","?)? "]"
    tuple := "(" body ")"
    map := "{" (value ":" value ("," value ":" value)* ","?)? "}"
    body := fields | (value ("," value)* ","?)?
    fields := identifier ":" value ("," identifier ":" value)* ","?

Every container commits (`cut`) right after its opening delimiter, so a
malformed body is reported where it goes wrong instead of being retried as
a different kind of value.
"""

from __future__ import annotations

from . import ast as A
from . import combinators as C
from .combinators import Outcome, Parsed, Parser
from .cursor import Cursor
from .errors import ParseError, pretty_list
from .primitives import boolean, char, identifier, keyword, number, punct, skip_ws, string, token, ws
from .spans import Span


def value(cur: Cursor) -> Outcome:
    """Any value. Defined as a function so container rules can recurse into it."""
    return _value(cur)


_comma = punct(",")


def _comma_list(item: Parser) -> Parser:
    return C.many(ws(item), _comma)


def _non_empty(p: Parser, expected: str) -> Parser:
    def parse(cur: Cursor) -> Outcome:
        out = p(cur)
        if isinstance(out, Parsed) and not out.value:
            return ParseError.expecting(cur.here(), expected)
        return out

    return parse


def _block(open_: str, body: Parser, close: str) -> Parser:
    """`open_ body close`, committed once `open_` matched, counted as one nesting level."""
    return C.nested(C.literal(open_), C.cut(C.terminated(body, punct(close))))


# ---------------------------------------------------------------------------
# Fields and bodies
# ---------------------------------------------------------------------------

field = C.spanned(
    C.sequence(identifier, punct(":"), C.cut(ws(value))),
    lambda parts, span: A.Field(span=span, key=parts[0], value=parts[2]),
)

_fields = C.map(_comma_list(field), lambda fields: ("fields", tuple(fields)))
_some_fields = C.map(_non_empty(_comma_list(field), "a field"), lambda fields: ("fields", tuple(fields)))
_items = C.map(_comma_list(value), lambda items: ("items", tuple(items)))

paren_body = _block("(", C.choice(_some_fields, _items), ")")
brace_fields = _block("{", _fields, "}")


# ---------------------------------------------------------------------------
# Containers
# ---------------------------------------------------------------------------

sequence = C.spanned(
    _block("[", _comma_list(value), "]"),
    lambda items, span: A.Sequence(span=span, items=tuple(items)),
)

map_entry = C.spanned(
    C.sequence(value, C.cut(punct(":")), C.cut(ws(value))),
    lambda parts, span: A.MapEntry(span=span, key=parts[0], value=parts[2]),
)

rmap = C.spanned(
    _block("{", _comma_list(map_entry), "}"),
    lambda entries, span: A.Map(span=span, entries=tuple(entries)),
)


def _untagged(body: tuple[str, tuple], span: Span) -> A.Value:
    kind, parts = body
    if kind == "fields":
        return A.NamedFields(span=span, fields=parts)
    if not parts:
        return A.Unit(span=span)
    return A.Tuple(span=span, items=parts)


tuple_ = C.spanned(paren_body, _untagged)


def _tagged(parts: tuple[A.Identifier, tuple[str, tuple] | None], span: Span) -> A.Value:
    name, body = parts
    if body is None:
        return name
    kind, inner = body
    if kind == "fields":
        return A.NamedFields(span=span, fields=inner, name=name)
    return A.Tuple(span=span, items=inner, name=name)


identifier_or_struct_or_enum = C.spanned(
    C.sequence(identifier, C.optional(ws(C.choice(paren_body, brace_fields)))),
    _tagged,
)

option = C.choice(
    C.spanned(keyword("None"), lambda _, span: A.Option(span=span)),
    C.spanned(
        C.preceded(keyword("Some"), ws(_block("(", ws(value), ")"))),
        lambda inner, span: A.Option(span=span, value=inner),
    ),
)

_value = C.label(
    C.choice(
        option,
        boolean,
        number,
        char,
        string,
        identifier_or_struct_or_enum,
        sequence,
        tuple_,
        rmap,
    ),
    "a value",
)


# ---------------------------------------------------------------------------
# Attributes and the document
# ---------------------------------------------------------------------------

_EXTENSIONS = {e.value: e for e in A.Extension}


def _extension(ident: A.Identifier, span: Span) -> A.ExtensionName | ParseError:
    ext = _EXTENSIONS.get(ident.name)
    if ext is None:
        return ParseError(
            span=span,
            message=f"unknown extension `{ident.name}`",
            fatal=True,
            hint="expected " + pretty_list(f"`{name}`" for name in _EXTENSIONS),
        )
    return A.ExtensionName(span=span, extension=ext)


_enable = C.preceded(
    C.sequence(keyword("enable"), punct("(")),
    C.terminated(
        _non_empty(_comma_list(C.try_map(identifier, _extension)), "an extension name"),
        punct(")"),
    ),
)

attribute = C.spanned(
    C.preceded(
        C.literal("#"),
        C.cut(C.delimited(C.sequence(punct("!"), punct("[")), ws(_enable), punct("]"))),
    ),
    lambda names, span: A.Attribute(span=span, enable=tuple(names)),
)


def _document(parts: tuple, span: Span) -> A.Document:
    _, attributes, val, _, _ = parts
    return A.Document(span=span, value=val, attributes=tuple(attributes))


document = C.spanned(
    C.sequence(
        skip_ws,
        token(C.many(C.terminated(attribute, skip_ws))),
        value,
        skip_ws,
        C.end_of_input(),
    ),
    _document,
)

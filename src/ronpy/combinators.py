"""
Parser combinators over `Cursor`.

A parser is any callable `(Cursor) -> Parsed | ParseError`. Failures are
returned, never raised: `ParseError.fatal` tells `choice`, `optional` and
`many` whether they may absorb the failure and try something else.

Whitespace is never skipped implicitly. Grammar rules put `skip_ws` (see
`primitives`) between tokens themselves so node spans stay exact.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from .cursor import Cursor
from .errors import ParseError
from .spans import Span


T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Parsed(Generic[T]):
    """A successful parse: the value and the cursor right after it.

    `discarded` is the furthest recoverable failure that an `optional` or a
    `many` absorbed on the way ("I could have gone further, but this is what
    stopped me"). It wins over a later failure that did not get as far.
    """

    value: T
    cursor: Cursor
    discarded: ParseError | None = None


Outcome = Parsed[Any] | ParseError
Parser = Callable[[Cursor], Outcome]


def _keep_furthest(a: ParseError | None, b: ParseError | None) -> ParseError | None:
    if a is None:
        return b
    return a.furthest(b)


def fail(err: ParseError, discarded: ParseError | None) -> ParseError:
    """Report `err`, or the discarded failure if that one got further.

    The fatality of `err` is kept either way.
    """
    best = err.furthest(discarded)
    if err.fatal and not best.fatal:
        return best.as_fatal()
    return best


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------


def literal(text: str, expected: str | None = None) -> Parser:
    what = expected or f"`{text}`"

    def parse(cur: Cursor) -> Outcome:
        if cur.startswith(text):
            return Parsed(text, cur.advance(len(text)))
        return ParseError.expecting(cur.here(), what)

    return parse


def keyword(text: str, boundary: Callable[[str], bool]) -> Parser:
    """`literal(text)` that is not followed by a character in `boundary`."""

    def parse(cur: Cursor) -> Outcome:
        if cur.startswith(text) and not boundary(cur.peek(len(text))):
            return Parsed(text, cur.advance(len(text)))
        return ParseError.expecting(cur.here(), f"`{text}`")

    return parse


def char_class(predicate: Callable[[str], bool], expected: str) -> Parser:
    def parse(cur: Cursor) -> Outcome:
        c = cur.peek()
        if c and predicate(c):
            return Parsed(c, cur.advance())
        return ParseError.expecting(cur.here(), expected)

    return parse


def take_while(predicate: Callable[[str], bool]) -> Parser:
    """Consume code points while `predicate` holds. Never fails."""

    def parse(cur: Cursor) -> Outcome:
        src = cur.src
        i = cur.index
        n = len(src)
        while i < n and predicate(src[i]):
            i += 1
        return Parsed(src[cur.index : i], cur.advance(i - cur.index))

    return parse


def take_while1(predicate: Callable[[str], bool], expected: str) -> Parser:
    inner = take_while(predicate)

    def parse(cur: Cursor) -> Outcome:
        out = inner(cur)
        if not out.value:
            return ParseError.expecting(cur.here(), expected)
        return out

    return parse


def end_of_input() -> Parser:
    def parse(cur: Cursor) -> Outcome:
        if cur.at_end():
            return Parsed(None, cur)
        return ParseError.expecting(cur.here(), "end of input")

    return parse


def success(value: object = None) -> Parser:
    def parse(cur: Cursor) -> Outcome:
        return Parsed(value, cur)

    return parse


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------


def sequence(*parsers: Parser) -> Parser:
    """Run `parsers` in order; the value is the tuple of their values."""

    def parse(cur: Cursor) -> Outcome:
        values: list[object] = []
        discarded: ParseError | None = None
        for p in parsers:
            out = p(cur)
            if isinstance(out, ParseError):
                return fail(out, discarded)
            values.append(out.value)
            cur = out.cursor
            discarded = _keep_furthest(discarded, out.discarded)
        return Parsed(tuple(values), cur, discarded)

    return parse


def choice(*parsers: Parser) -> Parser:
    """Ordered choice: the first success or fatal failure wins.

    Recoverable failures are collected and the one that got furthest into
    the input is reported if nothing matches.
    """

    def parse(cur: Cursor) -> Outcome:
        best: ParseError | None = None
        for p in parsers:
            out = p(cur)
            if isinstance(out, Parsed) or out.fatal:
                return out
            best = out if best is None else best.furthest(out)
        if best is None:
            raise RuntimeError("choice() needs at least one alternative")
        return best

    return parse


def many(item: Parser, separator: Parser | None = None) -> Parser:
    """Zero or more `item`s, optionally separated; a trailing separator is fine."""

    def parse(cur: Cursor) -> Outcome:
        values: list[object] = []
        discarded: ParseError | None = None
        while True:
            out = item(cur)
            if isinstance(out, ParseError):
                if out.fatal:
                    return fail(out, discarded)
                return Parsed(values, cur, _keep_furthest(discarded, out))
            if out.cursor.index == cur.index:
                raise RuntimeError("many(): item parser succeeded without consuming input")
            values.append(out.value)
            cur = out.cursor
            discarded = _keep_furthest(discarded, out.discarded)

            if separator is None:
                continue
            sep = separator(cur)
            if isinstance(sep, ParseError):
                if sep.fatal:
                    return fail(sep, discarded)
                return Parsed(values, cur, _keep_furthest(discarded, sep))
            cur = sep.cursor
            discarded = _keep_furthest(discarded, sep.discarded)

    return parse


def optional(p: Parser) -> Parser:
    def parse(cur: Cursor) -> Outcome:
        out = p(cur)
        if isinstance(out, ParseError):
            if out.fatal:
                return out
            return Parsed(None, cur, out)
        return out

    return parse


def map(p: Parser, fn: Callable[[Any], Any]) -> Parser:
    def parse(cur: Cursor) -> Outcome:
        out = p(cur)
        if isinstance(out, ParseError):
            return out
        return Parsed(fn(out.value), out.cursor, out.discarded)

    return parse


def try_map(p: Parser, fn: Callable[[Any, Span], Any]) -> Parser:
    """Like `map`, but `fn` also gets the span and may return a ParseError."""

    def parse(cur: Cursor) -> Outcome:
        start = cur.mark()
        out = p(cur)
        if isinstance(out, ParseError):
            return out
        value = fn(out.value, out.cursor.span_from(start))
        if isinstance(value, ParseError):
            return value
        return Parsed(value, out.cursor, out.discarded)

    return parse


def cut(p: Parser, hint: str | None = None) -> Parser:
    """Commit: every failure of `p` becomes fatal."""

    def parse(cur: Cursor) -> Outcome:
        out = p(cur)
        if isinstance(out, ParseError):
            return out.as_fatal(hint)
        return out

    return parse


def preceded(first: Parser, second: Parser) -> Parser:
    return map(sequence(first, second), lambda v: v[1])


def terminated(first: Parser, second: Parser) -> Parser:
    return map(sequence(first, second), lambda v: v[0])


def delimited(first: Parser, second: Parser, third: Parser) -> Parser:
    return map(sequence(first, second, third), lambda v: v[1])


def recognize(p: Parser) -> Parser:
    """Replace the value of `p` by the source text it consumed."""

    def parse(cur: Cursor) -> Outcome:
        out = p(cur)
        if isinstance(out, ParseError):
            return out
        return Parsed(cur.src[cur.index : out.cursor.index], out.cursor, out.discarded)

    return parse


def spanned(p: Parser, build: Callable[[Any, Span], Any] | None = None) -> Parser:
    """Attach the span from entry to exit; `build(value, span)` makes the result."""

    def parse(cur: Cursor) -> Outcome:
        start = cur.mark()
        out = p(cur)
        if isinstance(out, ParseError):
            return out
        span = out.cursor.span_from(start)
        value = build(out.value, span) if build is not None else (out.value, span)
        return Parsed(value, out.cursor, out.discarded)

    return parse


def label(p: Parser, expected: str) -> Parser:
    """Name what `p` expects when it fails without getting anywhere."""

    def parse(cur: Cursor) -> Outcome:
        out = p(cur)
        if isinstance(out, ParseError) and not out.fatal and out.span.start.index <= cur.index:
            return ParseError.expecting(cur.here(), expected)
        return out

    return parse


def peek(predicate: Callable[[str], bool], expected: str) -> Parser:
    """Succeed without consuming if the next code point matches."""

    def parse(cur: Cursor) -> Outcome:
        c = cur.peek()
        if c and predicate(c):
            return Parsed(c, cur)
        return ParseError.expecting(cur.here(), expected)

    return parse


def nested(opening: Parser, p: Parser) -> Parser:
    """`opening` then `p`, one nesting level deeper, keeping `p`'s value.

    The cursor's limit is only enforced once `opening` matched, so trying a
    container alternative at the bound is not an error by itself.
    """

    def parse(cur: Cursor) -> Outcome:
        first = opening(cur)
        if isinstance(first, ParseError):
            return first
        if cur.depth >= cur.max_depth:
            return ParseError(
                span=Span(file=cur.file, start=cur.mark(), end=first.cursor.mark()),
                message=f"exceeded maximum nesting depth of {cur.max_depth}",
                fatal=True,
                hint="flatten the value or raise ParseOptions.max_depth",
            )
        out = p(first.cursor.nested())
        if isinstance(out, ParseError):
            return out
        return Parsed(out.value, out.cursor.with_depth(cur.depth), out.discarded)

    return parse

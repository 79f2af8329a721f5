from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace

from .diagnostics import Diagnostic, render
from .spans import Span


def pretty_list(items: Iterable[str]) -> str:
    """`a`, `one of a or b`, `one of a, b or c`."""
    out = list(dict.fromkeys(items))
    if not out:
        return "<empty list>"
    if len(out) == 1:
        return out[0]
    return "one of " + ", ".join(out[:-1]) + " or " + out[-1]


@dataclass(slots=True)
class ParseError(Exception):
    """A syntax error.

    Inside the combinator engine this is returned, not raised: a recoverable
    error lets an enclosing `choice` try its next alternative, a fatal one
    does not. `parse_source` raises whatever reaches the top.
    """

    span: Span
    message: str
    fatal: bool = False
    hint: str | None = None
    expected: tuple[str, ...] = ()

    def __str__(self) -> str:
        base = f"{self.span.format()}: {self.message}"
        if self.hint:
            return f"{base}\nhint: {self.hint}"
        return base

    @classmethod
    def expecting(cls, span: Span, *expected: str, fatal: bool = False) -> ParseError:
        return cls(span=span, message=f"expected {pretty_list(expected)}", fatal=fatal, expected=expected)

    def as_fatal(self, hint: str | None = None) -> ParseError:
        if self.fatal and (hint is None or self.hint):
            return self
        return replace(self, fatal=True, hint=self.hint or hint)

    def as_recoverable(self) -> ParseError:
        if not self.fatal:
            return self
        return replace(self, fatal=False)

    def furthest(self, other: ParseError | None) -> ParseError:
        """Keep whichever failure got further into the input.

        Failures at the same position with known expectations are merged so the
        message lists every alternative that was tried there.
        """
        if other is None:
            return self
        if other.span.start.offset > self.span.start.offset:
            return other
        if other.span.start.offset < self.span.start.offset:
            return self
        if self.expected and other.expected and not self.hint and not other.hint:
            merged = tuple(dict.fromkeys(self.expected + other.expected))
            return replace(
                self,
                message=f"expected {pretty_list(merged)}",
                fatal=self.fatal or other.fatal,
                expected=merged,
            )
        return self

    def diagnostic(self) -> Diagnostic:
        return Diagnostic(span=self.span, message=self.message, hint=self.hint)

    def render(self, src: str, *, tab_width: int = 4) -> str:
        return render(src, self.span, self.message, hint=self.hint, tab_width=tab_width)


@dataclass(slots=True)
class DeserializeError(Exception):
    """A shape mismatch found while converting an AST node."""

    span: Span
    message: str

    def __str__(self) -> str:
        return f"{self.span.format()}: {self.message}"

    def diagnostic(self) -> Diagnostic:
        return Diagnostic(span=self.span, message=self.message)

    def render(self, src: str, *, tab_width: int = 4) -> str:
        return render(src, self.span, self.message, tab_width=tab_width)

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, order=True)
class Position:
    """A concrete source position.

    `offset` counts UTF-8 bytes and `index` counts code points, both 0-based;
    line/column are 1-based (columns count code points) for user-facing messages.
    """

    offset: int
    line: int
    column: int
    index: int

    @classmethod
    def start(cls) -> "Position":
        return cls(offset=0, line=1, column=1, index=0)


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open span [start, end) in a single file."""

    file: str
    start: Position
    end: Position

    def format(self) -> str:
        return f"{self.file}:{self.start.line}:{self.start.column}"

    @property
    def is_empty(self) -> bool:
        return self.start.offset == self.end.offset

    @property
    def is_multiline(self) -> bool:
        return self.end.line > self.start.line

    def contains(self, other: Span) -> bool:
        return self.start.offset <= other.start.offset and other.end.offset <= self.end.offset

    def slice(self, src: str) -> str:
        return src[self.start.index : self.end.index]

    def join(self, other: Span) -> Span:
        return Span(file=self.file, start=min(self.start, other.start), end=max(self.end, other.end))

    def collapse(self) -> Span:
        """Zero-width span at the start of this one (an insertion point)."""
        return Span(file=self.file, start=self.start, end=self.start)

from __future__ import annotations

from dataclasses import dataclass, replace

from .spans import Position, Span


@dataclass(frozen=True, slots=True)
class Cursor:
    """An immutable view of `src` at one position.

    Every move returns a new cursor, so a combinator can keep the cursor it
    was handed and retry from there after a failed alternative.
    """

    src: str
    file: str = "<string>"
    index: int = 0
    offset: int = 0
    line: int = 1
    column: int = 1
    depth: int = 0
    max_depth: int = 32

    def at_end(self) -> bool:
        return self.index >= len(self.src)

    def peek(self, n: int = 0) -> str:
        """Return the code point `n` places ahead, or "" at end of input."""
        j = self.index + n
        if j >= len(self.src):
            return ""
        return self.src[j]

    def startswith(self, text: str) -> bool:
        return self.src.startswith(text, self.index)

    def rest(self) -> str:
        return self.src[self.index :]

    def advance(self, n: int = 1) -> Cursor:
        end = min(self.index + n, len(self.src))
        if end == self.index:
            return self
        chunk = self.src[self.index : end]
        newlines = chunk.count("\n")
        if newlines:
            line = self.line + newlines
            column = end - self.src.rindex("\n", self.index, end)
        else:
            line = self.line
            column = self.column + len(chunk)
        return replace(
            self,
            index=end,
            offset=self.offset + len(chunk.encode("utf-8", "surrogatepass")),
            line=line,
            column=column,
        )

    def mark(self) -> Position:
        return Position(offset=self.offset, line=self.line, column=self.column, index=self.index)

    def span_from(self, start: Position) -> Span:
        return Span(file=self.file, start=start, end=self.mark())

    def here(self) -> Span:
        """Zero-width span at the current position."""
        pos = self.mark()
        return Span(file=self.file, start=pos, end=pos)

    def nested(self) -> Cursor:
        return replace(self, depth=self.depth + 1)

    def with_depth(self, depth: int) -> Cursor:
        if depth == self.depth:
            return self
        return replace(self, depth=depth)

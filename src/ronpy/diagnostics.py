from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .spans import Span

Severity = Literal["error", "warning"]

# Multi-line spans longer than this show their first and last lines only.
MAX_MULTILINE_ROWS = 6
_EDGE_ROWS = 2


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured form of an error: one span, one message."""

    span: Span
    message: str
    severity: Severity = "error"
    hint: str | None = None

    def render(self, src: str, *, tab_width: int = 4) -> str:
        return render(src, self.span, self.message, hint=self.hint, tab_width=tab_width, severity=self.severity)

    def to_dict(self) -> dict[str, object]:
        start, end = self.span.start, self.span.end
        return {
            "severity": self.severity,
            "message": self.message,
            "hint": self.hint,
            "file": self.span.file,
            "start": {"offset": start.offset, "line": start.line, "column": start.column},
            "end": {"offset": end.offset, "line": end.line, "column": end.column},
        }


def _expand_tabs(line: str, tab_width: int) -> tuple[str, list[int]]:
    """Expand tabs to tab stops; also return the display column of each code point.

    The returned list has one extra entry: the display width of the whole line.
    """
    out: list[str] = []
    cols: list[int] = []
    width = 0
    for ch in line:
        cols.append(width)
        if ch == "\t":
            pad = tab_width - (width % tab_width) if tab_width > 0 else 0
            out.append(" " * pad)
            width += pad
        else:
            out.append(ch)
            width += 1
    cols.append(width)
    return "".join(out), cols


def _display_col(cols: list[int], column: int) -> int:
    i = min(max(column - 1, 0), len(cols) - 1)
    return cols[i]


def render(
    src: str,
    span: Span,
    message: str,
    *,
    hint: str | None = None,
    tab_width: int = 4,
    severity: Severity = "error",
) -> str:
    """Render a source excerpt with `span` underlined.

    One-line spans get carets under the exact columns; multi-line spans get a
    box: an opening corner under the first column, a `|` rail down the left
    and a closing corner under the last column.
    """
    lines = [ln.rstrip("\r") for ln in src.split("\n")]

    def line_text(no: int) -> str:
        return lines[no - 1] if 0 < no <= len(lines) else ""

    first, last = span.start.line, span.end.line
    end_column = span.end.column
    # A span that stops right after a newline ends on the previous line.
    if last > first and end_column == 1:
        last -= 1
        end_column = len(line_text(last)) + 1

    width = len(str(last))
    pad = " " * width
    out = [f"{severity}: {message}", f"{pad}--> {span.format()}", f"{pad} |"]

    def row(no: int | None, content: str) -> None:
        gutter = str(no).rjust(width) if no is not None else pad
        out.append(f"{gutter} | {content}".rstrip() if content else f"{gutter} |")

    if first == last:
        text, cols = _expand_tabs(line_text(first), tab_width)
        start = _display_col(cols, span.start.column)
        end = _display_col(cols, end_column)
        row(first, text)
        row(None, " " * start + "^" * max(1, end - start))
    else:
        first_text, first_cols = _expand_tabs(line_text(first), tab_width)
        start = _display_col(first_cols, span.start.column)
        row(first, "  " + first_text)
        row(None, " " + "_" * (start + 1) + "^")

        middle = list(range(first + 1, last))
        if len(middle) + 2 > MAX_MULTILINE_ROWS:
            head, tail = middle[: _EDGE_ROWS - 1], middle[len(middle) - (_EDGE_ROWS - 1) :]
            for no in head:
                row(no, "| " + _expand_tabs(line_text(no), tab_width)[0])
            out.append("...")
            for no in tail:
                row(no, "| " + _expand_tabs(line_text(no), tab_width)[0])
        else:
            for no in middle:
                row(no, "| " + _expand_tabs(line_text(no), tab_width)[0])

        last_text, last_cols = _expand_tabs(line_text(last), tab_width)
        end = _display_col(last_cols, end_column)
        row(last, "| " + last_text)
        row(None, "|" + "_" * end + "^")

    if hint:
        out.append(f"{pad} = hint: {hint}")
    return "\n".join(out) + "\n"

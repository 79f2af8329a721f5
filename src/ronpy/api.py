from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

from . import ast as A
from .combinators import Parsed
from .cursor import Cursor
from .de import Deserializer
from .errors import ParseError
from .grammar import document
from .shapes import Shape


logger = logging.getLogger(__name__)

# Upper bound of interpreter frames one nesting level of a literal costs
# across the combinator chain of the deepest rule (named fields).
_FRAMES_PER_LEVEL = 32
_BASE_FRAMES = 200


@dataclass(frozen=True, slots=True)
class ParseOptions:
    max_depth: int = 32
    tab_width: int = 4
    extensions: frozenset[A.Extension] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")
        if self.tab_width < 1:
            raise ValueError(f"tab_width must be positive, got {self.tab_width}")


_DEFAULT_OPTIONS = ParseOptions()


@contextmanager
def _stack_for(max_depth: int) -> Iterator[None]:
    """Raise the interpreter recursion limit for one call, then put it back."""
    needed = _BASE_FRAMES + max_depth * _FRAMES_PER_LEVEL
    previous = sys.getrecursionlimit()
    if previous >= needed:
        yield
        return
    sys.setrecursionlimit(needed)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


def parse_document(src: str, *, file: str = "<string>", options: ParseOptions | None = None) -> A.Document:
    opts = options or _DEFAULT_OPTIONS
    logger.debug("parsing %s (%d chars)", file, len(src))

    with _stack_for(opts.max_depth):
        out = document(Cursor(src=src, file=file, max_depth=opts.max_depth))
    if not isinstance(out, Parsed):
        logger.debug("parse failed at %s: %s", out.span.format(), out.message)
        raise out.as_fatal()
    return out.value


def parse_source(src: str, *, file: str = "<string>", options: ParseOptions | None = None) -> A.Value:
    return parse_document(src, file=file, options=options).value


def _read(path: str | Path) -> tuple[str, str]:
    p = Path(path).expanduser().resolve()
    return p.read_text(encoding="utf-8"), str(p)


def parse_file(path: str | Path, *, options: ParseOptions | None = None) -> A.Value:
    src, file = _read(path)
    return parse_source(src, file=file, options=options)


def from_str(
    src: str,
    shape: Shape,
    *,
    file: str = "<string>",
    options: ParseOptions | None = None,
) -> object:
    """Parse `src` and convert its value to `shape`.

    Extensions enabled by the document's `#![enable(...)]` attribute are
    added to those in `options`.
    """
    opts = options or _DEFAULT_OPTIONS
    doc = parse_document(src, file=file, options=opts)
    de = Deserializer(extensions=opts.extensions | doc.extensions, max_depth=opts.max_depth)
    with _stack_for(opts.max_depth):
        return de.deserialize(doc.value, shape)


def from_file(path: str | Path, shape: Shape, *, options: ParseOptions | None = None) -> object:
    src, file = _read(path)
    return from_str(src, shape, file=file, options=options)

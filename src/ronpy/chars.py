"""Character categories used by the grammar rules.

All categories are ASCII-only: identifiers, digits and insignificant
whitespace never include non-ASCII code points.
"""

from __future__ import annotations

import string

_DIGITS = frozenset(string.digits)
_IDENT_FIRST = frozenset(string.ascii_letters + "_")
_IDENT_OTHER = _IDENT_FIRST | _DIGITS
_IDENT_RAW = _IDENT_OTHER | frozenset(".+-")
_WHITESPACE = frozenset(" \t\n\r")

_RADIX_DIGITS: dict[int, frozenset[str]] = {
    2: frozenset("01"),
    8: frozenset("01234567"),
    10: _DIGITS,
    16: frozenset(string.hexdigits),
}


def is_ws(c: str) -> bool:
    return c in _WHITESPACE


def is_digit(c: str) -> bool:
    return c in _DIGITS


def is_ident_first(c: str) -> bool:
    return c in _IDENT_FIRST


def is_ident_other(c: str) -> bool:
    return c in _IDENT_OTHER


def is_ident_raw(c: str) -> bool:
    return c in _IDENT_RAW


def radix_digit(radix: int):
    """Predicate for one digit in `radix`, `_` separators included."""
    allowed = _RADIX_DIGITS[radix] | {"_"}
    return allowed.__contains__

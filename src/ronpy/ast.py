from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from .spans import Span


@dataclass(frozen=True, slots=True)
class Node:
    span: Span


@dataclass(frozen=True, slots=True)
class Unit(Node):
    """`()`"""


@dataclass(frozen=True, slots=True)
class Bool(Node):
    value: bool


@dataclass(frozen=True, slots=True)
class Integer(Node):
    """An integer literal.

    `value` is signed; its magnitude is at most 64 bits (128 bits with an
    `i128`/`u128` suffix). `suffix` is the explicit type suffix, if any.
    """

    value: int
    suffix: str | None = None

    @property
    def negative(self) -> bool:
        return self.value < 0


@dataclass(frozen=True, slots=True)
class Float(Node):
    value: float
    suffix: str | None = None


@dataclass(frozen=True, slots=True)
class Char(Node):
    value: str  # exactly one code point


@dataclass(frozen=True, slots=True)
class String(Node):
    value: str  # escapes already decoded
    raw: bool = False


@dataclass(frozen=True, slots=True)
class Identifier(Node):
    name: str  # without the `r#` prefix of raw identifiers
    raw: bool = False

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class Option(Node):
    """`None` (value is None) or `Some(value)`."""

    value: "Value | None" = None


@dataclass(frozen=True, slots=True)
class Sequence(Node):
    items: tuple["Value", ...] = ()


@dataclass(frozen=True, slots=True)
class Tuple(Node):
    items: tuple["Value", ...] = ()
    name: Identifier | None = None


@dataclass(frozen=True, slots=True)
class Field(Node):
    """`key: value` inside a named-fields literal; the span covers both."""

    key: Identifier
    value: "Value"


@dataclass(frozen=True, slots=True)
class NamedFields(Node):
    """`Name(a: 1, b: 2)`, `(a: 1)` or `Name { a: 1 }`."""

    fields: tuple[Field, ...] = ()
    name: Identifier | None = None

    def field_names(self) -> tuple[str, ...]:
        return tuple(f.key.name for f in self.fields)


@dataclass(frozen=True, slots=True)
class MapEntry(Node):
    key: "Value"
    value: "Value"


@dataclass(frozen=True, slots=True)
class Map(Node):
    entries: tuple[MapEntry, ...] = ()


Value = (
    Unit
    | Bool
    | Integer
    | Float
    | Char
    | String
    | Identifier
    | Option
    | Sequence
    | Tuple
    | NamedFields
    | Map
)


class Extension(str, Enum):
    IMPLICIT_SOME = "implicit_some"
    UNWRAP_NEWTYPES = "unwrap_newtypes"
    UNWRAP_VARIANT_NEWTYPES = "unwrap_variant_newtypes"


@dataclass(frozen=True, slots=True)
class ExtensionName(Node):
    extension: Extension


@dataclass(frozen=True, slots=True)
class Attribute(Node):
    """`#![enable(...)]` in front of the value."""

    enable: tuple[ExtensionName, ...] = ()


@dataclass(frozen=True, slots=True)
class Document(Node):
    value: Value
    attributes: tuple[Attribute, ...] = ()

    @property
    def extensions(self) -> frozenset[Extension]:
        return frozenset(e.extension for a in self.attributes for e in a.enable)


def children(node: Node) -> tuple[Node, ...]:
    """Direct child nodes in source order."""
    if isinstance(node, Option):
        return (node.value,) if node.value is not None else ()
    if isinstance(node, Sequence):
        return node.items
    if isinstance(node, Tuple):
        head = (node.name,) if node.name is not None else ()
        return head + node.items
    if isinstance(node, NamedFields):
        head = (node.name,) if node.name is not None else ()
        return head + node.fields
    if isinstance(node, Map):
        return node.entries
    if isinstance(node, (Field, MapEntry)):
        return (node.key, node.value)
    if isinstance(node, Attribute):
        return node.enable
    if isinstance(node, Document):
        return node.attributes + (node.value,)
    return ()


def walk(node: Node) -> Iterator[Node]:
    """Pre-order traversal of `node` and everything below it."""
    stack = [node]
    while stack:
        cur = stack.pop()
        yield cur
        stack.extend(reversed(children(cur)))


def kind(node: Node) -> str:
    """Short lowercase name of the node kind, e.g. `named_fields`."""
    name = type(node).__name__
    out = [name[0].lower()]
    for c in name[1:]:
        if c.isupper():
            out.append("_")
        out.append(c.lower())
    return "".join(out)

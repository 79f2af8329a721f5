from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from . import ast as A
from .errors import DeserializeError, pretty_list
from .shapes import (
    AnyShape,
    EnumShape,
    Field,
    Kind,
    MapShape,
    NewtypeShape,
    OptionShape,
    Primitive,
    SeqShape,
    Shape,
    StructShape,
    TupleShape,
    TupleStructShape,
    UnitStructShape,
    Variant,
    VariantKind,
)
from .spans import Span


logger = logging.getLogger(__name__)

_F32_MAX = 3.4028234663852886e38


@dataclass(frozen=True, slots=True)
class EnumValue:
    """An enum value without a factory: the variant name and its payload."""

    variant: str
    value: object = None


def describe(node: A.Node) -> str:
    """How a node reads in "invalid type: <...>, expected ..." messages."""
    if isinstance(node, A.Unit):
        return "unit value"
    if isinstance(node, A.Bool):
        return f"boolean `{'true' if node.value else 'false'}`"
    if isinstance(node, A.Integer):
        return f"integer `{node.value}{node.suffix or ''}`"
    if isinstance(node, A.Float):
        return f"floating point `{node.value!r}{node.suffix or ''}`"
    if isinstance(node, A.Char):
        return f"character `{node.value}`"
    if isinstance(node, A.String):
        return f'string "{node.value}"'
    if isinstance(node, A.Identifier):
        return f"identifier `{node.name}`"
    if isinstance(node, A.Option):
        return "option"
    if isinstance(node, A.Sequence):
        return "sequence"
    if isinstance(node, A.Tuple):
        return f"tuple struct `{node.name}`" if node.name is not None else "tuple"
    if isinstance(node, A.NamedFields):
        return f"struct `{node.name}`" if node.name is not None else "map"
    if isinstance(node, A.Map):
        return "map"
    return type(node).__name__


def _describe_variant(node: A.Node) -> str:
    if isinstance(node, A.Identifier):
        return "unit variant"
    if isinstance(node, A.Tuple):
        return "newtype variant" if len(node.items) == 1 else "tuple variant"
    if isinstance(node, A.NamedFields):
        return "struct variant"
    return describe(node)


def _error(span: Span, message: str) -> DeserializeError:
    logger.debug("deserialize error at %s: %s", span.format(), message)
    return DeserializeError(span=span, message=message)


def invalid_type(node: A.Node, expected: str, *, unexpected: str | None = None) -> DeserializeError:
    return _error(node.span, f"invalid type: {unexpected or describe(node)}, expected {expected}")


def invalid_length(node: A.Node, length: int, expected: str) -> DeserializeError:
    return _error(node.span, f"invalid length {length}, expected {expected}")


def _backticked(names: tuple[str, ...]) -> str:
    return pretty_list(f"`{n}`" for n in names)


def _opens_level(node: A.Value) -> bool:
    if isinstance(node, A.Option):
        return node.value is not None
    return isinstance(node, (A.Unit, A.Sequence, A.Tuple, A.NamedFields, A.Map))


@dataclass(slots=True)
class Deserializer:
    """Converts AST nodes into the values a `Shape` asks for.

    One method per shape category; `deserialize` dispatches on the shape
    type. A binding layer either builds shapes and calls `deserialize`, or
    calls the per-category methods directly while walking its own type
    description. The AST is only read, so one tree can be tried against
    several shapes in turn.
    """

    extensions: frozenset[A.Extension] = frozenset()
    max_depth: int = 32
    _open: list[A.Value] = field(default_factory=list, init=False, repr=False)

    @property
    def depth(self) -> int:
        """Containers entered on the way to the node being converted."""
        return len(self._open)

    def deserialize(self, node: A.Value, shape: Shape) -> object:
        # One level per container node. A node passed on unchanged (unwrapped
        # newtype, implicit Some) is only counted once.
        if not _opens_level(node) or (self._open and self._open[-1] is node):
            return self._dispatch(node, shape)
        if self.depth >= self.max_depth:
            raise _error(node.span, f"exceeded maximum nesting depth of {self.max_depth}")
        self._open.append(node)
        try:
            return self._dispatch(node, shape)
        finally:
            self._open.pop()

    def _dispatch(self, node: A.Value, shape: Shape) -> object:
        if isinstance(shape, Primitive):
            return self.deserialize_primitive(node, shape)
        if isinstance(shape, AnyShape):
            return self.deserialize_any(node)
        if isinstance(shape, OptionShape):
            return self.deserialize_option(node, shape)
        if isinstance(shape, SeqShape):
            return self.deserialize_seq(node, shape)
        if isinstance(shape, TupleShape):
            return self.deserialize_tuple(node, shape)
        if isinstance(shape, MapShape):
            return self.deserialize_map(node, shape)
        if isinstance(shape, StructShape):
            return self.deserialize_struct(node, shape)
        if isinstance(shape, TupleStructShape):
            return self.deserialize_tuple_struct(node, shape)
        if isinstance(shape, NewtypeShape):
            return self.deserialize_newtype(node, shape)
        if isinstance(shape, UnitStructShape):
            return self.deserialize_unit_struct(node, shape)
        if isinstance(shape, EnumShape):
            return self.deserialize_enum(node, shape)
        raise TypeError(f"not a shape: {shape!r}")

    # -----------------------------------------------------------------------
    # Primitives
    # -----------------------------------------------------------------------

    def deserialize_primitive(self, node: A.Value, shape: Primitive) -> object:
        kind = shape.kind
        if kind is Kind.BOOL and isinstance(node, A.Bool):
            return node.value
        if kind.is_integer and isinstance(node, A.Integer):
            return self._integer(node, shape)
        if kind.is_float and isinstance(node, (A.Float, A.Integer)):
            return self._float(node, shape)
        if kind is Kind.CHAR:
            if isinstance(node, A.Char):
                return node.value
            if isinstance(node, A.String) and len(node.value) == 1:
                return node.value
        if kind is Kind.STR and isinstance(node, (A.String, A.Char)):
            return node.value
        if kind is Kind.UNIT and isinstance(node, A.Unit):
            return None
        raise invalid_type(node, shape.expecting())

    def _integer(self, node: A.Integer, shape: Primitive) -> int:
        if node.suffix is not None and node.suffix != shape.kind.value:
            raise invalid_type(node, shape.expecting())
        lo, hi = shape.kind.int_range()
        if not lo <= node.value <= hi:
            raise _error(node.span, f"invalid value: {describe(node)}, expected {shape.expecting()}")
        return node.value

    def _float(self, node: A.Float | A.Integer, shape: Primitive) -> float:
        if node.suffix is not None and node.suffix != shape.kind.value:
            raise invalid_type(node, shape.expecting())
        value = float(node.value)
        if shape.kind is Kind.F32 and math.isfinite(value) and abs(value) > _F32_MAX:
            raise _error(node.span, f"invalid value: {describe(node)}, expected {shape.expecting()}")
        return value

    # -----------------------------------------------------------------------
    # Containers
    # -----------------------------------------------------------------------

    def deserialize_option(self, node: A.Value, shape: OptionShape) -> object:
        if isinstance(node, A.Option):
            if node.value is None:
                return None
            return self.deserialize(node.value, shape.inner)
        if A.Extension.IMPLICIT_SOME in self.extensions:
            return self.deserialize(node, shape.inner)
        raise invalid_type(node, shape.expecting())

    def deserialize_seq(self, node: A.Value, shape: SeqShape) -> list[object]:
        if isinstance(node, A.Sequence) or (isinstance(node, A.Tuple) and node.name is None):
            return [self.deserialize(item, shape.item) for item in node.items]
        raise invalid_type(node, shape.expecting())

    def deserialize_tuple(self, node: A.Value, shape: TupleShape) -> tuple[object, ...]:
        if isinstance(node, A.Unit) and not shape.items:
            return ()
        if isinstance(node, A.Sequence) or (isinstance(node, A.Tuple) and node.name is None):
            return self._positional(node, shape.items, shape.expecting())
        raise invalid_type(node, shape.expecting())

    def _positional(self, node: A.Sequence | A.Tuple, shapes: tuple[Shape, ...], expected: str) -> tuple[object, ...]:
        if len(node.items) != len(shapes):
            raise invalid_length(node, len(node.items), expected)
        return tuple(self.deserialize(item, s) for item, s in zip(node.items, shapes))

    def deserialize_map(self, node: A.Value, shape: MapShape) -> dict[object, object]:
        out: dict[object, object] = {}
        if isinstance(node, A.Map):
            for entry in node.entries:
                key = self._map_key(entry.key, shape.key)
                out[key] = self.deserialize(entry.value, shape.value)
            return out
        if isinstance(node, A.NamedFields) and node.name is None:
            for f in node.fields:
                key = self._field_key(f.key, shape.key)
                out[key] = self.deserialize(f.value, shape.value)
            return out
        raise invalid_type(node, shape.expecting())

    def _map_key(self, node: A.Value, shape: Shape) -> object:
        key = self.deserialize(node, shape)
        try:
            hash(key)
        except TypeError:
            raise _error(node.span, f"invalid map key: {describe(node)} cannot be used as a key") from None
        return key

    def _field_key(self, ident: A.Identifier, shape: Shape) -> object:
        if isinstance(shape, AnyShape) or shape == Primitive(Kind.STR):
            return ident.name
        raise invalid_type(ident, shape.expecting())

    # -----------------------------------------------------------------------
    # Structs
    # -----------------------------------------------------------------------

    def _check_name(self, name: A.Identifier | None, expected: str) -> None:
        if name is not None and name.name != expected:
            raise _error(name.span, f"invalid struct type: `{name.name}`, expected `{expected}`")

    def _named_fields(self, node: A.NamedFields, fields: tuple[Field, ...]) -> dict[str, object]:
        wanted = {f.name: f for f in fields}
        values: dict[str, object] = {}
        for f in node.fields:
            name = f.key.name
            declared = wanted.get(name)
            if declared is None:
                if wanted:
                    expected = f"expected {_backticked(tuple(wanted))}"
                else:
                    expected = "there are no fields"
                raise _error(f.key.span, f"unknown field `{name}`, {expected}")
            if name in values:
                raise _error(f.key.span, f"duplicate field `{name}`")
            values[name] = self.deserialize(f.value, declared.shape)
        for name in wanted:
            if name not in values:
                raise _error(node.span, f"missing field `{name}`")
        return values

    def _struct_values(self, node: A.Value, shape: StructShape) -> dict[str, object]:
        if isinstance(node, A.NamedFields):
            self._check_name(node.name, shape.name)
            return self._named_fields(node, shape.fields)
        if isinstance(node, (A.Sequence, A.Tuple)):
            if isinstance(node, A.Tuple):
                self._check_name(node.name, shape.name)
            items = self._positional(node, tuple(f.shape for f in shape.fields), shape.expecting())
            return dict(zip(shape.field_names(), items))
        if isinstance(node, A.Unit) and not shape.fields:
            return {}
        raise invalid_type(node, shape.expecting())

    def deserialize_struct(self, node: A.Value, shape: StructShape) -> object:
        values = self._struct_values(node, shape)
        return shape.factory(**values) if shape.factory is not None else values

    def deserialize_tuple_struct(self, node: A.Value, shape: TupleStructShape) -> object:
        if isinstance(node, A.Tuple):
            self._check_name(node.name, shape.name)
        elif not isinstance(node, A.Sequence):
            raise invalid_type(node, shape.expecting())
        values = self._positional(node, shape.items, shape.expecting())
        return shape.factory(*values) if shape.factory is not None else values

    def deserialize_newtype(self, node: A.Value, shape: NewtypeShape) -> object:
        if A.Extension.UNWRAP_NEWTYPES in self.extensions:
            value = self.deserialize(node, shape.inner)
        elif isinstance(node, A.Tuple):
            self._check_name(node.name, shape.name)
            (value,) = self._positional(node, (shape.inner,), shape.expecting())
        else:
            raise invalid_type(node, shape.expecting())
        return shape.factory(value) if shape.factory is not None else value

    def deserialize_unit_struct(self, node: A.Value, shape: UnitStructShape) -> object:
        if isinstance(node, A.Identifier):
            self._check_name(node, shape.name)
        elif not isinstance(node, A.Unit):
            raise invalid_type(node, shape.expecting())
        return shape.factory() if shape.factory is not None else None

    # -----------------------------------------------------------------------
    # Enums
    # -----------------------------------------------------------------------

    def deserialize_enum(self, node: A.Value, shape: EnumShape) -> object:
        if isinstance(node, A.Identifier):
            name = node
        elif isinstance(node, (A.Tuple, A.NamedFields)) and node.name is not None:
            name = node.name
        else:
            raise invalid_type(node, shape.expecting())

        variant = shape.variant(name.name)
        if variant is None:
            names = tuple(v.name for v in shape.variants)
            raise _error(name.span, f"unknown variant `{name.name}`, expected {_backticked(names)}")

        value = self._variant(node, variant)
        if shape.factory is not None:
            return shape.factory(variant.name, value)
        return EnumValue(variant=variant.name, value=value)

    def _variant(self, node: A.Value, variant: Variant) -> object:
        if variant.kind is VariantKind.UNIT and isinstance(node, A.Identifier):
            return None
        if variant.kind is VariantKind.NEWTYPE and variant.inner is not None:
            if isinstance(node, A.Tuple):
                (value,) = self._positional(node, (variant.inner,), variant.expecting())
                return value
            if (
                isinstance(node, A.NamedFields)
                and isinstance(variant.inner, StructShape)
                and A.Extension.UNWRAP_VARIANT_NEWTYPES in self.extensions
            ):
                inner = variant.inner
                values = self._named_fields(node, inner.fields)
                return inner.factory(**values) if inner.factory is not None else values
        if variant.kind is VariantKind.TUPLE and isinstance(node, A.Tuple):
            return self._positional(node, variant.items, variant.expecting())
        if variant.kind is VariantKind.STRUCT and isinstance(node, A.NamedFields):
            return self._named_fields(node, variant.fields)
        raise invalid_type(node, variant.expecting(), unexpected=_describe_variant(node))

    # -----------------------------------------------------------------------
    # Self-describing
    # -----------------------------------------------------------------------

    def deserialize_any(self, node: A.Value) -> object:
        """Plain Python data for whatever the node is."""
        if isinstance(node, A.Unit):
            return None
        if isinstance(node, (A.Bool, A.Integer, A.Float, A.Char, A.String)):
            return node.value
        if isinstance(node, A.Identifier):
            return EnumValue(variant=node.name)
        if isinstance(node, A.Option):
            return None if node.value is None else self.deserialize_nested_any(node.value)
        if isinstance(node, A.Sequence):
            return [self.deserialize_nested_any(item) for item in node.items]
        if isinstance(node, A.Tuple):
            items = tuple(self.deserialize_nested_any(item) for item in node.items)
            return items if node.name is None else EnumValue(variant=node.name.name, value=items)
        if isinstance(node, A.NamedFields):
            values = {f.key.name: self.deserialize_nested_any(f.value) for f in node.fields}
            return values if node.name is None else EnumValue(variant=node.name.name, value=values)
        if isinstance(node, A.Map):
            return {self._map_key(e.key, _ANY): self.deserialize_nested_any(e.value) for e in node.entries}
        raise TypeError(f"not an AST value: {node!r}")

    def deserialize_nested_any(self, node: A.Value) -> object:
        return self.deserialize(node, _ANY)


_ANY = AnyShape()


def from_ast(
    node: A.Value,
    shape: Shape,
    *,
    extensions: frozenset[A.Extension] = frozenset(),
    max_depth: int = 32,
) -> object:
    return Deserializer(extensions=extensions, max_depth=max_depth).deserialize(node, shape)

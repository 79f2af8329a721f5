"""
Requested-shape tokens for the deserializer.

A shape says what the caller wants a node to become. Binding layers build
these once per target type; `factory` callables on struct-like shapes turn
the converted parts into the caller's own objects.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum


class Kind(str, Enum):
    BOOL = "bool"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    I128 = "i128"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    U128 = "u128"
    F32 = "f32"
    F64 = "f64"
    CHAR = "char"
    STR = "str"
    UNIT = "unit"

    @property
    def is_integer(self) -> bool:
        return self.value[0] in "iu" and self.value[1:].isdigit()

    @property
    def is_float(self) -> bool:
        return self.value[0] == "f"

    def int_range(self) -> tuple[int, int]:
        """Inclusive value range of an integer kind."""
        bits = int(self.value[1:])
        if self.value[0] == "u":
            return 0, (1 << bits) - 1
        return -(1 << (bits - 1)), (1 << (bits - 1)) - 1


_EXPECTING = {
    Kind.BOOL: "a boolean",
    Kind.CHAR: "a character",
    Kind.STR: "a string",
    Kind.UNIT: "unit",
}


@dataclass(frozen=True, slots=True)
class Primitive:
    kind: Kind

    def expecting(self) -> str:
        return _EXPECTING.get(self.kind, self.kind.value)


@dataclass(frozen=True, slots=True)
class AnyShape:
    """Whatever the node is, converted to plain Python data."""

    def expecting(self) -> str:
        return "any value"


@dataclass(frozen=True, slots=True)
class OptionShape:
    inner: "Shape"

    def expecting(self) -> str:
        return "option"


@dataclass(frozen=True, slots=True)
class SeqShape:
    item: "Shape"

    def expecting(self) -> str:
        return "a sequence"


@dataclass(frozen=True, slots=True)
class TupleShape:
    items: tuple["Shape", ...]

    def expecting(self) -> str:
        return f"a tuple of size {len(self.items)}"


@dataclass(frozen=True, slots=True)
class MapShape:
    key: "Shape"
    value: "Shape"

    def expecting(self) -> str:
        return "a map"


@dataclass(frozen=True, slots=True)
class Field:
    name: str
    shape: "Shape"


@dataclass(frozen=True, slots=True)
class StructShape:
    name: str
    fields: tuple[Field, ...]
    factory: Callable[..., object] | None = None  # called as factory(**fields)

    def expecting(self) -> str:
        return f"struct {self.name}"

    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)


@dataclass(frozen=True, slots=True)
class TupleStructShape:
    name: str
    items: tuple["Shape", ...]
    factory: Callable[..., object] | None = None  # called as factory(*items)

    def expecting(self) -> str:
        return f"tuple struct {self.name}"


@dataclass(frozen=True, slots=True)
class NewtypeShape:
    name: str
    inner: "Shape"
    factory: Callable[[object], object] | None = None

    def expecting(self) -> str:
        return f"newtype struct {self.name}"


@dataclass(frozen=True, slots=True)
class UnitStructShape:
    name: str
    factory: Callable[[], object] | None = None

    def expecting(self) -> str:
        return f"unit struct {self.name}"


class VariantKind(str, Enum):
    UNIT = "unit"
    NEWTYPE = "newtype"
    TUPLE = "tuple"
    STRUCT = "struct"


@dataclass(frozen=True, slots=True)
class Variant:
    name: str
    kind: VariantKind = VariantKind.UNIT
    inner: "Shape | None" = None  # newtype variants
    items: tuple["Shape", ...] = ()  # tuple variants
    fields: tuple[Field, ...] = ()  # struct variants

    @classmethod
    def unit(cls, name: str) -> Variant:
        return cls(name=name)

    @classmethod
    def newtype(cls, name: str, inner: Shape) -> Variant:
        return cls(name=name, kind=VariantKind.NEWTYPE, inner=inner)

    @classmethod
    def tuple_(cls, name: str, *items: Shape) -> Variant:
        return cls(name=name, kind=VariantKind.TUPLE, items=items)

    @classmethod
    def struct(cls, name: str, *fields: Field) -> Variant:
        return cls(name=name, kind=VariantKind.STRUCT, fields=fields)

    def expecting(self) -> str:
        return f"{self.kind.value} variant"


@dataclass(frozen=True, slots=True)
class EnumShape:
    name: str
    variants: tuple[Variant, ...]
    factory: Callable[[str, object], object] | None = None  # called as factory(variant, value)

    def expecting(self) -> str:
        return f"enum {self.name}"

    def variant(self, name: str) -> Variant | None:
        for v in self.variants:
            if v.name == name:
                return v
        return None


Shape = (
    Primitive
    | AnyShape
    | OptionShape
    | SeqShape
    | TupleShape
    | MapShape
    | StructShape
    | TupleStructShape
    | NewtypeShape
    | UnitStructShape
    | EnumShape
)


BOOL = Primitive(Kind.BOOL)
I8 = Primitive(Kind.I8)
I16 = Primitive(Kind.I16)
I32 = Primitive(Kind.I32)
I64 = Primitive(Kind.I64)
I128 = Primitive(Kind.I128)
U8 = Primitive(Kind.U8)
U16 = Primitive(Kind.U16)
U32 = Primitive(Kind.U32)
U64 = Primitive(Kind.U64)
U128 = Primitive(Kind.U128)
F32 = Primitive(Kind.F32)
F64 = Primitive(Kind.F64)
CHAR = Primitive(Kind.CHAR)
STR = Primitive(Kind.STR)
UNIT = Primitive(Kind.UNIT)
ANY = AnyShape()

from __future__ import annotations

from . import ast, shapes
from .api import ParseOptions, from_file, from_str, parse_document, parse_file, parse_source
from .de import Deserializer, EnumValue
from .diagnostics import Diagnostic, render
from .errors import DeserializeError, ParseError
from .shapes import (
    ANY,
    BOOL,
    CHAR,
    F32,
    F64,
    I8,
    I16,
    I32,
    I64,
    I128,
    STR,
    U8,
    U16,
    U32,
    U64,
    U128,
    UNIT,
    EnumShape,
    Field,
    MapShape,
    NewtypeShape,
    OptionShape,
    SeqShape,
    StructShape,
    TupleShape,
    TupleStructShape,
    UnitStructShape,
    Variant,
)

__all__ = [
    "ANY",
    "BOOL",
    "CHAR",
    "F32",
    "F64",
    "I8",
    "I16",
    "I32",
    "I64",
    "I128",
    "STR",
    "U8",
    "U16",
    "U32",
    "U64",
    "U128",
    "UNIT",
    "DeserializeError",
    "Deserializer",
    "Diagnostic",
    "EnumShape",
    "EnumValue",
    "Field",
    "MapShape",
    "NewtypeShape",
    "OptionShape",
    "ParseError",
    "ParseOptions",
    "SeqShape",
    "StructShape",
    "TupleShape",
    "TupleStructShape",
    "UnitStructShape",
    "Variant",
    "ast",
    "from_file",
    "from_str",
    "parse_document",
    "parse_file",
    "parse_source",
    "render",
    "shapes",
]

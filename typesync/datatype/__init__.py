"""
Language-neutral description of data shapes.
"""

from __future__ import annotations

from .attrs import Deprecated, ImplLocation
from .named import NamedType
from .nodes import (
    DataType,
    EnumType,
    EnumVariant,
    Field,
    Fields,
    FieldsKind,
    GenericType,
    ListType,
    LiteralKind,
    LiteralType,
    MapType,
    NullableType,
    OpaqueReference,
    PrimitiveKind,
    PrimitiveType,
    Reference,
    StructType,
    TupleType,
    substitute_generics,
    unhandled,
    walk_references,
)
from .repr import Adjacent, EnumRepr, External, Internal, StringRepr, Untagged
from .type_id import IdKind, TypeId, sid

__all__ = [
    "Adjacent",
    "DataType",
    "Deprecated",
    "EnumRepr",
    "EnumType",
    "EnumVariant",
    "External",
    "Field",
    "Fields",
    "FieldsKind",
    "GenericType",
    "IdKind",
    "ImplLocation",
    "Internal",
    "ListType",
    "LiteralKind",
    "LiteralType",
    "MapType",
    "NamedType",
    "NullableType",
    "OpaqueReference",
    "PrimitiveKind",
    "PrimitiveType",
    "Reference",
    "StringRepr",
    "StructType",
    "TupleType",
    "TypeId",
    "Untagged",
    "sid",
    "substitute_generics",
    "unhandled",
    "walk_references",
]

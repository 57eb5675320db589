"""
IR (Intermediate Representation) node definitions.

DataType is a closed union of immutable, structurally comparable nodes
describing a data shape independently of any target syntax. Recursion
never embeds a copy of a named type: it always goes through a Reference,
which holds a TypeId resolved against a TypeCollection at render time.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from .attrs import Deprecated
from .repr import EnumRepr
from .type_id import TypeId


class PrimitiveKind(str, Enum):
    """Closed vocabulary of scalar shapes."""

    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    I128 = "i128"
    ISIZE = "isize"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    U128 = "u128"
    USIZE = "usize"
    F16 = "f16"
    F32 = "f32"
    F64 = "f64"
    BOOL = "bool"
    CHAR = "char"
    STRING = "String"

    @property
    def is_bigint(self) -> bool:
        """64-bit and wider integers, which many targets cannot hold exactly."""
        return self in _BIGINT_KINDS

    @property
    def is_integer(self) -> bool:
        return self in _INTEGER_KINDS

    @property
    def is_float(self) -> bool:
        return self in (PrimitiveKind.F16, PrimitiveKind.F32, PrimitiveKind.F64)

    @property
    def is_number(self) -> bool:
        return self.is_integer or self.is_float

    @property
    def is_unsigned(self) -> bool:
        return self.value.startswith("u")

    @property
    def is_string_like(self) -> bool:
        return self in (PrimitiveKind.STRING, PrimitiveKind.CHAR)


_BIGINT_KINDS = frozenset(
    {
        PrimitiveKind.I64,
        PrimitiveKind.I128,
        PrimitiveKind.ISIZE,
        PrimitiveKind.U64,
        PrimitiveKind.U128,
        PrimitiveKind.USIZE,
    }
)

_INTEGER_KINDS = frozenset(
    {
        PrimitiveKind.I8,
        PrimitiveKind.I16,
        PrimitiveKind.I32,
        PrimitiveKind.U8,
        PrimitiveKind.U16,
        PrimitiveKind.U32,
    }
) | _BIGINT_KINDS


class LiteralKind(str, Enum):
    """Scalar kinds a literal constant may take."""

    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    F32 = "f32"
    F64 = "f64"
    BOOL = "bool"
    STRING = "String"
    CHAR = "char"
    NONE = "None"


_LITERAL_INT_RANGES = {
    LiteralKind.I8: (-(2**7), 2**7 - 1),
    LiteralKind.I16: (-(2**15), 2**15 - 1),
    LiteralKind.I32: (-(2**31), 2**31 - 1),
    LiteralKind.U8: (0, 2**8 - 1),
    LiteralKind.U16: (0, 2**16 - 1),
    LiteralKind.U32: (0, 2**32 - 1),
}


@dataclass(frozen=True)
class PrimitiveType:
    kind: PrimitiveKind


@dataclass(frozen=True)
class LiteralType:
    """A literal constant such as `"circle"`, `5` or `null`."""

    kind: LiteralKind
    value: Any = None

    def __post_init__(self):
        if self.kind in _LITERAL_INT_RANGES:
            low, high = _LITERAL_INT_RANGES[self.kind]
            if isinstance(self.value, bool) or not isinstance(self.value, int) or not low <= self.value <= high:
                raise ValueError(f"{self.value!r} is not a valid {self.kind.value} literal")
        elif self.kind in (LiteralKind.F32, LiteralKind.F64):
            if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
                raise ValueError(f"{self.value!r} is not a valid {self.kind.value} literal")
        elif self.kind is LiteralKind.BOOL:
            if not isinstance(self.value, bool):
                raise ValueError(f"{self.value!r} is not a valid bool literal")
        elif self.kind is LiteralKind.STRING:
            if not isinstance(self.value, str):
                raise ValueError(f"{self.value!r} is not a valid string literal")
        elif self.kind is LiteralKind.CHAR:
            if not isinstance(self.value, str) or len(self.value) != 1:
                raise ValueError(f"{self.value!r} is not a single character")
        elif self.value is not None:
            raise ValueError("a None literal cannot carry a value")

    @staticmethod
    def string(value: str) -> LiteralType:
        return LiteralType(LiteralKind.STRING, value)

    @staticmethod
    def none() -> LiteralType:
        return LiteralType(LiteralKind.NONE)

    @property
    def is_string_like(self) -> bool:
        return self.kind in (LiteralKind.STRING, LiteralKind.CHAR)

    @property
    def is_number(self) -> bool:
        return self.kind in _LITERAL_INT_RANGES or self.kind in (LiteralKind.F32, LiteralKind.F64)


@dataclass(frozen=True)
class ListType:
    """A sequence; `length` is set for fixed-size arrays, `unique` for sets."""

    element: DataType
    length: int | None = None
    unique: bool = False


@dataclass(frozen=True)
class MapType:
    key: DataType
    value: DataType


@dataclass(frozen=True)
class NullableType:
    inner: DataType


@dataclass(frozen=True)
class TupleType:
    elements: tuple[DataType, ...] = ()


@dataclass(frozen=True)
class Field:
    """A named or positional field of a struct or enum variant."""

    ty: DataType
    name: str | None = None  # None for positional fields
    optional: bool = False
    skip: bool = False
    rename: str | None = None
    docs: tuple[str, ...] = ()
    deprecated: Deprecated | None = None
    # Name of a conditional-skip predicate, e.g. "Option::is_none"
    skip_serializing_if: str | None = None

    @property
    def key(self) -> str | None:
        """The serialized name of the field."""
        return self.rename if self.rename is not None else self.name


class FieldsKind(str, Enum):
    UNIT = "unit"
    UNNAMED = "unnamed"
    NAMED = "named"


@dataclass(frozen=True)
class Fields:
    """The body of a struct or an enum variant."""

    kind: FieldsKind = FieldsKind.UNIT
    fields: tuple[Field, ...] = ()
    # Serde-style struct tag, rendered as `tag: "<Name>"`
    tag: str | None = None

    def __post_init__(self):
        if self.kind is FieldsKind.UNIT and self.fields:
            raise ValueError("unit fields cannot hold fields")
        if self.kind is FieldsKind.NAMED and any(f.name is None for f in self.fields):
            raise ValueError("named fields require a name on every field")
        if self.kind is not FieldsKind.NAMED and self.tag is not None:
            raise ValueError("only named fields can carry a tag")

    @staticmethod
    def unit() -> Fields:
        return Fields(FieldsKind.UNIT)

    @staticmethod
    def unnamed(*fields: Field) -> Fields:
        return Fields(FieldsKind.UNNAMED, tuple(fields))

    @staticmethod
    def named(*fields: Field, tag: str | None = None) -> Fields:
        return Fields(FieldsKind.NAMED, tuple(fields), tag)

    def non_skipped(self) -> tuple[Field, ...]:
        return tuple(f for f in self.fields if not f.skip)

    @property
    def is_newtype(self) -> bool:
        """A single positional field that is not skipped renders as that field's type."""
        return self.kind is FieldsKind.UNNAMED and len(self.fields) == 1 and not self.fields[0].skip


@dataclass(frozen=True)
class StructType:
    name: str
    fields: Fields = Fields()


@dataclass(frozen=True)
class EnumVariant:
    name: str
    fields: Fields = Fields()
    skip: bool = False
    rename: str | None = None
    docs: tuple[str, ...] = ()
    deprecated: Deprecated | None = None

    @property
    def key(self) -> str:
        return self.rename if self.rename is not None else self.name


@dataclass(frozen=True)
class EnumType:
    name: str
    variants: tuple[EnumVariant, ...] = ()
    # None means "not declared"; the representation resolver picks the default
    repr: EnumRepr | None = None

    def non_skipped(self) -> tuple[EnumVariant, ...]:
        return tuple(v for v in self.variants if not v.skip)

    @property
    def is_unit_only(self) -> bool:
        return all(v.fields.kind is FieldsKind.UNIT for v in self.non_skipped())


@dataclass(frozen=True)
class Reference:
    """A pointer to a named type, with its generic arguments in declaration order."""

    id: TypeId
    generics: tuple[DataType, ...] = ()


@dataclass(frozen=True)
class OpaqueReference:
    """
    A reference to a shape the DataType nodes cannot describe.

    `state` is an arbitrary hashable value that only backends recognising its
    type know how to render; every other backend rejects it. Two opaque
    references are equal when their states are equal.
    """

    state: Any

    @property
    def kind(self) -> str:
        return type(self.state).__name__


@dataclass(frozen=True)
class GenericType:
    """A generic placeholder such as `T`."""

    name: str


DataType = (
    PrimitiveType
    | LiteralType
    | ListType
    | MapType
    | NullableType
    | TupleType
    | StructType
    | EnumType
    | Reference
    | OpaqueReference
    | GenericType
)


def unhandled(dt: Any) -> AssertionError:
    """Error for a node kind a consumer forgot to handle."""
    return AssertionError(f"unhandled DataType node: {type(dt).__name__}")


def walk_references(dt: DataType) -> Iterator[Reference]:
    """Yield every Reference reachable without following references."""
    if isinstance(dt, (PrimitiveType, LiteralType, GenericType, OpaqueReference)):
        return
    if isinstance(dt, ListType):
        yield from walk_references(dt.element)
    elif isinstance(dt, MapType):
        yield from walk_references(dt.key)
        yield from walk_references(dt.value)
    elif isinstance(dt, NullableType):
        yield from walk_references(dt.inner)
    elif isinstance(dt, TupleType):
        for element in dt.elements:
            yield from walk_references(element)
    elif isinstance(dt, StructType):
        for f in dt.fields.fields:
            yield from walk_references(f.ty)
    elif isinstance(dt, EnumType):
        for variant in dt.variants:
            for f in variant.fields.fields:
                yield from walk_references(f.ty)
    elif isinstance(dt, Reference):
        yield dt
        for generic in dt.generics:
            yield from walk_references(generic)
    else:
        raise unhandled(dt)


def substitute_generics(dt: DataType, bindings: Mapping[str, DataType]) -> DataType:
    """Replace GenericType placeholders with the bound types."""
    if not bindings:
        return dt
    if isinstance(dt, GenericType):
        return bindings.get(dt.name, dt)
    if isinstance(dt, (PrimitiveType, LiteralType, OpaqueReference)):
        return dt
    if isinstance(dt, ListType):
        return replace(dt, element=substitute_generics(dt.element, bindings))
    if isinstance(dt, MapType):
        return MapType(substitute_generics(dt.key, bindings), substitute_generics(dt.value, bindings))
    if isinstance(dt, NullableType):
        return NullableType(substitute_generics(dt.inner, bindings))
    if isinstance(dt, TupleType):
        return TupleType(tuple(substitute_generics(e, bindings) for e in dt.elements))
    if isinstance(dt, StructType):
        return replace(dt, fields=_substitute_fields(dt.fields, bindings))
    if isinstance(dt, EnumType):
        variants = tuple(replace(v, fields=_substitute_fields(v.fields, bindings)) for v in dt.variants)
        return replace(dt, variants=variants)
    if isinstance(dt, Reference):
        return Reference(dt.id, tuple(substitute_generics(g, bindings) for g in dt.generics))
    raise unhandled(dt)


def _substitute_fields(fields: Fields, bindings: Mapping[str, DataType]) -> Fields:
    return replace(fields, fields=tuple(replace(f, ty=substitute_generics(f.ty, bindings)) for f in fields.fields))

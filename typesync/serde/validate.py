"""
Serde-compatibility validation.

A read-only pass over a populated TypeCollection that rejects shapes a
structural serializer cannot round-trip: map keys that are not strings or
numbers, internally tagged enums whose variants have no object to merge the
tag into, and skips that remove required content. Each named type is
visited once, however many times it is referenced.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from ..collection import TypeCollection
from ..datatype import (
    DataType,
    EnumRepr,
    EnumType,
    Fields,
    FieldsKind,
    GenericType,
    Internal,
    ListType,
    LiteralKind,
    LiteralType,
    MapType,
    NamedType,
    NullableType,
    OpaqueReference,
    PrimitiveType,
    Reference,
    StructType,
    TupleType,
    Untagged,
    substitute_generics,
    unhandled,
)
from ..errors import (
    InvalidInternallyTaggedEnumError,
    InvalidMapKeyError,
    InvalidReferenceError,
    InvalidUsageOfSkipError,
)
from ..logger import get_logger
from .resolver import effective_repr

logger = get_logger(__name__)

Path = tuple[str, ...]


def validate(types: TypeCollection, enum_reprs: Mapping[str, EnumRepr] | None = None) -> None:
    """
    Validate every type of a collection.

    Args:
        types: The collection to validate
        enum_reprs: Per-type enum representations overriding the declared ones

    Raises:
        SerdeError: On the first incompatible shape, with the offending path
        InvalidReferenceError: If a reference points outside the collection
    """
    validator = _Validator(types, enum_reprs or {})
    for ndt in types:
        validator.visit_named(ndt)
    logger.debug(f"Validated {len(validator.checked)} type(s)")


def is_valid_map_key(
    key: DataType,
    types: TypeCollection,
    enum_reprs: Mapping[str, EnumRepr] | None = None,
    allow_generic: bool = True,
) -> bool:
    """Whether `key` reduces to a string-like or number-like type."""
    return _map_key_ok(key, types, enum_reprs or {}, allow_generic, frozenset())


def check_internally_tagged_enum(
    enum: EnumType,
    types: TypeCollection | None,
    enum_reprs: Mapping[str, EnumRepr] | None = None,
    path: Sequence[str] = (),
) -> None:
    """
    Check that every variant of an internally tagged enum can hold the tag.

    Raises:
        InvalidInternallyTaggedEnumError: If a variant cannot be merged with the tag
    """
    _check_internal(enum, types, enum_reprs or {}, tuple(path) or (enum.name,), frozenset())


class _Validator:
    def __init__(self, types: TypeCollection, enum_reprs: Mapping[str, EnumRepr]):
        self.types = types
        self.enum_reprs = enum_reprs
        self.checked = set()

    def visit_named(self, ndt: NamedType) -> None:
        if ndt.id in self.checked:
            return
        self.checked.add(ndt.id)
        self.visit(ndt.inner, (ndt.name,))

    def visit(self, dt: DataType, path: Path) -> None:
        if isinstance(dt, (PrimitiveType, LiteralType, GenericType, OpaqueReference)):
            return
        if isinstance(dt, ListType):
            self.visit(dt.element, path)
        elif isinstance(dt, MapType):
            if not _map_key_ok(dt.key, self.types, self.enum_reprs, True, frozenset()):
                raise InvalidMapKeyError(path)
            self.visit(dt.key, path)
            self.visit(dt.value, path)
        elif isinstance(dt, NullableType):
            self.visit(dt.inner, path)
        elif isinstance(dt, TupleType):
            for i, element in enumerate(dt.elements):
                self.visit(element, path + (str(i),))
        elif isinstance(dt, StructType):
            self.visit_fields(dt.fields, path)
        elif isinstance(dt, EnumType):
            self.visit_enum(dt, path)
        elif isinstance(dt, Reference):
            self.visit_reference(dt, path)
        else:
            raise unhandled(dt)

    def visit_fields(self, fields: Fields, path: Path) -> None:
        if fields.kind is FieldsKind.UNNAMED and len(fields.fields) == 1 and fields.fields[0].skip:
            raise InvalidUsageOfSkipError(path + ("0",), "skipping the only positional field removes required content")
        for i, f in enumerate(fields.fields):
            if f.skip:
                continue
            self.visit(f.ty, path + (f.name if f.name is not None else str(i),))

    def visit_enum(self, enum: EnumType, path: Path) -> None:
        if enum.variants and not enum.non_skipped():
            raise InvalidUsageOfSkipError(path, "every variant is skipped")

        if isinstance(effective_repr(enum, self.enum_reprs), Internal):
            _check_internal(enum, self.types, self.enum_reprs, path, frozenset())

        for variant in enum.non_skipped():
            self.visit_fields(variant.fields, path + (variant.name,))

    def visit_reference(self, ref: Reference, path: Path) -> None:
        target = self.types.resolve(ref.id)
        if target is None:
            raise InvalidReferenceError(ref.id, path)

        for generic in ref.generics:
            self.visit(generic, path)

        # Generic parameters used as map keys are checked where they are bound
        key_params = generic_map_key_params(target.inner)
        for name, argument in zip(target.generics, ref.generics):
            if name in key_params and not _map_key_ok(argument, self.types, self.enum_reprs, True, frozenset()):
                raise InvalidMapKeyError(path, f"generic argument {name!r} of {target.name!r} is used as a map key")

        self.visit_named(target)


def generic_map_key_params(dt: DataType) -> set[str]:
    """Names of generic placeholders used directly as map keys inside `dt`."""
    found = set()

    def walk(node: DataType) -> None:
        if isinstance(node, (PrimitiveType, LiteralType, GenericType, OpaqueReference)):
            return
        if isinstance(node, ListType):
            walk(node.element)
        elif isinstance(node, MapType):
            key = node.key
            while isinstance(key, NullableType):
                key = key.inner
            if isinstance(key, GenericType):
                found.add(key.name)
            walk(node.key)
            walk(node.value)
        elif isinstance(node, NullableType):
            walk(node.inner)
        elif isinstance(node, TupleType):
            for element in node.elements:
                walk(element)
        elif isinstance(node, StructType):
            for f in node.fields.fields:
                walk(f.ty)
        elif isinstance(node, EnumType):
            for variant in node.variants:
                for f in variant.fields.fields:
                    walk(f.ty)
        elif isinstance(node, Reference):
            for generic in node.generics:
                walk(generic)
        else:
            raise unhandled(node)

    walk(dt)
    return found


def _map_key_ok(
    key: DataType,
    types: TypeCollection,
    enum_reprs: Mapping[str, EnumRepr],
    allow_generic: bool,
    seen: frozenset,
) -> bool:
    if isinstance(key, PrimitiveType):
        return key.kind.is_number or key.kind.is_string_like
    if isinstance(key, LiteralType):
        return key.kind not in (LiteralKind.BOOL, LiteralKind.NONE)
    if isinstance(key, NullableType):
        return _map_key_ok(key.inner, types, enum_reprs, allow_generic, seen)
    if isinstance(key, GenericType):
        return allow_generic
    if isinstance(key, OpaqueReference):
        # Only the backend knows what an opaque key serializes to
        return True
    if isinstance(key, EnumType):
        # A union of valid keys is a valid key, e.g. `"A" | "B"`
        untagged = isinstance(effective_repr(key, enum_reprs), Untagged)
        for variant in key.non_skipped():
            fields = variant.fields
            if fields.kind is FieldsKind.UNIT:
                continue
            if fields.kind is FieldsKind.NAMED or len(fields.non_skipped()) > 1 or not untagged:
                return False
            for f in fields.non_skipped():
                if not _map_key_ok(f.ty, types, enum_reprs, allow_generic, seen):
                    return False
        return True
    if isinstance(key, Reference):
        if key.id in seen:
            return False
        target = types.resolve(key.id)
        if target is None:
            raise InvalidReferenceError(key.id)
        inner = substitute_generics(target.inner, dict(zip(target.generics, key.generics)))
        return _map_key_ok(inner, types, enum_reprs, allow_generic, seen | {key.id})
    if isinstance(key, (ListType, MapType, TupleType, StructType)):
        return False
    raise unhandled(key)


def _check_internal(
    enum: EnumType,
    types: TypeCollection | None,
    enum_reprs: Mapping[str, EnumRepr],
    path: Path,
    seen: frozenset,
) -> None:
    for variant in enum.non_skipped():
        if variant.fields.kind is not FieldsKind.UNNAMED:
            continue
        fields = variant.fields.non_skipped()
        if not fields:
            continue
        if len(fields) > 1:
            raise InvalidInternallyTaggedEnumError(
                path + (variant.name,), "a tuple variant with more than one field has no object to merge the tag into"
            )
        _check_internal_payload(fields[0].ty, types, enum_reprs, path + (variant.name,), seen)


def _check_internal_payload(
    dt: DataType,
    types: TypeCollection | None,
    enum_reprs: Mapping[str, EnumRepr],
    path: Path,
    seen: frozenset,
) -> None:
    """Internally tagged payloads must serialize as objects (or as null)."""
    if isinstance(dt, (MapType, StructType, GenericType, OpaqueReference)):
        return
    if isinstance(dt, TupleType) and not dt.elements:
        return
    if isinstance(dt, EnumType):
        # Untagged payloads are objects only if each of their variants is
        if isinstance(effective_repr(dt, enum_reprs), Untagged):
            _check_internal(dt, types, enum_reprs, path, seen)
        return
    if isinstance(dt, Reference):
        if dt.id in seen:
            return
        target = types.resolve(dt.id) if types is not None else None
        if target is None:
            raise InvalidReferenceError(dt.id, path)
        inner = substitute_generics(target.inner, dict(zip(target.generics, dt.generics)))
        _check_internal_payload(inner, types, enum_reprs, path, seen | {dt.id})
        return
    if isinstance(dt, (PrimitiveType, LiteralType, ListType, NullableType, TupleType)):
        raise InvalidInternallyTaggedEnumError(path, "the variant payload does not serialize as an object")
    raise unhandled(dt)

"""
TypeScript exporter.

Renders each named type as `export type Name<T> = ...;`. Recursion always
goes through a type name, and maps use `{ [key in K]: V }` rather than
`Record<K, V>` so recursive aliases stay valid.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass

from ..collection import TypeCollection
from ..config import BigIntBehavior, Language
from ..datatype import (
    Adjacent,
    DataType,
    EnumType,
    EnumVariant,
    External,
    Field,
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
    StringRepr,
    StructType,
    TupleType,
    Untagged,
    unhandled,
)
from ..errors import InvalidOpaqueReferenceError
from .base import Exporter, TypePath
from .comments import render_comment, render_inline_comment
from .reserved_names import TYPESCRIPT_BUILTIN_TYPES, TYPESCRIPT_RESERVED_NAMES

NULL = "null"
NEVER = "never"
EMPTY_OBJECT = "Record<string, never>"


class TypeScriptExporter(Exporter):
    """Exporter for TypeScript type aliases."""

    LANGUAGE = Language.TYPESCRIPT
    FILE_EXTENSION = "ts"
    TEMPLATE_LANG = "typescript"
    RESERVED_TYPE_NAMES = TYPESCRIPT_RESERVED_NAMES | TYPESCRIPT_BUILTIN_TYPES
    RESERVED_FIELD_NAMES = TYPESCRIPT_RESERVED_NAMES

    def render_document(self, ndts: Sequence[NamedType], types: TypeCollection, imports: Sequence[str] = ()) -> str:
        declarations = [self.render_declaration(ndt, types) for ndt in ndts]
        return self.document_template.render(
            header_lines=self.header_lines(),
            imports=list(imports),
            declarations=declarations,
        )

    def render_declaration(self, ndt: NamedType, types: TypeCollection) -> str:
        """
        Render `export type Name<T> = ...;` for a named type.

        Args:
            ndt: The type to declare
            types: Collection used to resolve references

        Returns:
            The declaration, preceded by its documentation comment
        """
        name = self.display_name(ndt)
        generics = f"<{', '.join(ndt.generics)}>" if ndt.generics else ""
        comment = render_comment(ndt.docs, ndt.deprecated, self.config.comment_style)
        body = self.datatype(ndt.inner, types, (ndt.name,))
        return f"{comment}export type {name}{generics} = {body};"

    def imports(self, ndt: NamedType, types: TypeCollection) -> list[str]:
        return [
            f'import type {{ {self.display_name(target)} }} from "{self.module_specifier(ndt, target)}";'
            for target in self.referenced_types(ndt, types)
        ]

    def inline(self, dt: DataType, types: TypeCollection) -> str:
        """Render a DataType without declaring it."""
        return self.datatype(dt, types, ())

    def datatype(self, dt: DataType, types: TypeCollection, path: TypePath) -> str:
        if isinstance(dt, PrimitiveType):
            return self.primitive(dt, path)
        if isinstance(dt, LiteralType):
            return literal(dt)
        if isinstance(dt, ListType):
            return self.array(dt, types, path)
        if isinstance(dt, MapType):
            key = self.datatype(map_key(dt.key), types, path)
            value = self.datatype(dt.value, types, path)
            # Partial<> because TypeScript would otherwise require every key
            return f"Partial<{{ [key in {key}]: {value} }}>"
        if isinstance(dt, NullableType):
            inner = self.datatype(dt.inner, types, path)
            return inner if inner.endswith(" | null") else f"{inner} | null"
        if isinstance(dt, StructType):
            if path[-1:] != (dt.name,):
                path = path + (dt.name,)
            return self.struct_fields(dt.name, dt.fields, types, path)
        if isinstance(dt, EnumType):
            return self.enum(dt, types, path)
        if isinstance(dt, TupleType):
            if not dt.elements:
                return NULL
            elements = [self.datatype(e, types, path + (str(i),)) for i, e in enumerate(dt.elements)]
            return f"[{', '.join(elements)}]"
        if isinstance(dt, Reference):
            return self.reference(dt, types, path)
        if isinstance(dt, OpaqueReference):
            return self.opaque(dt, path)
        if isinstance(dt, GenericType):
            return dt.name
        raise unhandled(dt)

    def primitive(self, dt: PrimitiveType, path: TypePath) -> str:
        kind = dt.kind
        if kind.is_bigint:
            behavior = self.bigint_behavior(path)
            if behavior is BigIntBehavior.STRING:
                return "string"
            if behavior is BigIntBehavior.NUMBER:
                return "number"
            return "bigint"
        if kind.is_number:
            return "number"
        if kind.is_string_like:
            return "string"
        return "boolean"

    def array(self, dt: ListType, types: TypeCollection, path: TypePath) -> str:
        element = self.datatype(dt.element, types, path)
        # Unions and intersections need parentheses to bind before `[]`
        if " " in element and (not element.endswith("}") or "&" in element or "|" in element):
            element = f"({element})"
        if dt.length is not None:
            return f"[{', '.join([element] * dt.length)}]"
        return f"{element}[]"

    def reference(self, ref: Reference, types: TypeCollection, path: TypePath) -> str:
        target = self.resolve_reference(ref, types, path)
        name = self.display_name(target)
        if not ref.generics:
            return name
        generics = ", ".join(self.datatype(g, types, path) for g in ref.generics)
        return f"{name}<{generics}>"

    def opaque(self, dt: OpaqueReference, path: TypePath) -> str:
        if isinstance(dt.state, Define):
            return dt.state.raw
        raise InvalidOpaqueReferenceError(dt.kind, path, self.LANGUAGE.value)

    def struct_fields(self, name: str, fields: Fields, types: TypeCollection, path: TypePath) -> str:
        if fields.kind is FieldsKind.UNIT:
            return NULL

        non_skipped = fields.non_skipped()
        if fields.kind is FieldsKind.UNNAMED:
            # A single field is transparent, but `[T]` is kept when skips shortened the list
            if len(non_skipped) == 1 and len(fields.fields) == 1:
                return self.datatype(non_skipped[0].ty, types, path)
            elements = [self.datatype(f.ty, types, path + (str(i),)) for i, f in enumerate(non_skipped)]
            return f"[{', '.join(elements)}]"

        members = self.named_members(name, fields, types, path)
        if not members:
            return EMPTY_OBJECT
        return f"{{ {'; '.join(members)} }}"

    def named_members(self, name: str, fields: Fields, types: TypeCollection, path: TypePath) -> list[str]:
        members = []
        if fields.tag is not None:
            members.append(f"{self.escape_key(fields.tag)}: {json.dumps(name)}")
        for f in fields.non_skipped():
            members.append(self.field(f, types, path + (f.key,)))
        return members

    def field(self, f: Field, types: TypeCollection, path: TypePath) -> str:
        comment = render_inline_comment(f.docs, f.deprecated, self.config.comment_style)
        marker = "?" if self.is_optional(f) else ""
        return f"{comment}{self.escape_key(f.key)}{marker}: {self.datatype(f.ty, types, path)}"

    def enum(self, dt: EnumType, types: TypeCollection, path: TypePath) -> str:
        if path[-1:] != (dt.name,):
            path = path + (dt.name,)
        variants = dt.non_skipped()
        if not variants:
            return NEVER

        repr = self.resolve_repr(dt, types, path)
        rendered = [self.variant(v, repr, types, path + (v.name,)) for v in variants]
        # Identical shapes collapse into one union member
        return " | ".join(dict.fromkeys(rendered))

    def variant(self, variant: EnumVariant, repr, types: TypeCollection, path: TypePath) -> str:
        key = self.variant_key(variant, repr, path)
        tag_value = json.dumps(key)
        fields = variant.fields

        if isinstance(repr, StringRepr):
            return tag_value

        if isinstance(repr, Untagged):
            return self.struct_fields(key, fields, types, path)

        if isinstance(repr, External):
            if fields.kind is FieldsKind.UNIT:
                return tag_value
            if fields.kind is FieldsKind.UNNAMED and not fields.non_skipped():
                # `Variant()` serializes as an empty array, a fully skipped one as its name
                return "[]" if not fields.fields else tag_value
            return f"{{ {self.escape_key(key)}: {self.struct_fields(key, fields, types, path)} }}"

        if isinstance(repr, Internal):
            tag = f"{self.escape_key(repr.tag)}: {tag_value}"
            if fields.kind is FieldsKind.NAMED:
                members = [tag] + self.named_members(key, fields, types, path)
                return f"({{ {'; '.join(members)} }})"
            non_skipped = fields.non_skipped()
            if fields.kind is FieldsKind.UNNAMED and non_skipped:
                inner = self.datatype(non_skipped[0].ty, types, path)
                return f"({{ {tag} }} & {inner})"
            return f"({{ {tag} }})"

        if isinstance(repr, Adjacent):
            tag = f"{self.escape_key(repr.tag)}: {tag_value}"
            if fields.kind is FieldsKind.UNIT:
                return f"{{ {tag} }}"
            content = self.struct_fields(key, fields, types, path)
            return f"{{ {tag}; {self.escape_key(repr.content)}: {content} }}"

        raise AssertionError(f"unhandled enum representation: {repr!r}")


def literal(dt: LiteralType) -> str:
    if dt.kind is LiteralKind.NONE:
        return NULL
    if dt.kind is LiteralKind.BOOL:
        return "true" if dt.value else "false"
    if dt.is_string_like:
        return json.dumps(dt.value)
    return str(dt.value)


def map_key(dt: DataType) -> DataType:
    """Object keys are never null, so a nullable key is keyed by its inner type."""
    while isinstance(dt, NullableType):
        dt = dt.inner
    return dt


@dataclass(frozen=True)
class Define:
    """Raw TypeScript emitted verbatim in place of a type."""

    raw: str


def define(raw: str) -> OpaqueReference:
    """
    Reference a hand-written TypeScript type expression.

    The text is emitted as-is wherever the reference appears, so it must be a
    complete type on its own, e.g. `define("Date")`.

    Args:
        raw: TypeScript source of the type

    Returns:
        An opaque reference usable anywhere a DataType is expected
    """
    return OpaqueReference(Define(raw))

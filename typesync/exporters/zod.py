"""
Zod exporter.

Renders each named type as `export const Name = <schema>;` followed by its
inferred type. References go through `z.lazy` so declarations can appear
in any order and refer to each other recursively; a schema that reaches
itself carries an explicit `z.ZodType<Name>` annotation. Generic types
become factory functions taking one schema per generic parameter.
"""

from __future__ import annotations

import json
from collections.abc import Sequence

from ..collection import TypeCollection
from ..config import BigIntBehavior, ExportConfig, Language
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
    PrimitiveKind,
    PrimitiveType,
    Reference,
    StringRepr,
    StructType,
    TupleType,
    Untagged,
    substitute_generics,
    unhandled,
    walk_references,
)
from ..errors import InvalidOpaqueReferenceError
from .base import Exporter, TypePath
from .comments import render_comment
from .reserved_names import ZOD_RESERVED_NAMES
from .typescript import Define, TypeScriptExporter

NULL = "z.null()"
NEVER = "z.never()"
INTEGER_KEY = r"z.string().regex(/^-?[0-9]+$/)"
FLOAT_KEY = r"z.string().regex(/^-?[0-9]+(\.[0-9]+)?([eE][-+]?[0-9]+)?$/)"


class ZodExporter(Exporter):
    """Exporter for Zod validation schemas."""

    LANGUAGE = Language.ZOD
    FILE_EXTENSION = "ts"
    TEMPLATE_LANG = "zod"
    RESERVED_TYPE_NAMES = ZOD_RESERVED_NAMES
    RESERVED_FIELD_NAMES = ZOD_RESERVED_NAMES

    def __init__(self, config: ExportConfig | None = None):
        super().__init__(config)
        # Recursive schemas are annotated with their TypeScript type
        self.typescript = TypeScriptExporter(self.config)

    def render_document(self, ndts: Sequence[NamedType], types: TypeCollection, imports: Sequence[str] = ()) -> str:
        declarations = [self.render_declaration(ndt, types) for ndt in ndts]
        return self.document_template.render(
            header_lines=self.header_lines(),
            imports=list(imports),
            declarations=declarations,
        )

    def render_declaration(self, ndt: NamedType, types: TypeCollection) -> str:
        """
        Render the schema constant for a named type.

        A type that reaches itself through references cannot have its type
        inferred by TypeScript, so it is declared as a TypeScript type first
        and the schema is annotated as `z.ZodType<Name>`.

        Args:
            ndt: The type to declare
            types: Collection used to resolve references

        Returns:
            The declaration, preceded by its documentation comment
        """
        name = self.display_name(ndt)
        comment = render_comment(ndt.docs, ndt.deprecated, self.config.comment_style)
        body = self.datatype(ndt.inner, types, (ndt.name,))
        recursive = self.reaches_itself(ndt, types)
        if ndt.generics:
            params = ", ".join(f"{g} extends z.ZodTypeAny" for g in ndt.generics)
            args = ", ".join(f"{g}: {g}" for g in ndt.generics)
            annotation = ": z.ZodTypeAny" if recursive else ""
            return f"{comment}export const {name} = <{params}>({args}){annotation} => {body};"
        if recursive:
            ts_type = self.typescript.datatype(ndt.inner, types, (ndt.name,))
            return f"{comment}export type {name} = {ts_type};\nexport const {name}: z.ZodType<{name}> = {body};"
        return f"{comment}export const {name} = {body};\nexport type {name} = z.infer<typeof {name}>;"

    def reaches_itself(self, ndt: NamedType, types: TypeCollection) -> bool:
        pending = list(walk_references(ndt.inner))
        visited = set()
        while pending:
            ref = pending.pop()
            if ref.id == ndt.id:
                return True
            if ref.id in visited:
                continue
            visited.add(ref.id)
            target = types.resolve(ref.id)
            if target is not None:
                pending.extend(walk_references(target.inner))
        return False

    def imports(self, ndt: NamedType, types: TypeCollection) -> list[str]:
        return [
            f'import {{ {self.display_name(target)} }} from "{self.module_specifier(ndt, target)}";'
            for target in self.referenced_types(ndt, types)
        ]

    def datatype(self, dt: DataType, types: TypeCollection, path: TypePath) -> str:
        if isinstance(dt, PrimitiveType):
            return self.primitive(dt, path)
        if isinstance(dt, LiteralType):
            if dt.kind is LiteralKind.NONE:
                return NULL
            return f"z.literal({literal_value(dt)})"
        if isinstance(dt, ListType):
            element = self.datatype(dt.element, types, path)
            if dt.length is not None:
                return f"z.tuple([{', '.join([element] * dt.length)}])"
            return f"z.array({element})"
        if isinstance(dt, MapType):
            key = self.record_key(dt.key, types, path, frozenset())
            return f"z.record({key}, {self.datatype(dt.value, types, path)})"
        if isinstance(dt, NullableType):
            inner = self.datatype(dt.inner, types, path)
            return inner if inner.endswith(".nullable()") else f"{inner}.nullable()"
        if isinstance(dt, StructType):
            path = path if path[-1:] == (dt.name,) else path + (dt.name,)
            return self.struct_fields(dt.name, dt.fields, types, path)
        if isinstance(dt, EnumType):
            return self.enum(dt, types, path)
        if isinstance(dt, TupleType):
            if not dt.elements:
                return NULL
            elements = [self.datatype(e, types, path + (str(i),)) for i, e in enumerate(dt.elements)]
            return f"z.tuple([{', '.join(elements)}])"
        if isinstance(dt, Reference):
            target = self.resolve_reference(dt, types, path)
            name = self.display_name(target)
            if dt.generics:
                name = f"{name}({', '.join(self.datatype(g, types, path) for g in dt.generics)})"
            return f"z.lazy(() => {name})"
        if isinstance(dt, OpaqueReference):
            if isinstance(dt.state, Define):
                return f"z.custom<{dt.state.raw}>()"
            raise InvalidOpaqueReferenceError(dt.kind, path, self.LANGUAGE.value)
        if isinstance(dt, GenericType):
            return dt.name
        raise unhandled(dt)

    def record_key(self, key: DataType, types: TypeCollection, path: TypePath, seen: frozenset) -> str:
        """
        Schema for the keys of a record.

        Object keys always arrive as strings, so number keys are matched by
        their decimal text rather than with `z.number()`.
        """
        if isinstance(key, NullableType):
            return self.record_key(key.inner, types, path, seen)
        if isinstance(key, PrimitiveType) and key.kind.is_number:
            return INTEGER_KEY if key.kind.is_integer else FLOAT_KEY
        if isinstance(key, LiteralType) and key.is_number:
            return f"z.literal({json.dumps(str(key.value))})"
        if isinstance(key, Reference) and key.id not in seen:
            target = self.resolve_reference(key, types, path)
            inner = substitute_generics(target.inner, dict(zip(target.generics, key.generics)))
            return self.record_key(inner, types, path, seen | {key.id})
        return self.datatype(key, types, path)

    def primitive(self, dt: PrimitiveType, path: TypePath) -> str:
        kind = dt.kind
        if kind.is_bigint:
            behavior = self.bigint_behavior(path)
            if behavior is BigIntBehavior.STRING:
                return "z.string()"
            if behavior is BigIntBehavior.NUMBER:
                return "z.number().int()"
            return "z.bigint()"
        if kind.is_integer:
            return "z.number().int()"
        if kind.is_float:
            return "z.number()"
        if kind is PrimitiveKind.CHAR:
            return "z.string().length(1)"
        if kind is PrimitiveKind.STRING:
            return "z.string()"
        return "z.boolean()"

    def struct_fields(self, name: str, fields: Fields, types: TypeCollection, path: TypePath) -> str:
        if fields.kind is FieldsKind.UNIT:
            return NULL

        non_skipped = fields.non_skipped()
        if fields.kind is FieldsKind.UNNAMED:
            if len(non_skipped) == 1 and len(fields.fields) == 1:
                return self.datatype(non_skipped[0].ty, types, path)
            elements = [self.datatype(f.ty, types, path + (str(i),)) for i, f in enumerate(non_skipped)]
            return f"z.tuple([{', '.join(elements)}])"

        members = self.named_members(name, fields, types, path)
        if not members:
            return "z.object({}).strict()"
        return f"z.object({{ {', '.join(members)} }})"

    def named_members(self, name: str, fields: Fields, types: TypeCollection, path: TypePath) -> list[str]:
        members = []
        if fields.tag is not None:
            members.append(f"{self.escape_key(fields.tag)}: z.literal({json.dumps(name)})")
        for f in fields.non_skipped():
            members.append(self.field(f, types, path + (f.key,)))
        return members

    def field(self, f: Field, types: TypeCollection, path: TypePath) -> str:
        schema = self.datatype(f.ty, types, path)
        if self.is_optional(f):
            schema += ".optional()"
        return f"{self.escape_key(f.key)}: {schema}"

    def enum(self, dt: EnumType, types: TypeCollection, path: TypePath) -> str:
        path = path if path[-1:] == (dt.name,) else path + (dt.name,)
        variants = dt.non_skipped()
        if not variants:
            return NEVER

        repr = self.resolve_repr(dt, types, path)
        rendered = list(dict.fromkeys(self.variant(v, repr, types, path + (v.name,)) for v in variants))
        if len(rendered) == 1:
            return rendered[0]
        return f"z.union([{', '.join(rendered)}])"

    def variant(self, variant: EnumVariant, repr, types: TypeCollection, path: TypePath) -> str:
        key = self.variant_key(variant, repr, path)
        tag_value = f"z.literal({json.dumps(key)})"
        fields = variant.fields

        if isinstance(repr, StringRepr):
            return tag_value

        if isinstance(repr, Untagged):
            return self.struct_fields(key, fields, types, path)

        if isinstance(repr, External):
            if fields.kind is FieldsKind.UNIT:
                return tag_value
            if fields.kind is FieldsKind.UNNAMED and not fields.non_skipped():
                return "z.tuple([])" if not fields.fields else tag_value
            return f"z.object({{ {self.escape_key(key)}: {self.struct_fields(key, fields, types, path)} }})"

        if isinstance(repr, Internal):
            tag = f"{self.escape_key(repr.tag)}: {tag_value}"
            if fields.kind is FieldsKind.NAMED:
                members = [tag] + self.named_members(key, fields, types, path)
                return f"z.object({{ {', '.join(members)} }})"
            non_skipped = fields.non_skipped()
            if fields.kind is FieldsKind.UNNAMED and non_skipped:
                inner = self.datatype(non_skipped[0].ty, types, path)
                return f"z.object({{ {tag} }}).and({inner})"
            return f"z.object({{ {tag} }})"

        if isinstance(repr, Adjacent):
            tag = f"{self.escape_key(repr.tag)}: {tag_value}"
            if fields.kind is FieldsKind.UNIT:
                return f"z.object({{ {tag} }})"
            content = self.struct_fields(key, fields, types, path)
            return f"z.object({{ {tag}, {self.escape_key(repr.content)}: {content} }})"

        raise AssertionError(f"unhandled enum representation: {repr!r}")


def literal_value(dt: LiteralType) -> str:
    if dt.kind is LiteralKind.BOOL:
        return "true" if dt.value else "false"
    if dt.is_string_like:
        return json.dumps(dt.value)
    return str(dt.value)

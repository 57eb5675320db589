"""
JSON Schema exporter.

Every named type becomes an entry of the dialect's definitions key and
references become `$ref`s. JSON Schema has no generics, so references with
generic arguments are monomorphised: the arguments are substituted into the
target's body, which is rendered inline.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from ..collection import TypeCollection
from ..config import BigIntBehavior, ExportConfig, Language, SchemaVersion
from ..datatype import (
    Adjacent,
    DataType,
    EnumType,
    EnumVariant,
    External,
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
)
from ..errors import InvalidOpaqueReferenceError, UnsupportedShapeError
from .base import Exporter, TypePath
from .comments import comment_lines
from .reserved_names import JSONSCHEMA_RESERVED_NAMES

_INTEGER_BOUNDS = {
    PrimitiveKind.I8: {"minimum": -(2**7), "maximum": 2**7 - 1},
    PrimitiveKind.I16: {"minimum": -(2**15), "maximum": 2**15 - 1},
    PrimitiveKind.I32: {"format": "int32"},
    PrimitiveKind.I64: {"format": "int64"},
    PrimitiveKind.I128: {},
    PrimitiveKind.ISIZE: {},
    PrimitiveKind.U8: {"minimum": 0, "maximum": 2**8 - 1},
    PrimitiveKind.U16: {"minimum": 0, "maximum": 2**16 - 1},
    PrimitiveKind.U32: {"minimum": 0, "format": "uint32"},
    PrimitiveKind.U64: {"minimum": 0, "format": "uint64"},
    PrimitiveKind.U128: {"minimum": 0},
    PrimitiveKind.USIZE: {"minimum": 0},
}

_FLOAT_FORMATS = {
    PrimitiveKind.F16: "float16",
    PrimitiveKind.F32: "float",
    PrimitiveKind.F64: "double",
}

INTEGER_KEY_PATTERN = "^-?[0-9]+$"


class JsonSchemaExporter(Exporter):
    """Exporter for JSON Schema documents."""

    LANGUAGE = Language.JSONSCHEMA
    FILE_EXTENSION = "json"
    RESERVED_TYPE_NAMES = JSONSCHEMA_RESERVED_NAMES

    def __init__(self, config: ExportConfig | None = None):
        super().__init__(config)
        # Type whose file is being rendered in the per-type-file layout
        self._file_source: NamedType | None = None

    @property
    def version(self) -> SchemaVersion:
        return SchemaVersion.parse(self.config.schema_version)

    def file_suffix(self) -> str:
        return ".schema.json"

    def render_document(self, ndts: Sequence[NamedType], types: TypeCollection, imports: Sequence[str] = ()) -> str:
        root = self.render_root(ndts, types)
        return json.dumps(root, indent=2, ensure_ascii=False) + "\n"

    def render_root(self, ndts: Sequence[NamedType], types: TypeCollection) -> dict:
        """
        Build the root schema holding `ndts` under the definitions key.

        Generic types are left out: they are only reachable through references,
        which inline them with their arguments substituted.
        """
        root: dict[str, Any] = {"$schema": self.version.uri}
        if self.config.title:
            root["title"] = self.config.title
        if self.config.description:
            root["description"] = self.config.description
        comment = self.comment()
        if comment:
            root["$comment"] = comment

        definitions = {}
        for ndt in ndts:
            if ndt.generics:
                continue
            definitions[self.display_name(ndt)] = self.definition(ndt, types)
        root[self.version.definitions_key] = definitions
        return root

    def export_files(self, types: TypeCollection) -> dict[Path, str]:
        # Each file is a standalone schema; references point at sibling files
        self.prepare(types)
        files = {}
        for ndt in types:
            if ndt.generics:
                continue
            self._file_source = ndt
            schema: dict[str, Any] = {"$schema": self.version.uri}
            schema.update(self.definition(ndt, types))
            files[self.file_path(ndt)] = json.dumps(schema, indent=2, ensure_ascii=False) + "\n"
        self._file_source = None
        return files

    def comment(self) -> str:
        lines = [line.removeprefix("//").strip() for line in self.header_lines()]
        return "\n".join(line for line in lines if line)

    def definition(self, ndt: NamedType, types: TypeCollection) -> dict:
        schema = self.datatype(ndt.inner, types, (ndt.name,), ())
        return self.annotate(schema, ndt.docs, ndt.deprecated)

    def annotate(self, schema: dict, docs, deprecated) -> dict:
        lines = comment_lines(docs, None)
        if not lines and deprecated is None:
            return schema
        schema = dict(schema)
        if lines:
            schema["description"] = "\n".join(lines)
        if deprecated is not None:
            schema["deprecated"] = True
        return schema

    def datatype(self, dt: DataType, types: TypeCollection, path: TypePath, stack: tuple) -> dict:
        """
        Convert a DataType to a schema.

        Args:
            dt: The type to convert
            types: Collection used to resolve references
            path: Diagnostic path
            stack: Ids of generic types being monomorphised, to detect endless expansion

        Returns:
            The schema as a dictionary
        """
        if isinstance(dt, PrimitiveType):
            return self.primitive(dt, path)
        if isinstance(dt, LiteralType):
            if dt.kind is LiteralKind.NONE:
                return {"type": "null"}
            return {"const": dt.value}
        if isinstance(dt, ListType):
            item = self.datatype(dt.element, types, path, stack)
            if dt.length is not None:
                schema = self.fixed_items([item] * dt.length)
            else:
                schema = {"type": "array", "items": item}
            if dt.unique:
                schema["uniqueItems"] = True
            return schema
        if isinstance(dt, MapType):
            return self.map(dt, types, path, stack)
        if isinstance(dt, NullableType):
            return {"anyOf": [self.datatype(dt.inner, types, path, stack), {"type": "null"}]}
        if isinstance(dt, TupleType):
            if not dt.elements:
                return {"type": "null"}
            return self.fixed_items([self.datatype(e, types, path + (str(i),), stack) for i, e in enumerate(dt.elements)])
        if isinstance(dt, StructType):
            return self.struct_fields(dt.name, dt.fields, types, path, stack)
        if isinstance(dt, EnumType):
            return self.enum(dt, types, path, stack)
        if isinstance(dt, Reference):
            return self.reference(dt, types, path, stack)
        if isinstance(dt, OpaqueReference):
            raise InvalidOpaqueReferenceError(dt.kind, path, self.LANGUAGE.value)
        if isinstance(dt, GenericType):
            raise UnsupportedShapeError(path, f"generic parameter {dt.name!r} is not bound to a type")
        raise unhandled(dt)

    def primitive(self, dt: PrimitiveType, path: TypePath) -> dict:
        kind = dt.kind
        if kind.is_bigint:
            if self.bigint_behavior(path) is BigIntBehavior.STRING:
                return {"type": "string"}
            return {"type": "integer", **_INTEGER_BOUNDS[kind]}
        if kind.is_integer:
            return {"type": "integer", **_INTEGER_BOUNDS[kind]}
        if kind.is_float:
            return {"type": "number", "format": _FLOAT_FORMATS[kind]}
        if kind is PrimitiveKind.CHAR:
            return {"type": "string", "minLength": 1, "maxLength": 1}
        if kind is PrimitiveKind.STRING:
            return {"type": "string"}
        return {"type": "boolean"}

    def fixed_items(self, items: list[dict]) -> dict:
        """A fixed-length array in the syntax of the configured dialect."""
        schema: dict[str, Any] = {"type": "array"}
        if self.version is SchemaVersion.DRAFT_2020_12:
            schema["prefixItems"] = items
            schema["items"] = False
        else:
            schema["items"] = items
            schema["additionalItems"] = False
        schema["minItems"] = len(items)
        schema["maxItems"] = len(items)
        return schema

    def map(self, dt: MapType, types: TypeCollection, path: TypePath, stack: tuple) -> dict:
        schema: dict[str, Any] = {"type": "object"}
        names = self.property_names(dt.key, types, path, frozenset())
        if names is not None:
            schema["propertyNames"] = names
        schema["additionalProperties"] = self.datatype(dt.value, types, path, stack)
        return schema

    def property_names(self, key: DataType, types: TypeCollection, path: TypePath, seen: frozenset) -> dict | None:
        """
        The `propertyNames` constraint for a map key, or None for plain strings.

        Raises:
            UnsupportedShapeError: If the key does not reduce to a string or number
        """
        if isinstance(key, NullableType):
            return self.property_names(key.inner, types, path, seen)
        if isinstance(key, OpaqueReference):
            raise InvalidOpaqueReferenceError(key.kind, path, self.LANGUAGE.value)
        if isinstance(key, PrimitiveType):
            if key.kind.is_string_like:
                return None
            if key.kind.is_integer:
                return {"pattern": INTEGER_KEY_PATTERN}
            if key.kind.is_float:
                return {"pattern": "^-?[0-9]+(\\.[0-9]+)?([eE][-+]?[0-9]+)?$"}
        if isinstance(key, LiteralType):
            if key.is_string_like or key.is_number:
                return {"const": str(key.value)}
        if isinstance(key, EnumType) and key.is_unit_only:
            repr = self.resolve_repr(key, types, path)
            return {"enum": [self.variant_key(v, repr, path) for v in key.non_skipped()]}
        if isinstance(key, Reference) and key.id not in seen:
            target = self.resolve_reference(key, types, path)
            inner = substitute_generics(target.inner, dict(zip(target.generics, key.generics)))
            return self.property_names(inner, types, path, seen | {key.id})
        raise UnsupportedShapeError(path, "map keys must reduce to a string or a number")

    def reference(self, ref: Reference, types: TypeCollection, path: TypePath, stack: tuple) -> dict:
        target = self.resolve_reference(ref, types, path)
        if not target.generics:
            return {"$ref": self.ref_uri(target)}

        if ref.id in stack:
            raise UnsupportedShapeError(path, f"generic type {target.name!r} refers to itself and cannot be monomorphised")
        if len(ref.generics) != len(target.generics):
            raise UnsupportedShapeError(path, f"{target.name!r} expects {len(target.generics)} generic argument(s)")
        # Arguments are rendered in the caller's context before substitution
        bindings = dict(zip(target.generics, ref.generics))
        body = substitute_generics(target.inner, bindings)
        return self.annotate(self.datatype(body, types, path + (target.name,), stack + (ref.id,)), target.docs, target.deprecated)

    def ref_uri(self, target: NamedType) -> str:
        if self._file_source is not None:
            return self.module_specifier(self._file_source, target) + self.file_suffix()
        return f"#/{self.version.definitions_key}/{self.display_name(target)}"

    def struct_fields(self, name: str, fields: Fields, types: TypeCollection, path: TypePath, stack: tuple) -> dict:
        if fields.kind is FieldsKind.UNIT:
            return {"type": "null"}

        non_skipped = fields.non_skipped()
        if fields.kind is FieldsKind.UNNAMED:
            if len(non_skipped) == 1 and len(fields.fields) == 1:
                return self.datatype(non_skipped[0].ty, types, path, stack)
            return self.fixed_items([self.datatype(f.ty, types, path + (str(i),), stack) for i, f in enumerate(non_skipped)])

        properties = {}
        required = []
        if fields.tag is not None:
            properties[fields.tag] = {"const": name}
            required.append(fields.tag)
        for f in non_skipped:
            schema = self.datatype(f.ty, types, path + (f.key,), stack)
            properties[f.key] = self.annotate(schema, f.docs, f.deprecated)
            if not self.is_optional(f):
                required.append(f.key)

        if not properties:
            return {"type": "object", "additionalProperties": False}

        schema: dict[str, Any] = {"type": "object", "properties": properties}
        if required:
            schema["required"] = required
        return schema

    def enum(self, dt: EnumType, types: TypeCollection, path: TypePath, stack: tuple) -> dict:
        path = path if path[-1:] == (dt.name,) else path + (dt.name,)
        variants = dt.non_skipped()
        if not variants:
            return {"not": {}}

        repr = self.resolve_repr(dt, types, path)
        schemas = []
        for v in variants:
            schema = self.annotate(self.variant(v, repr, types, path + (v.name,), stack), v.docs, v.deprecated)
            if schema not in schemas:
                schemas.append(schema)
        if len(schemas) == 1:
            return schemas[0]
        return {"anyOf": schemas}

    def variant(self, variant: EnumVariant, repr, types: TypeCollection, path: TypePath, stack: tuple) -> dict:
        key = self.variant_key(variant, repr, path)
        fields = variant.fields

        if isinstance(repr, StringRepr):
            return {"const": key}

        if isinstance(repr, Untagged):
            return self.struct_fields(key, fields, types, path, stack)

        if isinstance(repr, External):
            if fields.kind is FieldsKind.UNIT:
                return {"const": key}
            return _object({key: self.struct_fields(key, fields, types, path, stack)}, [key], closed=True)

        if isinstance(repr, Internal):
            tag = {repr.tag: {"const": key}}
            if fields.kind is FieldsKind.NAMED:
                inner = self.struct_fields(key, fields, types, path, stack)
                properties = {**tag, **inner.get("properties", {})}
                return _object(properties, [repr.tag, *inner.get("required", [])])
            non_skipped = fields.non_skipped()
            if fields.kind is FieldsKind.UNNAMED and non_skipped:
                payload = self.datatype(non_skipped[0].ty, types, path, stack)
                return {"allOf": [_object(tag, [repr.tag]), payload]}
            return _object(tag, [repr.tag])

        if isinstance(repr, Adjacent):
            tag = {repr.tag: {"const": key}}
            if fields.kind is FieldsKind.UNIT:
                return _object(tag, [repr.tag], closed=True)
            content = self.struct_fields(key, fields, types, path, stack)
            return _object({**tag, repr.content: content}, [repr.tag, repr.content], closed=True)

        raise AssertionError(f"unhandled enum representation: {repr!r}")


def _object(properties: dict, required: list[str], closed: bool = False) -> dict:
    schema: dict[str, Any] = {"type": "object", "properties": properties, "required": required}
    if closed:
        schema["additionalProperties"] = False
    return schema

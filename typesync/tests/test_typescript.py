"""
Tests for the TypeScript exporter.
"""

from __future__ import annotations

from decimal import Decimal
from unittest import TestCase

import pytest

from typesync.config import BigIntBehavior, CommentStyle, ExportConfig, Layout, NameCollisionPolicy
from typesync.datatype import (
    Adjacent,
    Deprecated,
    EnumType,
    EnumVariant,
    Field,
    Fields,
    GenericType,
    Internal,
    ListType,
    LiteralType,
    MapType,
    NullableType,
    OpaqueReference,
    StringRepr,
    StructType,
    TupleType,
    Untagged,
)
from typesync.errors import (
    BigIntForbiddenError,
    DuplicateTypeNameError,
    ForbiddenNameError,
    InvalidMapKeyError,
    InvalidNameError,
    InvalidOpaqueReferenceError,
    UnsupportedLayoutError,
)
from typesync.exporters import TypeScriptExporter, define

from .factories import BOOL, F64, I32, I64, STRING, collection, named, newtype, point_and_wrapper, struct, unit_enum

HEADER = "// This file has been generated by typesync. DO NOT EDIT.\n\n"


def render(ndt, *others, **config):
    """Render the declaration of `ndt` alone."""
    exporter = TypeScriptExporter(ExportConfig(**config))
    return exporter.render_declaration(ndt, collection(ndt, *others))


def body(dt, *others, **config):
    return render(named("T", dt), *others, **config).removeprefix("export type T = ").removesuffix(";")


class TestDocument(TestCase):
    def test_struct_and_newtype_alias(self):
        output = TypeScriptExporter().export(point_and_wrapper())
        self.assertEqual(
            output,
            HEADER + "export type A = { a: number; b: boolean };\n\nexport type B = A;\n",
        )

    def test_headers(self):
        config = ExportConfig(header="// Copyright", framework_header="", generation_comment="Generated by: typesync")
        output = TypeScriptExporter(config).export(point_and_wrapper())
        self.assertTrue(output.startswith("// Copyright\n// Generated by: typesync\n\nexport type A"))

    def test_empty_collection(self):
        self.assertEqual(TypeScriptExporter(ExportConfig(framework_header="")).export(collection()), "")

    def test_per_type_layout_needs_a_directory(self):
        with pytest.raises(UnsupportedLayoutError):
            TypeScriptExporter(ExportConfig(layout=Layout.PER_TYPE_FILE)).export(point_and_wrapper())


class TestShapes(TestCase):
    def test_primitives_and_literals(self):
        self.assertEqual(body(struct("T", a=I32, b=F64, c=STRING, d=BOOL)), "{ a: number; b: number; c: string; d: boolean }")
        self.assertEqual(body(LiteralType.string("circle")), '"circle"')
        self.assertEqual(body(LiteralType.none()), "null")

    def test_collections(self):
        self.assertEqual(body(ListType(I32)), "number[]")
        self.assertEqual(body(ListType(NullableType(I32))), "(number | null)[]")
        self.assertEqual(body(ListType(I32, length=3)), "[number, number, number]")
        self.assertEqual(body(MapType(STRING, I32)), "Partial<{ [key in string]: number }>")
        self.assertEqual(body(TupleType((I32, STRING))), "[number, string]")
        self.assertEqual(body(TupleType()), "null")

    def test_nullable_map_key(self):
        self.assertEqual(body(MapType(NullableType(STRING), I32)), "Partial<{ [key in string]: number }>")

    def test_nullable_is_not_doubled(self):
        self.assertEqual(body(NullableType(NullableType(STRING))), "string | null")

    def test_empty_struct_is_not_null(self):
        self.assertEqual(body(StructType("T", Fields.named())), "Record<string, never>")
        self.assertEqual(body(StructType("T")), "null")

    def test_tuple_struct_keeps_brackets_when_fields_are_skipped(self):
        fields = Fields.unnamed(Field(I32), Field(STRING, skip=True))
        self.assertEqual(body(StructType("T", fields)), "[number]")

    def test_struct_tag(self):
        fields = Fields.named(Field(I32, name="x"), tag="kind")
        self.assertEqual(body(StructType("Point", fields)), '{ kind: "Point"; x: number }')

    def test_field_keys(self):
        fields = Fields.named(
            Field(I32, name="class"),
            Field(I32, name="my-key"),
            Field(I32, name="snake_case", rename="camelCase"),
            Field(I32, name="hidden", skip=True),
        )
        self.assertEqual(body(StructType("T", fields)), '{ "class": number; "my-key": number; camelCase: number }')

    def test_self_reference(self):
        tree = named("Tree", struct("Tree", children=ListType(named("Tree", StructType("Tree")).reference())))
        self.assertEqual(render(tree), "export type Tree = { children: Tree[] };")


class TestOpaque(TestCase):
    def test_define_is_emitted_verbatim(self):
        event = named("Event", struct("Event", at=define("Date"), size=ListType(define("number | string"))))
        output = TypeScriptExporter(ExportConfig(framework_header="")).export(collection(event))
        self.assertEqual(output, "export type Event = { at: Date; size: (number | string)[] };\n")

    def test_define_equality(self):
        self.assertEqual(define("Date"), define("Date"))
        self.assertNotEqual(define("Date"), define("string"))

    def test_unknown_opaque_reference(self):
        with pytest.raises(InvalidOpaqueReferenceError) as raised:
            body(struct("T", at=OpaqueReference(Decimal("1"))))
        self.assertEqual(raised.value.kind, "Decimal")
        self.assertEqual(raised.value.path, ("T", "at"))


class TestOptionality(TestCase):
    def test_nullable_field_is_required_by_default(self):
        self.assertEqual(body(struct("T", x=NullableType(I32))), "{ x: number | null }")

    def test_optional_nullable_fields(self):
        self.assertEqual(body(struct("T", x=NullableType(I32)), optional_nullable_fields=True), "{ x?: number | null }")

    def test_skip_serializing_if_none(self):
        fields = Fields.named(Field(NullableType(I32), name="x", skip_serializing_if="Option::is_none"))
        self.assertEqual(body(StructType("T", fields)), "{ x?: number | null }")

    def test_explicit_optional(self):
        self.assertEqual(body(StructType("T", Fields.named(Field(I32, name="x", optional=True)))), "{ x?: number }")


class TestEnums(TestCase):
    def variants(self):
        return (
            EnumVariant("Circle", Fields.named(Field(F64, name="radius"))),
            EnumVariant("Square", Fields.unnamed(Field(F64))),
            EnumVariant("Empty"),
        )

    def test_zero_variants_is_never(self):
        self.assertEqual(body(EnumType("T")), "never")

    def test_external(self):
        self.assertEqual(
            body(EnumType("Shape", self.variants())),
            '{ Circle: { radius: number } } | { Square: number } | "Empty"',
        )

    def test_external_empty_tuple_variant(self):
        enum = EnumType("E", (EnumVariant("A", Fields.unnamed()), EnumVariant("B")))
        self.assertEqual(body(enum), '[] | "B"')

    def test_internal(self):
        square = named("SquareData", struct("SquareData", side=F64))
        enum = EnumType(
            "Shape",
            (
                EnumVariant("Circle", Fields.named(Field(F64, name="radius"))),
                EnumVariant("Square", Fields.unnamed(Field(square.reference()))),
                EnumVariant("Empty"),
            ),
            Internal("kind"),
        )
        self.assertEqual(
            body(enum, square),
            '({ kind: "Circle"; radius: number }) | ({ kind: "Square" } & SquareData) | ({ kind: "Empty" })',
        )

    def test_adjacent(self):
        enum = EnumType("Shape", self.variants(), Adjacent("t", "c"))
        self.assertEqual(
            body(enum),
            '{ t: "Circle"; c: { radius: number } } | { t: "Square"; c: number } | { t: "Empty" }',
        )

    def test_untagged_collapses_identical_shapes(self):
        enum = EnumType(
            "Value",
            (
                EnumVariant("A", Fields.unnamed(Field(F64))),
                EnumVariant("B", Fields.unnamed(Field(F64))),
                EnumVariant("C"),
            ),
            Untagged(),
        )
        self.assertEqual(body(enum), "number | null")

    def test_string_enum_with_rename_rule(self):
        enum = unit_enum("Color", "DarkRed", "Green", repr=StringRepr("kebab-case"))
        self.assertEqual(body(enum), '"dark-red" | "green"')

    def test_configured_repr_outranks_declared(self):
        enum = unit_enum("Color", "Red", "Green", repr=StringRepr())
        ndt = named("Color", enum)
        self.assertEqual(render(ndt, enum_reprs={"Color": Adjacent("t", "c")}), 'export type Color = { t: "Red" } | { t: "Green" };')

    def test_variant_rename_and_skip(self):
        enum = EnumType("E", (EnumVariant("A", rename="a"), EnumVariant("B", skip=True)))
        self.assertEqual(body(enum), '"a"')


class TestGenerics(TestCase):
    def test_generic_declaration_and_reference(self):
        page = named("Page", struct("Page", items=ListType(GenericType("T")), total=I32), generics=("T",))
        holder = named("Holder", struct("Holder", users=page.reference(STRING)))

        self.assertEqual(render(page), "export type Page<T> = { items: T[]; total: number };")
        self.assertEqual(render(holder, page), "export type Holder = { users: Page<string> };")


class TestComments(TestCase):
    def test_jsdoc(self):
        ndt = named("A", struct("A"), docs=("A point.",), deprecated=Deprecated("use B", "1.2"))
        self.assertEqual(
            render(ndt),
            "/**\n * A point.\n * @deprecated use B since 1.2\n */\nexport type A = Record<string, never>;",
        )

    def test_line_comments(self):
        ndt = named("A", struct("A"), docs=("First.\nSecond.",))
        self.assertEqual(render(ndt, comment_style=CommentStyle.LINE), "// First.\n// Second.\nexport type A = Record<string, never>;")

    def test_no_comments(self):
        ndt = named("A", struct("A"), docs=("Hidden.",))
        self.assertEqual(render(ndt, comment_style=CommentStyle.NONE), "export type A = Record<string, never>;")

    def test_field_comment_is_escaped(self):
        fields = Fields.named(Field(I32, name="x", docs=("Ends */ early",), deprecated=Deprecated()))
        self.assertEqual(body(StructType("T", fields)), "{ /** Ends *\\/ early @deprecated */ x: number }")


class TestBigInt(TestCase):
    def test_fail_is_the_default(self):
        with pytest.raises(BigIntForbiddenError) as info:
            body(struct("T", id=I64))
        self.assertEqual(info.value.path, ("T", "id"))

    def test_policies(self):
        self.assertEqual(body(struct("T", id=I64), bigint=BigIntBehavior.STRING), "{ id: string }")
        self.assertEqual(body(struct("T", id=I64), bigint=BigIntBehavior.NUMBER), "{ id: number }")
        self.assertEqual(body(struct("T", id=I64), bigint=BigIntBehavior.BIGINT), "{ id: bigint }")


class TestNames(TestCase):
    def widgets(self):
        first = named("Widget", struct("Widget", a=I32), module_path="shop", line=3)
        second = named("Widget", struct("Widget", b=I32), module_path="admin", line=7)
        return collection(first, second)

    def test_duplicate_names_cite_both_locations(self):
        with pytest.raises(DuplicateTypeNameError) as info:
            TypeScriptExporter().export(self.widgets())
        message = str(info.value)
        self.assertIn("shop.py:3", message)
        self.assertIn("admin.py:7", message)

    def test_same_type_twice_is_not_a_duplicate(self):
        types = point_and_wrapper()
        types.extend(point_and_wrapper())
        TypeScriptExporter().export(types)

    def test_module_prefix_policy(self):
        output = TypeScriptExporter(ExportConfig(name_collisions=NameCollisionPolicy.MODULE_PREFIX)).export(self.widgets())
        self.assertIn("export type admin_Widget = { b: number };", output)
        self.assertIn("export type shop_Widget = { a: number };", output)

    def test_reserved_type_name(self):
        with pytest.raises(ForbiddenNameError):
            TypeScriptExporter().export(collection(named("string", struct("string"))))
        with pytest.raises(ForbiddenNameError):
            TypeScriptExporter().export(collection(named("Record", struct("Record"))))

    def test_invalid_type_name(self):
        with pytest.raises(InvalidNameError):
            TypeScriptExporter().export(collection(named("My-Type", struct("My-Type"))))

    def test_validation_runs_before_rendering(self):
        with pytest.raises(InvalidMapKeyError):
            TypeScriptExporter().export(collection(named("T", MapType(ListType(I32), I32))))

    def test_validation_can_be_disabled(self):
        output = TypeScriptExporter(ExportConfig(serde=False)).export(collection(named("T", MapType(newtype("K", I32), I32))))
        self.assertIn("export type T = Partial<{ [key in number]: number }>;", output)

"""
Tests for the IR nodes, type ids and named type records.
"""

from __future__ import annotations

import pytest

from typesync.datatype import (
    Deprecated,
    Field,
    Fields,
    FieldsKind,
    GenericType,
    IdKind,
    ImplLocation,
    ListType,
    LiteralKind,
    LiteralType,
    MapType,
    NullableType,
    OpaqueReference,
    PrimitiveKind,
    Reference,
    StructType,
    TypeId,
    sid,
    substitute_generics,
    walk_references,
)

from .factories import BOOL, I32, STRING, named, struct


class TestPrimitiveKind:
    def test_bigint_kinds(self):
        wide = {k for k in PrimitiveKind if k.is_bigint}
        assert wide == {
            PrimitiveKind.I64,
            PrimitiveKind.I128,
            PrimitiveKind.ISIZE,
            PrimitiveKind.U64,
            PrimitiveKind.U128,
            PrimitiveKind.USIZE,
        }

    def test_classification(self):
        assert PrimitiveKind.U16.is_integer and PrimitiveKind.U16.is_unsigned
        assert PrimitiveKind.F32.is_float and PrimitiveKind.F32.is_number
        assert PrimitiveKind.CHAR.is_string_like
        assert not PrimitiveKind.BOOL.is_number
        assert not PrimitiveKind.BOOL.is_string_like


class TestLiteralType:
    def test_valid_literals(self):
        assert LiteralType(LiteralKind.U8, 255).value == 255
        assert LiteralType(LiteralKind.F64, 1.5).is_number
        assert LiteralType.string("circle").is_string_like
        assert LiteralType.none().value is None

    @pytest.mark.parametrize(
        "kind,value",
        [
            (LiteralKind.I8, 200),
            (LiteralKind.U8, -1),
            (LiteralKind.I32, True),
            (LiteralKind.BOOL, 1),
            (LiteralKind.CHAR, "ab"),
            (LiteralKind.STRING, 3),
            (LiteralKind.NONE, "x"),
        ],
    )
    def test_out_of_range_literals_are_rejected(self, kind, value):
        with pytest.raises(ValueError):
            LiteralType(kind, value)


class TestFields:
    def test_unit_fields_cannot_hold_fields(self):
        with pytest.raises(ValueError):
            Fields(FieldsKind.UNIT, (Field(I32),))

    def test_named_fields_need_names(self):
        with pytest.raises(ValueError):
            Fields.named(Field(I32))

    def test_only_named_fields_carry_a_tag(self):
        with pytest.raises(ValueError):
            Fields(FieldsKind.UNNAMED, (Field(I32),), tag="type")

    def test_newtype(self):
        assert Fields.unnamed(Field(I32)).is_newtype
        assert not Fields.unnamed(Field(I32, skip=True)).is_newtype
        assert not Fields.unnamed(Field(I32), Field(BOOL)).is_newtype

    def test_non_skipped_and_key(self):
        fields = Fields.named(Field(I32, name="a", rename="alpha"), Field(BOOL, name="b", skip=True))
        assert [f.key for f in fields.non_skipped()] == ["alpha"]


class TestTypeId:
    def test_sid_is_stable(self):
        assert sid("Widget", "app.models.Widget") == sid("Widget", "app.models.Widget")

    def test_same_name_different_modules(self):
        assert sid("Widget", "a.Widget") != sid("Widget", "b.Widget")

    def test_name_and_identifier_are_separated(self):
        assert sid("AB", "x.Y") != sid("A", "Bx.Y")

    def test_equality_ignores_type_name(self):
        first = sid("Widget", "a.Widget")
        assert TypeId(first.kind, first.hash, "Other") == first

    def test_of_uses_qualified_name(self):
        class Widget:
            pass

        type_id = TypeId.of(Widget)
        assert type_id.is_static
        assert type_id == TypeId.of(Widget)
        assert type_id.type_name == "Widget"

    def test_virtual_ids_are_unique(self):
        first, second = TypeId.virtual("A"), TypeId.virtual("A")
        assert first.kind is IdKind.VIRTUAL
        assert first != second


class TestNamedType:
    def test_reference_checks_generic_arity(self):
        page = named("Page", struct("Page", items=ListType(GenericType("T"))), generics=("T",))
        assert page.reference(STRING) == Reference(page.id, (STRING,))
        with pytest.raises(ValueError):
            page.reference()

    def test_docs_text(self):
        ndt = named("A", struct("A"), docs=("First.", "Second."))
        assert ndt.docs_text == "First.\nSecond."


class TestHelpers:
    def test_walk_references_does_not_follow_targets(self):
        a, b = sid("A", "t.A"), sid("B", "t.B")
        dt = struct(
            "S",
            x=ListType(Reference(a)),
            y=MapType(STRING, NullableType(Reference(b, (Reference(a),)))),
        )
        assert [r.id for r in walk_references(dt)] == [a, b, a]

    def test_substitute_generics(self):
        dt = StructType("Page", Fields.named(Field(ListType(GenericType("T")), name="items")))
        bound = substitute_generics(dt, {"T": I32})
        assert bound.fields.fields[0].ty == ListType(I32)
        assert substitute_generics(GenericType("U"), {"T": I32}) == GenericType("U")

    def test_opaque_references_are_leaves(self):
        opaque = OpaqueReference(("money", 2))
        assert opaque.kind == "tuple"
        assert list(walk_references(struct("S", amount=opaque))) == []
        assert substitute_generics(opaque, {"T": I32}) is opaque


class TestAttrs:
    def test_deprecated_str(self):
        assert str(Deprecated("use B", "1.2")) == "deprecated use B since 1.2"
        assert str(Deprecated()) == "deprecated"

    def test_impl_location_of_function(self):
        location = ImplLocation.of(TestAttrs.test_impl_location_of_function)
        assert location.file.endswith("test_datatype.py")
        assert location.line > 0

    def test_impl_location_of_builtin(self):
        assert ImplLocation.of(len) == ImplLocation()

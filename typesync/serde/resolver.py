"""
Enum representation resolver.

Decides how each enum encodes which variant a value holds. Precedence is
explicit per-type configuration, then the representation declared on the
enum itself, then External.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from ..datatype import Adjacent, EnumRepr, EnumType, External, Internal, StringRepr, Untagged
from ..errors import EnumReprError
from .inflection import RenameRule


def effective_repr(enum: EnumType, overrides: Mapping[str, EnumRepr] | None = None) -> EnumRepr:
    """The representation an enum uses, before any shape checks."""
    if overrides and enum.name in overrides:
        return overrides[enum.name]
    if enum.repr is not None:
        return enum.repr
    return External()


def resolve_enum_repr(
    enum: EnumType,
    types=None,
    overrides: Mapping[str, EnumRepr] | None = None,
    path: Sequence[str] = (),
) -> EnumRepr:
    """
    Resolve and check the representation of an enum.

    Args:
        enum: The enum to resolve
        types: TypeCollection used to follow references for internal tagging
        overrides: Per-type representations keyed by display name
        path: Diagnostic path of the enum

    Returns:
        The representation to render the enum with

    Raises:
        EnumReprError: If the representation cannot encode the enum's variants
        InvalidInternallyTaggedEnumError: If internal tagging cannot merge the tag into a variant
    """
    path = tuple(path) or (enum.name,)
    repr = effective_repr(enum, overrides)

    if isinstance(repr, StringRepr):
        if not enum.is_unit_only:
            raise EnumReprError(path, "a string representation requires every variant to be a unit variant")
        if repr.rename_all is not None:
            rename_rule(repr, path)
    elif isinstance(repr, Adjacent):
        if repr.tag == repr.content:
            raise EnumReprError(path, f"the tag and content fields are both named {repr.tag!r}")
    elif isinstance(repr, Internal):
        from .validate import check_internally_tagged_enum

        check_internally_tagged_enum(enum, types, overrides, path)
    elif not isinstance(repr, (External, Untagged)):
        raise AssertionError(f"unhandled enum representation: {repr!r}")

    return repr


def rename_rule(repr: StringRepr, path: Sequence[str] = ()) -> RenameRule:
    """The casing rule of a string representation."""
    if repr.rename_all is None:
        return RenameRule.NONE
    try:
        return RenameRule.from_str(repr.rename_all)
    except ValueError as e:
        raise EnumReprError(path, str(e)) from e


def parse_enum_repr(value: Any, name: str = "") -> EnumRepr:
    """
    Parse a representation from its configuration form.

    Accepted forms are `{"external": true}`, `{"tag": "t"}`,
    `{"tag": "t", "content": "c"}`, `{"untagged": true}` and
    `{"string": "camelCase"}` (or `{"string": null}` to keep variant names).

    Args:
        value: A dictionary, or an already built representation
        name: Type name, for diagnostics

    Returns:
        The parsed representation
    """
    if isinstance(value, (External, Internal, Adjacent, Untagged, StringRepr)):
        return value
    if not isinstance(value, Mapping):
        raise EnumReprError((name,), f"expected a mapping, got {value!r}")

    keys = set(value)
    if keys == {"external"} and value["external"]:
        return External()
    if keys == {"untagged"} and value["untagged"]:
        return Untagged()
    if keys == {"string"}:
        return StringRepr(rename_all=value["string"])
    if keys == {"tag"}:
        return Internal(tag=value["tag"])
    if keys == {"tag", "content"}:
        return Adjacent(tag=value["tag"], content=value["content"])
    raise EnumReprError((name,), f"unrecognized enum representation {dict(value)!r}")


def enum_repr_to_dict(repr: EnumRepr) -> dict:
    """Inverse of parse_enum_repr."""
    if isinstance(repr, External):
        return {"external": True}
    if isinstance(repr, Untagged):
        return {"untagged": True}
    if isinstance(repr, StringRepr):
        return {"string": repr.rename_all}
    if isinstance(repr, Internal):
        return {"tag": repr.tag}
    if isinstance(repr, Adjacent):
        return {"tag": repr.tag, "content": repr.content}
    raise AssertionError(f"unhandled enum representation: {repr!r}")

"""
Enum representations.

Mirrors the tagging strategies of structural serializers: which variant a
value holds is encoded externally, internally, adjacently, not at all, or
(for unit-only enums) as a bare string.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class External:
    """`{ "Variant": payload }`, or a bare string for unit variants."""


@dataclass(frozen=True)
class Internal:
    """The tag field is merged into the variant's own object."""

    tag: str


@dataclass(frozen=True)
class Adjacent:
    """`{ tag: "Variant", content: payload }`."""

    tag: str
    content: str


@dataclass(frozen=True)
class Untagged:
    """A bare union of variant payloads."""


@dataclass(frozen=True)
class StringRepr:
    """Unit-only enum rendered as a union of string literals."""

    # Casing applied to variant names, e.g. "camelCase"; None keeps names as-is
    rename_all: str | None = None


EnumRepr = External | Internal | Adjacent | Untagged | StringRepr

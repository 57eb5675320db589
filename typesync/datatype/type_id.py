"""
Stable type identifiers.

A TypeId is derived from the host type's qualified name with a 64-bit
FNV-1a hash, so registering the same host type twice yields the same id
while two types that share a display name still get distinct ids.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from enum import Enum

_FNV_OFFSET = 0xCBF29CE484222325
_FNV_PRIME = 0x00000100000001B3
_MASK = 0xFFFFFFFFFFFFFFFF

_VIRTUAL_IDS = itertools.count()


class IdKind(str, Enum):
    """Whether an id is valid in every collection or issued by one."""

    STATIC = "static"
    VIRTUAL = "virtual"


@dataclass(frozen=True, order=True)
class TypeId:
    """Identity of a named type. Equality ignores the diagnostic type name."""

    kind: IdKind
    hash: int
    type_name: str = field(default="", compare=False)

    def __str__(self) -> str:
        return f"{self.type_name or '<anonymous>'}#{self.hash:016x}"

    @property
    def is_static(self) -> bool:
        return self.kind is IdKind.STATIC

    @property
    def is_virtual(self) -> bool:
        return self.kind is IdKind.VIRTUAL

    @staticmethod
    def of(obj) -> TypeId:
        """Compute the id for a class (or any object with a qualified name)."""
        qualname = getattr(obj, "__qualname__", None) or getattr(obj, "__name__")
        return sid(obj.__name__, f"{obj.__module__}.{qualname}")

    @staticmethod
    def virtual(type_name: str = "virtual") -> TypeId:
        """Issue a fresh id for a type declared at runtime."""
        return TypeId(IdKind.VIRTUAL, next(_VIRTUAL_IDS), type_name)


def sid(type_name: str, type_identifier: str) -> TypeId:
    """
    Compute a static id from a display name and a globally unique identifier.

    Args:
        type_name: Short name of the type, kept for diagnostics
        type_identifier: Unique identifier, usually the module-qualified name

    Returns:
        A TypeId that is equal for equal arguments
    """
    value = _FNV_OFFSET
    # NUL keeps ("AB", "x.Y") and ("A", "Bx.Y") apart
    for byte in type_name.encode("utf-8") + b"\x00" + type_identifier.encode("utf-8"):
        value ^= byte
        value = (value * _FNV_PRIME) & _MASK
    return TypeId(IdKind.STATIC, value, type_name)

"""
Named type records.

A NamedType pairs a DataType with the identity and documentation metadata
an exporter needs to emit a declaration for it.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .attrs import Deprecated, ImplLocation
from .nodes import DataType, Reference
from .type_id import TypeId


@dataclass(frozen=True)
class NamedType:
    """A DataType registered under a stable id and a display name."""

    id: TypeId
    name: str
    inner: DataType
    # Generic parameter names in declaration order, e.g. ("T", "U")
    generics: tuple[str, ...] = ()
    docs: tuple[str, ...] = ()
    deprecated: Deprecated | None = None
    location: ImplLocation = field(default_factory=ImplLocation)
    # Dotted path of the declaring module, used by per-type-file layouts
    module_path: str = ""

    def reference(self, *generics: DataType) -> Reference:
        """
        Build a Reference pointing at this type.

        Args:
            *generics: Arguments bound to the generic parameters, in order

        Returns:
            A Reference to this type
        """
        if len(generics) != len(self.generics):
            raise ValueError(f"{self.name} expects {len(self.generics)} generic argument(s), got {len(generics)}")
        return Reference(self.id, tuple(generics))

    @property
    def docs_text(self) -> str:
        return "\n".join(self.docs)

"""
Metadata attached to named types, fields and variants.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass


@dataclass(frozen=True)
class Deprecated:
    """A deprecation marker with an optional note and version."""

    note: str | None = None
    since: str | None = None

    def __str__(self) -> str:
        parts = ["deprecated"]
        if self.note:
            parts.append(self.note)
        if self.since:
            parts.append(f"since {self.since}")
        return " ".join(parts)


@dataclass(frozen=True)
class ImplLocation:
    """Where a host type was declared. Only used for diagnostics."""

    file: str = "<unknown>"
    line: int = 0

    def __str__(self) -> str:
        return f"{self.file}:{self.line}"

    @staticmethod
    def of(obj) -> ImplLocation:
        """Best-effort location of a class or function."""
        try:
            file = inspect.getsourcefile(obj) or "<unknown>"
            _, line = inspect.getsourcelines(obj)
        except (TypeError, OSError):
            return ImplLocation()
        return ImplLocation(file=file, line=line)

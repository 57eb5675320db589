"""
Serde compatibility: validation, enum representations and renaming rules.
"""

from __future__ import annotations

from .inflection import RenameRule
from .resolver import effective_repr, enum_repr_to_dict, parse_enum_repr, rename_rule, resolve_enum_repr
from .validate import check_internally_tagged_enum, is_valid_map_key, validate

__all__ = [
    "RenameRule",
    "check_internally_tagged_enum",
    "effective_repr",
    "enum_repr_to_dict",
    "is_valid_map_key",
    "parse_enum_repr",
    "rename_rule",
    "resolve_enum_repr",
    "validate",
]

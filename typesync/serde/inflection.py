"""
Casing transforms for renamed fields and variants.

Follows the rename rules of the serde derive internals so renamed keys match
what a serde-based serializer produces.
"""

from __future__ import annotations

from enum import Enum


class RenameRule(str, Enum):
    """The ways to change the case of struct fields or enum variants."""

    NONE = "none"
    LOWER_CASE = "lowercase"
    UPPER_CASE = "UPPERCASE"
    PASCAL_CASE = "PascalCase"
    CAMEL_CASE = "camelCase"
    SNAKE_CASE = "snake_case"
    SCREAMING_SNAKE_CASE = "SCREAMING_SNAKE_CASE"
    KEBAB_CASE = "kebab-case"
    SCREAMING_KEBAB_CASE = "SCREAMING-KEBAB-CASE"

    @staticmethod
    def from_str(rule: str) -> RenameRule:
        """
        Parse a `rename_all` value.

        Raises:
            ValueError: If `rule` is not a known rename rule
        """
        for candidate in RenameRule:
            if candidate is not RenameRule.NONE and candidate.value == rule:
                return candidate
        expected = ", ".join(repr(r.value) for r in RenameRule if r is not RenameRule.NONE)
        raise ValueError(f"unknown rename rule `rename_all = {rule!r}`, expected one of {expected}")

    def apply_to_variant(self, variant: str) -> str:
        """Rename a variant, which is expected to be written in PascalCase."""
        if self in (RenameRule.NONE, RenameRule.PASCAL_CASE):
            return variant
        if self is RenameRule.LOWER_CASE:
            return variant.lower()
        if self is RenameRule.UPPER_CASE:
            return variant.upper()
        if self is RenameRule.CAMEL_CASE:
            return variant[:1].lower() + variant[1:]
        if self is RenameRule.SNAKE_CASE:
            snake = []
            for i, ch in enumerate(variant):
                if i > 0 and ch.isupper():
                    snake.append("_")
                snake.append(ch.lower())
            return "".join(snake)
        if self is RenameRule.SCREAMING_SNAKE_CASE:
            return RenameRule.SNAKE_CASE.apply_to_variant(variant).upper()
        if self is RenameRule.KEBAB_CASE:
            return RenameRule.SNAKE_CASE.apply_to_variant(variant).replace("_", "-")
        if self is RenameRule.SCREAMING_KEBAB_CASE:
            return RenameRule.SCREAMING_SNAKE_CASE.apply_to_variant(variant).replace("_", "-")
        raise AssertionError(self)

    def apply_to_field(self, field: str) -> str:
        """Rename a field, which is expected to be written in snake_case."""
        if self in (RenameRule.NONE, RenameRule.LOWER_CASE, RenameRule.SNAKE_CASE):
            return field
        if self in (RenameRule.UPPER_CASE, RenameRule.SCREAMING_SNAKE_CASE):
            return field.upper()
        if self is RenameRule.PASCAL_CASE:
            return "".join(word[:1].upper() + word[1:] for word in field.split("_"))
        if self is RenameRule.CAMEL_CASE:
            pascal = RenameRule.PASCAL_CASE.apply_to_field(field)
            return pascal[:1].lower() + pascal[1:]
        if self is RenameRule.KEBAB_CASE:
            return field.replace("_", "-")
        if self is RenameRule.SCREAMING_KEBAB_CASE:
            return field.upper().replace("_", "-")
        raise AssertionError(self)

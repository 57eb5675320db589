"""
Exporters rendering a TypeCollection into target syntaxes.
"""

from __future__ import annotations

from .base import Exporter, is_valid_type_name
from .jsonschema import JsonSchemaExporter
from .typescript import Define, TypeScriptExporter, define
from .zod import ZodExporter

__all__ = [
    "Define",
    "Exporter",
    "JsonSchemaExporter",
    "TypeScriptExporter",
    "ZodExporter",
    "define",
    "is_valid_type_name",
]

"""
Export entry points.

Pick the exporter matching `config.language` and run it over a collection.
"""

from __future__ import annotations

from pathlib import Path

from .collection import TypeCollection
from .config import ExportConfig, Language
from .exporters import Exporter, JsonSchemaExporter, TypeScriptExporter, ZodExporter

EXPORTERS: dict[Language, type[Exporter]] = {
    Language.TYPESCRIPT: TypeScriptExporter,
    Language.JSONSCHEMA: JsonSchemaExporter,
    Language.ZOD: ZodExporter,
}


def get_exporter(config: ExportConfig) -> Exporter:
    """Instantiate the exporter for the configured language."""
    return EXPORTERS[Language(config.language)](config)


def export(config: ExportConfig, types: TypeCollection) -> str:
    """
    Export a collection to a string.

    Args:
        config: Export configuration
        types: The collection to export

    Returns:
        The rendered document

    Raises:
        TypesyncError: If validation, naming or rendering fails
    """
    return get_exporter(config).export(types)


def export_to(config: ExportConfig, path: str | Path, types: TypeCollection) -> list[Path]:
    """
    Export a collection to a file, or a directory for the per-type-file layout.

    Nothing is written when rendering or validation fails. The configured
    formatter runs once everything has been written.

    Returns:
        The written files
    """
    return get_exporter(config).export_to(path, types)

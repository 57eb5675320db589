"""
Formatters for TypeScript, JavaScript and JSON output.
"""

from __future__ import annotations

from ..config import FormatterTool
from .base import CommandFormatter, Formatter


class PrettierFormatter(CommandFormatter):
    EXECUTABLE = "prettier"
    ARGS = ("--write",)


class BiomeFormatter(CommandFormatter):
    EXECUTABLE = "biome"
    ARGS = ("format", "--write")


class EslintFormatter(CommandFormatter):
    EXECUTABLE = "eslint"
    ARGS = ("--fix",)


FORMATTERS: dict[FormatterTool, type[CommandFormatter]] = {
    FormatterTool.PRETTIER: PrettierFormatter,
    FormatterTool.BIOME: BiomeFormatter,
    FormatterTool.ESLINT: EslintFormatter,
}


def get_formatter(tool: FormatterTool | str) -> Formatter:
    """Instantiate the formatter for a tool name."""
    return FORMATTERS[FormatterTool(tool)]()

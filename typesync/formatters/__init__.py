"""
Post-processing formatters for exported files.
"""

from __future__ import annotations

from .base import CommandFormatter, Formatter
from .tools import BiomeFormatter, EslintFormatter, PrettierFormatter, get_formatter

__all__ = [
    "BiomeFormatter",
    "CommandFormatter",
    "EslintFormatter",
    "Formatter",
    "PrettierFormatter",
    "get_formatter",
]

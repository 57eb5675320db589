"""typesync

Keep one source of truth for data shapes and render it into TypeScript,
JSON Schema and Zod. Types are described with a language-neutral IR,
collected into a TypeCollection, checked for serde compatibility and
exported through a per-language exporter.
"""

__version__ = "0.1.0"

from .collection import TypeCollection
from .config import (
    BigIntBehavior,
    CommentStyle,
    ExportConfig,
    FormatterConfig,
    Language,
    Layout,
    NameCollisionPolicy,
    OutputConfig,
    SchemaVersion,
)
from .errors import InvariantViolation, TypesyncError
from .export import export, export_to, get_exporter
from .exporters import define
from .registry import collect, export_type
from .writer import AtomicWriter

__all__ = [
    "AtomicWriter",
    "BigIntBehavior",
    "CommentStyle",
    "ExportConfig",
    "FormatterConfig",
    "InvariantViolation",
    "Language",
    "Layout",
    "NameCollisionPolicy",
    "OutputConfig",
    "SchemaVersion",
    "TypeCollection",
    "TypesyncError",
    "collect",
    "define",
    "export",
    "export_to",
    "export_type",
    "get_exporter",
]

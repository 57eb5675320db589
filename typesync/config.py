"""
Configuration for exporters.

Every option has a JSON-friendly form so configurations can be loaded from
a file with `ExportConfig.from_dict` and written back with `to_dict`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .datatype import EnumRepr
from .errors import InvalidSchemaVersionError
from .serde.resolver import enum_repr_to_dict, parse_enum_repr

DEFAULT_FRAMEWORK_HEADER = "// This file has been generated by typesync. DO NOT EDIT."


class Language(str, Enum):
    """Target syntax of an export."""

    TYPESCRIPT = "typescript"
    JSONSCHEMA = "jsonschema"
    ZOD = "zod"


class BigIntBehavior(str, Enum):
    """How 64-bit and wider integers are exported.

    Targets whose native number is a double cannot hold these exactly.
    """

    STRING = "string"  # Serialized as a string
    NUMBER = "number"  # Native number, accepting precision loss
    BIGINT = "bigint"  # The target's big-integer type
    FAIL = "fail"  # Default: refuse to export


class Layout(str, Enum):
    SINGLE_FILE = "single-file"  # One document with every type
    PER_TYPE_FILE = "per-type-file"  # One document per type under a derived path


class CommentStyle(str, Enum):
    JSDOC = "jsdoc"  # /** ... */
    LINE = "line"  # // ...
    NONE = "none"


class SchemaVersion(str, Enum):
    """JSON Schema dialect."""

    DRAFT_07 = "draft-07"
    DRAFT_2019_09 = "draft-2019-09"
    DRAFT_2020_12 = "draft-2020-12"

    @staticmethod
    def parse(selector: str | SchemaVersion) -> SchemaVersion:
        """
        Parse a schema version selector.

        Raises:
            InvalidSchemaVersionError: If the selector is unknown
        """
        if isinstance(selector, SchemaVersion):
            return selector
        try:
            return SchemaVersion(selector)
        except ValueError as e:
            raise InvalidSchemaVersionError(selector) from e

    @property
    def uri(self) -> str:
        return {
            SchemaVersion.DRAFT_07: "http://json-schema.org/draft-07/schema#",
            SchemaVersion.DRAFT_2019_09: "https://json-schema.org/draft/2019-09/schema",
            SchemaVersion.DRAFT_2020_12: "https://json-schema.org/draft/2020-12/schema",
        }[self]

    @property
    def definitions_key(self) -> str:
        return "definitions" if self is SchemaVersion.DRAFT_07 else "$defs"


class NameCollisionPolicy(str, Enum):
    """What to do when two distinct types render to the same name."""

    ERROR = "error"  # Default: raise DuplicateTypeNameError
    MODULE_PREFIX = "module-prefix"  # Prefix every type name with its module path


class FormatterTool(str, Enum):
    PRETTIER = "prettier"
    BIOME = "biome"
    ESLINT = "eslint"


@dataclass
class FormatterConfig:
    """Configuration for the external formatter run after writing."""

    # Whether formatting is enabled
    enabled: bool = False

    # Which tool to invoke
    tool: FormatterTool = FormatterTool.PRETTIER

    # Whether a formatter failure fails the export
    strict: bool = False

    @staticmethod
    def from_dict(d: dict) -> FormatterConfig:
        return FormatterConfig(
            enabled=d.get("enabled", False),
            tool=FormatterTool(d.get("tool", FormatterTool.PRETTIER)),
            strict=d.get("strict", False),
        )

    def to_dict(self) -> dict:
        return {"enabled": self.enabled, "tool": self.tool.value, "strict": self.strict}


@dataclass
class OutputConfig:
    """Configuration for output file handling.

    Attributes:
        atomic_write: Whether to write through a temporary file and rename it
        validate_before_write: Whether to sanity-check rendered text before writing
    """

    atomic_write: bool = True
    validate_before_write: bool = True

    @staticmethod
    def from_dict(d: dict) -> OutputConfig:
        return OutputConfig(
            atomic_write=d.get("atomic_write", True),
            validate_before_write=d.get("validate_before_write", True),
        )

    def to_dict(self) -> dict:
        return {"atomic_write": self.atomic_write, "validate_before_write": self.validate_before_write}


@dataclass
class ExportConfig:
    """Configuration options for an export."""

    # Target syntax
    language: Language = Language.TYPESCRIPT

    # User header comment, emitted first
    header: str = ""

    # Tool banner emitted after the user header
    framework_header: str = DEFAULT_FRAMEWORK_HEADER

    # Comment describing how the file was generated (set by the command line)
    generation_comment: str = ""

    # Handling of i64/u64/i128/u128/isize/usize
    bigint: BigIntBehavior = BigIntBehavior.FAIL

    layout: Layout = Layout.SINGLE_FILE

    comment_style: CommentStyle = CommentStyle.JSDOC

    # JSON Schema dialect (ignored by other languages)
    schema_version: SchemaVersion = SchemaVersion.DRAFT_07

    name_collisions: NameCollisionPolicy = NameCollisionPolicy.ERROR

    # Run the serde-compatibility validator before exporting
    serde: bool = True

    # Render every nullable struct field as presence-optional too
    optional_nullable_fields: bool = False

    # Enum representations keyed by type name; they outrank the declared ones
    enum_reprs: dict[str, EnumRepr] = field(default_factory=dict)

    formatter: FormatterConfig = field(default_factory=FormatterConfig)

    output: OutputConfig = field(default_factory=OutputConfig)

    # JSON Schema root metadata
    title: str = ""
    description: str = ""

    @staticmethod
    def from_dict(d: dict) -> ExportConfig:
        """Create a config from a dictionary."""
        config = ExportConfig()
        for k, v in d.items():
            if k == "language":
                config.language = Language(v)
            elif k == "bigint":
                config.bigint = BigIntBehavior(v)
            elif k == "layout":
                config.layout = Layout(v)
            elif k == "comment_style":
                config.comment_style = CommentStyle(v)
            elif k == "schema_version":
                config.schema_version = SchemaVersion.parse(v)
            elif k == "name_collisions":
                config.name_collisions = NameCollisionPolicy(v)
            elif k == "enum_reprs":
                config.enum_reprs = {name: parse_enum_repr(r, name) for name, r in v.items()}
            elif k == "formatter" and isinstance(v, dict):
                config.formatter = FormatterConfig.from_dict(v)
            elif k == "output" and isinstance(v, dict):
                config.output = OutputConfig.from_dict(v)
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "language": self.language.value,
            "header": self.header,
            "framework_header": self.framework_header,
            "generation_comment": self.generation_comment,
            "bigint": self.bigint.value,
            "layout": self.layout.value,
            "comment_style": self.comment_style.value,
            "schema_version": self.schema_version.value,
            "name_collisions": self.name_collisions.value,
            "serde": self.serde,
            "optional_nullable_fields": self.optional_nullable_fields,
            "enum_reprs": {name: enum_repr_to_dict(r) for name, r in self.enum_reprs.items()},
            "formatter": self.formatter.to_dict(),
            "output": self.output.to_dict(),
            "title": self.title,
            "description": self.description,
        }

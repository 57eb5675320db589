"""
Base class for exporters.

Defines the contract every target syntax implements and the behavior they
share: name checks, duplicate detection, big-integer policy, optionality,
enum representation lookup, layouts and writing files.
"""

from __future__ import annotations

import json
import os
import re
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from pathlib import Path

import jinja2

from ..collection import TypeCollection
from ..config import BigIntBehavior, ExportConfig, Language, Layout, NameCollisionPolicy
from ..datatype import (
    EnumRepr,
    EnumType,
    EnumVariant,
    Field,
    NamedType,
    NullableType,
    Reference,
    StringRepr,
    walk_references,
)
from ..errors import (
    BigIntForbiddenError,
    DuplicateTypeNameError,
    ExportIOError,
    ForbiddenNameError,
    FormatterError,
    InvalidNameError,
    InvalidReferenceError,
    UnsupportedLayoutError,
)
from ..formatters import get_formatter
from ..logger import get_logger
from ..serde import rename_rule, resolve_enum_repr, validate
from ..writer import AtomicWriter

logger = get_logger(__name__)

# Conditional-skip predicates that make a nullable field presence-optional
OPTION_SKIP_PREDICATES = frozenset({"Option::is_none", "is_none"})

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

TypePath = tuple[str, ...]


def is_valid_type_name(name: str) -> bool:
    """First character alphabetic or `_`, the rest alphanumeric or `_`."""
    if not name or not (name[0].isalpha() or name[0] == "_"):
        return False
    return all(c.isalnum() or c == "_" for c in name)


class Exporter(ABC):
    """Abstract base class for exporters."""

    LANGUAGE: Language

    # Extension of generated files, without the dot
    FILE_EXTENSION: str = ""

    # Template directory name; empty when the exporter does not use templates
    TEMPLATE_LANG: str = ""

    RESERVED_TYPE_NAMES: frozenset[str] = frozenset()
    RESERVED_FIELD_NAMES: frozenset[str] = frozenset()

    def __init__(self, config: ExportConfig | None = None):
        """
        Initialize the exporter.

        Args:
            config: Export configuration
        """
        self.config = config or ExportConfig(language=self.LANGUAGE)
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        if not self.TEMPLATE_LANG:
            self.document_template = None
            return
        template_dir = Path(__file__).parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=False,
        )
        self.document_template = self.jinja_env.get_template(f"document.{self.FILE_EXTENSION}.jinja2")

    # Contract

    @abstractmethod
    def render_document(self, ndts: Sequence[NamedType], types: TypeCollection, imports: Sequence[str] = ()) -> str:
        """
        Render a document holding the given types.

        Args:
            ndts: Types to declare, in output order
            types: Collection used to resolve references
            imports: Import lines for references to types declared in other files

        Returns:
            The document text
        """

    def export(self, types: TypeCollection) -> str:
        """
        Export every type of a collection into one document.

        Args:
            types: The collection to export

        Returns:
            The document text

        Raises:
            UnsupportedLayoutError: If the configured layout writes one file per type
            TypesyncError: If validation, naming or rendering fails
        """
        if self.config.layout is Layout.PER_TYPE_FILE:
            raise UnsupportedLayoutError("The per-type-file layout can only be exported with export_to")
        self.prepare(types)
        ndts = list(types)
        text = self.render_document(ndts, types)
        logger.debug(f"Rendered {len(ndts)} {self.LANGUAGE.value} declaration(s)")
        return text

    def export_files(self, types: TypeCollection) -> dict[Path, str]:
        """
        Render one document per type, keyed by path relative to the output directory.
        """
        self.prepare(types)
        files = {}
        for ndt in types:
            files[self.file_path(ndt)] = self.render_document([ndt], types, self.imports(ndt, types))
        logger.debug(f"Rendered {len(files)} {self.LANGUAGE.value} file(s)")
        return files

    def export_to(self, path: str | Path, types: TypeCollection) -> list[Path]:
        """
        Export to a file, or to a directory for the per-type-file layout.

        Everything is rendered before anything is written, so a failing export
        leaves the output untouched.

        Args:
            path: Output file, or output directory for the per-type-file layout
            types: The collection to export

        Returns:
            The written files
        """
        path = Path(path)
        writer = AtomicWriter(atomic=self.config.output.atomic_write)
        validate_output = self.config.output.validate_before_write

        if self.config.layout is Layout.PER_TYPE_FILE:
            files = self.export_files(types)
            if validate_output:
                for content in files.values():
                    writer.validate(content, self.LANGUAGE.value)
            written = []
            for relative, content in sorted(files.items()):
                target = path / relative
                writer.write(target, content, self.LANGUAGE.value, validate=False)
                written.append(target)
            self.remove_stale_files(path, written)
        else:
            content = self.export(types)
            writer.write(path, content, self.LANGUAGE.value, validate_output)
            written = [path]

        self.format(path)
        return written

    def format(self, path: str | Path) -> None:
        """
        Run the configured external formatter over written output.

        A formatter failure is logged unless the formatter is configured as
        strict, in which case it is raised.
        """
        if not self.config.formatter.enabled:
            return
        formatter = get_formatter(self.config.formatter.tool)
        try:
            formatter.format(Path(path))
        except FormatterError as e:
            if self.config.formatter.strict:
                raise
            logger.warning(f"Formatting {path} failed: {e}")

    # Layout

    def file_suffix(self) -> str:
        return f".{self.FILE_EXTENSION}"

    def file_path(self, ndt: NamedType) -> Path:
        """Path of the file declaring `ndt`, relative to the output directory."""
        parts = [p for p in ndt.module_path.split(".") if p]
        return Path(*parts, f"{self.display_name(ndt)}{self.file_suffix()}")

    def module_specifier(self, source: NamedType, target: NamedType) -> str:
        """Relative import specifier from the file of `source` to the file of `target`."""
        source_dir = self.file_path(source).parent
        target_path = self.file_path(target)
        relative = os.path.relpath(target_path.with_name(target_path.name[: -len(self.file_suffix())]), source_dir)
        relative = Path(relative).as_posix()
        return relative if relative.startswith(".") else f"./{relative}"

    def referenced_types(self, ndt: NamedType, types: TypeCollection) -> list[NamedType]:
        """Types referenced by `ndt`, excluding itself, sorted by name."""
        targets = {}
        for ref in walk_references(ndt.inner):
            if ref.id == ndt.id or ref.id in targets:
                continue
            target = types.resolve(ref.id)
            if target is None:
                raise InvalidReferenceError(ref.id, (ndt.name,))
            targets[ref.id] = target
        return sorted(targets.values(), key=lambda t: (t.name, t.id))

    def imports(self, ndt: NamedType, types: TypeCollection) -> list[str]:
        """Import lines needed by the file declaring `ndt`."""
        return []

    def remove_stale_files(self, directory: Path, written: Iterable[Path]) -> None:
        """Delete generated files under `directory` that this export did not write."""
        keep = {p.resolve() for p in written}
        suffix = self.file_suffix()
        try:
            for candidate in sorted(directory.rglob(f"*{suffix}"), reverse=True):
                if candidate.is_file() and candidate.resolve() not in keep:
                    logger.debug(f"Removing stale file {candidate}")
                    candidate.unlink()
            for sub in sorted((d for d in directory.rglob("*") if d.is_dir()), reverse=True):
                if not any(sub.iterdir()):
                    sub.rmdir()
        except OSError as e:
            raise ExportIOError(f"Failed to clean up {directory}: {e}", directory) from e

    # Shared checks

    def prepare(self, types: TypeCollection) -> None:
        """Checks run before anything is rendered."""
        types.assert_complete()
        if self.config.serde:
            validate(types, self.config.enum_reprs)
        self.check_names(types)

    def check_names(self, types: TypeCollection) -> None:
        """
        Check every type name and detect distinct types that render to the same name.

        Single-file documents collide on the rendered name. Per-type files
        collide on the derived file path, which includes the module path.
        """
        seen: dict[str, NamedType] = {}
        per_type = self.config.layout is Layout.PER_TYPE_FILE
        for ndt in types:
            name = self.display_name(ndt)
            self.check_type_name(name, (ndt.name,))
            key = self.file_path(ndt).as_posix() if per_type else name
            existing = seen.setdefault(key, ndt)
            if existing.id != ndt.id:
                raise DuplicateTypeNameError(name, existing.location, ndt.location)

    def check_type_name(self, name: str, path: TypePath = ()) -> None:
        if name in self.RESERVED_TYPE_NAMES:
            raise ForbiddenNameError(path, name, self.LANGUAGE.value)
        if not is_valid_type_name(name):
            raise InvalidNameError(path, name)

    def display_name(self, ndt: NamedType) -> str:
        """The name a type is declared under."""
        if self.config.name_collisions is NameCollisionPolicy.MODULE_PREFIX and ndt.module_path:
            return f"{ndt.module_path.replace('.', '_')}_{ndt.name}"
        return ndt.name

    def resolve_reference(self, ref: Reference, types: TypeCollection, path: TypePath) -> NamedType:
        target = types.resolve(ref.id)
        if target is None:
            raise InvalidReferenceError(ref.id, path)
        return target

    def escape_key(self, key: str) -> str:
        """Object key as written in the target syntax; quoted when it is not a plain identifier."""
        if _IDENTIFIER.match(key) and key not in self.RESERVED_FIELD_NAMES:
            return key
        return json.dumps(key)

    def is_optional(self, field: Field) -> bool:
        """Whether a field may be absent, in addition to any nullability of its value."""
        if field.optional:
            return True
        if isinstance(field.ty, NullableType):
            return self.config.optional_nullable_fields or field.skip_serializing_if in OPTION_SKIP_PREDICATES
        return False

    def bigint_behavior(self, path: TypePath) -> BigIntBehavior:
        """
        The big-integer policy for a 64-bit or wider integer at `path`.

        Raises:
            BigIntForbiddenError: If the policy is FAIL
        """
        if self.config.bigint is BigIntBehavior.FAIL:
            raise BigIntForbiddenError(path)
        return self.config.bigint

    def resolve_repr(self, enum: EnumType, types: TypeCollection, path: TypePath) -> EnumRepr:
        return resolve_enum_repr(enum, types, self.config.enum_reprs, path)

    def variant_key(self, variant: EnumVariant, repr: EnumRepr, path: TypePath = ()) -> str:
        """The serialized name of a variant."""
        if variant.rename is not None:
            return variant.rename
        if isinstance(repr, StringRepr):
            return rename_rule(repr, path).apply_to_variant(variant.name)
        return variant.name

    def header_lines(self) -> list[str]:
        lines = []
        if self.config.header:
            lines.extend(self.config.header.split("\n"))
        if self.config.framework_header:
            lines.extend(self.config.framework_header.split("\n"))
        if self.config.generation_comment:
            lines.append(f"// {self.config.generation_comment}")
        return lines

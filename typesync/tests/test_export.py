"""
Tests for export entry points, layouts, the atomic writer and formatters.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from typesync.config import ExportConfig, FormatterConfig, Language, Layout, OutputConfig
from typesync.errors import BigIntForbiddenError, DuplicateTypeNameError, FormatterError, OutputValidationError
from typesync.export import export, export_to, get_exporter
from typesync.exporters import JsonSchemaExporter, TypeScriptExporter, ZodExporter
from typesync.formatters import CommandFormatter, PrettierFormatter, get_formatter
from typesync.writer import AtomicWriter

from .factories import I32, I64, collection, named, point_and_wrapper, struct


class PythonFormatter(CommandFormatter):
    """Runs the current interpreter so formatter behavior can be tested anywhere."""

    EXECUTABLE = sys.executable
    ARGS = ("-c", "pass")


class FailingFormatter(PythonFormatter):
    ARGS = ("-c", "import sys; sys.stderr.write('bad input'); sys.exit(3)")


class MissingFormatter(CommandFormatter):
    EXECUTABLE = "typesync-test-formatter-that-does-not-exist"


def test_get_exporter_dispatches_on_language():
    assert isinstance(get_exporter(ExportConfig()), TypeScriptExporter)
    assert isinstance(get_exporter(ExportConfig(language=Language.JSONSCHEMA)), JsonSchemaExporter)
    assert isinstance(get_exporter(ExportConfig(language="zod")), ZodExporter)


def test_export_end_to_end():
    output = export(ExportConfig(framework_header=""), point_and_wrapper())
    assert output == "export type A = { a: number; b: boolean };\n\nexport type B = A;\n"


class TestSingleFile:
    def test_export_to_file(self, tmp_path):
        target = tmp_path / "out" / "types.ts"
        written = export_to(ExportConfig(), target, point_and_wrapper())

        assert written == [target]
        assert "export type B = A;" in target.read_text()
        assert [p.name for p in target.parent.iterdir()] == ["types.ts"]

    def test_failed_export_leaves_existing_file(self, tmp_path):
        target = tmp_path / "types.ts"
        target.write_text("previous")

        with pytest.raises(BigIntForbiddenError):
            export_to(ExportConfig(), target, collection(named("T", struct("T", id=I64))))
        assert target.read_text() == "previous"

    def test_non_atomic_write(self, tmp_path):
        target = tmp_path / "types.ts"
        config = ExportConfig(output=OutputConfig(atomic_write=False))
        export_to(config, target, point_and_wrapper())
        assert target.read_text().endswith("export type B = A;\n")


class TestPerTypeFile:
    def test_typescript_files_import_their_dependencies(self, tmp_path):
        config = ExportConfig(layout=Layout.PER_TYPE_FILE, framework_header="")
        written = export_to(config, tmp_path, point_and_wrapper())

        assert sorted(p.name for p in written) == ["A.ts", "B.ts"]
        assert (tmp_path / "A.ts").read_text() == "export type A = { a: number; b: boolean };\n"
        assert (tmp_path / "B.ts").read_text() == 'import type { A } from "./A";\n\nexport type B = A;\n'

    def test_module_paths_become_directories(self, tmp_path):
        point = named("Point", struct("Point", x=I32), module_path="geo")
        line = named("Line", struct("Line", start=point.reference()), module_path="geo.shapes")
        config = ExportConfig(layout=Layout.PER_TYPE_FILE, framework_header="")
        export_to(config, tmp_path, collection(point, line))

        content = (tmp_path / "geo" / "shapes" / "Line.ts").read_text()
        assert content.startswith('import type { Point } from "../Point";\n')
        assert (tmp_path / "geo" / "Point.ts").exists()

    def test_same_name_in_different_modules(self, tmp_path):
        first = named("Widget", struct("Widget", a=I32), module_path="shop")
        second = named("Widget", struct("Widget", b=I32), module_path="admin")
        config = ExportConfig(layout=Layout.PER_TYPE_FILE)

        export_to(config, tmp_path, collection(first, second))
        assert (tmp_path / "shop" / "Widget.ts").exists()
        assert (tmp_path / "admin" / "Widget.ts").exists()

        with pytest.raises(DuplicateTypeNameError):
            export(ExportConfig(), collection(first, second))

    def test_stale_files_are_removed(self, tmp_path):
        (tmp_path / "old").mkdir()
        (tmp_path / "old" / "Removed.ts").write_text("export type Removed = null;\n")
        (tmp_path / "notes.txt").write_text("kept")

        export_to(ExportConfig(layout=Layout.PER_TYPE_FILE), tmp_path, point_and_wrapper())

        assert not (tmp_path / "old").exists()
        assert (tmp_path / "notes.txt").read_text() == "kept"
        assert (tmp_path / "A.ts").exists()

    def test_zod_files(self, tmp_path):
        config = ExportConfig(language=Language.ZOD, layout=Layout.PER_TYPE_FILE, framework_header="")
        export_to(config, tmp_path, point_and_wrapper())
        assert (tmp_path / "B.ts").read_text() == (
            'import { z } from "zod";\n'
            'import { A } from "./A";\n'
            "\n"
            "export const B = z.lazy(() => A);\n"
            "export type B = z.infer<typeof B>;\n"
        )

    def test_json_schema_files(self, tmp_path):
        config = ExportConfig(language=Language.JSONSCHEMA, layout=Layout.PER_TYPE_FILE)
        written = export_to(config, tmp_path, point_and_wrapper())
        assert sorted(p.name for p in written) == ["A.schema.json", "B.schema.json"]


class TestAtomicWriter:
    def test_write(self, tmp_path):
        target = tmp_path / "nested" / "a.ts"
        AtomicWriter().write(target, "export type A = { a: number };\n", "typescript")

        assert target.read_text() == "export type A = { a: number };\n"
        assert [p.name for p in target.parent.iterdir()] == ["a.ts"]

    @pytest.mark.parametrize(
        "content",
        [
            "export type A = { a: number;\n",
            "export type A = number };\n",
            "export type A = [number);\n",
            'export type A = "unterminated;\n',
            "/* unterminated comment\n",
        ],
    )
    def test_invalid_script_is_not_written(self, tmp_path, content):
        target = tmp_path / "a.ts"
        with pytest.raises(OutputValidationError):
            AtomicWriter().write(target, content, "typescript")
        assert not target.exists()

    def test_brackets_in_strings_and_comments_are_ignored(self):
        AtomicWriter().validate('// }\n/** { */\nexport type A = "{" | `[`;\n', "zod")

    def test_invalid_json(self, tmp_path):
        with pytest.raises(OutputValidationError):
            AtomicWriter().write(tmp_path / "a.json", "{", "jsonschema")

    def test_custom_validator(self, tmp_path):
        def reject(content):
            raise OutputValidationError("rejected")

        with pytest.raises(OutputValidationError):
            AtomicWriter(validate_script=reject).write(tmp_path / "a.ts", "", "typescript")
        AtomicWriter(validate_script=reject).write(tmp_path / "a.ts", "", "typescript", validate=False)

    def test_unknown_language(self):
        with pytest.raises(ValueError):
            AtomicWriter().validate("", "python")


class TestFormatters:
    def test_get_formatter(self):
        assert isinstance(get_formatter("prettier"), PrettierFormatter)
        assert PrettierFormatter().command(Path("out.ts")) == ["prettier", "--write", "out.ts"]

    def test_success(self, tmp_path):
        PythonFormatter().format(tmp_path)

    def test_nonzero_exit(self, tmp_path):
        with pytest.raises(FormatterError, match="bad input"):
            FailingFormatter().format(tmp_path)

    def test_missing_executable(self, tmp_path):
        formatter = MissingFormatter()
        assert not formatter.is_available()
        with pytest.raises(FormatterError):
            formatter.format(tmp_path)

    def test_failure_is_not_fatal_by_default(self, tmp_path, monkeypatch):
        monkeypatch.setattr("typesync.exporters.base.get_formatter", lambda tool: FailingFormatter())
        config = ExportConfig(formatter=FormatterConfig(enabled=True))

        written = export_to(config, tmp_path / "types.ts", point_and_wrapper())
        assert written[0].exists()

    def test_strict_failure_raises(self, tmp_path, monkeypatch):
        monkeypatch.setattr("typesync.exporters.base.get_formatter", lambda tool: MissingFormatter())
        config = ExportConfig(formatter=FormatterConfig(enabled=True, strict=True))

        with pytest.raises(FormatterError):
            export_to(config, tmp_path / "types.ts", point_and_wrapper())
        # Output was written before formatting
        assert (tmp_path / "types.ts").exists()

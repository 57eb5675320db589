"""
Atomic file writer for exported documents.

Ensures that an interrupted or rejected write never leaves a target file
in an incomplete state.
"""

from __future__ import annotations

import json
import tempfile
from collections.abc import Callable
from pathlib import Path

from .errors import ExportIOError, OutputValidationError
from .logger import get_logger

logger = get_logger(__name__)

_PAIRS = {"}": "{", "]": "[", ")": "("}


class AtomicWriter:
    """Handles atomic file writes with validation.

    Uses a two-phase commit approach:
    1. Validate the content
    2. Write to a temporary file in the same directory
    3. Atomically replace the target file
    """

    def __init__(
        self,
        validate_script: Callable[[str], None] | None = None,
        validate_json: Callable[[str], None] | None = None,
        atomic: bool = True,
    ):
        """Initialize the atomic writer.

        Args:
            validate_script: Optional validation function for TypeScript and Zod output
            validate_json: Optional validation function for JSON output
            atomic: Whether to go through a temporary file; plain writes otherwise
        """
        self._validate_script = validate_script or self._default_validate_script
        self._validate_json = validate_json or self._default_validate_json
        self._atomic = atomic

    def write(
        self,
        path: Path,
        content: str,
        language: str,
        validate: bool = True,
    ) -> None:
        """Write content to file atomically.

        Args:
            path: Target file path
            content: Content to write
            language: Language for validation ("typescript", "zod" or "jsonschema")
            validate: Whether to validate before finalizing

        Raises:
            OutputValidationError: If validation fails
            ExportIOError: If file operations fail
        """
        path = Path(path)

        # Validate before touching the filesystem so nothing is left behind on failure
        if validate:
            self.validate(content, language)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            if not self._atomic:
                path.write_text(content, encoding="utf-8")
                return
            self._replace(path, content)
        except OSError as e:
            raise ExportIOError(f"Failed to write {path}: {e}", path) from e

        logger.debug(f"Wrote {path}")

    def _replace(self, path: Path, content: str) -> None:
        # Same directory ensures atomic rename on the same filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)
            temp_path.replace(path)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise

    def validate(self, content: str, language: str) -> None:
        """Run the validation for `language` without writing anything."""
        if language in ("typescript", "zod"):
            self._validate_script(content)
        elif language == "jsonschema":
            self._validate_json(content)
        else:
            raise ValueError(f"Unknown output language: {language!r}")

    def _default_validate_script(self, content: str) -> None:
        """Check that brackets outside strings and comments are balanced.

        Raises:
            OutputValidationError: If validation fails
        """
        stack = []
        i = 0
        n = len(content)
        while i < n:
            ch = content[i]
            if ch in "\"'`":
                i = _skip_string(content, i)
                continue
            if content.startswith("//", i):
                end = content.find("\n", i)
                i = n if end == -1 else end
                continue
            if content.startswith("/*", i):
                end = content.find("*/", i + 2)
                if end == -1:
                    raise OutputValidationError("Generated code has an unterminated comment")
                i = end + 2
                continue
            if ch in "{[(":
                stack.append(ch)
            elif ch in _PAIRS:
                if not stack or stack.pop() != _PAIRS[ch]:
                    raise OutputValidationError(f"Generated code has an unbalanced {ch!r} at offset {i}")
            i += 1

        if stack:
            raise OutputValidationError(f"Generated code has {len(stack)} unclosed bracket(s)")

    def _default_validate_json(self, content: str) -> None:
        try:
            json.loads(content)
        except json.JSONDecodeError as e:
            raise OutputValidationError(f"Generated JSON is not valid: {e}") from e


def _skip_string(content: str, start: int) -> int:
    """Index just past the string literal opening at `start`."""
    quote = content[start]
    i = start + 1
    while i < len(content):
        if content[i] == "\\":
            i += 2
            continue
        if content[i] == quote:
            return i + 1
        i += 1
    raise OutputValidationError(f"Generated code has an unterminated string starting at offset {start}")

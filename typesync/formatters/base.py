"""
Base class for external code formatters.
"""

from __future__ import annotations

import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from ..errors import FormatterError
from ..logger import get_logger

logger = get_logger(__name__)


class Formatter(ABC):
    """Abstract base class for formatters run over written files."""

    @abstractmethod
    def format(self, path: Path) -> None:
        """
        Format the given file or directory in place.

        Args:
            path: File or directory to format

        Raises:
            FormatterError: If the formatter cannot be run or reports an error
        """

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if the formatter is available (executable installed).

        Returns:
            True if the formatter can be used
        """


class CommandFormatter(Formatter):
    """Formatter invoking an external command with the target path appended."""

    # Executable name looked up on PATH
    EXECUTABLE: str = ""

    # Arguments placed between the executable and the path
    ARGS: tuple[str, ...] = ()

    def __init__(self, executable: str | None = None, timeout: float | None = 120):
        self.executable = executable or self.EXECUTABLE
        self.timeout = timeout

    def is_available(self) -> bool:
        return shutil.which(self.executable) is not None

    def command(self, path: Path) -> list[str]:
        return [self.executable, *self.ARGS, str(path)]

    def format(self, path: Path) -> None:
        if not self.is_available():
            raise FormatterError(f"Formatter {self.executable!r} was not found on PATH", path)

        cmd = self.command(Path(path))
        logger.debug(f"Running {' '.join(cmd)}")
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout, check=False)
        except (OSError, subprocess.SubprocessError) as e:
            raise FormatterError(f"Failed to run {self.executable!r}: {e}", path) from e

        if result.returncode != 0:
            output = (result.stderr or result.stdout).strip()
            raise FormatterError(f"{self.executable!r} exited with status {result.returncode}: {output}", path)

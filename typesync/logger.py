"""
Logging setup for typesync.

Library modules only ask for loggers; handlers are installed by the
command line entry point through configure_root_logger.
"""

import logging
import sys


def _build_formatter() -> logging.Formatter:
    return logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


class _TypesyncHandler(logging.StreamHandler):
    """Writes to the current sys.stderr, so redirected streams are followed."""

    def __init__(self):
        logging.Handler.__init__(self)

    @property
    def stream(self):
        return sys.stderr


def configure_root_logger(level: str = "INFO") -> None:
    """
    Configure the typesync logger namespace.

    Args:
        level: Log level for typesync logs (DEBUG, INFO, WARNING, ERROR).

    Safe to call multiple times; it will not duplicate handlers.
    """
    typesync_logger = logging.getLogger("typesync")
    typesync_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if any(isinstance(h, _TypesyncHandler) for h in typesync_logger.handlers):
        return

    handler = _TypesyncHandler()
    handler.setFormatter(_build_formatter())
    typesync_logger.addHandler(handler)
    typesync_logger.propagate = False


def get_logger(name: str = "typesync") -> logging.Logger:
    """Get a logger placed under the typesync namespace."""
    if name != "typesync" and not name.startswith("typesync."):
        name = f"typesync.{name}"
    return logging.getLogger(name)

"""Logging utilities.

Purpose:
    Centralize logging configuration for the package.

Key responsibilities:
    - Provide helper to obtain loggers below the ``docgrep`` namespace.
    - Allow optional verbose/debug modes from the CLI.

Notes/Edge cases:
    - :func:`configure_logging` is idempotent; calling it twice does not stack
      handlers.
    - The handler writes to whatever ``sys.stderr`` is at emit time, so
      repeated CLI invocations in one process (tests) never hold a stale stream.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

__all__ = ["LOGGER_NAME", "get_logger", "configure_logging"]

LOGGER_NAME = "docgrep"
_FORMAT = "%(levelname)s %(name)s: %(message)s"


class _StderrHandler(logging.StreamHandler):  # type: ignore[type-arg]
    """Stream handler bound to the current ``sys.stderr``."""

    def __init__(self) -> None:
        super().__init__(sys.stderr)

    @property  # type: ignore[override]
    def stream(self) -> TextIO:
        return sys.stderr

    @stream.setter
    def stream(self, value: TextIO) -> None:
        pass


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger below the package namespace.

    ``name`` may be a dotted module name (``docgrep.io.archive``) or a short
    suffix (``archive``).
    """

    if not name or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Install a single stderr handler on the package logger."""

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    handler = next((h for h in logger.handlers if isinstance(h, _StderrHandler)), None)
    if handler is None:
        handler = _StderrHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
    handler.setLevel(logger.level)
    logger.propagate = False
    return logger

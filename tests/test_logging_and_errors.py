from __future__ import annotations

import io
import logging

import pytest

from docgrep.utils.errors import (
    CorruptDocumentError,
    DiscoveryError,
    DocgrepError,
    InvalidPatternError,
    IOFormatError,
    UnrecognizedFormatError,
)
from docgrep.utils.logging import LOGGER_NAME, configure_logging, get_logger


def test_get_logger_namespaces() -> None:
    assert get_logger().name == LOGGER_NAME
    assert get_logger("archive").name == "docgrep.archive"
    assert get_logger("docgrep.io.archive").name == "docgrep.io.archive"


def test_configure_logging_is_idempotent() -> None:
    logger = configure_logging(verbose=False)
    configure_logging(verbose=True)
    handlers = [h for h in logger.handlers if isinstance(h, logging.StreamHandler)]
    assert len(handlers) == 1
    assert logger.level == logging.DEBUG
    configure_logging(verbose=False)
    assert logger.level == logging.WARNING


def test_error_hierarchy() -> None:
    assert issubclass(InvalidPatternError, ValueError)
    assert issubclass(DiscoveryError, OSError)
    assert issubclass(UnrecognizedFormatError, IOFormatError)
    assert issubclass(CorruptDocumentError, IOFormatError)
    for exc in (InvalidPatternError, DiscoveryError, UnrecognizedFormatError, CorruptDocumentError):
        assert issubclass(exc, DocgrepError)


def test_handler_follows_current_stderr(monkeypatch: pytest.MonkeyPatch) -> None:
    logger = configure_logging(verbose=False)
    first = io.StringIO()
    monkeypatch.setattr("sys.stderr", first)
    get_logger("discovery").warning("first message")
    assert "first message" in first.getvalue()
    first.close()

    second = io.StringIO()
    monkeypatch.setattr("sys.stderr", second)
    configure_logging(verbose=False)
    logger.warning("second message")
    assert "second message" in second.getvalue()

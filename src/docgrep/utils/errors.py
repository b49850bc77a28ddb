"""Typed exceptions for pattern compilation, discovery and document formats."""


class DocgrepError(Exception):
    """Base class for all package errors."""


class InvalidPatternError(DocgrepError, ValueError):
    """Raised when the search pattern cannot be compiled."""


class DiscoveryError(DocgrepError, OSError):
    """Raised when a search root or one of its directories cannot be read."""


class IOFormatError(DocgrepError, ValueError):
    """Base class for document format errors."""


class UnrecognizedFormatError(IOFormatError):
    """Raised when a file is neither a zip archive nor a docx document."""


class CorruptDocumentError(IOFormatError):
    """Raised when a docx has the right shape but its document XML is unparseable."""

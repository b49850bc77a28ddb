"""Match scanning: data model, scanner and per-file pipeline."""

from .base import ArchiveEntry, ExtractedDocument, MatchRecord, ScanResult, ScanStatus
from .matcher import DEFAULT_CONTEXT, compile_pattern, iter_matches, scan_document

__all__ = [
    "ArchiveEntry",
    "ExtractedDocument",
    "MatchRecord",
    "ScanResult",
    "ScanStatus",
    "DEFAULT_CONTEXT",
    "compile_pattern",
    "iter_matches",
    "scan_document",
]

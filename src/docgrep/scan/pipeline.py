"""Per-file scan pipeline.

Each candidate path flows through the archive walker, the docx text extractor
and the match scanner on its own; nothing is shared between files except the
compiled pattern, which is only ever read.  Format and I/O problems are turned
into :class:`ScanResult` values so that one bad file never stops a run.

:func:`scan_paths` optionally fans the work out over a thread pool.  Results
are delivered per candidate, as a complete list, in input order, and at most
a bounded number of candidates are in flight so discovery stays lazy.
"""

from __future__ import annotations

import os
import re
from collections import deque
from collections.abc import Iterable, Iterator
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from pathlib import Path

from docgrep.config import ConfigModel
from docgrep.io.archive import walk_archive
from docgrep.io.readers.docx_reader import extract_text
from docgrep.utils.errors import CorruptDocumentError, DiscoveryError, UnrecognizedFormatError
from docgrep.utils.logging import get_logger

from .base import ArchiveEntry, ExtractedDocument, ScanResult, ScanStatus
from .matcher import scan_document

__all__ = ["RunSummary", "scan_entry", "scan_path", "scan_paths"]

log = get_logger(__name__)

NO_CONTENT_REASON = "no docx content found"


@dataclass(slots=True)
class RunSummary:
    """Running totals over a whole search."""

    files: int = 0
    entries: int = 0
    matched_entries: int = 0
    matches: int = 0
    failures: int = 0
    warnings: list[str] = field(default_factory=list)

    def add(self, results: Iterable[ScanResult]) -> None:
        """Account for the results of one candidate file."""

        self.files += 1
        for result in results:
            if result.status is not ScanStatus.NO_CONTENT:
                self.entries += 1
            if result.failed:
                self.failures += 1
            if result.match_count:
                self.matched_entries += 1
                self.matches += result.match_count

    def record_warning(self, error: DiscoveryError) -> None:
        self.warnings.append(str(error))


def scan_entry(entry: ArchiveEntry, pattern: re.Pattern[str], cfg: ConfigModel) -> ScanResult:
    """Extract and scan one archive entry."""

    source = str(entry.source) if entry.source is not None else None

    def failure(status: ScanStatus, reason: str) -> ScanResult:
        return ScanResult(entry.name, status, reason=reason, source=source)

    if entry.error is not None:
        return failure(ScanStatus.CORRUPT_DOCUMENT, entry.error)
    try:
        text = extract_text(entry.payload)
    except UnrecognizedFormatError as exc:
        return failure(ScanStatus.UNRECOGNIZED_FORMAT, str(exc))
    except CorruptDocumentError as exc:
        return failure(ScanStatus.CORRUPT_DOCUMENT, str(exc))
    result = scan_document(
        ExtractedDocument(entry.name, text),
        pattern,
        cfg.search.context,
        max_matches=cfg.search.max_matches,
    )
    return replace(result, source=source)


def scan_path(
    path: str | os.PathLike[str], pattern: re.Pattern[str], cfg: ConfigModel
) -> list[ScanResult]:
    """Scan every docx entry reachable from ``path``.

    The returned list is never empty: a zip without docx members gives one
    ``NO_CONTENT`` result and an unusable file gives one failure result.
    """

    name = str(path)
    results: list[ScanResult] = []
    try:
        for entry in walk_archive(path, max_depth=cfg.archive.max_depth):
            results.append(scan_entry(entry, pattern, cfg))
    except UnrecognizedFormatError as exc:
        results.append(
            ScanResult(name, ScanStatus.UNRECOGNIZED_FORMAT, reason=str(exc), source=name)
        )
    except OSError as exc:
        results.append(ScanResult(name, ScanStatus.READ_ERROR, reason=str(exc), source=name))

    if not results:
        results.append(
            ScanResult(name, ScanStatus.NO_CONTENT, reason=NO_CONTENT_REASON, source=name)
        )

    for result in results:
        if result.failed:
            log.info("%s: %s", result.name, result.reason)
        else:
            log.debug("%s: %s (%d matches)", result.name, result.status.value, result.match_count)
    return results


def scan_paths(
    paths: Iterable[Path],
    pattern: re.Pattern[str],
    cfg: ConfigModel,
    *,
    workers: int | None = None,
) -> Iterator[tuple[Path, list[ScanResult]]]:
    """Yield ``(path, results)`` for every candidate in ``paths``, in order."""

    n_workers = cfg.workers if workers is None else workers
    if n_workers < 1:
        raise ValueError("workers must be at least 1")
    if n_workers == 1:
        for path in paths:
            yield path, scan_path(path, pattern, cfg)
        return

    window = n_workers * 2
    pending: deque[tuple[Path, Future[list[ScanResult]]]] = deque()
    with ThreadPoolExecutor(max_workers=n_workers, thread_name_prefix="docgrep") as pool:
        for path in paths:
            pending.append((path, pool.submit(scan_path, path, pattern, cfg)))
            if len(pending) >= window:
                done_path, future = pending.popleft()
                yield done_path, future.result()
        while pending:
            done_path, future = pending.popleft()
            yield done_path, future.result()

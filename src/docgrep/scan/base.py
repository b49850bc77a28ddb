"""Core scan model definitions.

This module defines the strongly-typed records passed between pipeline stages.
Character offsets follow the half-open interval convention ``[start, end)``.
Records are immutable and carry no references back to the files they were
produced from, so a :class:`ScanResult` can be handed to a reporter (or across
a thread boundary) as a single unit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

#: Separator between an archive path and the member names inside it.
NAME_SEPARATOR = "::"


class ScanStatus(Enum):
    """Outcome of scanning one archive entry or candidate file."""

    MATCHED = "matched"
    NO_MATCHES = "no_matches"
    NO_CONTENT = "no_content"
    UNRECOGNIZED_FORMAT = "unrecognized_format"
    CORRUPT_DOCUMENT = "corrupt_document"
    READ_ERROR = "read_error"


FAILURE_STATUSES = frozenset(
    {ScanStatus.UNRECOGNIZED_FORMAT, ScanStatus.CORRUPT_DOCUMENT, ScanStatus.READ_ERROR}
)


@dataclass(slots=True, frozen=True)
class ArchiveEntry:
    """A logical unit of extractable content.

    Either a plain docx file (``name`` is its path) or a docx member of a zip
    archive (``name`` is ``archive.zip::member.docx``).  ``error`` is set when
    the member could not be read out of its archive.
    """

    name: str
    payload: bytes = field(repr=False)
    source: Path | None = None
    error: str | None = None


@dataclass(slots=True, frozen=True)
class ExtractedDocument:
    """Plain text extracted from one :class:`ArchiveEntry`."""

    name: str
    text: str


@dataclass(slots=True, frozen=True)
class MatchRecord:
    """One pattern hit with its surrounding context.

    ``start``/``end`` are character offsets, ``byte_start`` is the UTF-8 byte
    offset of the match start.  ``line`` and ``column`` are one-based.
    """

    start: int
    end: int
    text: str
    before: str
    after: str
    byte_start: int = 0
    line: int = 1
    column: int = 1

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid match range [{self.start}, {self.end})")

    @property
    def length(self) -> int:
        """Return match length in characters."""

        return self.end - self.start


@dataclass(slots=True, frozen=True)
class ScanResult:
    """Terminal outcome for one entry: matches or a failure reason.

    ``source`` is the candidate file the entry was read from; for a zip member
    it names the archive rather than the member.
    """

    name: str
    status: ScanStatus
    matches: tuple[MatchRecord, ...] = ()
    reason: str | None = None
    source: str | None = None

    @property
    def failed(self) -> bool:
        return self.status in FAILURE_STATUSES

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def match_count(self) -> int:
        return len(self.matches)


def member_name(parent: str, member: str) -> str:
    """Return the display name of ``member`` inside the archive ``parent``."""

    return f"{parent}{NAME_SEPARATOR}{member}"


__all__ = [
    "NAME_SEPARATOR",
    "ScanStatus",
    "FAILURE_STATUSES",
    "ArchiveEntry",
    "ExtractedDocument",
    "MatchRecord",
    "ScanResult",
    "member_name",
]

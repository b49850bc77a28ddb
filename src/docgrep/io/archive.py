"""Archive walker.

Normalizes a candidate path into zero or more :class:`ArchiveEntry` values.
Every candidate is read whole and classified by content, not by extension:

* a zip container holding ``word/document.xml`` is a docx and yields one entry
  carrying the whole file;
* any other zip container yields one entry per ``.docx`` member
  (case-insensitive), skipping directories and ``__MACOSX`` resource forks;
* anything else raises :class:`UnrecognizedFormatError`.

Traversal is a bounded-depth walk over :class:`ContainerKind`.  The default
``max_depth`` of ``1`` descends exactly one level (zip -> docx); zip members of
a zip are only opened when a larger depth is requested.  A member that cannot
be decompressed is still yielded, with ``error`` set, so that the remaining
members of the archive are scanned.
"""

from __future__ import annotations

import io
import os
import zipfile
from collections.abc import Iterator
from enum import Enum
from pathlib import Path, PurePosixPath

from docgrep.io.readers.docx_reader import DOCUMENT_PART, ZIP_OPEN_ERRORS, ZIP_READ_ERRORS
from docgrep.scan.base import ArchiveEntry, member_name
from docgrep.utils.errors import UnrecognizedFormatError
from docgrep.utils.logging import get_logger

__all__ = [
    "ContainerKind",
    "DEFAULT_MAX_DEPTH",
    "classify_payload",
    "walk_payload",
    "walk_archive",
]

log = get_logger(__name__)

DEFAULT_MAX_DEPTH = 1
RESOURCE_FORK_DIR = "__MACOSX"


class ContainerKind(Enum):
    """Shape of a zip payload."""

    PLAIN_DOCUMENT = "docx"
    ZIP_CONTAINER = "zip"


def _open_zip(name: str, payload: bytes) -> zipfile.ZipFile:
    try:
        return zipfile.ZipFile(io.BytesIO(payload))
    except ZIP_OPEN_ERRORS:
        raise UnrecognizedFormatError(f"{name}: not a zip archive or docx document") from None


def _kind_of(zf: zipfile.ZipFile) -> ContainerKind:
    if DOCUMENT_PART in zf.namelist():
        return ContainerKind.PLAIN_DOCUMENT
    return ContainerKind.ZIP_CONTAINER


def classify_payload(payload: bytes, name: str = "<payload>") -> ContainerKind:
    """Return the :class:`ContainerKind` of ``payload``.

    Raises :class:`UnrecognizedFormatError` when ``payload`` is not a zip.
    """

    with _open_zip(name, payload) as zf:
        return _kind_of(zf)


def _is_resource_fork(member: str) -> bool:
    parts = PurePosixPath(member).parts
    return RESOURCE_FORK_DIR in parts or PurePosixPath(member).name.startswith("._")


def walk_payload(
    name: str,
    payload: bytes,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    source: Path | None = None,
    _depth: int = 0,
) -> Iterator[ArchiveEntry]:
    """Yield the docx entries contained in ``payload``.

    Parameters
    ----------
    name:
        Display name of the payload; member names are appended with ``::``.
    payload:
        Raw bytes of a docx document or zip archive.
    max_depth:
        How many archive levels may be descended.  ``1`` reads docx members of
        a zip but does not open zip members.
    source:
        Candidate path recorded on every yielded entry.
    """

    if max_depth < 1:
        raise ValueError("max_depth must be at least 1")

    zf = _open_zip(name, payload)
    with zf:
        if _kind_of(zf) is ContainerKind.PLAIN_DOCUMENT:
            yield ArchiveEntry(name, payload, source)
            return

        for info in zf.infolist():
            member = info.filename
            if info.is_dir() or _is_resource_fork(member):
                continue
            lowered = member.lower()
            display = member_name(name, member)
            if lowered.endswith(".docx"):
                try:
                    data = zf.read(info)
                except ZIP_READ_ERRORS as exc:
                    log.warning("Cannot read %s: %s", display, exc)
                    yield ArchiveEntry(display, b"", source, error=f"Unreadable archive member: {exc}")
                    continue
                yield ArchiveEntry(display, data, source)
            elif lowered.endswith(".zip") and _depth + 1 < max_depth:
                try:
                    data = zf.read(info)
                except ZIP_READ_ERRORS as exc:
                    log.warning("Cannot read nested archive %s: %s", display, exc)
                    continue
                try:
                    yield from walk_payload(
                        display, data, max_depth=max_depth, source=source, _depth=_depth + 1
                    )
                except UnrecognizedFormatError as exc:
                    log.warning("Skipping nested archive: %s", exc)
            else:
                log.debug("Ignoring member %s", display)


def walk_archive(
    path: str | os.PathLike[str], *, max_depth: int = DEFAULT_MAX_DEPTH
) -> Iterator[ArchiveEntry]:
    """Read the file at ``path`` and yield its docx entries.

    ``OSError`` from reading the file propagates to the caller.
    """

    file_path = Path(path)
    payload = file_path.read_bytes()
    yield from walk_payload(str(file_path), payload, max_depth=max_depth, source=file_path)

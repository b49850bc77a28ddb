"""File discovery.

:func:`discover_files` turns a search root into a lazy, single-pass sequence of
candidate paths.  A file root is yielded as-is whatever its extension (the
archive walker decides whether it is usable).  A directory root is walked
depth first in sorted order and only files whose suffix, compared
case-insensitively, is one of ``extensions`` are yielded.

Unreadable directories and symbolic-link cycles are skipped: each produces a
:class:`DiscoveryError` that is logged as a warning and handed to the optional
``on_error`` callback, and the walk continues.  Only a missing root is fatal.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path

from docgrep.utils.errors import DiscoveryError
from docgrep.utils.logging import get_logger

__all__ = ["DEFAULT_EXTENSIONS", "DEFAULT_SKIP_DIRS", "discover_files", "has_extension"]

log = get_logger(__name__)

DEFAULT_EXTENSIONS: tuple[str, ...] = (".docx", ".zip")
DEFAULT_SKIP_DIRS: tuple[str, ...] = ("__MACOSX",)
LOCK_FILE_PREFIX = "~$"

ErrorHandler = Callable[[DiscoveryError], None]


def has_extension(path: str | os.PathLike[str], extensions: Iterable[str]) -> bool:
    """Return ``True`` if ``path`` ends with one of ``extensions`` (any case)."""

    suffix = Path(path).suffix.lower()
    return bool(suffix) and suffix in {ext.lower() for ext in extensions}


def _report(error: DiscoveryError, on_error: ErrorHandler | None) -> None:
    log.warning("%s", error)
    if on_error is not None:
        on_error(error)


def _walk(
    root: Path,
    extensions: frozenset[str],
    skip_dirs: frozenset[str],
    on_error: ErrorHandler | None,
) -> Iterator[Path]:
    visited: set[tuple[int, int]] = set()
    stack: list[Path] = [root]
    while stack:
        directory = stack.pop()
        try:
            st = directory.stat()
        except OSError as exc:
            _report(DiscoveryError(f"Cannot stat directory {directory}: {exc}"), on_error)
            continue
        key = (st.st_dev, st.st_ino)
        if key in visited:
            _report(DiscoveryError(f"Skipping symbolic link cycle at {directory}"), on_error)
            continue
        visited.add(key)

        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as exc:
            _report(DiscoveryError(f"Cannot read directory {directory}: {exc}"), on_error)
            continue

        subdirs: list[Path] = []
        for entry in entries:
            try:
                is_dir = entry.is_dir()
                is_file = not is_dir and entry.is_file()
            except OSError as exc:
                _report(DiscoveryError(f"Cannot inspect {entry.path}: {exc}"), on_error)
                continue
            if is_dir:
                if entry.name not in skip_dirs:
                    subdirs.append(Path(entry.path))
            elif is_file:
                if entry.name.startswith(LOCK_FILE_PREFIX):
                    continue
                if has_extension(entry.name, extensions):
                    yield Path(entry.path)
        # reversed so that popping visits subdirectories in sorted order
        stack.extend(reversed(subdirs))


def discover_files(
    root: str | os.PathLike[str],
    *,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    skip_dirs: Iterable[str] = DEFAULT_SKIP_DIRS,
    on_error: ErrorHandler | None = None,
) -> Iterator[Path]:
    """Return a lazy iterator over candidate files below ``root``.

    Raises
    ------
    DiscoveryError
        Immediately, if ``root`` does not exist.
    """

    root_path = Path(root)
    if root_path.is_file():
        return iter((root_path,))
    if not root_path.is_dir():
        raise DiscoveryError(f"No such file or directory: '{root_path}'")
    return _walk(
        root_path,
        frozenset(ext.lower() for ext in extensions),
        frozenset(skip_dirs),
        on_error,
    )

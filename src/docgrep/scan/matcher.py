"""Regular-expression match scanner.

The scanner walks a document's text once, left to right, and yields a
:class:`MatchRecord` for every non-overlapping match reported by
:meth:`re.Pattern.finditer`.  Each record carries up to ``context`` characters
on either side of the match, truncated at the document boundaries.

Offsets are code-point offsets into the ``str``; slicing a ``str`` never splits
a character, so context windows are always valid text.  The UTF-8 byte offset
of each match is tracked incrementally from the previous match, and the
one-based line/column come from the line-start table, so the whole scan stays
a single pass.

Zero-width matches are reported like any other.  ``finditer`` resumes one
character past an empty match, so a pattern matching the empty string
everywhere yields exactly ``len(text) + 1`` records.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from itertools import islice

from docgrep.utils.errors import InvalidPatternError
from docgrep.utils.textspan import (
    build_line_starts,
    char_to_line_col,
    context_window,
    utf8_len,
)

from .base import ExtractedDocument, MatchRecord, ScanResult, ScanStatus

__all__ = [
    "DEFAULT_CONTEXT",
    "compile_pattern",
    "iter_matches",
    "scan_document",
]

DEFAULT_CONTEXT = 75


def compile_pattern(pattern: str, *, ignore_case: bool = False) -> re.Pattern[str]:
    """Compile ``pattern`` once for the whole run.

    Raises
    ------
    InvalidPatternError
        If ``pattern`` is not a valid regular expression.
    """

    flags = re.IGNORECASE if ignore_case else 0
    try:
        return re.compile(pattern, flags)
    except re.error as exc:
        raise InvalidPatternError(f"Invalid pattern {pattern!r}: {exc}") from exc


def iter_matches(
    text: str,
    pattern: re.Pattern[str],
    context: int = DEFAULT_CONTEXT,
) -> Iterator[MatchRecord]:
    """Yield match records for ``pattern`` in ``text``.

    Parameters
    ----------
    text:
        Document text to scan.
    pattern:
        Compiled pattern from :func:`compile_pattern`.
    context:
        Maximum number of characters of context on each side.
    """

    if context < 0:
        raise ValueError("context must be non-negative")

    line_starts = build_line_starts(text)
    prev_char = 0
    prev_byte = 0
    for m in pattern.finditer(text):
        start, end = m.span()
        prev_byte += utf8_len(text, prev_char, start)
        prev_char = start
        before, after = context_window(text, start, end, context)
        line, col = char_to_line_col(start, line_starts)
        yield MatchRecord(
            start=start,
            end=end,
            text=m.group(),
            before=before,
            after=after,
            byte_start=prev_byte,
            line=line + 1,
            column=col + 1,
        )


def scan_document(
    document: ExtractedDocument,
    pattern: re.Pattern[str],
    context: int = DEFAULT_CONTEXT,
    *,
    max_matches: int | None = None,
) -> ScanResult:
    """Scan ``document`` and return its :class:`ScanResult`.

    ``max_matches`` stops the scan after that many records.
    """

    records = iter_matches(document.text, pattern, context)
    if max_matches is not None:
        records = islice(records, max_matches)
    matches = tuple(records)
    status = ScanStatus.MATCHED if matches else ScanStatus.NO_MATCHES
    return ScanResult(document.name, status, matches)

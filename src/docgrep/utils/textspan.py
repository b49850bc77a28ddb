"""Utility functions for working with text offsets.

The helpers in this module are pure and framework agnostic.  Offsets are
character (code point) indices into a Python ``str`` unless stated otherwise;
ranges are half-open intervals ``[start, end)``.  Because a ``str`` is already
a character-indexed view, context windows sliced from it can never split a
multi-byte character.  UTF-8 byte offsets are derived with :func:`utf8_len`
when a consumer needs to correlate with the raw encoded text.
"""

from __future__ import annotations

from bisect import bisect_right


def build_line_starts(text: str) -> tuple[int, ...]:
    """Return the starting character index for each line in ``text``."""

    starts = [0]
    for idx, char in enumerate(text):
        if char == "\n":
            starts.append(idx + 1)
    return tuple(starts)


def char_to_line_col(index: int, line_starts: tuple[int, ...]) -> tuple[int, int]:
    """Convert a character index to ``(line, col)`` using ``line_starts``.

    Line and column numbers are zero-based.
    """

    if index < 0:
        raise ValueError("index must be non-negative")
    line = bisect_right(line_starts, index) - 1
    if line < 0:
        line = 0
    col = index - line_starts[line]
    return line, col


def utf8_len(text: str, start: int = 0, end: int | None = None) -> int:
    """Return the UTF-8 encoded length of ``text[start:end]``."""

    return len(text[start:end].encode("utf-8", errors="surrogatepass"))


def context_window(text: str, start: int, end: int, size: int) -> tuple[str, str]:
    """Return up to ``size`` characters before ``start`` and after ``end``.

    Windows are truncated at the document boundaries rather than padded.
    """

    if size < 0:
        raise ValueError("context size must be non-negative")
    if not 0 <= start <= end <= len(text):
        raise ValueError(f"invalid range [{start}, {end}) for text of length {len(text)}")
    before = text[max(0, start - size) : start]
    after = text[end : end + size]
    return before, after


__all__ = ["build_line_starts", "char_to_line_col", "utf8_len", "context_window"]

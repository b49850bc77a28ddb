"""DOCX document reader.

Purpose:
    Extract the visible text of a Word document's main part.

Key responsibilities:
    - Open the docx zip container and read ``word/document.xml``.
    - Walk the element tree in document order, concatenating ``w:t`` text and
      mapping paragraph boundaries, ``w:br``/``w:cr`` and ``w:tab`` to
      whitespace.

Inputs/Outputs:
    - Inputs: raw bytes of a docx file (or a path to one).
    - Outputs: extracted text string.  Paragraphs ``a``, ``b``, ``c`` yield
      ``"a\\nb\\nc"``.

Notes/Edge cases:
    - Drawings, VML pictures and embedded objects contribute nothing, including
      any text boxes inside them.
    - Deleted revisions (``w:delText``) and field codes (``w:instrText``) are
      not visible text and are skipped.
    - Unparseable XML raises :class:`CorruptDocumentError`; a payload that is
      not a docx container raises :class:`UnrecognizedFormatError`.

Dependencies:
    - ``lxml`` for parsing, with entity resolution and network access disabled.
"""

from __future__ import annotations

import io
import lzma
import os
import struct
import zipfile
import zlib
from collections.abc import Iterator
from pathlib import Path

from lxml import etree

from docgrep.utils.errors import CorruptDocumentError, UnrecognizedFormatError
from docgrep.utils.logging import get_logger

__all__ = [
    "DOCUMENT_PART",
    "ZIP_OPEN_ERRORS",
    "ZIP_READ_ERRORS",
    "extract_text",
    "extract_text_from_xml",
    "read_docx",
]

log = get_logger(__name__)

DOCUMENT_PART = "word/document.xml"

_NAMESPACES = (
    "http://schemas.openxmlformats.org/wordprocessingml/2006/main",
    "http://purl.oclc.org/ooxml/wordprocessingml/main",
)
_MC_NS = "http://schemas.openxmlformats.org/markup-compatibility/2006"

# What zipfile raises for damaged containers, beyond BadZipFile: bogus
# offsets (ValueError, OSError, struct.error), truncated data (EOFError) and
# unsupported versions or compression (NotImplementedError).
ZIP_OPEN_ERRORS = (
    zipfile.BadZipFile,
    NotImplementedError,
    ValueError,
    EOFError,
    OSError,
    struct.error,
)
ZIP_READ_ERRORS = ZIP_OPEN_ERRORS + (zlib.error, lzma.LZMAError, RuntimeError)


def _tags(*local: str) -> frozenset[str]:
    return frozenset(f"{{{ns}}}{name}" for ns in _NAMESPACES for name in local)


_TEXT = _tags("t")
_PARAGRAPH = _tags("p")
_TAB = _tags("tab", "ptab")
_BREAK = _tags("br", "cr")
_HYPHEN = _tags("noBreakHyphen")
_SKIPPED = _tags("drawing", "pict", "object", "delText", "instrText") | {f"{{{_MC_NS}}}Fallback"}

# Marker yielded at the start of every paragraph.
_PARAGRAPH_START = object()


def _parser() -> etree.XMLParser:
    return etree.XMLParser(resolve_entities=False, no_network=True, load_dtd=False)


def _iter_tokens(element: etree._Element) -> Iterator[object]:
    for child in element:
        tag = child.tag
        if not isinstance(tag, str) or tag in _SKIPPED:
            continue
        if tag in _TEXT:
            if child.text:
                yield child.text
        elif tag in _TAB:
            yield "\t"
        elif tag in _BREAK:
            yield "\n"
        elif tag in _HYPHEN:
            yield "-"
        elif tag in _PARAGRAPH:
            yield _PARAGRAPH_START
            yield from _iter_tokens(child)
        else:
            yield from _iter_tokens(child)


def extract_text_from_xml(xml: bytes) -> str:
    """Return the visible text of a WordprocessingML document part."""

    try:
        root = etree.fromstring(xml, parser=_parser())
    except etree.XMLSyntaxError as exc:
        raise CorruptDocumentError(f"Malformed document XML: {exc}") from exc

    parts: list[str] = []
    seen_paragraph = False
    for token in _iter_tokens(root):
        if token is _PARAGRAPH_START:
            if seen_paragraph:
                parts.append("\n")
            seen_paragraph = True
        else:
            parts.append(token)  # type: ignore[arg-type]
    return "".join(parts)


def extract_text(payload: bytes) -> str:
    """Return the text of the main document part of the docx in ``payload``.

    Raises
    ------
    UnrecognizedFormatError
        If ``payload`` is not a zip container or lacks ``word/document.xml``.
    CorruptDocumentError
        If the container or its document XML cannot be decoded.
    """

    try:
        zf = zipfile.ZipFile(io.BytesIO(payload))
    except ZIP_OPEN_ERRORS as exc:
        raise UnrecognizedFormatError(f"Not a zip container: {exc}") from exc

    with zf:
        try:
            xml = zf.read(DOCUMENT_PART)
        except KeyError:
            raise UnrecognizedFormatError(f"No {DOCUMENT_PART} part found") from None
        except ZIP_READ_ERRORS as exc:
            # Encrypted members raise RuntimeError, unsupported methods NotImplementedError.
            raise CorruptDocumentError(f"Unreadable {DOCUMENT_PART}: {exc}") from exc

    text = extract_text_from_xml(xml)
    log.debug("Extracted %d chars from %s", len(text), DOCUMENT_PART)
    return text


def read_docx(path: str | os.PathLike[str]) -> str:
    """Read the docx at ``path`` and return its text."""

    return extract_text(Path(path).read_bytes())

"""Input side of the pipeline.

``discover_files`` finds candidate files below a root, ``walk_archive`` turns a
candidate into docx entries and ``extract_text`` returns the visible text of a
docx payload.  Format problems surface as
:class:`~docgrep.utils.errors.UnrecognizedFormatError` or
:class:`~docgrep.utils.errors.CorruptDocumentError`.
"""

from __future__ import annotations

from .archive import ContainerKind, classify_payload, walk_archive, walk_payload
from .discovery import discover_files, has_extension
from .readers.docx_reader import extract_text, extract_text_from_xml, read_docx

__all__ = [
    "ContainerKind",
    "classify_payload",
    "walk_archive",
    "walk_payload",
    "discover_files",
    "has_extension",
    "extract_text",
    "extract_text_from_xml",
    "read_docx",
]

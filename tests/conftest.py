"""Fixtures that build docx documents and zip archives in ``tmp_path``."""

from __future__ import annotations

import io
import struct
import zipfile
from collections.abc import Callable, Iterable
from pathlib import Path
from xml.sax.saxutils import escape

import pytest

from docgrep.config import ConfigModel, load_config

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"

_CONTENT_TYPES = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="xml" ContentType="application/xml"/>'
    '<Override PartName="/word/document.xml" ContentType="application/'
    'vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>'
    "</Types>"
)


def document_xml(body: str) -> bytes:
    """Wrap raw ``w:body`` markup in a WordprocessingML document part."""

    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<w:document xmlns:w="{W_NS}" '
        'xmlns:mc="http://schemas.openxmlformats.org/markup-compatibility/2006">'
        f"<w:body>{body}</w:body></w:document>"
    ).encode("utf-8")


def paragraphs_xml(paragraphs: Iterable[str]) -> str:
    return "".join(
        f'<w:p><w:r><w:t xml:space="preserve">{escape(p)}</w:t></w:r></w:p>' for p in paragraphs
    )


def docx_bytes(document: bytes) -> bytes:
    """Return a minimal docx container holding ``document`` as its main part."""

    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("[Content_Types].xml", _CONTENT_TYPES)
        zf.writestr("word/document.xml", document)
    return buf.getvalue()


def zip_bytes(members: dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in members.items():
            zf.writestr(name, data)
    return buf.getvalue()


@pytest.fixture
def make_docx(tmp_path: Path) -> Callable[..., Path]:
    """Write a docx whose paragraphs are ``paragraphs`` and return its path."""

    def _make(name: str, paragraphs: Iterable[str] = (), *, body: str | None = None) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        markup = body if body is not None else paragraphs_xml(paragraphs)
        path.write_bytes(docx_bytes(document_xml(markup)))
        return path

    return _make


@pytest.fixture
def make_zip(tmp_path: Path) -> Callable[..., Path]:
    """Write a zip archive from a ``{member: bytes}`` mapping and return its path."""

    def _make(name: str, members: dict[str, bytes]) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(zip_bytes(members))
        return path

    return _make


@pytest.fixture
def cfg() -> ConfigModel:
    return load_config(env={})


@pytest.fixture
def docx_payload() -> Callable[..., bytes]:
    """Return docx bytes for ``paragraphs`` (or raw ``body`` markup)."""

    def _make(paragraphs: Iterable[str] = (), *, body: str | None = None) -> bytes:
        markup = body if body is not None else paragraphs_xml(paragraphs)
        return docx_bytes(document_xml(markup))

    return _make


@pytest.fixture
def xml_part() -> Callable[[str], bytes]:
    """Return a document part for raw ``w:body`` markup."""

    return document_xml


@pytest.fixture
def zip_payload() -> Callable[[dict[str, bytes]], bytes]:
    return zip_bytes


CENTRAL_FLAGS = (8, "<H")
CENTRAL_EXTRACT_VERSION = (6, "<B")
LOCAL_FLAGS = (6, "<H")


def rewrite_member_field(
    data: bytes,
    member: str,
    field: tuple[int, str],
    value: int,
    *,
    local: tuple[int, str] | None = None,
) -> bytes:
    """Overwrite a central directory ``field`` of ``member`` (and optionally its local header)."""

    buf = bytearray(data)
    name = member.encode("utf-8")
    pos = buf.find(b"PK\x01\x02")
    while pos != -1:
        (name_len,) = struct.unpack_from("<H", buf, pos + 28)
        if bytes(buf[pos + 46 : pos + 46 + name_len]) == name:
            offset, fmt = field
            struct.pack_into(fmt, buf, pos + offset, value)
            if local is not None:
                (header_offset,) = struct.unpack_from("<I", buf, pos + 42)
                struct.pack_into(local[1], buf, header_offset + local[0], value)
            return bytes(buf)
        pos = buf.find(b"PK\x01\x02", pos + 4)
    raise AssertionError(f"{member} not in central directory")


@pytest.fixture
def encrypt_member() -> Callable[[bytes, str], bytes]:
    """Return a function setting the "encrypted" flag bit on one zip member."""

    def _encrypt(data: bytes, member: str) -> bytes:
        return rewrite_member_field(data, member, CENTRAL_FLAGS, 0x1, local=LOCAL_FLAGS)

    return _encrypt


@pytest.fixture
def bump_extract_version() -> Callable[[bytes, str], bytes]:
    """Return a function claiming zip version 22.7 is needed to extract a member."""

    def _bump(data: bytes, member: str) -> bytes:
        return rewrite_member_field(data, member, CENTRAL_EXTRACT_VERSION, 227)

    return _bump

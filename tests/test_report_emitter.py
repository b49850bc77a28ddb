"""Tests for terminal formatting and the JSON report writer."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from docgrep.report import emit_results, emit_summary, format_match, write_json_report
from docgrep.scan.base import MatchRecord, ScanResult, ScanStatus
from docgrep.scan.pipeline import RunSummary


def _record() -> MatchRecord:
    return MatchRecord(start=4, end=10, text="needle", before="hay\n", after="\thay", line=2, column=1)


def test_format_match_plain() -> None:
    assert format_match(3, _record(), color=False) == "  3-> [2:1] hay needle hay"


def test_format_match_colored_contains_ansi() -> None:
    line = format_match(1, _record(), color=True)
    assert "\x1b[" in line
    assert "needle" in line


def test_emit_results(capsys: pytest.CaptureFixture[str]) -> None:
    results = [
        ScanResult("a.docx", ScanStatus.MATCHED, (_record(),)),
        ScanResult("b.zip", ScanStatus.NO_CONTENT, reason="no docx content found"),
        ScanResult("c.docx", ScanStatus.CORRUPT_DOCUMENT, reason="Malformed document XML"),
    ]
    emit_results(results, color=False)
    captured = capsys.readouterr()
    assert "Searched file--> a.docx" in captured.out
    assert "  1-> [2:1] hay needle hay" in captured.out
    assert "No docx content found" in captured.out
    assert "Error: Malformed document XML" in captured.err
    assert captured.out.count("===") == 3


def test_emit_results_quiet(capsys: pytest.CaptureFixture[str]) -> None:
    emit_results([ScanResult("a.docx", ScanStatus.MATCHED, (_record(), _record()))], quiet=True, color=False)
    out = capsys.readouterr().out
    assert "Matched 2" in out
    assert "needle" not in out


def test_emit_summary(capsys: pytest.CaptureFixture[str]) -> None:
    summary = RunSummary(files=2, entries=3, matched_entries=1, matches=4, failures=1)
    emit_summary(summary, pattern="x+", root="docs")
    out = capsys.readouterr().out
    assert "Searched 2 files (3 documents), 4 matches in 1 documents" in out
    assert "1 documents could not be read" in out
    assert "regex: 'x+', path: 'docs'" in out


def test_write_json_report_keeps_raw_text(tmp_path: Path) -> None:
    out = write_json_report(
        tmp_path / "nested" / "r.json",
        [ScanResult("a.docx", ScanStatus.MATCHED, (_record(),))],
        RunSummary(files=1, entries=1, matched_entries=1, matches=1),
        parameters={"regex": "needle"},
    )
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["tool"]["name"] == "docgrep"
    assert data["results"][0]["matches"][0]["before"] == "hay\n"
    assert data["results"][0]["match_count"] == 1
    assert data["summary"]["warnings"] == []


def test_write_json_report_names_source_file(tmp_path: Path) -> None:
    out = write_json_report(
        tmp_path / "r.json",
        [
            ScanResult("b.zip::a.docx", ScanStatus.NO_MATCHES, source="b.zip"),
            ScanResult("c.docx", ScanStatus.READ_ERROR, reason="gone"),
        ],
        RunSummary(files=2, entries=2, failures=1),
        parameters={"regex": "x"},
    )
    results = json.loads(out.read_text(encoding="utf-8"))["results"]
    assert [r["source"] for r in results] == ["b.zip", None]
    assert [r["name"] for r in results] == ["b.zip::a.docx", "c.docx"]

"""Terminal and JSON reporting for scan results.

Terminal output mirrors a grep-style audit log: one header per entry, then
either a one-line status (quiet mode) or one line per match showing its
position and the match highlighted inside its context.  Line breaks and tabs
inside context are shown as spaces so every match stays on one terminal line;
the JSON report keeps the text exactly as extracted.

The JSON report intentionally contains document text around every match, so
it should be handled with the same care as the scanned documents.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from collections.abc import Iterable
from typing import Any

import typer

from docgrep import __version__
from docgrep.scan.base import MatchRecord, ScanResult, ScanStatus
from docgrep.scan.pipeline import RunSummary

__all__ = ["emit_results", "emit_summary", "format_match", "write_json_report"]

_SEPARATOR = "==="


def _flatten(text: str) -> str:
    return text.replace("\r", " ").replace("\n", " ").replace("\t", " ")


def format_match(index: int, record: MatchRecord, *, color: bool = True) -> str:
    """Return the single-line rendering of ``record``."""

    prompt = f"{index}"
    location = f"[{record.line}:{record.column}]"
    matched = _flatten(record.text)
    if color:
        prompt = typer.style(prompt, fg=typer.colors.BRIGHT_YELLOW, bg=typer.colors.BLUE)
        matched = typer.style(matched, fg=typer.colors.RED, bold=True)
    return f"  {prompt}-> {location} {_flatten(record.before)}{matched}{_flatten(record.after)}"


def _status_line(result: ScanResult) -> tuple[str, str]:
    if result.status is ScanStatus.MATCHED:
        return f"Matched {result.match_count}", typer.colors.BRIGHT_GREEN
    if result.status is ScanStatus.NO_MATCHES:
        return "No matches found", typer.colors.BRIGHT_RED
    if result.status is ScanStatus.NO_CONTENT:
        return "No docx content found", typer.colors.YELLOW
    return f"Error: {result.reason}", typer.colors.RED


def emit_results(results: Iterable[ScanResult], *, quiet: bool = False, color: bool = True) -> None:
    """Print the results of one candidate file."""

    echo_color = None if color else False
    for result in results:
        header = f"Searched file--> {result.name}"
        typer.echo(typer.style(header, fg=typer.colors.BRIGHT_RED) if color else header, color=echo_color)

        if result.failed:
            message, fg = _status_line(result)
            typer.echo(typer.style(message, fg=fg) if color else message, err=True, color=echo_color)
        elif quiet or not result.matches:
            message, fg = _status_line(result)
            typer.echo(typer.style(message, fg=fg) if color else message, color=echo_color)
        else:
            for index, record in enumerate(result.matches, start=1):
                typer.echo(format_match(index, record, color=color), color=echo_color)
        typer.echo(_SEPARATOR, color=echo_color)


def emit_summary(summary: RunSummary, *, pattern: str, root: str | Path) -> None:
    """Print the closing summary of a run."""

    typer.echo(
        f"Searched {summary.files} files ({summary.entries} documents), "
        f"{summary.matches} matches in {summary.matched_entries} documents"
    )
    if summary.failures:
        typer.echo(f"  {summary.failures} documents could not be read")
    if summary.warnings:
        typer.echo(f"  {len(summary.warnings)} paths skipped during discovery")
    typer.echo(f"  Search parameters: regex: {pattern!r}, path: {str(root)!r}")


def _result_to_dict(result: ScanResult) -> dict[str, Any]:
    return {
        "name": result.name,
        "source": result.source,
        "status": result.status.value,
        "reason": result.reason,
        "match_count": result.match_count,
        "matches": [asdict(m) for m in result.matches],
    }


def write_json_report(
    path: str | Path,
    results: Iterable[ScanResult],
    summary: RunSummary,
    *,
    parameters: dict[str, Any],
) -> Path:
    """Write all ``results`` with run ``parameters`` and ``summary`` to ``path``.

    Parent directories are created as needed.  ``OSError`` propagates.
    """

    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "tool": {"name": "docgrep", "version": __version__},
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "parameters": parameters,
        "summary": asdict(summary),
        "results": [_result_to_dict(r) for r in results],
    }
    out.write_text(json.dumps(payload, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
    return out

"""Typer-based command line interface.

The ``search`` command scans a file or directory tree for a regular
expression inside ``.docx`` documents and zip archives of them.  The pattern
is compiled once before any file is touched; per-file problems (unrecognized
formats, corrupt documents, unreadable files) are reported inline and never
stop the run.

Exit codes
----------
0 at least one match found
1 search completed without matches
2 usage error (reported by typer)
3 I/O error (missing search root, unwritable report)
4 configuration error
5 invalid regular expression
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional

import typer
import yaml
from pydantic import ValidationError

from .config import ConfigModel, load_config
from .io.discovery import discover_files
from .report import emit_results, emit_summary, write_json_report
from .scan.base import ScanResult
from .scan.matcher import compile_pattern
from .scan.pipeline import RunSummary, scan_paths
from .utils.errors import DiscoveryError, InvalidPatternError
from .utils.logging import configure_logging

if not sys.stdout.isatty():  # pragma: no cover - CLI test context
    os.environ.setdefault("NO_COLOR", "1")
    os.environ.setdefault("RICH_DISABLE_NO_COLOR", "1")

EXIT_MATCHES = 0
EXIT_NO_MATCHES = 1
EXIT_IO = 3
EXIT_CONFIG = 4
EXIT_PATTERN = 5

app = typer.Typer(
    name="docgrep",
    help="Search .docx files and zip archives. Run 'docgrep search --help'.",
)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _safe_exit(code: int, msg: str | None = None) -> None:
    """Exit the CLI with ``code`` emitting ``msg`` to stderr if provided."""

    if msg:
        typer.echo(msg, err=True)
    raise typer.Exit(code)


def _apply_overrides(
    cfg: ConfigModel,
    *,
    context: int | None,
    ignore_case: bool,
    max_matches: int | None,
    max_depth: int | None,
    jobs: int | None,
    quiet: bool,
    no_color: bool,
) -> ConfigModel:
    """Return a copy of ``cfg`` with CLI overrides applied."""

    new_cfg = cfg.model_copy(deep=True)
    if context is not None:
        new_cfg.search.context = context
    if ignore_case:
        new_cfg.search.ignore_case = True
    if max_matches is not None:
        new_cfg.search.max_matches = max_matches
    if max_depth is not None:
        new_cfg.archive.max_depth = max_depth
    if jobs is not None:
        new_cfg.workers = jobs
    if quiet:
        new_cfg.report.quiet = True
    if no_color:
        new_cfg.report.color = False
    return new_cfg


@app.callback()
def main() -> None:
    """Entry point for the docgrep command group."""
    pass


@app.command()
def search(  # noqa: PLR0913
    path: Path = typer.Argument(  # noqa: B008
        Path("."), help="File or directory to search (directories are searched recursively)"
    ),
    regex: str = typer.Option(  # noqa: B008
        ..., "--regex", "-r", help="Regular expression to search for, e.g. 'Hi|[Hh]ello'"
    ),
    context: Optional[int] = typer.Option(  # noqa: B008
        None, "--context", "-c", min=0, help="Characters of context on each side [default: 75]"
    ),
    quiet: bool = typer.Option(  # noqa: B008
        False, "--quiet", "-q", help="Show file names and match status only"
    ),
    ignore_case: bool = typer.Option(  # noqa: B008
        False, "--ignore-case", "-i", help="Match case-insensitively"
    ),
    max_matches: Optional[int] = typer.Option(  # noqa: B008
        None, "--max-matches", min=1, help="Stop after this many matches per document"
    ),
    max_depth: Optional[int] = typer.Option(  # noqa: B008
        None, "--max-depth", min=1, help="Archive nesting levels to descend [default: 1]"
    ),
    jobs: Optional[int] = typer.Option(  # noqa: B008
        None, "--jobs", "-j", min=1, help="Number of files scanned in parallel"
    ),
    config_path: Optional[Path] = typer.Option(  # noqa: B008
        None, "--config", help="YAML config to override defaults"
    ),
    report_path: Optional[Path] = typer.Option(  # noqa: B008
        None, "--report", help="Write all results to this JSON file"
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),  # noqa: B008
    verbose: bool = typer.Option(  # noqa: B008
        False, "--verbose", "-v", help="Log progress and skipped files to stderr"
    ),
) -> None:
    """Search ``path`` for ``regex`` and print every match with its context."""

    configure_logging(verbose)

    try:
        cfg = load_config(config_path)
    except (ValidationError, yaml.YAMLError, ValueError, OSError) as exc:
        _safe_exit(EXIT_CONFIG, str(exc).splitlines()[0])
    if verbose:
        typer.echo("Loaded config", err=True)

    cfg = _apply_overrides(
        cfg,
        context=context,
        ignore_case=ignore_case,
        max_matches=max_matches,
        max_depth=max_depth,
        jobs=jobs,
        quiet=quiet,
        no_color=no_color,
    )

    try:
        pattern = compile_pattern(regex, ignore_case=cfg.search.ignore_case)
    except InvalidPatternError as exc:
        _safe_exit(EXIT_PATTERN, str(exc))

    summary = RunSummary()
    try:
        candidates = discover_files(
            path,
            extensions=cfg.discovery.extensions,
            skip_dirs=cfg.discovery.skip_dirs,
            on_error=summary.record_warning,
        )
    except DiscoveryError as exc:
        _safe_exit(EXIT_IO, str(exc))

    collected: list[ScanResult] = []
    for _candidate, results in scan_paths(candidates, pattern, cfg):
        summary.add(results)
        emit_results(results, quiet=cfg.report.quiet, color=cfg.report.color)
        if report_path is not None:
            collected.extend(results)

    emit_summary(summary, pattern=regex, root=path)

    if report_path is not None:
        parameters = {
            "regex": regex,
            "path": str(path),
            "context": cfg.search.context,
            "ignore_case": cfg.search.ignore_case,
            "max_depth": cfg.archive.max_depth,
        }
        try:
            write_json_report(report_path, collected, summary, parameters=parameters)
        except OSError as exc:
            _safe_exit(EXIT_IO, str(exc))
        if verbose:
            typer.echo(f"Report written to {report_path}", err=True)

    raise typer.Exit(EXIT_MATCHES if summary.matches else EXIT_NO_MATCHES)

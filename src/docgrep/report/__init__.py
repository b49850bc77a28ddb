"""Rendering of scan results to the terminal and to JSON report files."""

from .emitter import emit_results, emit_summary, format_match, write_json_report

__all__ = ["emit_results", "emit_summary", "format_match", "write_json_report"]

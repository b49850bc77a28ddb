"""Shared helpers: typed exceptions, logging setup and text offset utilities."""

"""Shared helpers for structured logging and text rendering."""

from .logging import JsonLogger, configure_logging, get_logger
from .text import escape_field, sanitize_printable

__all__ = [
    "JsonLogger",
    "configure_logging",
    "escape_field",
    "get_logger",
    "sanitize_printable",
]

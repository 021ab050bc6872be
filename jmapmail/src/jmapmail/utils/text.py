"""Text helpers for rendering email content on terminals.

What:
  Strip control characters from blob contents and escape values for the
  line-oriented CLI output.

Why:
  HTML and plain-text parts arrive exactly as the sender wrote them, including
  stray control bytes that corrupt terminal output. Filtering must keep
  accented letters, CJK text, and emoji intact; only non-printable code points
  are dropped.

How:
  Walk the string once and keep characters whose Unicode category is not a
  control, surrogate, or unassigned category. Line breaks and tabs are kept
  because they carry layout.

Interfaces:
  :func:`sanitize_printable`, :func:`escape_field`.
"""
from __future__ import annotations

import unicodedata
from typing import Any, Union

_KEEP = {"\n", "\t"}
_DROP_CATEGORIES = {"Cc", "Cs", "Cn"}


def sanitize_printable(value: Union[str, bytes]) -> str:
    """Return ``value`` without control characters or invalid code points.

    Bytes are decoded as UTF-8 with invalid sequences skipped, so the result is
    always valid text.

    Examples:
      >>> sanitize_printable("caf\\u00e9\\x01\\x02!")
      'café!'
    """

    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="ignore")
    value = value.replace("\r\n", "\n").replace("\r", "\n")
    return "".join(
        ch for ch in value if ch in _KEEP or unicodedata.category(ch) not in _DROP_CATEGORIES
    )


def escape_field(value: Any) -> str:
    text = "" if value is None else str(value)
    text = text.replace("|", "\\|")
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return text.replace("\n", "\\n")

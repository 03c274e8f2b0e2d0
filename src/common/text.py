"""Lightweight byte/text helpers shared across modules."""
from __future__ import annotations

import re

# CRLF -> LF, lone CR -> LF
_LINE_ENDING_PATTERN = re.compile(rb"\r\n?")
NORMALIZED_NEWLINE = b"\n"


def normalize_line_endings(content: bytes) -> bytes:
    """Translate platform line-ending sequences inside ``content`` to ``\\n``."""

    if b"\r" not in content:
        return content
    return _LINE_ENDING_PATTERN.sub(NORMALIZED_NEWLINE, content)


def decode_separator(value: str) -> str:
    """Expand backslash escapes typed on a command line (``\\r\\n``, ``\\t``, ``\\x00``)."""

    return value.encode("latin-1", errors="backslashreplace").decode("unicode_escape")

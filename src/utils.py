"""Shared source-text helpers."""

from __future__ import annotations

_TRIM_CHARS = " \t\r\n="


def slice_source(source: bytes, start: int, end: int) -> str:
    """Return the UTF-8 text between two byte offsets of ``source``.

    Offsets outside the buffer are clamped; an empty or inverted range
    yields an empty string.
    """
    start = max(start, 0)
    end = min(end, len(source))
    if end <= start:
        return ""
    return source[start:end].decode("utf-8", errors="replace")


def extract_assigned_value(source: bytes, start: int, end: int) -> str | None:
    """Extract the text assigned with ``=`` inside a byte span.

    Everything before the first ``=`` is dropped, then whitespace,
    newlines and ``=`` are trimmed from both ends.

    Examples:
        >>> extract_assigned_value(b'case inactive = "INACTIVE"', 0, 26)
        '"INACTIVE"'
        >>> extract_assigned_value(b"case active", 0, 11) is None
        True
    """
    text = slice_source(source, start, end)
    _, sep, remainder = text.partition("=")
    if not sep:
        return None
    value = remainder.strip(_TRIM_CHARS)
    return value or None


def unquote_literal(value: str) -> str:
    """Strip one pair of surrounding double quotes from a string literal."""
    if len(value) >= 2 and value[0] == '"' and value[-1] == '"':
        return value[1:-1]
    return value

"""Output shaping for the online code runner."""

from __future__ import annotations

TRUNCATION_MARK = "\n............\n............"
_MAX_LINES = 30
_MAX_CHARS = 1000


def cut_too_long(text: str) -> str:
    """Cut output after 30 line breaks or 1000 characters."""
    count = 0
    for i, ch in enumerate(text):
        if ch == "\r" and text[i + 1 : i + 2] == "\n":
            pass  # CRLF is counted once, on the LF
        elif ch in "\n\r":
            count += 1
        if count > _MAX_LINES or i > _MAX_CHARS:
            return text[: i - 1] + TRUNCATION_MARK
    return text
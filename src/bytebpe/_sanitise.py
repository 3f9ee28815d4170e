"""
Helpers that turn token bytes into printable text for ``.vocab`` listings.
"""

import unicodedata

from .types import Token


def _escape(s: str) -> str:
    """Swap every Unicode control character (category C*) for a ``\\uXXXX`` escape."""
    return "".join(
        f"\\u{ord(c):04x}" if unicodedata.category(c).startswith("C") else c for c in s
    )


def render_bytes(b: bytes) -> str:
    """
    Decode bytes as UTF-8 and escape control characters.

    Partial UTF-8 sequences, common in merged tokens, show up as U+FFFD.
    """
    return _escape(b.decode("utf-8", errors="replace"))


def vocab_line(tok: Token, b: bytes, children: tuple[bytes, bytes] | None = None) -> str:
    """
    Format one ``.vocab`` line.

    Base tokens render as ``[tok] text``; merged tokens also show the two
    child tokens they were built from: ``[tok] [left][right] -> text``.
    """
    if children is None:
        return f"[{tok}] {render_bytes(b)}"
    left, right = children
    return f"[{tok}] [{render_bytes(left)}][{render_bytes(right)}] -> {render_bytes(b)}"

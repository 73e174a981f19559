"""Plain-text helpers for inline result rendering."""

from __future__ import annotations

import re
import unicodedata

ELLIPSIS = "…"
_WHITESPACE_RE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def truncate(text: str, limit: int, marker: str = ELLIPSIS) -> str:
    """Cut ``text`` to at most ``limit`` characters, ending with ``marker``.

    Works on code points, so multi-byte characters are never split. A
    trailing combining mark is dropped together with its base character.
    """

    if limit <= 0:
        return ""
    if len(text) <= limit:
        return text
    cut = text[: max(limit - len(marker), 0)]
    while cut and unicodedata.combining(cut[-1]):
        cut = cut[:-1]
    if cut:
        cut = cut[:-1] if unicodedata.combining(text[len(cut)]) else cut
    return f"{cut.rstrip()}{marker}"


def sanitize_message(text: str | None, limit: int) -> str:
    """Strip control characters and collapse whitespace in upstream text."""

    if not text:
        return ""
    cleaned = "".join(
        ch if unicodedata.category(ch)[0] != "C" else " " for ch in text
    )
    return truncate(collapse_whitespace(cleaned), limit)


__all__ = ["ELLIPSIS", "collapse_whitespace", "sanitize_message", "truncate"]

"""ANSI-aware width measurement and clipping.

Companion rows are fixed-width columns, so alignment has to count display
cells rather than characters: escapes take none, wide glyphs take two.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``."""
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    """Count display columns of ``text`` ignoring escape sequences."""
    col = 0
    for chunk in ANSI_ESCAPE_RE.split(text):
        for ch in chunk:
            col += char_display_width(ch, col)
    return col


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    Escape sequences are kept verbatim; tabs are expanded to spaces.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n and col < max_cols:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch, col)
        if col + w > max_cols:
            break
        out.append(" " * w if ch == "\t" else ch)
        col += w
        i += 1

    return "".join(out)


def pad_ansi_line(text: str, width: int, right_align: bool = False) -> str:
    """Clip ``text`` to ``width`` and pad it with spaces to exactly ``width`` cells."""
    clipped = clip_ansi_line(text, width)
    padding = " " * max(0, width - display_width(clipped))
    return padding + clipped if right_align else clipped + padding

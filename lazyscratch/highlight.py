"""Source highlighting and filetype detection via Pygments.

Also neutralizes terminal control bytes so edited text cannot move the cursor
or ring the bell while it is drawn.
"""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import TextLexer, get_lexer_by_name, get_lexer_for_filename
from pygments.util import ClassNotFound

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


def read_text(path: Path) -> str:
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source
    return _CONTROL_RE.sub(lambda match: f"\\x{ord(match.group(0)):02x}", source)


def lexer_aliases(path: Path) -> list[str]:
    """Pygments aliases for ``path``'s lexer, most specific first."""
    try:
        lexer = get_lexer_for_filename(path.name)
    except ClassNotFound:
        return []
    return list(lexer.aliases)


def detect_filetype(path: Path, known: set[str] | None = None) -> str:
    """Guess a filetype for ``path``.

    When ``known`` is given, the first lexer alias it contains wins; the file
    suffix is tried last so ``foo.py`` still maps to ``py`` for alias lookup.
    """
    candidates = lexer_aliases(path)
    suffix = path.suffix.lstrip(".").lower()
    if suffix:
        candidates.append(suffix)
    if known is not None:
        for candidate in candidates:
            if candidate in known:
                return candidate
        return ""
    return candidates[0] if candidates else ""


@lru_cache(maxsize=16)
def _lexer_for(filetype: str):
    try:
        return get_lexer_by_name(filetype, stripnl=False) if filetype else TextLexer(stripnl=False)
    except ClassNotFound:
        return TextLexer(stripnl=False)


@lru_cache(maxsize=4)
def _formatter() -> TerminalFormatter:
    return TerminalFormatter()


def colorize_source(source: str, filetype: str, no_color: bool = False) -> list[str]:
    """Return one highlighted row per source line."""
    line_count = source.count("\n") + 1
    clean = sanitize_terminal_text(source)
    if no_color:
        return clean.split("\n")
    rendered = highlight(clean, _lexer_for(filetype), _formatter())
    rows = rendered.split("\n")
    # Pygments always terminates output with a newline.
    if rows and rows[-1] == "":
        rows.pop()
    rows.extend([""] * (line_count - len(rows)))
    return rows[:line_count]

"""Built-in text hooks for interpreter descriptors.

Rephrase hooks transform source text before it is fed to the interpreter and
must keep the line count intact. Preprocess hooks clean raw interpreter
output before result extraction.
"""

from __future__ import annotations

import re
from collections.abc import Callable

_ANSI_RE = re.compile(r"\x1b(?:\[[0-9;?]*[ -/]*[@-~]|\][^\x07]*\x07|[=>])")
_FAT_ARROW_RE = re.compile(r"=> ")
_OCAML_VALUE_RE = re.compile(r"^- : .*? = ", re.MULTILINE)
_R_INDEX_RE = re.compile(r"^[ \t]*\[\d+\] ", re.MULTILINE)


def strip_ansi(text: str) -> str:
    """Drop escape sequences emitted by readline and colored REPLs."""
    return _ANSI_RE.sub("", text)


def strip_fat_arrow(text: str) -> str:
    """Remove the first ``=> `` result marker on every line (irb, psysh, planck)."""
    return "\n".join(_FAT_ARROW_RE.sub("", line, count=1) for line in text.split("\n"))


def strip_ocaml_types(text: str) -> str:
    """Turn ``- : int = 3`` toplevel answers into ``3``."""
    return _OCAML_VALUE_RE.sub("", strip_ansi(text))


def strip_r_index(text: str) -> str:
    """Turn ``[1] 3`` vector answers into ``3``."""
    return _R_INDEX_RE.sub("", text)


def python_blank_lines(text: str) -> str:
    """Keep indented blocks open across blank lines.

    The REPL closes a compound statement on the first blank line, so a blank
    line followed by an indented line becomes an indented comment.
    """
    lines = text.split("\n")
    for idx in range(len(lines) - 1):
        if lines[idx].strip():
            continue
        following = lines[idx + 1]
        indent = following[: len(following) - len(following.lstrip())]
        if indent and following.strip():
            lines[idx] = f"{indent}#"
    return "\n".join(lines)


HOOKS: dict[str, Callable[[str], str]] = {
    "strip_ansi": strip_ansi,
    "strip_fat_arrow": strip_fat_arrow,
    "strip_ocaml_types": strip_ocaml_types,
    "strip_r_index": strip_r_index,
    "python_blank_lines": python_blank_lines,
}


def resolve_hook(value: object) -> Callable[[str], str] | None:
    """Return a hook callable for a callable or a built-in hook name.

    Raises ``LookupError`` for unknown hook names.
    """
    if value is None or value == "":
        return None
    if callable(value):
        return value  # type: ignore[return-value]
    name = str(value)
    try:
        return HOOKS[name]
    except KeyError:
        raise LookupError(f"unknown hook {name!r}") from None

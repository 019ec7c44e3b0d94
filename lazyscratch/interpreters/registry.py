"""Interpreter registry and alias resolution.

Built-in entries cover common REPLs; user config can add interpreters,
override individual keys of built-in ones, and add aliases.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from ..errors import EmptyFiletype, UnknownInterpreter
from .descriptor import InterpreterDescriptor

logger = logging.getLogger(__name__)

BUILTIN_INTERPRETERS: dict[str, dict[str, object]] = {
    "python": {
        "bin": ["python3", "-i", "-q"],
        "prompt": r"^(>>>|\.\.\.) ",
        "env": "PYTHON_BASIC_REPL=1 PYTHONSTARTUP=",
        "rephrase": "python_blank_lines",
        "preprocess": "strip_ansi",
    },
    "javascript": {
        "bin": ["node", "-i"],
        "prompt": r"^(>|\.\.\.+) ",
        "env": "NODE_NO_READLINE=1",
        "preprocess": "strip_ansi",
    },
    "coffee": {
        "bin": ["coffee"],
        "prompt": r"^coffee> ",
        "preprocess": "strip_ansi",
    },
    "ruby": {
        "bin": ["irb", "-f", "--nocolorize", "--noreadline"],
        "prompt": r"^irb\(\w+\):\d+:\d+. ",
        "preprocess": "strip_fat_arrow",
    },
    "haskell": {
        "bin": ["ghci", "-ignore-dot-ghci"],
        "prompt": r"^(Prelude|ghci)[^>|]*[>|] ",
        "preprocess": "strip_ansi",
    },
    "php": {
        "bin": ["psysh"],
        "prompt": r"^(>>>|\.\.\.) ",
        "preprocess": "strip_fat_arrow",
    },
    "lua": {
        "bin": ["lua"],
        "prompt": r"^(>|>>) ",
    },
    "ocaml": {
        "bin": ["ocaml"],
        "prompt": r"^# ",
        "preprocess": "strip_ocaml_types",
    },
    "r": {
        "bin": ["R", "--no-save", "--quiet"],
        "prompt": r"^(>|\+) ",
        "preprocess": "strip_r_index",
    },
    "clojure": {
        "bin": ["planck"],
        "prompt": r"^[^=> ]+=> ",
        "preprocess": "strip_fat_arrow",
    },
    "elixir": {
        "bin": ["iex"],
        "prompt": r"^(iex|\.\.\.)\(\d+\)> ",
        "preprocess": "strip_ansi",
    },
    "purescript": {
        "bin": ["pulp", "psci"],
        "prompt": r"^> ",
        "deps": ["purs"],
        "preprocess": "strip_ansi",
    },
    "scala": {
        "bin": ["scala"],
        "prompt": r"^scala> ",
        "preprocess": "strip_ansi",
    },
    "julia": {
        "bin": ["julia", "-qi", "--color=no", "--history-file=no"],
        "prompt": r"^julia> ",
    },
}

BUILTIN_ALIASES: dict[str, str] = {
    "python3": "python",
    "py": "python",
    "js": "javascript",
    "javascript.jsx": "javascript",
    "rb": "ruby",
    "hs": "haskell",
    "lhaskell": "haskell",
    "ml": "ocaml",
    "clj": "clojure",
    "ex": "elixir",
    "exs": "elixir",
    "purs": "purescript",
    "jl": "julia",
}


def merge_interpreter_data(
    base: Mapping[str, Mapping[str, object]],
    overrides: Mapping[str, Mapping[str, object]],
) -> dict[str, dict[str, object]]:
    """Overlay user entries onto built-ins key by key."""
    merged = {name: dict(entry) for name, entry in base.items()}
    for name, entry in overrides.items():
        merged.setdefault(name, {}).update(entry)
    return merged


class InterpreterRegistry:
    """Lookup table from filetype to ``InterpreterDescriptor``.

    Descriptors are built lazily so a broken user entry only fails when that
    filetype is actually requested.
    """

    def __init__(
        self,
        interpreters: Mapping[str, Mapping[str, object]] | None = None,
        aliases: Mapping[str, str] | None = None,
    ) -> None:
        self._data = {name: dict(entry) for name, entry in (interpreters or {}).items()}
        self._aliases = dict(aliases or {})
        self._descriptors: dict[str, InterpreterDescriptor] = {}

    @classmethod
    def with_builtins(
        cls,
        interpreters: Mapping[str, Mapping[str, object]] | None = None,
        aliases: Mapping[str, str] | None = None,
    ) -> InterpreterRegistry:
        return cls(
            merge_interpreter_data(BUILTIN_INTERPRETERS, interpreters or {}),
            {**BUILTIN_ALIASES, **(aliases or {})},
        )

    @property
    def aliases(self) -> Mapping[str, str]:
        return self._aliases

    def names(self) -> list[str]:
        return sorted(self._data)

    def canonical(self, filetype: str) -> str:
        return self._aliases.get(filetype, filetype)

    def knows(self, filetype: str) -> bool:
        return bool(filetype) and self.canonical(filetype) in self._data

    def resolve(self, filetype: str) -> InterpreterDescriptor:
        """Map ``filetype`` through aliases and return its descriptor."""
        if not filetype:
            raise EmptyFiletype()
        key = self.canonical(filetype)
        cached = self._descriptors.get(key)
        if cached is not None:
            return cached
        data = self._data.get(key)
        if data is None:
            raise UnknownInterpreter(filetype)
        descriptor = InterpreterDescriptor.from_mapping(key, data)
        self._descriptors[key] = descriptor
        logger.debug(f"Resolved filetype {filetype!r} to interpreter {key!r} ({' '.join(descriptor.bin)})")
        return descriptor

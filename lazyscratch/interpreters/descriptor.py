"""Typed interpreter descriptors and their construction-time validation."""

from __future__ import annotations

import re
import shlex
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from ..errors import InterpreterConfigInvalid
from .hooks import resolve_hook

REQUIRED_KEYS: tuple[str, ...] = ("bin", "prompt")

TextHook = Callable[[str], str]


def _identity(text: str) -> str:
    return text


def parse_env_assignments(env: str) -> dict[str, str]:
    """Parse ``"A=1 B='two words'"`` into an environment mapping.

    Tokens without ``=`` are ignored.
    """
    assignments: dict[str, str] = {}
    for token in shlex.split(env):
        key, sep, value = token.partition("=")
        if not sep or not key:
            continue
        assignments[key] = value
    return assignments


@dataclass(frozen=True)
class InterpreterDescriptor:
    """How to drive one interactive interpreter.

    ``bin`` is the full argv; ``prompt`` matches the interpreter's
    per-statement prompt; ``env`` is assignment text applied on top of the
    inherited environment.
    """

    name: str
    bin: tuple[str, ...]
    prompt: re.Pattern[str]
    env: str = ""
    rephrase: TextHook = _identity
    preprocess: TextHook = _identity
    deps: tuple[str, ...] = field(default_factory=tuple)

    @property
    def executable(self) -> str:
        return self.bin[0]

    def required_executables(self) -> set[str]:
        return {self.executable, *self.deps}

    def environment(self) -> dict[str, str]:
        return parse_env_assignments(self.env) if self.env else {}

    @classmethod
    def from_mapping(cls, name: str, data: Mapping[str, object]) -> InterpreterDescriptor:
        """Build a descriptor from registry/config data.

        Raises ``InterpreterConfigInvalid`` naming every missing or empty
        required key at once. Hooks may be callables or names of built-in hooks.
        """
        absent = [key for key in REQUIRED_KEYS if not data.get(key)]
        if absent:
            raise InterpreterConfigInvalid(name, absent)

        raw_bin = data["bin"]
        if isinstance(raw_bin, str):
            argv = tuple(shlex.split(raw_bin))
        else:
            argv = tuple(str(part) for part in raw_bin)  # type: ignore[union-attr]
        if not argv:
            raise InterpreterConfigInvalid(name, ["bin"])

        raw_prompt = data["prompt"]
        try:
            prompt = raw_prompt if isinstance(raw_prompt, re.Pattern) else re.compile(str(raw_prompt))
        except re.error as exc:
            raise InterpreterConfigInvalid(name, [f"prompt ({exc})"]) from exc

        deps = data.get("deps") or ()
        if isinstance(deps, str):
            deps = (deps,)

        hooks: dict[str, TextHook] = {}
        unknown: list[str] = []
        for key in ("rephrase", "preprocess"):
            try:
                hooks[key] = resolve_hook(data.get(key)) or _identity
            except LookupError:
                unknown.append(f"{key} (unknown hook {data.get(key)!r})")
        if unknown:
            raise InterpreterConfigInvalid(name, unknown)

        return cls(
            name=name,
            bin=argv,
            prompt=prompt,
            env=str(data.get("env") or ""),
            rephrase=hooks["rephrase"],
            preprocess=hooks["preprocess"],
            deps=tuple(str(dep) for dep in deps),  # type: ignore[union-attr]
        )

"""Interpreter descriptors, built-in hooks, and the filetype registry."""

from __future__ import annotations

from .descriptor import REQUIRED_KEYS, InterpreterDescriptor, parse_env_assignments
from .hooks import HOOKS, resolve_hook
from .registry import BUILTIN_ALIASES, BUILTIN_INTERPRETERS, InterpreterRegistry, merge_interpreter_data

__all__ = [
    "BUILTIN_ALIASES",
    "BUILTIN_INTERPRETERS",
    "HOOKS",
    "REQUIRED_KEYS",
    "InterpreterDescriptor",
    "InterpreterRegistry",
    "merge_interpreter_data",
    "parse_env_assignments",
    "resolve_hook",
]

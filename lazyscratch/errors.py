"""Error taxonomy for scratchpad commands.

Every error carries the user-facing message that gets reported through the
host. None of them is meant to terminate the process; the engine catches
``ScratchError`` at its command boundary.
"""

from __future__ import annotations

from collections.abc import Iterable


def _format_names(names: Iterable[str]) -> str:
    return ", ".join(sorted(set(names)))


class ScratchError(Exception):
    """Base class for errors surfaced to the user as a message."""


class MissingBaseDependency(ScratchError):
    """Required base executables are absent; the feature is disabled."""

    def __init__(self, missing: Iterable[str]) -> None:
        self.missing = frozenset(missing)
        super().__init__(f"lazyscratch requires these executables: {_format_names(self.missing)}")


class EmptyFiletype(ScratchError):
    def __init__(self) -> None:
        super().__init__("Cannot run scratchpad without a filetype.")


class UnknownInterpreter(ScratchError):
    def __init__(self, filetype: str) -> None:
        self.filetype = filetype
        super().__init__(f"No interpreter registered for filetype {filetype!r}.")


class InterpreterConfigInvalid(ScratchError):
    """Descriptor data is missing required keys."""

    def __init__(self, name: str, missing: Iterable[str]) -> None:
        self.name = name
        self.missing = frozenset(missing)
        super().__init__(f"Interpreter {name!r} has missing or invalid keys: {_format_names(self.missing)}")


class InterpreterDepsMissing(ScratchError):
    """Executables needed by one interpreter are not installed."""

    def __init__(self, name: str, missing: Iterable[str]) -> None:
        self.name = name
        self.missing = frozenset(missing)
        super().__init__(f"Interpreter {name!r} requires these executables: {_format_names(self.missing)}")


class SpawnFailure(ScratchError):
    def __init__(self, command: str, reason: str) -> None:
        self.command = command
        self.reason = reason
        super().__init__(f"Failed to run {command!r}: {reason}")

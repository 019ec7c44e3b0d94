"""Scratchpad bootstrap: wires file, host, engine, and terminal together."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from ..config import Settings
from ..errors import MissingBaseDependency
from ..highlight import detect_filetype, read_text
from ..interpreters import InterpreterRegistry
from ..session import MemoryHost, ScratchEngine
from .host import SOURCE_VIEW, TerminalHost, buffer_lines
from .loop import RuntimeLoopTiming, run_main_loop
from .terminal import TerminalController

logger = logging.getLogger(__name__)

ONE_SHOT_VIEW = "buffer"


def _known_filetypes(registry: InterpreterRegistry) -> set[str]:
    return set(registry.names()) | set(registry.aliases)


def evaluate_once(text: str, filetype: str, settings: Settings, registry: InterpreterRegistry) -> tuple[list[str], list[str]]:
    """Run one update against an in-memory host.

    Returns ``(companion_lines, messages)``; messages are the errors the
    engine reported.
    """
    host = MemoryHost()
    host.add_source(ONE_SHOT_VIEW, "\n".join(buffer_lines(text)), filetype)
    engine = ScratchEngine(host, settings, registry)
    if not engine.spawn(ONE_SHOT_VIEW) or host.messages:
        return [], list(host.messages)
    session = engine.session(ONE_SHOT_VIEW)
    assert session is not None
    return host.companion_lines(session.companion_id), []


def run_scratchpad(
    path: Path,
    settings: Settings,
    filetype: str | None = None,
    no_color: bool = False,
    nopager: bool = False,
) -> int:
    """Open ``path`` with its companion pane, or print results once and exit.

    Returns a process exit status.
    """
    registry = InterpreterRegistry.with_builtins(settings.interpreters, settings.aliases)
    text = read_text(path) if path.is_file() else ""
    resolved_filetype = filetype or detect_filetype(path, _known_filetypes(registry))
    logger.debug(f"Opening {path} as filetype {resolved_filetype!r}")

    if nopager or not os.isatty(sys.stdin.fileno()):
        lines, messages = evaluate_once(text, resolved_filetype, settings, registry)
        for message in messages:
            sys.stderr.write(f"{message}\n")
        if messages:
            return 1
        sys.stdout.write("".join(f"{line}\n" for line in lines))
        return 0

    host = TerminalHost(path, text, resolved_filetype, no_color=no_color)
    engine = ScratchEngine(host, settings, registry)
    if not engine.available:
        sys.stderr.write(f"{MissingBaseDependency(engine.missing_base)}\n")
        return 1
    engine.spawn(SOURCE_VIEW)

    terminal = TerminalController(sys.stdin.fileno(), sys.stdout.fileno())
    run_main_loop(
        host,
        engine,
        terminal,
        sys.stdin.fileno(),
        RuntimeLoopTiming(idle_seconds=settings.idle_seconds),
    )
    return 0

"""Main interactive event loop for the scratchpad TUI.

Each iteration polls the watched file, fires the idle update once edits
settle, redraws when the host is dirty, and dispatches one key.
"""

from __future__ import annotations

import os
import shutil
import sys
import time
from dataclasses import dataclass

from ..highlight import read_text
from ..session import Event, EventKind, ScratchEngine
from .actions import handle_key
from .host import SOURCE_VIEW, TerminalHost
from .keys import read_key
from .render import build_frame
from .terminal import TerminalController
from .watch import IdleTracker, file_signature


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    idle_seconds: float
    poll_ms: int = 100


def _write_frame(frame: str) -> None:
    os.write(sys.stdout.fileno(), frame.encode("utf-8", errors="replace"))


def run_main_loop(
    host: TerminalHost,
    engine: ScratchEngine,
    terminal: TerminalController,
    stdin_fd: int,
    timing: RuntimeLoopTiming,
) -> None:
    """Run the TUI until a quit key is pressed."""
    idle = IdleTracker(timing.idle_seconds)
    signature = file_signature(host.path)

    with terminal.raw_mode():
        while True:
            term = shutil.get_terminal_size((80, 24))
            now = time.monotonic()
            if host.usable_rows != max(1, term.lines - 1):
                host.usable_rows = max(1, term.lines - 1)
                host.dirty = True
            if host.status_message and now >= host.status_message_until:
                host.status_message = ""
                host.dirty = True

            current = file_signature(host.path)
            if current != signature:
                signature = current
                idle.note_change(now)
            if idle.due(now) and current[0] == "ok":
                host.load_text(read_text(host.path))
                engine.dispatch(Event(EventKind.IDLE, SOURCE_VIEW))

            if host.dirty:
                session = engine.session(SOURCE_VIEW)
                interpreter = session.interpreter.name if session is not None else None
                _write_frame(build_frame(host, term.columns, host.usable_rows, interpreter))
                host.dirty = False

            key = read_key(stdin_fd, timeout_ms=timing.poll_ms)
            if not key:
                continue
            if not handle_key(key, host, engine):
                break

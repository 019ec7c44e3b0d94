"""Key bindings for the scratchpad TUI.

``handle_key`` maps one decoded key token onto host viewport moves and engine
commands. It returns ``False`` when the UI should exit.
"""

from __future__ import annotations

from dataclasses import replace

from ..session import Event, EventKind, ScratchEngine
from .host import SOURCE_VIEW, TerminalHost

WHEEL_STEP = 3

HELP_TEXT = "j/k move  PgUp/PgDn page  t toggle  u update  e expand  r raw  q quit"


def _move_cursor(host: TerminalHost, engine: ScratchEngine, delta: int | None = None, line: int | None = None) -> None:
    current = host.source_viewport
    target = line if line is not None else current.cursor_line + (delta or 0)
    host.set_viewport(SOURCE_VIEW, replace(current, cursor_line=target))
    engine.sync_viewport(SOURCE_VIEW)


def _scroll(host: TerminalHost, engine: ScratchEngine, delta: int) -> None:
    current = host.source_viewport
    scroll_top = max(0, min(current.scroll_top + delta, max(0, len(host.lines) - 1)))
    cursor_line = min(max(current.cursor_line, scroll_top), scroll_top + host.usable_rows - 1)
    host.set_viewport(SOURCE_VIEW, replace(current, scroll_top=scroll_top, cursor_line=cursor_line))
    engine.sync_viewport(SOURCE_VIEW)


def toggle_raw(engine: ScratchEngine) -> None:
    engine.settings = replace(engine.settings, raw=not engine.settings.raw)
    engine.update(SOURCE_VIEW)


def handle_key(key: str, host: TerminalHost, engine: ScratchEngine) -> bool:
    if key in {"q", "CTRL_C"}:
        engine.dispatch(Event(EventKind.VIEW_CLOSING, SOURCE_VIEW))
        return False
    if key in {"j", "DOWN", "ENTER"}:
        _move_cursor(host, engine, delta=1)
    elif key in {"k", "UP"}:
        _move_cursor(host, engine, delta=-1)
    elif key in {"PAGE_DOWN", " "}:
        _move_cursor(host, engine, delta=host.usable_rows)
    elif key == "PAGE_UP":
        _move_cursor(host, engine, delta=-host.usable_rows)
    elif key in {"g", "HOME"}:
        _move_cursor(host, engine, line=0)
    elif key in {"G", "END"}:
        _move_cursor(host, engine, line=len(host.lines) - 1)
    elif key.startswith("MOUSE_WHEEL_UP"):
        _scroll(host, engine, -WHEEL_STEP)
    elif key.startswith("MOUSE_WHEEL_DOWN"):
        _scroll(host, engine, WHEEL_STEP)
    elif key == "FOCUS_IN":
        engine.dispatch(Event(EventKind.FOCUS_GAINED, SOURCE_VIEW))
    elif key == "FOCUS_OUT":
        engine.dispatch(Event(EventKind.FOCUS_LOST, SOURCE_VIEW))
    elif key == "t":
        engine.toggle(SOURCE_VIEW)
    elif key == "u":
        engine.update(SOURCE_VIEW)
    elif key == "r":
        toggle_raw(engine)
    elif key == "e":
        result = engine.expand(SOURCE_VIEW)
        host.report(result if result else "(no result on this line)")
    elif key == "?":
        host.report(HELP_TEXT)
    return True

"""``Host`` implementation backing the terminal UI.

There is one source view (the watched file) and at most one companion pane.
The host only records state; ``render.build_frame`` draws it.
"""

from __future__ import annotations

import time
from collections.abc import Hashable
from dataclasses import dataclass, field, replace
from pathlib import Path

from ..highlight import colorize_source
from ..viewport import ViewportSnapshot

SOURCE_VIEW = "source"
COMPANION_VIEW = "companion"
STATUS_MESSAGE_SECONDS = 4.0


def buffer_lines(text: str) -> list[str]:
    """Split file text into buffer lines; a final newline does not start a new line."""
    if text.endswith("\n"):
        text = text[:-1]
    return text.split("\n")


@dataclass
class CompanionPane:
    width: int
    right: bool
    lines: list[str] = field(default_factory=list)
    visible: bool = True
    viewport: ViewportSnapshot = field(default_factory=ViewportSnapshot)


class TerminalHost:
    def __init__(self, path: Path, text: str, filetype: str, no_color: bool = False) -> None:
        self.path = path
        self.lines = buffer_lines(text)
        self.filetype_name = filetype
        self.no_color = no_color
        self.source_viewport = ViewportSnapshot()
        self.options: dict[str, object] = {"wrap": True}
        self.companion: CompanionPane | None = None
        self.status_message = ""
        self.status_message_until = 0.0
        self.usable_rows = 24
        self.dirty = True
        self._highlight_key: tuple[str, str] | None = None
        self._highlighted: list[str] = []

    def load_text(self, text: str) -> None:
        self.lines = buffer_lines(text)
        self.set_viewport(SOURCE_VIEW, self.source_viewport)
        self.dirty = True

    def highlighted_lines(self) -> list[str]:
        """Highlighted source rows, cached per text/filetype."""
        text = "\n".join(self.lines)
        key = (text, self.filetype_name)
        if key != self._highlight_key:
            self._highlighted = colorize_source(text, self.filetype_name, self.no_color)
            self._highlight_key = key
        return self._highlighted

    def visible_companion(self) -> CompanionPane | None:
        if self.companion is None or not self.companion.visible:
            return None
        return self.companion

    def source_text(self, view: Hashable) -> str:
        return "\n".join(self.lines)

    def filetype(self, view: Hashable) -> str:
        return self.filetype_name

    def set_filetype(self, view: Hashable, filetype: str) -> None:
        self.filetype_name = filetype
        self.dirty = True

    def open_companion(self, source: Hashable, width: int, right: bool) -> Hashable:
        self.companion = CompanionPane(width=max(1, width), right=right)
        self.dirty = True
        return COMPANION_VIEW

    def close_companion(self, companion: Hashable) -> None:
        self.companion = None
        self.dirty = True

    def set_companion_visible(self, companion: Hashable, visible: bool) -> None:
        if self.companion is not None:
            self.companion.visible = visible
            self.dirty = True

    def companion_width(self, companion: Hashable) -> int:
        return self.companion.width if self.companion is not None else 0

    def set_companion_lines(self, companion: Hashable, lines: list[str]) -> None:
        if self.companion is not None:
            self.companion.lines = list(lines)
            self.dirty = True

    def companion_lines(self, companion: Hashable) -> list[str]:
        return list(self.companion.lines) if self.companion is not None else []

    def _line_count(self, view: Hashable) -> int:
        if view == COMPANION_VIEW and self.companion is not None:
            # Rows stay aligned with the source even past the last result.
            return max(len(self.companion.lines), len(self.lines))
        return len(self.lines)

    def get_viewport(self, view: Hashable) -> ViewportSnapshot:
        if view == COMPANION_VIEW:
            return self.companion.viewport if self.companion is not None else ViewportSnapshot()
        return self.source_viewport

    def set_viewport(self, view: Hashable, snapshot: ViewportSnapshot) -> None:
        last_line = max(0, self._line_count(view) - 1)
        cursor_line = max(0, min(snapshot.cursor_line, last_line))
        scroll_top = max(0, min(snapshot.scroll_top, last_line))
        # Keep the cursor on screen.
        if cursor_line < scroll_top:
            scroll_top = cursor_line
        elif cursor_line >= scroll_top + self.usable_rows:
            scroll_top = cursor_line - self.usable_rows + 1
        clamped = replace(snapshot, scroll_top=scroll_top, cursor_line=cursor_line)
        if view == COMPANION_VIEW:
            if self.companion is not None:
                self.companion.viewport = clamped
        else:
            self.source_viewport = clamped
        self.dirty = True

    def get_option(self, view: Hashable, name: str) -> object:
        return self.options.get(name)

    def set_option(self, view: Hashable, name: str, value: object) -> None:
        if value is None:
            self.options.pop(name, None)
        else:
            self.options[name] = value
        self.dirty = True

    def report(self, message: str) -> None:
        self.status_message = message
        self.status_message_until = time.monotonic() + STATUS_MESSAGE_SECONDS
        self.dirty = True

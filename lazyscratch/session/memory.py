"""In-memory ``Host`` implementation.

Backs the ``--nopager`` one-shot mode and serves as a reference host for
embedding code: views are plain records keyed by caller-chosen ids.
"""

from __future__ import annotations

import itertools
from collections.abc import Hashable
from dataclasses import dataclass, field, replace

from ..viewport import ViewportSnapshot


@dataclass
class MemoryView:
    lines: list[str] = field(default_factory=lambda: [""])
    filetype: str = ""
    viewport: ViewportSnapshot = field(default_factory=ViewportSnapshot)
    options: dict[str, object] = field(default_factory=dict)
    width: int = 80
    visible: bool = True
    companion_of: Hashable | None = None


class MemoryHost:
    def __init__(self) -> None:
        self.views: dict[Hashable, MemoryView] = {}
        self.messages: list[str] = []
        self._companion_ids = itertools.count(1)

    def add_source(self, view: Hashable, text: str = "", filetype: str = "") -> MemoryView:
        record = MemoryView(lines=text.split("\n"), filetype=filetype)
        self.views[view] = record
        return record

    def set_source_text(self, view: Hashable, text: str) -> None:
        self.views[view].lines = text.split("\n")

    def source_text(self, view: Hashable) -> str:
        return "\n".join(self.views[view].lines)

    def filetype(self, view: Hashable) -> str:
        return self.views[view].filetype

    def set_filetype(self, view: Hashable, filetype: str) -> None:
        self.views[view].filetype = filetype

    def open_companion(self, source: Hashable, width: int, right: bool) -> Hashable:
        companion = f"companion-{next(self._companion_ids)}"
        self.views[companion] = MemoryView(lines=[], width=width, companion_of=source)
        return companion

    def close_companion(self, companion: Hashable) -> None:
        self.views.pop(companion, None)

    def set_companion_visible(self, companion: Hashable, visible: bool) -> None:
        self.views[companion].visible = visible

    def companion_width(self, companion: Hashable) -> int:
        return self.views[companion].width

    def set_companion_lines(self, companion: Hashable, lines: list[str]) -> None:
        self.views[companion].lines = list(lines)

    def companion_lines(self, companion: Hashable) -> list[str]:
        return list(self.views[companion].lines)

    def get_viewport(self, view: Hashable) -> ViewportSnapshot:
        return self.views[view].viewport

    def set_viewport(self, view: Hashable, snapshot: ViewportSnapshot) -> None:
        record = self.views[view]
        last_line = max(0, len(record.lines) - 1)
        record.viewport = replace(
            snapshot,
            scroll_top=max(0, min(snapshot.scroll_top, last_line)),
            cursor_line=max(0, min(snapshot.cursor_line, last_line)),
        )

    def get_option(self, view: Hashable, name: str) -> object:
        return self.views[view].options.get(name)

    def set_option(self, view: Hashable, name: str, value: object) -> None:
        self.views[view].options[name] = value

    def report(self, message: str) -> None:
        self.messages.append(message)

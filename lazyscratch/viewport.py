"""Viewport capture/restore around updates and scroll/cursor mirroring."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from .ansi import clip_ansi_line, pad_ansi_line

if TYPE_CHECKING:
    from .session.host import Host


@dataclass(frozen=True)
class ViewportSnapshot:
    """Scroll and cursor position of one view (0-based lines and columns)."""

    scroll_top: int = 0
    cursor_line: int = 0
    cursor_column: int = 0


def format_companion_lines(text: str, width: int, right_align: bool = False) -> list[str]:
    """Shape extracted text into rows no wider than ``width`` cells."""
    lines = text.split("\n") if text else []
    if right_align:
        return [pad_ansi_line(line, width, right_align=True) for line in lines]
    return [clip_ansi_line(line, width) for line in lines]


def before_update(host: Host, source: Hashable) -> ViewportSnapshot:
    return host.get_viewport(source)


def render(host: Host, companion: Hashable, text: str, width: int, right_align: bool = False) -> list[str]:
    """Replace the companion's content wholesale with formatted ``text``."""
    lines = format_companion_lines(text, width, right_align)
    host.set_companion_lines(companion, lines)
    return lines


def after_update(host: Host, source: Hashable, snapshot: ViewportSnapshot) -> None:
    host.set_viewport(source, snapshot)


class ScrollBinding:
    """Keeps scroll top and cursor line of a source/companion pair in step."""

    def __init__(self, host: Host, source: Hashable, companion: Hashable) -> None:
        self.host = host
        self.source = source
        self.companion = companion
        self.active = True

    def partner(self, view: Hashable) -> Hashable | None:
        if view == self.source:
            return self.companion
        if view == self.companion:
            return self.source
        return None

    def mirror(self, moved: Hashable) -> bool:
        """Copy ``moved``'s scroll top and cursor line onto its partner.

        Returns whether the partner viewport changed.
        """
        if not self.active:
            return False
        other = self.partner(moved)
        if other is None:
            return False
        origin = self.host.get_viewport(moved)
        current = self.host.get_viewport(other)
        target = replace(current, scroll_top=origin.scroll_top, cursor_line=origin.cursor_line)
        if target == current:
            return False
        self.host.set_viewport(other, target)
        return True

    def release(self) -> None:
        self.active = False

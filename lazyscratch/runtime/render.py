"""Frame composition for the source/companion split view."""

from __future__ import annotations

from dataclasses import dataclass

from ..ansi import clip_ansi_line, display_width, pad_ansi_line
from .host import TerminalHost

GUTTER_WIDTH = 5
SEPARATOR = "│"


@dataclass(frozen=True)
class PaneLayout:
    source_x: int
    source_width: int
    companion_x: int | None
    companion_width: int


def compute_layout(host: TerminalHost, columns: int) -> PaneLayout:
    companion = host.visible_companion()
    if companion is None:
        return PaneLayout(source_x=0, source_width=max(1, columns), companion_x=None, companion_width=0)
    companion_width = max(1, min(companion.width, columns // 2))
    source_width = max(1, columns - companion_width - 1)
    if companion.right:
        return PaneLayout(0, source_width, source_width + 1, companion_width)
    return PaneLayout(companion_width + 1, source_width, 0, companion_width)


def _source_row(host: TerminalHost, highlighted: list[str], line_idx: int, width: int) -> str:
    if line_idx >= len(highlighted):
        return pad_ansi_line("~", width)
    cursor = host.source_viewport.cursor_line == line_idx
    number = f"{line_idx + 1:>{GUTTER_WIDTH - 1}} "
    gutter = f"\033[7m{number}\033[0m" if cursor else f"\033[90m{number}\033[0m"
    body_width = max(0, width - GUTTER_WIDTH)
    body = clip_ansi_line(highlighted[line_idx], body_width)
    padding = " " * max(0, body_width - display_width(body))
    return f"{gutter}{body}\033[0m{padding}"


def build_status_line(host: TerminalHost, columns: int, interpreter: str | None) -> str:
    state = f"[{interpreter}]" if interpreter else "[closed]"
    left = f" {host.path.name} {host.filetype_name or '-'} {state}"
    view = host.source_viewport
    right = f"{view.cursor_line + 1}:{view.cursor_column + 1} "
    if host.status_message:
        left = f"{left}  {host.status_message}"
    room = max(0, columns - display_width(right))
    return pad_ansi_line(left, room) + right


def build_frame(host: TerminalHost, columns: int, rows: int, interpreter: str | None = None) -> str:
    """Compose a full-screen frame: ``rows`` content rows plus the status row."""
    layout = compute_layout(host, columns)
    highlighted = host.highlighted_lines()
    companion = host.visible_companion()
    out: list[str] = ["\033[H\033[J"]
    for row in range(rows):
        source_idx = host.source_viewport.scroll_top + row
        cells: list[tuple[int, str]] = [(layout.source_x, _source_row(host, highlighted, source_idx, layout.source_width))]
        if companion is not None and layout.companion_x is not None:
            companion_idx = companion.viewport.scroll_top + row
            text = companion.lines[companion_idx] if companion_idx < len(companion.lines) else ""
            cells.append((layout.companion_x, pad_ansi_line(text, layout.companion_width) + "\033[0m"))
        cells.sort(key=lambda cell: cell[0])
        out.append(f"\033[90m{SEPARATOR}\033[0m".join(cell for _x, cell in cells))
        out.append("\r\n")
    out.append("\033[7m")
    out.append(build_status_line(host, columns, interpreter))
    out.append("\033[0m")
    return "".join(out)

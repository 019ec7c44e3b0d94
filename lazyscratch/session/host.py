"""Adapter contract between the scratchpad engine and a host UI.

The engine never registers callbacks. A host owns views, draws them, and
delivers events to ``ScratchEngine.dispatch``; the engine drives the host
only through the methods below.
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import Protocol

from ..viewport import ViewportSnapshot


class Host(Protocol):
    def source_text(self, view: Hashable) -> str:
        """Full buffer of ``view``, lines joined by ``\\n`` without a trailing terminator."""
        ...

    def filetype(self, view: Hashable) -> str: ...

    def set_filetype(self, view: Hashable, filetype: str) -> None: ...

    def open_companion(self, source: Hashable, width: int, right: bool) -> Hashable:
        """Create a companion view beside ``source`` and return its id."""
        ...

    def close_companion(self, companion: Hashable) -> None: ...

    def set_companion_visible(self, companion: Hashable, visible: bool) -> None: ...

    def companion_width(self, companion: Hashable) -> int: ...

    def set_companion_lines(self, companion: Hashable, lines: list[str]) -> None: ...

    def companion_lines(self, companion: Hashable) -> list[str]: ...

    def get_viewport(self, view: Hashable) -> ViewportSnapshot: ...

    def set_viewport(self, view: Hashable, snapshot: ViewportSnapshot) -> None: ...

    def get_option(self, view: Hashable, name: str) -> object: ...

    def set_option(self, view: Hashable, name: str, value: object) -> None: ...

    def report(self, message: str) -> None:
        """Show a user-visible message."""
        ...

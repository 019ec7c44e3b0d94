"""Host events delivered to ``ScratchEngine.dispatch``."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass
from enum import Enum


class EventKind(Enum):
    IDLE = "idle"
    FOCUS_GAINED = "focus-gained"
    FOCUS_LOST = "focus-lost"
    VIEW_CLOSING = "view-closing"


@dataclass(frozen=True)
class Event:
    kind: EventKind
    view: Hashable

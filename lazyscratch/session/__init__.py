"""Companion-view sessions: engine, host contract, and events."""

from __future__ import annotations

from .engine import SOURCE_VIEW_OPTIONS, ScratchEngine, Session, UpdateContext
from .events import Event, EventKind
from .host import Host
from .memory import MemoryHost, MemoryView

__all__ = [
    "SOURCE_VIEW_OPTIONS",
    "Event",
    "EventKind",
    "Host",
    "MemoryHost",
    "MemoryView",
    "ScratchEngine",
    "Session",
    "UpdateContext",
]

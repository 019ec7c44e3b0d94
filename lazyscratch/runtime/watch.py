"""Change polling and idle detection for the watched source file."""

from __future__ import annotations

from pathlib import Path


def file_signature(path: Path) -> tuple[str, int, int]:
    """Return a stable stat tuple describing ``path`` existence and content metadata."""
    try:
        st = path.stat()
    except FileNotFoundError:
        return ("missing", 0, 0)
    except OSError:
        return ("error", 0, 0)
    return ("ok", st.st_mtime_ns, st.st_size)


class IdleTracker:
    """Fires once after the source has been quiescent for ``idle_seconds``.

    Every observed change restarts the countdown.
    """

    def __init__(self, idle_seconds: float) -> None:
        self.idle_seconds = max(0.0, idle_seconds)
        self._pending_since: float | None = None

    @property
    def pending(self) -> bool:
        return self._pending_since is not None

    def note_change(self, now: float) -> None:
        self._pending_since = now

    def due(self, now: float) -> bool:
        """Return ``True`` exactly once per quiescent period."""
        if self._pending_since is None:
            return False
        if now - self._pending_since < self.idle_seconds:
            return False
        self._pending_since = None
        return True

"""Session lifecycle for scratchpad companion views.

``ScratchEngine`` owns the interpreter registry, the per-source sessions and
the busy flag. Hosts call its methods directly for commands and route
idle/focus/close notifications through ``dispatch``.
"""

from __future__ import annotations

import logging
import platform
import shutil
from collections.abc import Callable, Hashable
from dataclasses import dataclass, field

from .. import capabilities, viewport
from ..config import Settings
from ..errors import InterpreterDepsMissing, MissingBaseDependency, ScratchError
from ..interpreters import InterpreterDescriptor, InterpreterRegistry
from ..pipeline import ReconcileMode, Runner, count_lines, run_pipeline, run_under_tty
from ..viewport import ScrollBinding, ViewportSnapshot
from .events import Event, EventKind
from .host import Host

logger = logging.getLogger(__name__)

# Options forced on the source view while a companion is attached.
SOURCE_VIEW_OPTIONS: tuple[tuple[str, object], ...] = (
    ("wrap", False),
    ("scrollbind", True),
    ("cursorbind", True),
)


@dataclass
class Session:
    source_id: Hashable
    companion_id: Hashable
    interpreter: InterpreterDescriptor
    binding: ScrollBinding
    teardown: list[tuple[str, object]] = field(default_factory=list)
    hidden: bool = False
    last_output: str = ""


@dataclass(frozen=True)
class UpdateContext:
    source_text: str
    line_count: int
    snapshot: ViewportSnapshot
    width: int


class ScratchEngine:
    """Per-process scratchpad state: registry, sessions, and the busy flag."""

    def __init__(
        self,
        host: Host,
        settings: Settings | None = None,
        registry: InterpreterRegistry | None = None,
        reconcile_mode: ReconcileMode | None = None,
        runner: Runner = run_under_tty,
        which: Callable[[str], str | None] = shutil.which,
    ) -> None:
        self.host = host
        self.settings = settings or Settings()
        self.registry = registry or InterpreterRegistry.with_builtins(
            self.settings.interpreters,
            self.settings.aliases,
        )
        self.reconcile_mode = reconcile_mode or ReconcileMode.for_platform(platform.system())
        self.runner = runner
        self._which = which
        self.sessions: dict[Hashable, Session] = {}
        self.busy = False
        self.missing_base = frozenset(capabilities.missing(capabilities.BASE_DEPENDENCIES, which))
        if self.missing_base:
            logger.error(f"Scratchpad disabled, missing base executables: {sorted(self.missing_base)}")

    @property
    def available(self) -> bool:
        return not self.missing_base

    def _report(self, error: ScratchError) -> None:
        logger.warning(f"{type(error).__name__}: {error}")
        self.host.report(str(error))

    def _ensure_available(self) -> bool:
        if self.missing_base:
            self._report(MissingBaseDependency(self.missing_base))
            return False
        return True

    def session(self, source: Hashable) -> Session | None:
        return self.sessions.get(source)

    def is_open(self, source: Hashable) -> bool:
        return source in self.sessions

    def _session_for_view(self, view: Hashable) -> Session | None:
        session = self.sessions.get(view)
        if session is not None:
            return session
        for candidate in self.sessions.values():
            if candidate.companion_id == view:
                return candidate
        return None

    def _resolve(self, filetype: str) -> InterpreterDescriptor:
        descriptor = self.registry.resolve(filetype)
        absent = capabilities.missing(descriptor.required_executables(), self._which)
        if absent:
            raise InterpreterDepsMissing(descriptor.name, absent)
        return descriptor

    def spawn(self, source: Hashable, filetype: str | None = None) -> bool:
        """Open a companion for ``source`` and run the first update.

        Spawning an already open source replaces its session. On any
        resolution or validation error nothing is created.
        """
        if not self._ensure_available():
            return False
        requested = filetype if filetype is not None else self.host.filetype(source)
        try:
            descriptor = self._resolve(requested)
        except ScratchError as exc:
            self._report(exc)
            return False

        self.kill(source)
        companion = self.host.open_companion(source, self.settings.width, self.settings.rightsplit)
        teardown: list[tuple[str, object]] = []
        for name, value in SOURCE_VIEW_OPTIONS:
            teardown.append((name, self.host.get_option(source, name)))
            self.host.set_option(source, name, value)
        self.sessions[source] = Session(
            source_id=source,
            companion_id=companion,
            interpreter=descriptor,
            binding=ScrollBinding(self.host, source, companion),
            teardown=teardown,
        )
        logger.info(f"Spawned {descriptor.name} companion {companion!r} for {source!r}")
        self.update(source)
        return True

    def kill(self, source: Hashable) -> bool:
        """Destroy the companion and restore source options; no-op when closed."""
        session = self.sessions.pop(source, None)
        if session is None:
            return False
        session.binding.release()
        self.host.close_companion(session.companion_id)
        for name, value in reversed(session.teardown):
            self.host.set_option(source, name, value)
        logger.info(f"Killed companion {session.companion_id!r} for {source!r}")
        return True

    def toggle(self, source: Hashable, filetype: str | None = None) -> bool:
        """Kill when open, spawn otherwise. Returns whether a session is open afterwards."""
        if self.is_open(source):
            self.kill(source)
            return False
        return self.spawn(source, filetype)

    def hide(self, source: Hashable) -> None:
        """Detach the companion display, keeping the session (autoclose only)."""
        if not self.settings.autoclose or self.busy:
            return
        session = self.sessions.get(source)
        if session is None or session.hidden:
            return
        self.host.set_companion_visible(session.companion_id, False)
        session.hidden = True
        logger.debug(f"Hid companion for {source!r}")

    def show(self, source: Hashable) -> None:
        """Re-attach a hidden companion display and refresh it (autoclose only)."""
        if not self.settings.autoclose or self.busy:
            return
        session = self.sessions.get(source)
        if session is None or not session.hidden:
            return
        self.host.set_companion_visible(session.companion_id, True)
        session.hidden = False
        logger.debug(f"Showed companion for {source!r}")
        self.update(source)

    def autoclose(self, source: Hashable) -> None:
        if self.settings.autoclose:
            self.kill(source)

    def update(self, source: Hashable) -> bool:
        """Re-evaluate the source buffer and render the result.

        Holds the busy flag for the whole run. A spawn failure is reported and
        leaves the previous companion content in place.
        """
        session = self.sessions.get(source)
        if session is None or session.hidden or self.busy:
            return False
        self.busy = True
        try:
            text = self.host.source_text(source)
            context = UpdateContext(
                source_text=text,
                line_count=count_lines(text),
                snapshot=viewport.before_update(self.host, source),
                width=self.host.companion_width(session.companion_id),
            )
            try:
                output = run_pipeline(
                    context.source_text,
                    session.interpreter,
                    self.reconcile_mode,
                    raw=self.settings.raw,
                    runner=self.runner,
                )
            except ScratchError as exc:
                self._report(exc)
                return False
            session.last_output = output
            viewport.render(self.host, session.companion_id, output, context.width, self.settings.rightalign)
            viewport.after_update(self.host, source, context.snapshot)
            session.binding.mirror(source)
            logger.debug(f"Updated {source!r}: {context.line_count} source lines")
        finally:
            self.busy = False
        return True

    def expand(self, source: Hashable) -> str | None:
        """Return the full result line at the source cursor, unclipped."""
        session = self.sessions.get(source)
        if session is None:
            return None
        cursor_line = self.host.get_viewport(source).cursor_line
        lines = session.last_output.split("\n")
        return lines[cursor_line] if 0 <= cursor_line < len(lines) else ""

    def sync_viewport(self, view: Hashable) -> bool:
        """Mirror a scroll/cursor move of ``view`` onto its partner view."""
        session = self._session_for_view(view)
        if session is None or session.hidden or self.busy:
            return False
        return session.binding.mirror(view)

    def dispatch(self, event: Event) -> None:
        if event.kind is EventKind.IDLE:
            self.update(event.view)
        elif event.kind is EventKind.FOCUS_GAINED:
            self.show(event.view)
        elif event.kind is EventKind.FOCUS_LOST:
            self.hide(event.view)
        elif event.kind is EventKind.VIEW_CLOSING:
            self.autoclose(event.view)

    def run_command(self, source: Hashable, bang: bool = False, arg: str | None = None) -> bool:
        """Entry point for the single scratchpad command.

        ``!FT`` with bang toggles for ``FT``; any other argument sets the
        view's filetype first. Bang alone kills, otherwise spawn.
        """
        if not self._ensure_available():
            return False
        if arg:
            if bang and arg.startswith("!"):
                return self.toggle(source, arg[1:].strip() or None)
            self.host.set_filetype(source, arg.strip())
        if bang:
            self.kill(source)
            return False
        return self.spawn(source)

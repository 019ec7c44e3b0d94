"""Lifecycle tests for ``ScratchEngine`` against the in-memory host.

The injected runner behaves like a REPL that echoes each statement after a
``> `` prompt and answers with the statement upper-cased.
"""

from __future__ import annotations

import unittest

from lazyscratch.config import Settings
from lazyscratch.errors import SpawnFailure
from lazyscratch.interpreters import InterpreterRegistry
from lazyscratch.pipeline import ReconcileMode
from lazyscratch.session import Event, EventKind, MemoryHost, ScratchEngine
from lazyscratch.viewport import ViewportSnapshot

SOURCE = "src"


def _shouting_repl(argv, text, mode, env) -> str:
    chunks = [f"> {line}\r\n{line.upper()}\r\n" for line in text.split("\n")]
    return "".join(chunks) + "> \x04"


def _found(name: str) -> str | None:
    return f"/usr/bin/{name}"


def _registry() -> InterpreterRegistry:
    return InterpreterRegistry(
        {
            "shout": {"bin": ["shout-repl"], "prompt": r"^> "},
            "needs": {"bin": ["needs-repl"], "prompt": r"^> ", "deps": ["helper-a", "helper-b"]},
            "broken": {"env": "A=1"},
        },
        {"yell": "shout"},
    )


def _engine(
    host: MemoryHost,
    settings: Settings | None = None,
    runner=_shouting_repl,
    which=_found,
) -> ScratchEngine:
    return ScratchEngine(
        host,
        settings or Settings(width=10),
        _registry(),
        ReconcileMode.PROMPT_SPLIT,
        runner=runner,
        which=which,
    )


def _host(text: str = "hello\nworld", filetype: str = "shout") -> MemoryHost:
    host = MemoryHost()
    host.add_source(SOURCE, text, filetype)
    return host


class SpawnAndKillTests(unittest.TestCase):
    def test_spawn_creates_companion_and_renders_results(self) -> None:
        host = _host()
        engine = _engine(host)

        self.assertTrue(engine.spawn(SOURCE))

        session = engine.session(SOURCE)
        assert session is not None
        self.assertEqual(host.companion_lines(session.companion_id), ["HELLO", "WORLD"])
        self.assertEqual(session.interpreter.name, "shout")
        self.assertEqual(host.messages, [])

    def test_spawn_sets_source_options_and_kill_restores_them(self) -> None:
        host = _host()
        host.set_option(SOURCE, "wrap", True)
        engine = _engine(host)

        engine.spawn(SOURCE)
        self.assertEqual(host.get_option(SOURCE, "wrap"), False)
        self.assertEqual(host.get_option(SOURCE, "scrollbind"), True)
        companion = engine.session(SOURCE).companion_id

        self.assertTrue(engine.kill(SOURCE))
        self.assertFalse(engine.is_open(SOURCE))
        self.assertNotIn(companion, host.views)
        self.assertEqual(host.get_option(SOURCE, "wrap"), True)
        self.assertIsNone(host.get_option(SOURCE, "scrollbind"))

    def test_kill_on_closed_view_is_a_noop(self) -> None:
        host = _host()
        engine = _engine(host)
        self.assertFalse(engine.kill(SOURCE))
        self.assertEqual(host.messages, [])
        self.assertEqual(engine.sessions, {})

    def test_second_spawn_replaces_session_instead_of_adding_one(self) -> None:
        host = _host()
        engine = _engine(host)
        engine.spawn(SOURCE)
        engine.spawn(SOURCE, "yell")

        companions = [view for view in host.views.values() if view.companion_of == SOURCE]
        self.assertEqual(len(companions), 1)
        self.assertEqual(len(engine.sessions), 1)

    def test_interpreter_is_bound_for_session_lifetime(self) -> None:
        host = _host()
        engine = _engine(host)
        engine.spawn(SOURCE)
        host.set_filetype(SOURCE, "needs")
        engine.update(SOURCE)
        self.assertEqual(engine.session(SOURCE).interpreter.name, "shout")

    def test_unknown_and_empty_filetypes_are_reported_without_session(self) -> None:
        host = _host(filetype="")
        engine = _engine(host)

        self.assertFalse(engine.spawn(SOURCE))
        self.assertFalse(engine.spawn(SOURCE, "cobol"))

        self.assertEqual(len(host.messages), 2)
        self.assertIn("without a filetype", host.messages[0])
        self.assertIn("cobol", host.messages[1])
        self.assertEqual(list(host.views), [SOURCE])

    def test_missing_descriptor_keys_are_reported_together(self) -> None:
        host = _host(filetype="broken")
        engine = _engine(host)
        self.assertFalse(engine.spawn(SOURCE))
        self.assertIn("bin, prompt", host.messages[0])
        self.assertFalse(engine.is_open(SOURCE))

    def test_missing_interpreter_executables_are_reported_together(self) -> None:
        host = _host(filetype="needs")
        engine = _engine(host, which=lambda name: None if name != "script" else "/usr/bin/script")
        self.assertFalse(engine.spawn(SOURCE))
        self.assertIn("helper-a, helper-b, needs-repl", host.messages[0])
        self.assertFalse(engine.is_open(SOURCE))

    def test_missing_base_toolset_disables_every_command(self) -> None:
        host = _host()
        engine = _engine(host, which=lambda _name: None)

        self.assertFalse(engine.available)
        self.assertFalse(engine.spawn(SOURCE))
        self.assertFalse(engine.run_command(SOURCE, bang=True, arg="!shout"))
        self.assertEqual(len(host.messages), 2)
        self.assertTrue(all("script" in message for message in host.messages))
        self.assertEqual(engine.sessions, {})


class ToggleTests(unittest.TestCase):
    def test_toggle_is_involutive(self) -> None:
        host = _host()
        engine = _engine(host)

        self.assertTrue(engine.toggle(SOURCE))
        self.assertTrue(engine.is_open(SOURCE))
        self.assertFalse(engine.toggle(SOURCE))
        self.assertFalse(engine.is_open(SOURCE))

    def test_spawn_then_toggle_closes(self) -> None:
        host = _host()
        engine = _engine(host)
        engine.spawn(SOURCE)
        engine.toggle(SOURCE)
        self.assertFalse(engine.is_open(SOURCE))


class UpdateTests(unittest.TestCase):
    def test_update_preserves_source_viewport_and_mirrors_companion(self) -> None:
        text = "\n".join(f"l{i}" for i in range(10))
        host = _host(text)
        engine = _engine(host)
        host.set_viewport(SOURCE, ViewportSnapshot(scroll_top=3, cursor_line=5, cursor_column=1))

        engine.spawn(SOURCE)

        session = engine.session(SOURCE)
        self.assertEqual(host.get_viewport(SOURCE), ViewportSnapshot(3, 5, 1))
        self.assertEqual(host.get_viewport(session.companion_id).scroll_top, 3)
        self.assertEqual(host.get_viewport(session.companion_id).cursor_line, 5)

    def test_spawn_failure_leaves_previous_content(self) -> None:
        host = _host()
        calls = {"count": 0}

        def flaky(argv, text, mode, env) -> str:
            calls["count"] += 1
            if calls["count"] > 1:
                raise SpawnFailure("shout-repl", "gone")
            return _shouting_repl(argv, text, mode, env)

        engine = _engine(host, runner=flaky)
        engine.spawn(SOURCE)
        host.set_source_text(SOURCE, "changed")

        self.assertFalse(engine.update(SOURCE))

        session = engine.session(SOURCE)
        self.assertEqual(host.companion_lines(session.companion_id), ["HELLO", "WORLD"])
        self.assertIn("gone", host.messages[-1])
        self.assertFalse(engine.busy)

    def test_right_align_and_width_apply_to_rendered_rows(self) -> None:
        host = _host("hi\nlonger-than-width")
        engine = _engine(host, settings=Settings(width=6, rightalign=True))
        engine.spawn(SOURCE)
        session = engine.session(SOURCE)
        self.assertEqual(host.companion_lines(session.companion_id), ["    HI", "LONGER"])

    def test_raw_setting_shows_reconciled_transcript(self) -> None:
        host = _host("a")
        engine = _engine(host, settings=Settings(raw=True))
        engine.spawn(SOURCE)
        session = engine.session(SOURCE)
        self.assertEqual(host.companion_lines(session.companion_id), ["> ", "a", "A", "> ", ""])

    def test_expand_returns_full_result_at_cursor(self) -> None:
        host = _host("short\nthis line is long")
        engine = _engine(host, settings=Settings(width=4))
        engine.spawn(SOURCE)
        host.set_viewport(SOURCE, ViewportSnapshot(cursor_line=1))

        self.assertEqual(engine.expand(SOURCE), "THIS LINE IS LONG")
        self.assertIsNone(engine.expand("other"))

    def test_update_on_closed_view_does_nothing(self) -> None:
        host = _host()
        engine = _engine(host)
        self.assertFalse(engine.update(SOURCE))


class _FocusStealingHost(MemoryHost):
    """Replacing companion content synchronously fires a focus-loss event."""

    engine: ScratchEngine | None = None

    def set_companion_lines(self, companion, lines) -> None:
        super().set_companion_lines(companion, lines)
        assert self.engine is not None
        self.engine.dispatch(Event(EventKind.FOCUS_LOST, SOURCE))


class HideShowTests(unittest.TestCase):
    def test_hide_triggered_during_update_is_ignored(self) -> None:
        host = _FocusStealingHost()
        host.add_source(SOURCE, "one", "shout")
        engine = _engine(host)
        host.engine = engine

        engine.spawn(SOURCE)

        session = engine.session(SOURCE)
        self.assertTrue(engine.is_open(SOURCE))
        self.assertFalse(session.hidden)
        self.assertTrue(host.views[session.companion_id].visible)
        self.assertEqual(host.companion_lines(session.companion_id), ["ONE"])
        self.assertFalse(engine.busy)

    def test_hide_and_show_keep_session_when_autoclose_enabled(self) -> None:
        host = _host()
        engine = _engine(host, settings=Settings(autoclose=True))
        engine.spawn(SOURCE)
        session = engine.session(SOURCE)

        engine.dispatch(Event(EventKind.FOCUS_LOST, SOURCE))
        self.assertTrue(session.hidden)
        self.assertFalse(host.views[session.companion_id].visible)
        self.assertFalse(engine.update(SOURCE))

        host.set_source_text(SOURCE, "again")
        engine.dispatch(Event(EventKind.FOCUS_GAINED, SOURCE))
        self.assertFalse(session.hidden)
        self.assertTrue(host.views[session.companion_id].visible)
        self.assertEqual(host.companion_lines(session.companion_id), ["AGAIN"])

    def test_hide_and_show_are_noops_without_autoclose(self) -> None:
        host = _host()
        engine = _engine(host, settings=Settings(autoclose=False))
        engine.spawn(SOURCE)
        engine.hide(SOURCE)
        self.assertFalse(engine.session(SOURCE).hidden)

    def test_view_closing_kills_only_with_autoclose(self) -> None:
        host = _host()
        engine = _engine(host, settings=Settings(autoclose=False))
        engine.spawn(SOURCE)
        engine.dispatch(Event(EventKind.VIEW_CLOSING, SOURCE))
        self.assertTrue(engine.is_open(SOURCE))

        engine.settings = Settings(autoclose=True)
        engine.dispatch(Event(EventKind.VIEW_CLOSING, SOURCE))
        self.assertFalse(engine.is_open(SOURCE))

    def test_idle_event_refreshes_content(self) -> None:
        host = _host()
        engine = _engine(host)
        engine.spawn(SOURCE)
        host.set_source_text(SOURCE, "fresh")
        engine.dispatch(Event(EventKind.IDLE, SOURCE))
        self.assertEqual(host.companion_lines(engine.session(SOURCE).companion_id), ["FRESH"])


class ViewportSyncTests(unittest.TestCase):
    def test_moves_mirror_both_ways_until_kill(self) -> None:
        host = _host("\n".join("x" * 20))
        engine = _engine(host)
        engine.spawn(SOURCE)
        companion = engine.session(SOURCE).companion_id

        host.set_viewport(SOURCE, ViewportSnapshot(scroll_top=4, cursor_line=6))
        self.assertTrue(engine.sync_viewport(SOURCE))
        self.assertEqual(host.get_viewport(companion).cursor_line, 6)

        host.set_viewport(companion, ViewportSnapshot(scroll_top=1, cursor_line=2))
        self.assertTrue(engine.sync_viewport(companion))
        self.assertEqual(host.get_viewport(SOURCE).scroll_top, 1)
        self.assertEqual(host.get_viewport(SOURCE).cursor_line, 2)

        engine.kill(SOURCE)
        self.assertFalse(engine.sync_viewport(SOURCE))


class RunCommandTests(unittest.TestCase):
    def test_no_argument_spawns_with_view_filetype(self) -> None:
        host = _host()
        engine = _engine(host)
        self.assertTrue(engine.run_command(SOURCE))
        self.assertTrue(engine.is_open(SOURCE))

    def test_argument_sets_filetype_then_spawns(self) -> None:
        host = _host(filetype="")
        engine = _engine(host)
        self.assertTrue(engine.run_command(SOURCE, arg="yell"))
        self.assertEqual(host.filetype(SOURCE), "yell")
        self.assertTrue(engine.is_open(SOURCE))

    def test_bang_with_bang_argument_toggles(self) -> None:
        host = _host(filetype="")
        engine = _engine(host)
        self.assertTrue(engine.run_command(SOURCE, bang=True, arg="! shout "))
        self.assertTrue(engine.is_open(SOURCE))
        self.assertEqual(host.filetype(SOURCE), "")
        self.assertFalse(engine.run_command(SOURCE, bang=True, arg="!shout"))
        self.assertFalse(engine.is_open(SOURCE))

    def test_bang_alone_kills(self) -> None:
        host = _host()
        engine = _engine(host)
        engine.spawn(SOURCE)
        self.assertFalse(engine.run_command(SOURCE, bang=True))
        self.assertFalse(engine.is_open(SOURCE))

    def test_bang_with_plain_argument_sets_filetype_and_kills(self) -> None:
        host = _host()
        engine = _engine(host)
        engine.spawn(SOURCE)
        engine.run_command(SOURCE, bang=True, arg="yell")
        self.assertEqual(host.filetype(SOURCE), "yell")
        self.assertFalse(engine.is_open(SOURCE))


if __name__ == "__main__":
    unittest.main()

"""Runs the built-in Python interpreter under a real script(1) pty.

Guards the end-to-end contract the mocked tests cannot: the interpreter sees
end-of-file after the last statement, exits, and one result per statement
comes back.
"""

from __future__ import annotations

import platform
import shutil
import threading
import time
import unittest

from lazyscratch.interpreters import InterpreterRegistry
from lazyscratch.pipeline import ReconcileMode, run_pipeline

WALL_TIME_LIMIT_SECONDS = 30.0


@unittest.skipUnless(shutil.which("script") and shutil.which("python3"), "needs script and python3 on PATH")
class PythonReplPipelineTests(unittest.TestCase):
    def _run(self, source: str) -> str:
        descriptor = InterpreterRegistry.with_builtins().resolve("python")
        mode = ReconcileMode.for_platform(platform.system())
        outcome: dict[str, object] = {}

        def target() -> None:
            try:
                outcome["output"] = run_pipeline(source, descriptor, mode)
            except Exception as exc:  # reported on the test thread
                outcome["error"] = exc

        worker = threading.Thread(target=target, daemon=True)
        started = time.monotonic()
        worker.start()
        worker.join(WALL_TIME_LIMIT_SECONDS)

        self.assertFalse(worker.is_alive(), "interpreter did not exit after the fed input")
        self.assertLess(time.monotonic() - started, WALL_TIME_LIMIT_SECONDS)
        if "error" in outcome:
            raise outcome["error"]  # type: ignore[misc]
        return str(outcome["output"])

    def test_source_without_final_newline_evaluates_every_statement(self) -> None:
        results = self._run("1+1\nx = 3\nx * 2").split("\n")

        self.assertEqual(len(results), 3)
        self.assertEqual(results[0], "2")
        self.assertEqual(results[-1], "6")

    def test_caret_d_text_in_results_survives(self) -> None:
        results = self._run('print("^Done")').split("\n")
        self.assertEqual(results, ["^Done"])


if __name__ == "__main__":
    unittest.main()

from __future__ import annotations

import unittest
from unittest import mock

from lazyscratch import capabilities


class MissingExecutablesTests(unittest.TestCase):
    def test_reports_every_missing_name_in_one_call(self) -> None:
        installed = {"script", "python3"}
        calls: list[str] = []

        def which(name: str) -> str | None:
            calls.append(name)
            return f"/usr/bin/{name}" if name in installed else None

        missing = capabilities.missing(["script", "ghci", "python3", "pulp", "purs"], which)

        self.assertEqual(missing, {"ghci", "pulp", "purs"})
        self.assertEqual(sorted(calls), ["ghci", "pulp", "purs", "python3", "script"])

    def test_nothing_missing_returns_empty_set(self) -> None:
        self.assertEqual(capabilities.missing(["a"], lambda _name: "/bin/a"), set())

    def test_base_toolset_is_script(self) -> None:
        with mock.patch("lazyscratch.capabilities.shutil.which", return_value=None):
            self.assertEqual(capabilities.missing(capabilities.BASE_DEPENDENCIES, capabilities.shutil.which), {"script"})


if __name__ == "__main__":
    unittest.main()

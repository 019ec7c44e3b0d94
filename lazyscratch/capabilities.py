"""Executable presence checks.

Used once against the base toolset when an engine is built and again per
interpreter at spawn time. Checks never stop at the first missing name.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable, Iterable

# The simulated terminal is provided by script(1).
BASE_DEPENDENCIES: tuple[str, ...] = ("script",)


def missing(names: Iterable[str], which: Callable[[str], str | None] = shutil.which) -> set[str]:
    """Return every name in ``names`` that does not resolve to an executable."""
    return {name for name in names if name and which(name) is None}

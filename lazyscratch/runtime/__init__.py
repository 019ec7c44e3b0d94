"""Terminal host for the scratchpad: bootstrap, event loop, and rendering.

Entry points are imported lazily so ``import lazyscratch.runtime`` does not
touch termios until the TUI is actually started.
"""

from __future__ import annotations


def run_scratchpad(*args, **kwargs):
    """Lazily import the bootstrap to avoid heavy runtime setup on import."""
    from .app import run_scratchpad as _run_scratchpad

    return _run_scratchpad(*args, **kwargs)


__all__ = ["run_scratchpad"]

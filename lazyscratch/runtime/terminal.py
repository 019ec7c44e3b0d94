"""Terminal control helpers for the TUI session.

Owns raw-mode lifecycle, alternate-screen switching, mouse wheel reporting,
and focus-change reporting.

Only press reporting (``?1000``) is enabled, without drag tracking
(``?1002``): the panes react to wheel events and nothing else, so motion
reports would only add input noise.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty

_ENTER_SEQUENCE = b"\x1b[?1049h\x1b[?25l\x1b[?1000h\x1b[?1006h\x1b[?1004h"
_EXIT_SEQUENCE = b"\x1b[?1004l\x1b[?1000l\x1b[?1006l\x1b[?25h\x1b[?1049l"


class TerminalController:
    """Manage terminal mode transitions for the scratchpad TUI."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with mouse and focus reporting."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, _ENTER_SEQUENCE)

    def disable_tui_mode(self) -> None:
        """Restore normal terminal state."""
        os.write(self.stdout_fd, _EXIT_SEQUENCE)
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()

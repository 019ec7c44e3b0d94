"""Run an interpreter under script(1) so it behaves as if driven from a tty.

Many REPLs only print prompts and per-statement results when stdin is a
terminal. script(1) provides the pseudo-terminal; its argv differs between
BSD and util-linux implementations.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from collections.abc import Mapping, Sequence

from ..errors import SpawnFailure
from .stages import EOT, ReconcileMode

logger = logging.getLogger(__name__)


def build_script_command(argv: Sequence[str], mode: ReconcileMode) -> list[str]:
    """Wrap ``argv`` in the script(1) invocation for the host flavor."""
    if mode is ReconcileMode.ECHO_DROP:
        return ["script", "-q", "/dev/null", *argv]
    # util-linux: -q quiet, -f flush, -e propagate exit status, -c command.
    return ["script", "-qfec", shlex.join(argv), "/dev/null"]


def terminate_input(text: str) -> str:
    """Close the last line, then append one EOT.

    A tty only treats EOT as end-of-file at the start of a line; mid-line it
    just flushes the pending text and the interpreter never exits.
    """
    if not text.endswith("\n"):
        text += "\n"
    return text + EOT


def run_under_tty(
    argv: Sequence[str],
    text: str,
    mode: ReconcileMode,
    env: Mapping[str, str] | None = None,
) -> str:
    """Feed ``text`` as complete lines plus one EOT and return the transcript.

    Blocks until the interpreter exits. Raises ``SpawnFailure`` when the
    process cannot be started or exits non-zero without printing anything.
    """
    command = build_script_command(argv, mode)
    process_env = dict(os.environ)
    if env:
        process_env.update(env)
    logger.debug(f"Spawning {command!r} with {len(text)} chars of input")
    try:
        proc = subprocess.run(
            command,
            input=terminate_input(text),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding="utf-8",
            errors="replace",
            env=process_env,
            check=False,
        )
    except OSError as exc:
        raise SpawnFailure(shlex.join(argv), str(exc)) from exc

    output = proc.stdout or ""
    logger.debug(f"Interpreter exited with {proc.returncode}, captured {len(output)} chars")
    if proc.returncode != 0 and not output.strip():
        raise SpawnFailure(shlex.join(argv), f"exit status {proc.returncode} with no output")
    return output

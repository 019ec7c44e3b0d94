"""Pure text stages of the execution pipeline.

Each function takes and returns plain text so the stages compose in order:
rephrase, (execute), sanitize, reconcile, preprocess, extract.
"""

from __future__ import annotations

import re
from enum import Enum

EOT = "\x04"
# A pty with ECHOCTL echoes EOT as "^D" and then backs over it.
_NOISE_RE = re.compile(r"\^D\x08\x08|[\x04\x08\r]")


class ReconcileMode(Enum):
    """How script(1) on the host presents the fed input.

    ``ECHO_DROP``: BSD script echoes the whole input before any output, so the
    first N lines are dropped. ``PROMPT_SPLIT``: util-linux script interleaves
    prompts with output, so every prompt is moved onto its own line.
    """

    ECHO_DROP = "echo-drop"
    PROMPT_SPLIT = "prompt-split"

    @classmethod
    def for_platform(cls, system: str) -> ReconcileMode:
        """Pick the mode for a ``platform.system()`` value."""
        lowered = system.lower()
        if lowered == "darwin" or lowered.endswith("bsd") or lowered == "dragonfly":
            return cls.ECHO_DROP
        return cls.PROMPT_SPLIT


def count_lines(source: str) -> int:
    """Number of lines in a buffer whose lines are joined by ``\\n``."""
    return source.count("\n") + 1


def sanitize(raw_output: str) -> str:
    """Strip end-of-transmission markers (raw or echoed), backspaces and carriage returns.

    A literal ``^D`` in program output is kept; only the echoed form followed
    by its two backspaces is removed.
    """
    return _NOISE_RE.sub("", raw_output)


def drop_echoed_input(text: str, line_count: int) -> str:
    return "\n".join(text.split("\n")[line_count:])


def split_prompts(text: str, prompt: re.Pattern[str]) -> str:
    """Insert a newline right after every prompt occurrence.

    Each line is rescanned after a cut so back-to-back prompts such as
    ``>>> >>> 2`` end up on separate lines.
    """
    out: list[str] = []
    for line in text.split("\n"):
        rest = line
        while True:
            match = prompt.search(rest)
            if match is None or match.end() == 0:
                break
            out.append(rest[: match.end()])
            rest = rest[match.end() :]
        out.append(rest)
    return "\n".join(out)


def reconcile(text: str, mode: ReconcileMode, prompt: re.Pattern[str], line_count: int) -> str:
    if mode is ReconcileMode.ECHO_DROP:
        return drop_echoed_input(text, line_count)
    return split_prompts(text, prompt)


def extract_results(text: str, prompt: re.Pattern[str]) -> list[str]:
    """Scrape one result line per prompt interval.

    The first prompt only opens accumulation. Each later prompt emits the
    last non-indented line seen since the previous prompt, or an empty line
    when there was none.
    """
    results: list[str] = []
    accumulating = False
    candidate = ""
    for line in text.split("\n"):
        if prompt.search(line):
            if accumulating:
                results.append(candidate)
                candidate = ""
            else:
                accumulating = True
        elif accumulating and line and not line[0].isspace():
            candidate = line
    return results

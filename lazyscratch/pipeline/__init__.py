"""Execution and result-extraction pipeline.

``run_pipeline`` composes the stages in their fixed order. The subprocess
runner is injectable so the text stages can be exercised without spawning.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence

from ..interpreters import InterpreterDescriptor
from .execute import build_script_command, run_under_tty, terminate_input
from .stages import (
    EOT,
    ReconcileMode,
    count_lines,
    drop_echoed_input,
    extract_results,
    reconcile,
    sanitize,
    split_prompts,
)

logger = logging.getLogger(__name__)

Runner = Callable[[Sequence[str], str, ReconcileMode, Mapping[str, str]], str]


def run_pipeline(
    source: str,
    descriptor: InterpreterDescriptor,
    mode: ReconcileMode,
    raw: bool = False,
    runner: Runner = run_under_tty,
) -> str:
    """Evaluate ``source`` with ``descriptor`` and return the text to render.

    With ``raw`` the reconciled, preprocessed transcript is returned as-is;
    otherwise one extracted result line per executed statement.
    """
    fed = descriptor.rephrase(source)
    raw_output = runner(descriptor.bin, fed, mode, descriptor.environment())
    clean = sanitize(raw_output)
    reconciled = reconcile(clean, mode, descriptor.prompt, count_lines(source))
    processed = descriptor.preprocess(reconciled)
    if raw:
        return processed
    results = extract_results(processed, descriptor.prompt)
    logger.debug(f"Extracted {len(results)} result lines for {descriptor.name}")
    return "\n".join(results)


__all__ = [
    "EOT",
    "ReconcileMode",
    "Runner",
    "build_script_command",
    "count_lines",
    "drop_echoed_input",
    "extract_results",
    "reconcile",
    "run_pipeline",
    "run_under_tty",
    "sanitize",
    "split_prompts",
    "terminate_input",
]

"""Command-line front door for lazyscratch.

Parses CLI options, merges them over the JSON config, configures logging,
and dispatches into the scratchpad runtime.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import load_settings
from .interpreters import InterpreterRegistry
from .runtime import run_scratchpad

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def configure_logging(log_file: Path | None, debug: bool) -> None:
    """Send package logs to ``log_file``, or to stderr when only ``debug`` is set.

    Without either, logging stays silent so the TUI owns the terminal.
    """
    if log_file is None and not debug:
        return
    handler: logging.Handler
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger = logging.getLogger("lazyscratch")
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if debug else logging.INFO)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Show interpreter results for every line of a source file, live."
    )
    parser.add_argument("path", nargs="?", default=None, help="Source file to evaluate.")
    parser.add_argument("--filetype", "-f", default=None, help="Interpreter filetype (default: detected from PATH).")
    parser.add_argument("--width", type=_positive_int, default=None, help="Companion pane width in columns.")
    parser.add_argument("--raw", action="store_true", default=None, help="Show the full interpreter transcript.")
    parser.add_argument("--right-align", dest="rightalign", action="store_true", default=None, help="Right-align results.")
    parser.add_argument(
        "--left-split",
        dest="rightsplit",
        action="store_false",
        default=None,
        help="Open the companion pane left of the source.",
    )
    parser.add_argument(
        "--autoclose",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Hide the companion when the terminal loses focus.",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable source highlighting.")
    parser.add_argument("--nopager", action="store_true", help="Print results once without the interactive view.")
    parser.add_argument("--list", action="store_true", help="List known interpreters and aliases, then exit.")
    parser.add_argument("--log-file", type=Path, default=None, help="Write debug logs to this file.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    return parser


def list_interpreters(registry: InterpreterRegistry) -> str:
    aliases_by_target: dict[str, list[str]] = {}
    for alias, target in registry.aliases.items():
        aliases_by_target.setdefault(target, []).append(alias)
    rows = []
    for name in registry.names():
        aliases = sorted(aliases_by_target.get(name, []))
        rows.append(f"{name} ({', '.join(aliases)})" if aliases else name)
    return "\n".join(rows) + "\n"


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch the scratchpad on a file."""
    args = build_parser().parse_args(argv)
    settings = load_settings().with_overrides(
        width=args.width,
        raw=args.raw,
        rightalign=args.rightalign,
        rightsplit=args.rightsplit,
        autoclose=args.autoclose,
        log_file=args.log_file,
    )
    configure_logging(settings.log_file, args.debug)

    if args.list:
        registry = InterpreterRegistry.with_builtins(settings.interpreters, settings.aliases)
        sys.stdout.write(list_interpreters(registry))
        return

    if args.path is None:
        raise SystemExit("A source file path is required.")
    path = Path(args.path)
    if path.is_dir():
        raise SystemExit(f"Not a file: {path}")

    status = run_scratchpad(path, settings, args.filetype, no_color=args.no_color, nopager=args.nopager)
    if status:
        raise SystemExit(status)


if __name__ == "__main__":
    main()

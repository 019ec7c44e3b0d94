"""JSON configuration for lazyscratch.

Missing or malformed config falls back to defaults value by value; a bad
entry never prevents startup.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "lazyscratch"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_WIDTH = 40
DEFAULT_IDLE_SECONDS = 0.5


@dataclass(frozen=True)
class Settings:
    """Process-wide scratchpad options."""

    width: int = DEFAULT_WIDTH
    autoclose: bool = True
    raw: bool = False
    rightalign: bool = False
    rightsplit: bool = True
    idle_seconds: float = DEFAULT_IDLE_SECONDS
    interpreters: dict[str, dict[str, object]] = field(default_factory=dict)
    aliases: dict[str, str] = field(default_factory=dict)
    log_file: Path | None = None

    def with_overrides(self, **overrides: object) -> Settings:
        """Return a copy with every non-``None`` override applied."""
        applied = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **applied) if applied else self


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = path or CONFIG_PATH
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _bool(data: dict[str, object], key: str, default: bool) -> bool:
    value = data.get(key)
    return value if isinstance(value, bool) else default


def _positive_int(data: dict[str, object], key: str, default: int) -> int:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return default
    return value


def _positive_float(data: dict[str, object], key: str, default: float) -> float:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return default
    return float(value)


def _interpreters(data: dict[str, object]) -> dict[str, dict[str, object]]:
    """Keep only object-valued entries; descriptor validation happens on use."""
    value = data.get("interpreters")
    if not isinstance(value, dict):
        return {}
    return {
        str(name): dict(entry)
        for name, entry in value.items()
        if isinstance(entry, dict)
    }


def _aliases(data: dict[str, object]) -> dict[str, str]:
    value = data.get("aliases")
    if not isinstance(value, dict):
        return {}
    return {
        alias: target
        for alias, target in value.items()
        if isinstance(alias, str) and isinstance(target, str) and alias and target
    }


def settings_from_config(data: dict[str, object]) -> Settings:
    log_file = data.get("log_file")
    return Settings(
        width=_positive_int(data, "width", DEFAULT_WIDTH),
        autoclose=_bool(data, "autoclose", True),
        raw=_bool(data, "raw", False),
        rightalign=_bool(data, "rightalign", False),
        rightsplit=_bool(data, "rightsplit", True),
        idle_seconds=_positive_float(data, "idle_seconds", DEFAULT_IDLE_SECONDS),
        interpreters=_interpreters(data),
        aliases=_aliases(data),
        log_file=Path(log_file).expanduser() if isinstance(log_file, str) and log_file.strip() else None,
    )


def load_settings(path: Path | None = None) -> Settings:
    return settings_from_config(load_config(path))

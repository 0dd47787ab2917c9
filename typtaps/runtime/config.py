"""Persistent JSON config helpers and resolved runtime settings.

All access is defensive: malformed or missing config falls back to defaults,
and each key is validated on its own so one bad value never discards the rest.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path

from platformdirs import user_cache_dir, user_config_dir

from ..preview import DEFAULT_PDF_TARGET_WIDTH, PREVIEW_MODE_SVG, PREVIEW_MODES
from ..session import DEFAULT_AUTOSAVE_SECONDS

logger = logging.getLogger(__name__)

APP_NAME = "typtaps"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_CACHE_DIR = Path(user_cache_dir(APP_NAME, appauthor=False))
DEFAULT_POLL_INTERVAL_MS = 100


@dataclass(frozen=True)
class Settings:
    typst_command: str = "typst"
    preview_mode: str = PREVIEW_MODE_SVG
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    autosave_seconds: float = DEFAULT_AUTOSAVE_SECONDS
    show_hidden: bool = True
    pdf_target_width: int = DEFAULT_PDF_TARGET_WIDTH
    cache_dir: Path = DEFAULT_CACHE_DIR

    @property
    def poll_interval_seconds(self) -> float:
        return self.poll_interval_ms / 1000.0


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def _positive_int(value: object) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value > 0 else None


def _positive_number(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value) if value > 0 else None


def _non_empty_str(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _preview_mode(value: object) -> str | None:
    return value if value in PREVIEW_MODES else None


def _bool(value: object) -> bool | None:
    return value if isinstance(value, bool) else None


def _path(value: object) -> Path | None:
    text = _non_empty_str(value)
    return Path(text).expanduser() if text is not None else None


_VALIDATORS = {
    "typst_command": _non_empty_str,
    "preview_mode": _preview_mode,
    "poll_interval_ms": _positive_int,
    "autosave_seconds": _positive_number,
    "show_hidden": _bool,
    "pdf_target_width": _positive_int,
    "cache_dir": _path,
}


def settings_from_config(data: dict[str, object]) -> Settings:
    """Build settings from a raw config mapping, dropping invalid values."""
    values: dict[str, object] = {}
    for key, validate in _VALIDATORS.items():
        if key not in data:
            continue
        value = validate(data[key])
        if value is None:
            logger.warning("ignoring invalid config value %s=%r", key, data[key])
            continue
        values[key] = value
    return Settings(**values)


def load_settings(overrides: dict[str, object] | None = None) -> Settings:
    """Load persisted settings and apply non-``None`` overrides (CLI flags)."""
    settings = settings_from_config(load_config())
    if not overrides:
        return settings
    known = {item.name for item in fields(Settings)}
    applied = {key: value for key, value in overrides.items() if key in known and value is not None}
    return replace(settings, **applied)


def ensure_cache_dir(settings: Settings) -> Path:
    """Create the cache directory when absent and return it."""
    try:
        settings.cache_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.error("error creating cache directory %s: %s", settings.cache_dir, exc)
    return settings.cache_dir


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "DEFAULT_CACHE_DIR",
    "DEFAULT_POLL_INTERVAL_MS",
    "Settings",
    "load_config",
    "settings_from_config",
    "load_settings",
    "ensure_cache_dir",
]

"""YAML settings loader.

An optional settings file supplies defaults for the command-line options.
Keys are fed to the command as click default_map values, so anything given
on the command line wins.

Schema (every key optional):
  snote: string            # notice type, "*" for all
  ignore_remote: bool
  strip: bool
  filename: bool
  output: string           # path or "-"
  fast: bool
  workers: int             # fast-mode concurrency limit
  fast_multiplier: int     # CPUs x multiplier when workers is unset
  format: string           # str.format template
  json: bool
  null_delimited: bool
  queue_size: int          # 0 = unbounded
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

DEFAULT_SETTINGS_PATH = Path.home() / ".config" / "snote-grep" / "config.yml"

# settings key -> (command parameter name, expected type)
_KEYS: dict[str, tuple[str, type]] = {
    "snote": ("snote_type", str),
    "ignore_remote": ("ignore_remote", bool),
    "strip": ("strip_leaders", bool),
    "filename": ("include_filename", bool),
    "output": ("output", str),
    "fast": ("fast", bool),
    "workers": ("workers", int),
    "fast_multiplier": ("fast_multiplier", int),
    "format": ("template", str),
    "null_delimited": ("null_delimited", bool),
    "queue_size": ("queue_size", int),
}

# Options that don't live on ScanConfig
_EXTRA_KEYS: dict[str, tuple[str, type]] = {"json": ("as_json", bool)}


def load_settings(path: Path) -> dict[str, Any]:
    """Load and validate a settings file.

    Returns an empty dict if the file doesn't exist.

    Raises:
        ValueError: if the YAML is invalid, has unknown keys, or wrong value types.
    """
    if not path.exists():
        return {}

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except OSError as err:
        raise ValueError(f"Could not read settings file {path}: {err.strerror or err}") from err
    except yaml.YAMLError as err:
        raise ValueError(f"Invalid YAML in settings file {path}: {err}") from err

    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a mapping")

    return _validate(data, source=str(path))


def _validate(data: dict[str, Any], source: str) -> dict[str, Any]:
    settings: dict[str, Any] = {}
    for key, value in data.items():
        if key in _KEYS:
            expected = _KEYS[key][1]
        elif key in _EXTRA_KEYS:
            expected = _EXTRA_KEYS[key][1]
        else:
            raise ValueError(f"Unknown setting '{key}' (source: {source})")

        # bool is an int subclass; don't let `workers: true` through
        if (expected is int and isinstance(value, bool)) or not isinstance(value, expected):
            raise ValueError(
                f"Setting '{key}' must be {expected.__name__}, got {type(value).__name__} "
                f"(source: {source})"
            )
        if expected is int and value < 0:
            raise ValueError(f"Setting '{key}' must not be negative (source: {source})")
        settings[key] = value
    return settings


def to_default_map(settings: dict[str, Any]) -> dict[str, Any]:
    """Translate validated settings keys into command parameter names."""
    names = {key: name for key, (name, _type) in {**_KEYS, **_EXTRA_KEYS}.items()}
    return {names[key]: value for key, value in settings.items()}

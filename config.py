from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

"""Config loader and validator.

Provides `load_config` which accepts either a path to a YAML file,
a dictionary or None and returns a normalized configuration dict
using DEFAULTS for missing values.

Matrix dimension and slot names are fixed and live here as constants,
they are not part of the loadable configuration.
"""


MATRIX_SIZE = 4
SLOT_NAMES: tuple[str, ...] = ("MAT_A", "MAT_B", "MAT_C", "MAT_D", "MAT_E", "MAT_F")

DEFAULTS: dict[str, Any] = {
    "max_line_size": 2048,
    "prompt": ">>> ",
    "banner": True,
    "logfile": "calculator.log",
    "debug": False,
}


class ConfigError(ValueError):
    """Raised when configuration is invalid or cannot be loaded."""

    pass


def _convert_types(cfg: dict[str, Any]) -> None:
    """Normalize types for configuration values in-place.

    Raises ConfigError on conversion failure.
    """
    try:
        cfg["max_line_size"] = int(cfg.get("max_line_size", DEFAULTS["max_line_size"]))

        # prompt: None means no prompt at all
        if cfg.get("prompt") is None:
            cfg["prompt"] = ""

        cfg["banner"] = bool(cfg.get("banner", DEFAULTS["banner"]))

        v = cfg.get("logfile")
        if v is None:
            cfg["logfile"] = DEFAULTS["logfile"]
        else:
            cfg["logfile"] = str(v)

        cfg["debug"] = bool(cfg.get("debug", DEFAULTS["debug"]))
    except Exception as e:
        msg = f"Bad types in config: {e}"
        raise ConfigError(msg) from e


def _validate_cfg(cfg: dict[str, Any]) -> None:
    """Perform semantic validation on normalized config dict.

    Raises ConfigError on invalid values.
    """
    # one char of the buffer is always reserved for the terminator
    if cfg["max_line_size"] < 2:
        msg = "max_line_size must be at least 2"
        raise ConfigError(msg)

    if not isinstance(cfg["prompt"], str):
        msg = "prompt must be a string"
        raise ConfigError(msg)

    unknown = sorted(k for k in cfg if k not in DEFAULTS)
    if unknown:
        msg = f"Unknown config keys: {', '.join(unknown)}"
        raise ConfigError(msg)


def load_config(path_or_dict: str | dict[str, Any] | None = None) -> dict[str, Any]:
    """Load and normalize configuration.

    Accepts:
      - None -> returns DEFAULTS copy
      - dict -> overlay DEFAULTS with provided dict
      - str (path) -> load YAML and overlay DEFAULTS

    Returns a normalized dict or raises ConfigError.
    """
    if path_or_dict is None:
        cfg: dict[str, Any] = dict(DEFAULTS)
    elif isinstance(path_or_dict, dict):
        cfg = dict(DEFAULTS)
        cfg.update(path_or_dict)
    elif isinstance(path_or_dict, str):
        p = Path(path_or_dict)
        if not p.exists():
            msg = f"Config file not found: {path_or_dict}"
            raise ConfigError(msg)
        try:
            with p.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except Exception as e:
            msg = f"Failed to load config file {path_or_dict}: {e}"
            raise ConfigError(msg) from e
        if not isinstance(data, dict):
            msg = f"Config file {path_or_dict} does not contain a mapping"
            raise ConfigError(msg)
        cfg = dict(DEFAULTS)
        cfg.update(data)
    else:
        msg = "Unsupported config input"
        raise ConfigError(msg)

    # convert types and validate semantics
    _convert_types(cfg)
    _validate_cfg(cfg)

    return cfg

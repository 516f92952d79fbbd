from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from evalboard.errors import ConfigError
from evalboard.view.aggregate import SortMode

_ENV_CONFIG = "EVALBOARD_CONFIG"
_ENV_PREFIX = "EVALBOARD_"
_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True, slots=True)
class ViewerConfig:
    page_size: int = 10
    sort_mode: SortMode = SortMode.NAME
    normalize: bool = False
    log_level: str = "WARNING"
    out_dir: str = "outputs"


def config_path() -> Path:
    """
    Location of the user config file.

    Override with env var:
      EVALBOARD_CONFIG=/path/to/config.json

    Default:
      platformdirs.user_config_dir("evalboard") / "config.json"
    """
    override = os.environ.get(_ENV_CONFIG)
    if override:
        return Path(override).expanduser()
    return Path(user_config_dir("evalboard")) / "config.json"


def _load_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in config file: {path}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file must be a JSON object: {path}")
    return raw


def _as_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    s = str(value).strip().lower()
    if s in _TRUTHY:
        return True
    if s in _FALSY:
        return False
    raise ConfigError(f"{key} must be a boolean, got {value!r}")


def _as_page_size(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be a positive integer, got {value!r}")
    try:
        n = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{key} must be a positive integer, got {value!r}") from exc
    if n <= 0:
        raise ConfigError(f"{key} must be a positive integer, got {value!r}")
    return n


def _as_log_level(key: str, value: Any) -> str:
    level = str(value).strip().upper()
    if level not in _LOG_LEVELS:
        raise ConfigError(f"{key} must be one of {sorted(_LOG_LEVELS)}, got {value!r}")
    return level


def _coerce(values: Mapping[str, Any], source: str) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in values.items():
        where = f"{source}:{key}"
        if key == "page_size":
            out[key] = _as_page_size(where, value)
        elif key == "sort_mode":
            out[key] = SortMode.coerce(value)
        elif key == "normalize":
            out[key] = _as_bool(where, value)
        elif key == "log_level":
            out[key] = _as_log_level(where, value)
        elif key == "out_dir":
            out[key] = str(value)
    return out


def _env_values() -> dict[str, str]:
    out: dict[str, str] = {}
    for f in fields(ViewerConfig):
        val = os.environ.get(_ENV_PREFIX + f.name.upper())
        if val is not None:
            out[f.name] = val
    return out


def load_config(overrides: Mapping[str, Any] | None = None, *, path: Path | None = None) -> ViewerConfig:
    """
    Resolve configuration: defaults < config file < EVALBOARD_* env vars < overrides.

    Override values that are None are ignored so CLI flags can be passed through
    unconditionally.
    """
    cfg = ViewerConfig()
    file_path = path if path is not None else config_path()
    cfg = replace(cfg, **_coerce(_load_config_file(file_path), str(file_path)))
    cfg = replace(cfg, **_coerce(_env_values(), "env"))
    if overrides:
        given = {k: v for k, v in overrides.items() if v is not None}
        cfg = replace(cfg, **_coerce(given, "option"))
    return cfg

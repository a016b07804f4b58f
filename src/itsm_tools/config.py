"""Optional JSON configuration for the service.

Every key has a default, so the service runs with no file at all. Keys not in
``ServiceConfig`` are ignored with a warning.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from itsm_tools.repository import DEFAULT_ID_START
from itsm_tools.tools.common import DEFAULT_URL_BASE
from itsm_tools.types.core import ServiceConfig

logger = logging.getLogger(__name__)

DEFAULT_LOG_LEVEL = "INFO"

_KEY_TYPES: dict[str, tuple[type, ...]] = {
    "url_base": (str,),
    "id_start": (int,),
    "log_dir": (str,),
    "log_level": (str,),
    "timeout": (int, float),
    "concurrent": (bool,),
}


def default_config() -> ServiceConfig:
    return ServiceConfig(url_base=DEFAULT_URL_BASE, id_start=DEFAULT_ID_START, log_level=DEFAULT_LOG_LEVEL, concurrent=False)


def _check(key: str, value: Any) -> None:
    expected = _KEY_TYPES[key]
    # bool is an int subclass; only "concurrent" may be a bool.
    if isinstance(value, bool) and bool not in expected:
        msg = f"Config key '{key}' must be {expected[0].__name__}, got bool"
        raise ValueError(msg)
    if not isinstance(value, expected):
        msg = f"Config key '{key}' must be {expected[0].__name__}, got {type(value).__name__}"
        raise ValueError(msg)


def read_config(path: Path | None) -> ServiceConfig:
    """Read a JSON config file merged over the defaults.

    ``None`` returns the defaults. A missing, unreadable, or mistyped file is
    an error: the caller asked for it explicitly.
    """
    config = default_config()
    if path is None:
        return config
    try:
        raw = json.loads(path.read_text())
    except OSError as e:
        msg = f"Cannot read config {path}: {e}"
        raise ValueError(msg) from e
    except json.JSONDecodeError as e:
        msg = f"Invalid JSON in config {path}: {e}"
        raise ValueError(msg) from e
    if not isinstance(raw, dict):
        msg = f"Config {path} must contain a JSON object"
        raise ValueError(msg)

    for key, value in raw.items():
        if key not in _KEY_TYPES:
            logger.warning("Ignoring unknown config key '%s' in %s", key, path)
            continue
        if value is None:
            continue
        _check(key, value)
        config[key] = value  # type: ignore[literal-required]
    return config

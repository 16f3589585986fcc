from __future__ import annotations

import logging
import os
from typing import Optional

_DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DEFAULT_DATEFMT = "%H:%M:%S"
_LEVEL_ENV_VAR = "NAULIFY_LOG_LEVEL"
_DEBUG_FLAG = "NAULIFY_DEBUG"


def _coerce_level(value: Optional[str], fallback: int) -> int:
    text = (value or "").strip()
    if not text:
        return fallback
    if text.isdigit():
        return int(text)
    candidate = getattr(logging, text.upper(), None)
    if isinstance(candidate, int):
        return candidate
    return fallback


def env_truthy(value: Optional[str]) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _resolve_env_level() -> Optional[int]:
    value = os.getenv(_LEVEL_ENV_VAR)
    if value:
        return _coerce_level(value, logging.INFO)
    if env_truthy(os.getenv(_DEBUG_FLAG)):
        return logging.DEBUG
    return None


def configure_root(default_level: int | str = logging.INFO) -> int:
    """
    Configure the root logger with a compact format.

    Environment overrides:
      - NAULIFY_LOG_LEVEL: explicit log level (name or number)
      - NAULIFY_DEBUG: truthy -> DEBUG
    """
    fallback = (
        _coerce_level(default_level, logging.INFO)
        if isinstance(default_level, str)
        else int(default_level)
    )
    env_level = _resolve_env_level()
    effective = env_level if env_level is not None else fallback

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=effective, format=_DEFAULT_FORMAT, datefmt=_DEFAULT_DATEFMT)
    root.setLevel(effective)
    return effective


def apply_debug_preference(debug_enabled: bool) -> int:
    """
    Update the root log level from the ``debug_logging`` setting while
    honoring env overrides. Returns the effective level.
    """
    env_level = _resolve_env_level()
    level = env_level if env_level is not None else (logging.DEBUG if debug_enabled else logging.INFO)
    logging.getLogger().setLevel(level)
    return level


def level_name(level: int) -> str:
    return logging.getLevelName(level)

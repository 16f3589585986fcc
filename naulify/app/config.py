"""Runtime configuration for the app and CLI.

Sources, lowest to highest precedence: dataclass defaults, ``settings.json``
in the settings directory (read through ``StorageLocal``), then ``NAULIFY_*``
environment variables.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

from naulify.adapters.firestore_rest import DEFAULT_FIRESTORE_URL
from naulify.adapters.identity_rest import DEFAULT_AUTH_URL
from naulify.adapters.storage_local import StorageLocal

from ..utils.logging import env_truthy

SETTINGS_DIR_ENV = "NAULIFY_SETTINGS_DIR"
DEFAULT_SETTINGS_DIR = os.path.join("~", ".naulify")

ENV_KEYS: Dict[str, str] = {
    "NAULIFY_API_KEY": "api_key",
    "NAULIFY_PROJECT_ID": "project_id",
    "NAULIFY_AUTH_URL": "auth_base_url",
    "NAULIFY_FIRESTORE_URL": "firestore_base_url",
    "NAULIFY_REQUEST_TIMEOUT_S": "request_timeout_s",
    "NAULIFY_OFFLINE": "offline",
}


@dataclass
class AppConfig:
    """Typed runtime settings that persist via StorageLocal."""

    api_key: str = ""
    project_id: str = ""
    auth_base_url: str = DEFAULT_AUTH_URL
    firestore_base_url: str = DEFAULT_FIRESTORE_URL
    request_timeout_s: int = 10
    offline: bool = False
    debug_logging: bool = False

    def is_online_ready(self) -> bool:
        """True when the REST backends can be built (or offline mode is on)."""
        if self.offline:
            return True
        return bool(self.api_key.strip() and self.project_id.strip())

    def apply_dict(self, payload: Mapping[str, Any]) -> "AppConfig":
        """Return a copy with ``payload`` applied; unknown keys raise ``ValueError``."""
        if not isinstance(payload, Mapping):
            raise ValueError("Settings payload must be a mapping of flat keys.")
        allowed = {f.name for f in fields(self)}
        unknown = set(payload.keys()) - allowed
        if unknown:
            raise ValueError(f"Unsupported settings keys: {', '.join(sorted(str(k) for k in unknown))}")
        updates = {key: _coerce(key, value) for key, value in payload.items()}
        return replace(self, **updates)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _coerce(key: str, value: Any) -> Any:
    if key in {"offline", "debug_logging"}:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return env_truthy(value)
        raise ValueError(f"{key} must be a boolean")
    if key == "request_timeout_s":
        if isinstance(value, bool):
            raise ValueError("request_timeout_s must be an integer")
        try:
            timeout = int(str(value).strip())
        except (TypeError, ValueError):
            raise ValueError("request_timeout_s must be an integer") from None
        if timeout <= 0:
            raise ValueError("request_timeout_s must be positive")
        return timeout
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string")
    return value.strip()


def settings_dir(env: Optional[Mapping[str, str]] = None) -> str:
    source = os.environ if env is None else env
    return os.path.expanduser(source.get(SETTINGS_DIR_ENV) or DEFAULT_SETTINGS_DIR)


def load_config(
    storage: Optional[StorageLocal] = None,
    env: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    source = os.environ if env is None else env
    storage = storage or StorageLocal(settings_dir(source))

    config = AppConfig()
    persisted = storage.load_settings()
    if persisted:
        config = config.apply_dict(persisted)

    overrides = {field: source[var] for var, field in ENV_KEYS.items() if source.get(var)}
    if overrides:
        config = config.apply_dict(overrides)
    return config


def save_config(config: AppConfig, storage: StorageLocal) -> None:
    storage.save_settings(config.to_dict())


__all__ = ["AppConfig", "ENV_KEYS", "load_config", "save_config", "settings_dir"]

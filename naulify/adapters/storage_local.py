from __future__ import annotations

import json
import os
import tempfile
from typing import Any, Dict, Optional

SETTINGS_FILE = "settings.json"


class StorageLocal:
    """Local filesystem storage for app settings (JSON)."""

    def __init__(self, root_dir: str = ".") -> None:
        self.root = root_dir

    @property
    def settings_path(self) -> str:
        return os.path.join(self.root, SETTINGS_FILE)

    def load_settings(self) -> Optional[Dict[str, Any]]:
        """Return the persisted settings mapping, or ``None`` when absent."""
        path = self.settings_path
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{path}: settings must be a JSON object")
        return data

    def save_settings(self, settings: Dict[str, Any]) -> None:
        """Write settings atomically (temp file in the same dir, then replace)."""
        os.makedirs(self.root, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix="settings_", suffix=".tmp", dir=self.root)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(settings, f, ensure_ascii=False, indent=2, sort_keys=True)
            os.replace(tmp_path, self.settings_path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise


__all__ = ["SETTINGS_FILE", "StorageLocal"]

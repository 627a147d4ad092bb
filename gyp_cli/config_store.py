"""Local on-disk key/value store backing ``gyp-cli set`` / ``gyp-cli get``."""

from __future__ import annotations

import json
from pathlib import Path

import structlog

from gyp_cli.exceptions import ConfigStoreError

log = structlog.get_logger("gyp_cli.config_store")

CONFIG_FILE = "config.json"


class ConfigStore:
    """String key/value pairs persisted as JSON under a cache directory.

    Nothing is read or written implicitly: call :meth:`load` before reading
    and :meth:`save` after mutating.
    """

    def __init__(self, base_dir: str | Path) -> None:
        self.base_dir = Path(base_dir)
        self._values: dict[str, str] = {}

    @property
    def path(self) -> Path:
        return self.base_dir / CONFIG_FILE

    def load(self) -> ConfigStore:
        if not self.path.exists():
            self._values = {}
            return self
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigStoreError(f"Cannot read config store {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigStoreError(f"Config store {self.path} is not a JSON object")
        self._values = {str(k): str(v) for k, v in data.items()}
        log.debug("config_store.loaded", path=str(self.path), keys=len(self._values))
        return self

    def save(self) -> None:
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._values, indent=2, sort_keys=True) + "\n",
                             encoding="utf-8")
        log.debug("config_store.saved", path=str(self.path), keys=len(self._values))

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

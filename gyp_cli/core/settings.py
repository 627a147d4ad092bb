"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

_DEFAULT_CACHE_PATH = "/tmp/gyp-cli"


@dataclass(frozen=True)
class Settings:
    cache_path: str = _DEFAULT_CACHE_PATH
    log_level: str = "WARNING"
    log_format: str = "console"  # "console" | "json"

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from environment variables.

        Reads:
            GYP_CLI_CACHE_PATH — config store directory (default: /tmp/gyp-cli)
            GYP_CLI_LOG_LEVEL  — log level (default: WARNING)
            GYP_CLI_LOG_FORMAT — console | json (default: console)
        """
        log_format = os.environ.get("GYP_CLI_LOG_FORMAT", "console").lower()
        if log_format not in ("console", "json"):
            log_format = "console"
        return cls(
            cache_path=os.environ.get("GYP_CLI_CACHE_PATH", _DEFAULT_CACHE_PATH),
            log_level=os.environ.get("GYP_CLI_LOG_LEVEL", "WARNING").upper(),
            log_format=log_format,
        )

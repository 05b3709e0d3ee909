"""
Environment-driven configuration.

Environment Variables:
    DESYNC_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    DESYNC_LOG_FORMAT: json, text (default: json)
    DESYNC_ADD_SYSTEM: 1 installs update_crc in the FIRST stage (default: 1)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

_LOG_FORMATS = ("json", "text")


def _env_flag(key: str, default: str) -> bool:
    return os.getenv(key, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class DesyncConfig:
    log_level: str = "INFO"
    log_format: str = "json"
    add_system: bool = True

    @staticmethod
    def from_env() -> "DesyncConfig":
        log_level = os.getenv("DESYNC_LOG_LEVEL", "INFO").strip().upper()
        log_format = os.getenv("DESYNC_LOG_FORMAT", "json").strip().lower()
        if log_format not in _LOG_FORMATS:
            log_format = "json"
        return DesyncConfig(
            log_level=log_level,
            log_format=log_format,
            add_system=_env_flag("DESYNC_ADD_SYSTEM", "1"),
        )

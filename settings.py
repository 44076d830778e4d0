from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


_THRESHOLD_ENV = "WEATHERTAG_THRESHOLD_MINUTES"
_WRITE_ENV = "WEATHERTAG_WRITE"
_LOG_FILE_ENV = "WEATHERTAG_LOG_FILE"
_EXIFTOOL_ENV = "WEATHERTAG_EXIFTOOL"
_EXIFTOOL_TIMEOUT_ENV = "WEATHERTAG_EXIFTOOL_TIMEOUT"
_LOG_LEVEL_ENV = "WEATHERTAG_LOG_LEVEL"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    threshold_minutes: float
    write_metadata: bool
    log_file_name: str
    exiftool_path: str
    exiftool_timeout: float
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_float_env(name: str, default: float, allow_zero: bool = False) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    if parsed < 0 or (parsed == 0 and not allow_zero):
        return default
    return parsed


def _read_bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip().lower()
    if candidate in _TRUTHY:
        return True
    if candidate in _FALSY:
        return False
    return default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        threshold_minutes=_read_float_env(_THRESHOLD_ENV, 30.0, allow_zero=True),
        write_metadata=_read_bool_env(_WRITE_ENV, False),
        log_file_name=_read_str_env(_LOG_FILE_ENV, "weatherhistory.csv"),
        exiftool_path=_read_str_env(_EXIFTOOL_ENV, "exiftool"),
        exiftool_timeout=_read_float_env(_EXIFTOOL_TIMEOUT_ENV, 30.0),
        log_level=_read_log_level("WARNING"),
    )

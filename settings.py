from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


_MAX_HISTORY_ENV = "MAX_READINGS_HISTORY"
_RISKY_THRESHOLD_ENV = "RISKY_HR_THRESHOLD"
_NORMAL_MIN_ENV = "NORMAL_HR_MIN"
_DEMO_MODE_ENV = "DEMO_MODE"
_DEMO_INTERVAL_ENV = "DATA_UPDATE_INTERVAL"
_LOG_LEVEL_ENV = "LOG_LEVEL"
_CORS_ORIGIN_ENV = "CORS_ORIGIN"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    max_history: int
    risky_threshold: int
    normal_min: int
    demo_mode: bool
    demo_interval_s: float
    log_level: str
    cors_origins: tuple[str, ...] = ("*",)


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_positive_float(name: str, default: float) -> float:
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
    return parsed if parsed > 0 else default


def _read_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip().lower()
    if not candidate:
        return default
    return candidate in _TRUTHY


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


def _read_origins(default: tuple[str, ...]) -> tuple[str, ...]:
    value = os.getenv(_CORS_ORIGIN_ENV)
    if value is None:
        return default
    origins = tuple(part.strip() for part in value.split(",") if part.strip())
    return origins or default


def _read_thresholds(default_upper: int, default_lower: int) -> tuple[int, int]:
    upper = _read_positive_int(_RISKY_THRESHOLD_ENV, default_upper)
    lower = _read_positive_int(_NORMAL_MIN_ENV, default_lower)
    if lower >= upper:
        return default_upper, default_lower
    return upper, lower


@lru_cache
def get_settings() -> Settings:
    risky_threshold, normal_min = _read_thresholds(100, 60)
    return Settings(
        max_history=_read_positive_int(_MAX_HISTORY_ENV, 50),
        risky_threshold=risky_threshold,
        normal_min=normal_min,
        demo_mode=_read_flag(_DEMO_MODE_ENV, False),
        demo_interval_s=_read_positive_float(_DEMO_INTERVAL_ENV, 15.0),
        log_level=_read_log_level("INFO"),
        cors_origins=_read_origins(("*",)),
    )

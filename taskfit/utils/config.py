"""Environment-driven runtime settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional


PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


def _env_optional_float(name: str, default: Optional[float]) -> Optional[float]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {value!r}") from exc


@dataclass(frozen=True)
class Settings:
    app_name: str
    app_version: str
    log_level: str
    database_path: Path

    synthetic_random_seed: int
    synthetic_resource_count: int
    synthetic_task_count: int

    recommendation_max_workers: int
    recommendation_unit_timeout_seconds: Optional[float]
    recommendation_ttl_hours: int
    recommendation_alternative_pool_size: int
    recommendation_alternative_limit: int
    recommendation_task_match_limit: int

    default_window: str


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build settings once per process; tests derive copies with `replace`."""
    return Settings(
        app_name=_env_str("TASKFIT_APP_NAME", "TaskFit Assignment Engine"),
        app_version=_env_str("TASKFIT_APP_VERSION", "0.1.0"),
        log_level=_env_str("TASKFIT_LOG_LEVEL", "INFO"),
        database_path=Path(
            _env_str("TASKFIT_DATABASE_PATH", str(PROJECT_ROOT / "data" / "taskfit.db"))
        ),
        synthetic_random_seed=_env_int("TASKFIT_SYNTHETIC_RANDOM_SEED", 42),
        synthetic_resource_count=_env_int("TASKFIT_SYNTHETIC_RESOURCE_COUNT", 6),
        synthetic_task_count=_env_int("TASKFIT_SYNTHETIC_TASK_COUNT", 24),
        recommendation_max_workers=_env_int("TASKFIT_RECOMMENDATION_MAX_WORKERS", 8),
        recommendation_unit_timeout_seconds=_env_optional_float(
            "TASKFIT_RECOMMENDATION_UNIT_TIMEOUT_SECONDS", None
        ),
        recommendation_ttl_hours=_env_int("TASKFIT_RECOMMENDATION_TTL_HOURS", 24),
        recommendation_alternative_pool_size=_env_int(
            "TASKFIT_RECOMMENDATION_ALTERNATIVE_POOL_SIZE", 5
        ),
        recommendation_alternative_limit=_env_int(
            "TASKFIT_RECOMMENDATION_ALTERNATIVE_LIMIT", 3
        ),
        recommendation_task_match_limit=_env_int(
            "TASKFIT_RECOMMENDATION_TASK_MATCH_LIMIT", 5
        ),
        default_window=_env_str("TASKFIT_DEFAULT_WINDOW", "week"),
    )

"""
Application settings.

Typed settings for the run store, history window, gap targets, alert
thresholds and the API bind address. Built once from the environment;
tests call get_settings.cache_clear() after changing env vars.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from reputeos_lsi.config.env import env_float, env_int, get_database_url, load_reputeos_env


@dataclass(frozen=True)
class Settings:
    database_url: str
    history_window: int = 12
    """Prior runs folded into control statistics for a new run."""
    history_limit: int = 24
    """Max runs returned for history listing and validation reports."""
    target_fraction: float = 0.8
    """Default target profile = fraction x component max."""
    drop_warning_points: float = 5.0
    drop_critical_points: float = 10.0
    significance_alpha: float = 0.05
    default_target_score: float = 75.0
    api_host: str = "0.0.0.0"
    api_port: int = 8000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the current application settings (cached)."""
    load_reputeos_env()
    fraction = env_float("LSI_TARGET_FRACTION", 0.8)
    return Settings(
        database_url=get_database_url(),
        history_window=max(env_int("LSI_HISTORY_WINDOW", 12), 0),
        history_limit=max(env_int("LSI_HISTORY_LIMIT", 24), 1),
        target_fraction=min(max(fraction, 0.0), 1.0),
        drop_warning_points=env_float("LSI_DROP_WARNING_POINTS", 5.0),
        drop_critical_points=env_float("LSI_DROP_CRITICAL_POINTS", 10.0),
        significance_alpha=env_float("LSI_SIGNIFICANCE_ALPHA", 0.05),
        default_target_score=env_float("LSI_DEFAULT_TARGET_SCORE", 75.0),
        api_host=(os.getenv("API_HOST") or "0.0.0.0").strip(),
        api_port=env_int("API_PORT", 8000),
    )

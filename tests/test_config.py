"""
Tests for environment-driven settings and run-store URL resolution.
"""

from __future__ import annotations

import pytest

from reputeos_lsi.config import get_settings
from reputeos_lsi.config.env import get_database_url


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    for name in (
        "REPUTEOS_DB_URL",
        "DATABASE_URL",
        "LSI_DB_PATH",
        "LSI_HISTORY_WINDOW",
        "LSI_TARGET_FRACTION",
        "LSI_DROP_WARNING_POINTS",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults():
    settings = get_settings()
    assert settings.history_window == 12
    assert settings.history_limit == 24
    assert settings.target_fraction == 0.8
    assert settings.drop_warning_points == 5.0
    assert settings.drop_critical_points == 10.0
    assert settings.significance_alpha == 0.05
    assert settings.default_target_score == 75.0
    assert settings.database_url == "sqlite:///reputeos_lsi.db"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("LSI_HISTORY_WINDOW", "6")
    monkeypatch.setenv("LSI_DROP_WARNING_POINTS", "3.5")
    settings = get_settings()
    assert settings.history_window == 6
    assert settings.drop_warning_points == 3.5


def test_invalid_values_fall_back(monkeypatch):
    monkeypatch.setenv("LSI_HISTORY_WINDOW", "twelve")
    monkeypatch.setenv("LSI_TARGET_FRACTION", "1.5")
    settings = get_settings()
    assert settings.history_window == 12
    assert settings.target_fraction == 1.0


def test_settings_cached(monkeypatch):
    first = get_settings()
    monkeypatch.setenv("LSI_HISTORY_WINDOW", "3")
    assert get_settings() is first


def test_database_url_precedence(monkeypatch, tmp_path):
    monkeypatch.setenv("LSI_DB_PATH", str(tmp_path / "x.db"))
    assert get_database_url() == f"sqlite:///{tmp_path / 'x.db'}"
    monkeypatch.setenv("DATABASE_URL", "postgresql://db/lsi")
    assert get_database_url() == "postgresql://db/lsi"
    monkeypatch.setenv("REPUTEOS_DB_URL", "sqlite:///override.db")
    assert get_database_url() == "sqlite:///override.db"

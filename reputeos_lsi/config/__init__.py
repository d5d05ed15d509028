"""
Configuration management for ReputeOS LSI.

Loads settings from environment variables and an optional .env file.
Exposes a single source of truth for run-store, history, alert and API settings.
"""

from reputeos_lsi.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]

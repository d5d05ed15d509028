"""
Environment variable loading for ReputeOS LSI.

- REPUTEOS_DB_URL / DATABASE_URL: SQLAlchemy URL for the LSI run store
- LSI_DB_PATH: SQLite file used when no URL is set
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from reputeos_lsi.lsi_logging import get_logger

logger = get_logger(__name__)

# Project root: config is reputeos_lsi/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_SQLITE_PATH = "reputeos_lsi.db"


def load_reputeos_env() -> None:
    """Load .env from project root. Safe to call multiple times; existing env wins."""
    if _ENV_PATH.is_file():
        load_dotenv(_ENV_PATH, override=False)


def get_database_url() -> str:
    """
    Resolve the run-store URL.
    Order: REPUTEOS_DB_URL > DATABASE_URL > sqlite:///<LSI_DB_PATH or default file>.
    """
    load_reputeos_env()
    url = (os.getenv("REPUTEOS_DB_URL") or os.getenv("DATABASE_URL") or "").strip()
    if url:
        return url
    path = (os.getenv("LSI_DB_PATH") or "").strip() or DEFAULT_SQLITE_PATH
    return f"sqlite:///{path}"


def env_int(name: str, default: int) -> int:
    """Integer env var; falls back to default (with a warning) when unparsable."""
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("config_invalid_int", variable=name, value=raw, default=default)
        return default


def env_float(name: str, default: float) -> float:
    """Float env var; falls back to default (with a warning) when unparsable."""
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("config_invalid_float", variable=name, value=raw, default=default)
        return default

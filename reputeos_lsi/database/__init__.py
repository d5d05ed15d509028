"""
Database package: append-only LSI run history.
"""

from reputeos_lsi.database.run_store import (
    LSIRunRow,
    append_run,
    get_latest_run,
    get_recent_scores,
    init_db,
    list_runs,
    reset_engine_for_test,
)

__all__ = [
    "LSIRunRow",
    "append_run",
    "get_latest_run",
    "get_recent_scores",
    "init_db",
    "list_runs",
    "reset_engine_for_test",
]

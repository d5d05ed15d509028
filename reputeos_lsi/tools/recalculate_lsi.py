"""
Weekly LSI recalculation over a batch of clients.

Input is a JSON object mapping client_id -> latest discovery snapshot. Each
client is scored and appended to its history; a failure for one client is
reported in the summary and the batch continues.

Usage:
  python -m reputeos_lsi.tools.recalculate_lsi latest_snapshots.json
"""

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Any, Mapping

from reputeos_lsi.analysis_engine.models import DiscoverRunSnapshot
from reputeos_lsi.analytics import score_and_record
from reputeos_lsi.core.exceptions import LSIError
from reputeos_lsi.database import init_db
from reputeos_lsi.lsi_logging import bind_client, get_logger

logger = get_logger(__name__)


def recalculate(snapshots: Mapping[str, Any]) -> dict[str, Any]:
    """Score every client; returns {processed, recalculated, failed, duration_ms, results}."""
    start = time.monotonic()
    results: list[dict[str, Any]] = []
    for client_id, payload in snapshots.items():
        if not payload:
            results.append({"client_id": client_id, "skipped": "no discover run"})
            continue
        try:
            snapshot = DiscoverRunSnapshot.from_dict(payload)
            run = score_and_record(client_id, snapshot=snapshot)
        except LSIError as e:
            bind_client(client_id).warning("lsi_recalculate_client_failed", code=e.code, error=e.message)
            results.append({"client_id": client_id, "error": e.message})
            continue
        results.append({
            "client_id": client_id,
            "new_score": run.total_score,
            "classification": run.classification,
            "alerts": [a["type"] for a in run.alerts],
            "recalculated": True,
        })
    summary = {
        "processed": len(snapshots),
        "recalculated": sum(1 for r in results if r.get("recalculated")),
        "failed": sum(1 for r in results if "error" in r),
        "duration_ms": int((time.monotonic() - start) * 1000),
        "results": results,
    }
    logger.info(
        "lsi_recalculate_done",
        processed=summary["processed"],
        recalculated=summary["recalculated"],
        failed=summary["failed"],
    )
    return summary


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Recalculate LSI for every client in a snapshot batch file.")
    parser.add_argument("file", type=Path, help="JSON object: client_id -> discovery snapshot")
    args = parser.parse_args(argv)
    try:
        with args.file.open(encoding="utf-8") as f:
            snapshots = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("lsi_recalculate_read_failed", path=str(args.file), error=str(e))
        return 1
    if not isinstance(snapshots, dict):
        logger.error("lsi_recalculate_bad_input", path=str(args.file), error="expected a JSON object")
        return 1
    init_db()
    summary = recalculate(snapshots)
    print(json.dumps(summary, indent=2))
    return 1 if summary["failed"] else 0


if __name__ == "__main__":
    sys.exit(main())

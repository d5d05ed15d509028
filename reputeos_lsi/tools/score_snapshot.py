"""
Score one discovery snapshot JSON file and print the LSI result.

Without --record the score is computed in memory only. With --record the run
is appended to the client's history (needs --client-id).

Usage:
  python -m reputeos_lsi.tools.score_snapshot snapshot.json
  python -m reputeos_lsi.tools.score_snapshot snapshot.json --client-id acme --record
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from reputeos_lsi.analysis_engine.models import DiscoverRunSnapshot
from reputeos_lsi.analysis_engine.scorer import calculate_lsi_from_snapshot
from reputeos_lsi.analysis_engine.signals import build_signal_summary
from reputeos_lsi.analytics import score_and_record
from reputeos_lsi.core.exceptions import LSIError
from reputeos_lsi.database import init_db
from reputeos_lsi.lsi_logging import get_logger

logger = get_logger(__name__)


def load_json(path: Path) -> Any:
    with path.open(encoding="utf-8") as f:
        return json.load(f)


def score_file(path: Path, client_id: str | None = None, record: bool = False) -> dict[str, Any]:
    """Score the snapshot at path; returns the printable result."""
    snapshot = DiscoverRunSnapshot.from_dict(load_json(path))
    if record:
        if not client_id:
            raise LSIError("--record requires --client-id", field="client_id")
        init_db()
        run = score_and_record(client_id, snapshot=snapshot)
        return {"lsi_run": run.to_dict(), "alerts": list(run.alerts)}
    result, inputs = calculate_lsi_from_snapshot(snapshot)
    return {
        "lsi": result.to_dict(),
        "inputs": inputs.to_dict(),
        "signal_summary": build_signal_summary(snapshot).to_dict(),
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Score a discovery snapshot JSON file (LSI).")
    parser.add_argument("file", type=Path, help="Path to snapshot JSON")
    parser.add_argument("--client-id", default=None, help="Client id (required with --record)")
    parser.add_argument("--record", action="store_true", help="Append the run to the client's history")
    args = parser.parse_args(argv)
    try:
        output = score_file(args.file, client_id=args.client_id, record=args.record)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("score_snapshot_read_failed", path=str(args.file), error=str(e))
        return 1
    except LSIError as e:
        logger.error("score_snapshot_failed", path=str(args.file), code=e.code, error=e.message)
        return 1
    print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())

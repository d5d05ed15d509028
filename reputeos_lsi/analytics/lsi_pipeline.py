"""
LSI pipeline: score -> history -> stats -> gaps -> alerts -> append.

Single entrypoint for the API and the batch tools. Ties the pure scoring core
to the run store; writes per client are serialised with an in-process lock so
history stays ordered. Multi-process deployments must serialise upstream.
"""

from __future__ import annotations

import threading
import time
import uuid
from contextlib import contextmanager
from typing import Iterator

from reputeos_lsi.alerts import AlertConfig, LSIAlert, evaluate_run_alerts
from reputeos_lsi.analysis_engine.components import ComponentInputs
from reputeos_lsi.analysis_engine.gaps import calculate_gaps
from reputeos_lsi.analysis_engine.historical import calculate_stats
from reputeos_lsi.analysis_engine.models import (
    DiscoverRunSnapshot,
    LSIComponents,
    LSIRun,
    default_target,
)
from reputeos_lsi.analysis_engine.scorer import calculate_lsi
from reputeos_lsi.analysis_engine.signals import extract_component_inputs
from reputeos_lsi.config import get_settings
from reputeos_lsi.core.exceptions import LSIError
from reputeos_lsi.database import run_store
from reputeos_lsi.lsi_logging import client_context, get_logger

logger = get_logger(__name__)

MAX_NOTES_LENGTH = 1000


class _ClientLocks:
    """
    One lock per client id, held only while some caller is using it.

    Entries are reference-counted and dropped when the last holder releases,
    so the registry stays bounded by the number of clients in flight.
    """

    def __init__(self) -> None:
        self._locks: dict[str, list] = {}
        self._guard = threading.Lock()

    @contextmanager
    def hold(self, client_id: str) -> Iterator[None]:
        with self._guard:
            entry = self._locks.setdefault(client_id, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[client_id]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


_client_locks = _ClientLocks()


def _resolve_inputs(
    inputs: ComponentInputs | None,
    snapshot: DiscoverRunSnapshot | None,
) -> ComponentInputs:
    if (inputs is None) == (snapshot is None):
        raise LSIError("provide exactly one of inputs or snapshot")
    if inputs is not None:
        return inputs
    return extract_component_inputs(snapshot)


def _build_run(
    client_id: str,
    inputs: ComponentInputs,
    prior_scores: list[float],
    *,
    target: LSIComponents | None,
    source_run_id: str | None,
    notes: str | None,
    run_date: int | None,
) -> tuple[LSIRun, list[LSIAlert]]:
    settings = get_settings()
    result = calculate_lsi(inputs)
    total = result.total_score
    stats = calculate_stats([total, *prior_scores])
    goal = target if target is not None else default_target(settings.target_fraction)
    gaps = calculate_gaps(result.components, goal)
    alerts = evaluate_run_alerts(
        prior_scores,
        total,
        AlertConfig(
            drop_warning_points=settings.drop_warning_points,
            drop_critical_points=settings.drop_critical_points,
        ),
    )
    run = LSIRun(
        id=str(uuid.uuid4()),
        client_id=client_id,
        run_date=run_date if run_date is not None else int(time.time()),
        total_score=total,
        percentage=result.percentage,
        classification=result.classification.label,
        components=result.components,
        stats=stats,
        gaps=tuple(gaps),
        source_run_id=source_run_id,
        notes=notes[:MAX_NOTES_LENGTH] if notes else None,
        alerts=tuple(a.to_dict() for a in alerts),
    )
    return run, alerts


def score_only(
    client_id: str,
    *,
    inputs: ComponentInputs | None = None,
    snapshot: DiscoverRunSnapshot | None = None,
    target: LSIComponents | None = None,
    notes: str | None = None,
) -> LSIRun:
    """
    Compute a full LSI run (stats against stored history, gaps, alerts)
    without persisting it.
    """
    client_id = (client_id or "").strip()
    component_inputs = _resolve_inputs(inputs, snapshot)
    prior = run_store.get_recent_scores(client_id, get_settings().history_window)
    run, _ = _build_run(
        client_id,
        component_inputs,
        prior,
        target=target,
        source_run_id=snapshot.run_id if snapshot is not None else None,
        notes=notes,
        run_date=None,
    )
    return run


def score_and_record(
    client_id: str,
    *,
    inputs: ComponentInputs | None = None,
    snapshot: DiscoverRunSnapshot | None = None,
    target: LSIComponents | None = None,
    notes: str | None = None,
    run_date: int | None = None,
) -> LSIRun:
    """
    Score one subject and append the run to its history.

    Exactly one of inputs (manual scoring) or snapshot (derived scoring) must
    be given. The returned run carries the alerts raised against the prior
    history; alerts are not persisted.
    """
    client_id = (client_id or "").strip()
    if not client_id:
        raise LSIError("client_id is required", field="client_id")
    component_inputs = _resolve_inputs(inputs, snapshot)
    mode = "snapshot" if snapshot is not None else "inputs"

    with client_context(client_id, mode=mode), _client_locks.hold(client_id):
        prior = run_store.get_recent_scores(client_id, get_settings().history_window)
        run, alerts = _build_run(
            client_id,
            component_inputs,
            prior,
            target=target,
            source_run_id=snapshot.run_id if snapshot is not None else None,
            notes=notes,
            run_date=run_date,
        )
        run_store.append_run(run)
        logger.info(
            "lsi_calculated",
            run_id=run.id,
            total_score=run.total_score,
            classification=run.classification,
            prior_runs=len(prior),
            gaps=len(run.gaps),
            alerts=len(alerts),
        )
    return run

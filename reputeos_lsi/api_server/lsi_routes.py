"""
FastAPI router: LSI calculation, run history, validation report, derivation.

Validates requests with pydantic, delegates to the scoring pipeline and run
store, and maps LSIError to 400 and store failures to 500.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Query

from reputeos_lsi.analysis_engine.historical import build_validation_report
from reputeos_lsi.analysis_engine.models import DiscoverRunSnapshot
from reputeos_lsi.analysis_engine.scorer import calculate_lsi, get_lsi_classification
from reputeos_lsi.analysis_engine.signals import build_signal_summary, extract_component_inputs
from reputeos_lsi.analytics import score_and_record
from reputeos_lsi.api_server.schemas import (
    CalculateLSIRequest,
    CalculateLSIResponse,
    DeriveRequest,
    RunsResponse,
    ValidationRequest,
)
from reputeos_lsi.config import get_settings
from reputeos_lsi.core.exceptions import LSIError, RunStoreError
from reputeos_lsi.database import run_store
from reputeos_lsi.lsi_logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/lsi", tags=["lsi"])


def _parse_snapshot(payload: dict[str, Any]) -> DiscoverRunSnapshot:
    try:
        return DiscoverRunSnapshot.from_dict(payload)
    except LSIError as e:
        raise HTTPException(status_code=400, detail=e.message) from e


@router.post("/calculate", response_model=CalculateLSIResponse)
def calculate(body: CalculateLSIRequest) -> CalculateLSIResponse:
    """
    Score a client from direct inputs or a discovery snapshot and append the
    run to its history. Returns the stored run with alerts.
    """
    client_id = body.client_id.strip()
    if not client_id:
        raise HTTPException(status_code=400, detail="client_id must be non-empty")
    snapshot = _parse_snapshot(body.snapshot) if body.snapshot is not None else None
    try:
        run = score_and_record(
            client_id,
            inputs=body.inputs.to_inputs() if body.inputs is not None else None,
            snapshot=snapshot,
            target=body.target_scores.to_components() if body.target_scores is not None else None,
            notes=body.notes,
        )
    except RunStoreError as e:
        logger.exception("lsi_calculate_store_failed", client_id=client_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to calculate LSI") from e
    except LSIError as e:
        raise HTTPException(status_code=400, detail=e.message) from e

    payload = run.to_dict()
    payload["classification_detail"] = get_lsi_classification(run.total_score).to_dict()
    payload["alerts"] = list(run.alerts)
    return CalculateLSIResponse(success=True, lsi_run=payload)


@router.get("/{client_id}/runs", response_model=RunsResponse)
def list_client_runs(
    client_id: str,
    limit: int | None = Query(None, ge=1, le=500, description="Max runs; default LSI_HISTORY_LIMIT"),
) -> RunsResponse:
    """Stored runs for a client, newest first."""
    limit = limit or get_settings().history_limit
    try:
        runs = run_store.list_runs(client_id, limit)
    except RunStoreError as e:
        logger.exception("lsi_list_runs_route_failed", client_id=client_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to list LSI runs") from e
    return RunsResponse(client_id=client_id, runs=[r.to_dict() for r in runs])


def _validation_response(
    client_id: str,
    *,
    target: float | None,
    baseline: float | None,
    baseline_frames: dict[str, float] | None = None,
    current_frames: dict[str, float] | None = None,
) -> dict[str, Any]:
    settings = get_settings()
    try:
        history = run_store.list_runs(client_id, settings.history_limit, ascending=True)
    except RunStoreError as e:
        logger.exception("lsi_validation_route_failed", client_id=client_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to build validation report") from e
    if not history:
        raise HTTPException(status_code=404, detail=f"No LSI runs found for client {client_id}")
    report = build_validation_report(
        history,
        baseline=baseline,
        target=target if target is not None else settings.default_target_score,
        alpha=settings.significance_alpha,
        baseline_frames=baseline_frames,
        current_frames=current_frames,
    )
    return {"client_id": client_id, "report": report.to_dict()}


@router.get("/{client_id}/validation")
def validation_report(
    client_id: str,
    target: float | None = Query(None, ge=0, le=100),
    baseline: float | None = Query(None, ge=0, le=100),
) -> dict[str, Any]:
    """Proof-of-improvement report over the client's bounded run history."""
    return _validation_response(client_id, target=target, baseline=baseline)


@router.post("/{client_id}/validation")
def validation_report_with_frames(client_id: str, body: ValidationRequest) -> dict[str, Any]:
    """Same report; the body may add baseline/current frame distributions for frame shift rows."""
    return _validation_response(
        client_id,
        target=body.target,
        baseline=body.baseline,
        baseline_frames=body.baseline_frames,
        current_frames=body.current_frames,
    )


@router.post("/derive")
def derive(body: DeriveRequest) -> dict[str, Any]:
    """Derived component inputs, preview score and signal summary for a snapshot. Nothing is stored."""
    snapshot = _parse_snapshot(body.snapshot)
    inputs = extract_component_inputs(snapshot)
    result = calculate_lsi(inputs)
    return {
        "inputs": inputs.to_dict(),
        "lsi": result.to_dict(),
        "signal_summary": build_signal_summary(snapshot).to_dict(),
    }

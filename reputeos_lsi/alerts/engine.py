"""
Alert engine: LSI drop thresholds and control-limit breaches.

Defines when a new LSI run should raise an alert: a drop versus the previous
run above the warning/critical thresholds (narrative drift), or a total
outside the control limits of the prior runs (out of control). Alerts are
returned to the caller; delivery and storage belong to the hosting app.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence

from reputeos_lsi.analysis_engine.historical import calculate_stats
from reputeos_lsi.analysis_engine.statistics import round_score
from reputeos_lsi.lsi_logging import get_logger

logger = get_logger(__name__)


class AlertSeverity(str, Enum):
    WARNING = "warning"
    CRITICAL = "critical"


class AlertType(str, Enum):
    NARRATIVE_DRIFT = "narrative_drift"
    OUT_OF_CONTROL = "out_of_control"


# Drop in points vs the previous run
DEFAULT_DROP_WARNING_POINTS = 5.0
DEFAULT_DROP_CRITICAL_POINTS = 10.0
# Control limits need at least this many prior runs
MIN_RUNS_FOR_CONTROL_LIMITS = 2


@dataclass
class AlertConfig:
    """Configurable drop thresholds for the alert engine."""

    drop_warning_points: float = DEFAULT_DROP_WARNING_POINTS
    """Warning when the total drops by more than this."""
    drop_critical_points: float = DEFAULT_DROP_CRITICAL_POINTS
    """Critical when the total drops by more than this."""
    min_runs_for_control_limits: int = MIN_RUNS_FOR_CONTROL_LIMITS


@dataclass
class LSIAlert:
    """Single explainable alert raised for one scoring event."""

    type: AlertType
    severity: AlertSeverity
    title: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)
    """Thresholds and actual values used."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "severity": self.severity.value,
            "title": self.title,
            "message": self.message,
            "details": self.details,
        }


def evaluate_lsi_drop(
    previous: float | None,
    current: float,
    config: AlertConfig | None = None,
) -> LSIAlert | None:
    """
    Narrative-drift alert when current is more than drop_warning_points below
    previous; critical above drop_critical_points. None without a previous run.
    """
    if previous is None:
        return None
    cfg = config or AlertConfig()
    drop = previous - current
    if drop <= cfg.drop_warning_points:
        return None
    severity = AlertSeverity.CRITICAL if drop > cfg.drop_critical_points else AlertSeverity.WARNING
    alert = LSIAlert(
        type=AlertType.NARRATIVE_DRIFT,
        severity=severity,
        title="LSI Drop",
        message=(
            f"LSI decreased by {drop:.1f} points ({previous:.1f} -> {current:.1f}). "
            "Review content strategy."
        ),
        details={
            "previous": previous,
            "current": current,
            "drop": round_score(drop),
            "warning_points": cfg.drop_warning_points,
            "critical_points": cfg.drop_critical_points,
        },
    )
    logger.info("lsi_drop_alert", severity=severity.value, drop=round_score(drop))
    return alert


def evaluate_control_limits(
    prior_scores: Sequence[float],
    current: float,
    config: AlertConfig | None = None,
) -> LSIAlert | None:
    """
    Out-of-control alert when current falls outside UCL/LCL computed from the
    prior runs only. Below LCL is critical, above UCL is a warning.
    """
    cfg = config or AlertConfig()
    if len(prior_scores) < cfg.min_runs_for_control_limits:
        return None
    stats = calculate_stats(list(prior_scores))
    if stats.lcl <= current <= stats.ucl:
        return None
    below = current < stats.lcl
    severity = AlertSeverity.CRITICAL if below else AlertSeverity.WARNING
    bound = stats.lcl if below else stats.ucl
    alert = LSIAlert(
        type=AlertType.OUT_OF_CONTROL,
        severity=severity,
        title="LSI outside control limits",
        message=(
            f"LSI {current:.1f} is {'below LCL' if below else 'above UCL'} {bound:.1f} "
            f"(mean {stats.mean:.1f}, {len(prior_scores)} prior runs)."
        ),
        details={"current": current, **stats.to_dict(), "prior_runs": len(prior_scores)},
    )
    logger.info("lsi_control_limit_alert", severity=severity.value, current=current, bound=bound)
    return alert


def evaluate_run_alerts(
    prior_scores: Sequence[float],
    current: float,
    config: AlertConfig | None = None,
) -> list[LSIAlert]:
    """All alerts for a new total given prior totals (newest first)."""
    alerts: list[LSIAlert] = []
    drop = evaluate_lsi_drop(prior_scores[0] if prior_scores else None, current, config)
    if drop is not None:
        alerts.append(drop)
    breach = evaluate_control_limits(prior_scores, current, config)
    if breach is not None:
        alerts.append(breach)
    return alerts

"""
Historical analysis: control statistics, trend, and proof-of-improvement.

Deterministic and explainable:
- Control statistics over a run window (sample stddev, 3-sigma limits).
- Trend between two consecutive totals (up | down | stable, with magnitude).
- Validation report: baseline vs current significance, effect size, and
  per-component / per-frame change.

All standard deviations here use the sample divisor max(n - 1, 1).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from reputeos_lsi.analysis_engine.models import (
    COMPONENT_CONFIG,
    COMPONENT_KEYS,
    FRAMES,
    MAX_LSI_SCORE,
    FrameDistribution,
    LSIRun,
    LSIStats,
)
from reputeos_lsi.analysis_engine.statistics import (
    clamp,
    cohens_d,
    effect_band,
    mean,
    p_value,
    round_half_up,
    round_score,
    sample_stddev,
)
from reputeos_lsi.lsi_logging import get_logger

logger = get_logger(__name__)

# Neutral statistics when no history exists
DEFAULT_STATS = LSIStats(mean=50.0, stddev=10.0, ucl=80.0, lcl=20.0)
CONTROL_SIGMA = 3

TREND_UP = "up"
TREND_DOWN = "down"
TREND_STABLE = "stable"
MAGNITUDE_SIGNIFICANT = "significant"
MAGNITUDE_MODERATE = "moderate"
MAGNITUDE_MINIMAL = "minimal"

# Trend: absolute change in points; magnitude: percent change
TREND_DELTA_THRESHOLD = 2.0
MAGNITUDE_SIGNIFICANT_PCT = 10.0
MAGNITUDE_MODERATE_PCT = 5.0

DEFAULT_TARGET_SCORE = 75.0
DEFAULT_ALPHA = 0.05


def calculate_stats(scores: Sequence[float]) -> LSIStats:
    """
    Control statistics over totals (current score first, then history).

    Empty input returns DEFAULT_STATS. One score gives stddev 0 and limits
    equal to the score.
    """
    if not scores:
        return DEFAULT_STATS
    m = mean(scores)
    sd = sample_stddev(scores)
    return LSIStats(
        mean=round_score(m),
        stddev=round_score(sd),
        ucl=round_score(min(m + CONTROL_SIGMA * sd, MAX_LSI_SCORE)),
        lcl=round_score(max(m - CONTROL_SIGMA * sd, 0.0)),
    )


@dataclass(frozen=True)
class Trend:
    direction: str
    change: float
    percent_change: float
    magnitude: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "direction": self.direction,
            "change": self.change,
            "percent_change": self.percent_change,
            "magnitude": self.magnitude,
        }


def calculate_trend(current: float, previous: float) -> Trend:
    """
    Direction: change > +2 up, < -2 down, else stable. Magnitude on |% change|:
    > 10 significant, > 5 moderate, else minimal. A previous score of 0 gives
    0% when unchanged and 100% otherwise.
    """
    change = current - previous
    if previous == 0:
        percent = 0.0 if change == 0 else 100.0
    else:
        percent = change / previous * 100
    if change > TREND_DELTA_THRESHOLD:
        direction = TREND_UP
    elif change < -TREND_DELTA_THRESHOLD:
        direction = TREND_DOWN
    else:
        direction = TREND_STABLE
    if abs(percent) > MAGNITUDE_SIGNIFICANT_PCT:
        magnitude = MAGNITUDE_SIGNIFICANT
    elif abs(percent) > MAGNITUDE_MODERATE_PCT:
        magnitude = MAGNITUDE_MODERATE
    else:
        magnitude = MAGNITUDE_MINIMAL
    return Trend(
        direction=direction,
        change=round_score(change),
        percent_change=round_score(percent),
        magnitude=magnitude,
    )


@dataclass(frozen=True)
class ComponentChange:
    component: str
    name: str
    first: float
    last: float
    change: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "component": self.component,
            "name": self.name,
            "first": self.first,
            "last": self.last,
            "change": self.change,
        }


@dataclass(frozen=True)
class FrameShift:
    frame: str
    baseline: float
    current: float

    def to_dict(self) -> dict[str, Any]:
        return {"frame": self.frame, "baseline": self.baseline, "current": self.current}


@dataclass(frozen=True)
class ValidationReport:
    """Proof-of-improvement summary over a client's run history."""

    run_count: int
    baseline: float
    current: float
    target: float
    improvement: float
    progress: int
    """Percent of the way from baseline to target; capped at 100."""
    stddev: float
    p_value: float
    significant: bool
    cohens_d: float
    effect: str
    effect_label: str
    trend: Trend | None
    component_changes: tuple[ComponentChange, ...] = ()
    frame_shift: tuple[FrameShift, ...] = ()
    scores: tuple[float, ...] = field(default=(), repr=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_count": self.run_count,
            "baseline": self.baseline,
            "current": self.current,
            "target": self.target,
            "improvement": self.improvement,
            "progress": self.progress,
            "stddev": self.stddev,
            "p_value": self.p_value,
            "significant": self.significant,
            "cohens_d": self.cohens_d,
            "effect": self.effect,
            "effect_label": self.effect_label,
            "trend": self.trend.to_dict() if self.trend else None,
            "component_changes": [c.to_dict() for c in self.component_changes],
            "frame_shift": [f.to_dict() for f in self.frame_shift],
            "scores": list(self.scores),
        }


def _frame_values(frames: FrameDistribution | Mapping[str, float] | None) -> dict[str, float]:
    if frames is None:
        return {}
    if isinstance(frames, FrameDistribution):
        return frames.to_dict()
    return {str(k): float(v or 0.0) for k, v in frames.items()}


def _frame_shift(
    baseline: FrameDistribution | Mapping[str, float] | None,
    current: FrameDistribution | Mapping[str, float] | None,
) -> tuple[FrameShift, ...]:
    """Rows for every frame present (> 0) on either side; known frames first."""
    before = _frame_values(baseline)
    after = _frame_values(current)
    keys = [f for f in FRAMES if f in before or f in after]
    for key in (*before, *after):
        if key not in keys:
            keys.append(key)
    return tuple(
        FrameShift(frame=key, baseline=before.get(key, 0.0), current=after.get(key, 0.0))
        for key in keys
        if before.get(key, 0.0) > 0 or after.get(key, 0.0) > 0
    )


def _progress(baseline: float, current: float, target: float) -> int:
    if baseline >= target:
        return 100
    return min(round_half_up((current - baseline) / (target - baseline) * 100), 100)


def build_validation_report(
    history: Sequence[LSIRun],
    *,
    baseline: float | None = None,
    target: float | None = None,
    alpha: float = DEFAULT_ALPHA,
    baseline_frames: FrameDistribution | Mapping[str, float] | None = None,
    current_frames: FrameDistribution | Mapping[str, float] | None = None,
) -> ValidationReport:
    """
    Build the proof-of-improvement report.

    Args:
        history: Runs ordered oldest first.
        baseline: Baseline total; defaults to the first run's total (0 if none).
        target: Target total; defaults to DEFAULT_TARGET_SCORE.
        alpha: Significance threshold for the approximate p-value.
        baseline_frames: Frame distribution at baseline (optional).
        current_frames: Frame distribution now (optional).

    Returns:
        ValidationReport. An empty history yields zeros and p = 1.
    """
    scores = [float(r.total_score) for r in history]
    base = float(baseline) if baseline is not None else (scores[0] if scores else 0.0)
    current = scores[-1] if scores else 0.0
    goal = float(target) if target is not None else DEFAULT_TARGET_SCORE

    sd = sample_stddev(scores)
    p = p_value(base, current, len(scores))
    d = cohens_d(base, current, sd)
    band = effect_band(d)

    trend = calculate_trend(scores[-1], scores[-2]) if len(scores) >= 2 else None

    changes: list[ComponentChange] = []
    if history:
        first_run, last_run = history[0], history[-1]
        for key in COMPONENT_KEYS:
            first = first_run.components.get(key)
            last = last_run.components.get(key)
            changes.append(
                ComponentChange(
                    component=key,
                    name=COMPONENT_CONFIG[key].name,
                    first=first,
                    last=last,
                    change=round_score(last - first),
                )
            )

    report = ValidationReport(
        run_count=len(scores),
        baseline=round_score(base),
        current=round_score(current),
        target=goal,
        improvement=round_score(current - base),
        progress=_progress(base, current, goal),
        stddev=round_score(sd, 2),
        p_value=round_score(clamp(p, 0.0, 1.0), 4),
        significant=p < alpha,
        cohens_d=round_score(d, 2),
        effect=band.band,
        effect_label=band.label,
        trend=trend,
        component_changes=tuple(changes),
        frame_shift=_frame_shift(baseline_frames, current_frames),
        scores=tuple(scores),
    )
    logger.debug(
        "validation_report_built",
        run_count=report.run_count,
        improvement=report.improvement,
        significant=report.significant,
    )
    return report

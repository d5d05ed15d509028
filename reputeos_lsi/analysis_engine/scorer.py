"""
LSI aggregation: component scores, total, percentage and classification.

Responsibilities:
- Run the six component scorers over one set of inputs.
- Sum into a total in [0, 100] and map it to a fixed classification band.
- Score a discovery snapshot end-to-end (signal extraction + aggregation).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from reputeos_lsi.analysis_engine.components import (
    C3_MAX,
    ComponentInputs,
    score_c1,
    score_c2,
    score_c3,
    score_c4,
    score_c5,
    score_c6,
)
from reputeos_lsi.analysis_engine.models import (
    COMPONENT_CONFIG,
    MAX_LSI_SCORE,
    DiscoverRunSnapshot,
    LSIComponents,
)
from reputeos_lsi.analysis_engine.signals import extract_component_inputs
from reputeos_lsi.analysis_engine.statistics import clamp, round_half_up, round_score
from reputeos_lsi.lsi_logging import get_logger

logger = get_logger(__name__)

# Score used for C3 when the subject has no social footprint at all
C3_NEUTRAL_SCORE = C3_MAX / 2


@dataclass(frozen=True)
class Classification:
    """One reputation band; min_score is inclusive."""

    label: str
    description: str
    color: str
    min_score: float

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "description": self.description, "color": self.color}


# Ordered by descending threshold.
LSI_CLASSIFICATIONS: tuple[Classification, ...] = (
    Classification("Elite Authority", "Top 5% reputation standing", "#10B981", 86.0),
    Classification("Strong Authority", "Above-average credibility", "#0066CC", 71.0),
    Classification("Functional Legitimacy", "Adequate but not distinctive", "#F59E0B", 56.0),
    Classification("Reputation Vulnerability", "At risk during crises", "#F97316", 36.0),
    Classification("Severe Impairment", "Immediate intervention required", "#EF4444", float("-inf")),
)


def get_lsi_classification(score: float) -> Classification:
    """Band lookup: >=86 Elite, >=71 Strong, >=56 Functional, >=36 Vulnerability, else Severe."""
    for band in LSI_CLASSIFICATIONS:
        if score >= band.min_score:
            return band
    return LSI_CLASSIFICATIONS[-1]


def calculate_lsi_percentage(total_score: float) -> int:
    return round_half_up(total_score * 100 / MAX_LSI_SCORE)


def calculate_component_percentage(component: str, value: float) -> int:
    """Share of the component's maximum, as an integer percentage."""
    component_config = COMPONENT_CONFIG[component]
    return round_half_up(value * 100 / component_config.max_score)


@dataclass(frozen=True)
class LSIResult:
    """Output of one aggregation: components, total, percentage, band."""

    components: LSIComponents
    total_score: float
    percentage: int
    classification: Classification
    social_data: bool = True
    """False when C3 was scored at the neutral default."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "components": self.components.to_dict(),
            "total_score": self.total_score,
            "percentage": self.percentage,
            "classification": self.classification.label,
            "classification_detail": self.classification.to_dict(),
            "social_data": self.social_data,
        }


def calculate_lsi(inputs: ComponentInputs) -> LSIResult:
    """
    Score all six components and aggregate.

    Args:
        inputs: Component input records; inputs.c3 may be None (no social data).

    Returns:
        LSIResult whose total_score is the sum of the six clamped sub-scores,
        rounded to one decimal and bounded to [0, 100].
    """
    c3 = score_c3(inputs.c3) if inputs.c3 is not None else C3_NEUTRAL_SCORE
    components = LSIComponents(
        c1=score_c1(inputs.c1),
        c2=score_c2(inputs.c2),
        c3=c3,
        c4=score_c4(inputs.c4),
        c5=score_c5(inputs.c5),
        c6=score_c6(inputs.c6),
    )
    total = round_score(clamp(components.total(), 0.0, MAX_LSI_SCORE))
    classification = get_lsi_classification(total)
    logger.debug(
        "lsi_calculated",
        total_score=total,
        classification=classification.label,
        social_data=inputs.c3 is not None,
    )
    return LSIResult(
        components=components,
        total_score=total,
        percentage=calculate_lsi_percentage(total),
        classification=classification,
        social_data=inputs.c3 is not None,
    )


def calculate_lsi_from_snapshot(snapshot: DiscoverRunSnapshot) -> tuple[LSIResult, ComponentInputs]:
    """Extract component inputs from a discovery snapshot, then aggregate."""
    inputs = extract_component_inputs(snapshot)
    return calculate_lsi(inputs), inputs

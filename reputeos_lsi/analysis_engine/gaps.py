"""
Gap analysis: unmet component targets, largest first.

Only strictly positive gaps are reported. Ties keep component order
(c1..c6). Each gap carries a 0-10 priority relative to the component's
maximum and a Pareto flag for the "vital few" covering the first 80% of
the total shortfall.
"""

from __future__ import annotations

from reputeos_lsi.analysis_engine.models import (
    COMPONENT_CONFIG,
    COMPONENT_KEYS,
    LSIComponents,
    LSIGap,
    default_target,
)
from reputeos_lsi.analysis_engine.statistics import round_half_up, round_score

PARETO_SHARE = 0.8


def calculate_gaps(current: LSIComponents, target: LSIComponents | None = None) -> list[LSIGap]:
    """
    Gaps between current and target component scores.

    Args:
        current: Current component scores.
        target: Target profile; defaults to 80% of each component maximum.

    Returns:
        Gaps with target - current > 0, sorted by descending raw gap.
    """
    goal = target if target is not None else default_target()
    raw: list[tuple[str, float]] = []
    for key in COMPONENT_KEYS:
        diff = goal.get(key) - current.get(key)
        if diff > 0:
            raw.append((key, diff))
    # sorted() is stable: equal gaps stay in c1..c6 order
    raw = sorted(raw, key=lambda item: item[1], reverse=True)

    total_gap = sum(diff for _, diff in raw)
    gaps: list[LSIGap] = []
    cumulative = 0.0
    for index, (key, diff) in enumerate(raw):
        component_config = COMPONENT_CONFIG[key]
        preceding_share = cumulative / total_gap if total_gap > 0 else 0.0
        cumulative += diff
        gaps.append(
            LSIGap(
                component=key,
                name=component_config.name,
                gap=round_score(diff),
                priority=round_half_up(diff / component_config.max_score * 10),
                rank=index + 1,
                cumulative_share=round_score(cumulative / total_gap, 3) if total_gap > 0 else 0.0,
                pareto=preceding_share < PARETO_SHARE,
            )
        )
    return gaps

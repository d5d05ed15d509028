"""
Tests for gap analysis: positive gaps only, ordering, tie-break, priority and Pareto flag.
"""

from __future__ import annotations

import pytest

from reputeos_lsi.analysis_engine.gaps import calculate_gaps
from reputeos_lsi.analysis_engine.models import LSIComponents, default_target


def test_default_target_is_80_percent_of_max():
    assert default_target().to_dict() == {"c1": 16.0, "c2": 16.0, "c3": 16.0, "c4": 12.0, "c5": 12.0, "c6": 8.0}


def test_gap_scenario_order_and_tie_break():
    """Ties (c1/c2/c3 at 6, c4/c5 at 4) keep component order; c6 (3) last."""
    current = LSIComponents(c1=10, c2=10, c3=10, c4=8, c5=8, c6=5)
    gaps = calculate_gaps(current)
    assert [g.component for g in gaps] == ["c1", "c2", "c3", "c4", "c5", "c6"]
    assert [g.gap for g in gaps] == [6.0, 6.0, 6.0, 4.0, 4.0, 3.0]
    assert [g.rank for g in gaps] == [1, 2, 3, 4, 5, 6]
    assert [g.priority for g in gaps] == [3, 3, 3, 3, 3, 3]
    assert [g.pareto for g in gaps] == [True, True, True, True, True, False]
    assert gaps[-1].cumulative_share == pytest.approx(1.0)
    assert gaps[0].name == "Search Reputation"


def test_tie_break_is_component_order_not_input_magnitude():
    """Equal gaps on c5 and c2 list c2 first."""
    current = LSIComponents(c1=16, c2=14, c3=16, c4=12, c5=10, c6=8)
    gaps = calculate_gaps(current)
    assert [(g.component, g.gap) for g in gaps] == [("c2", 2.0), ("c5", 2.0)]


def test_only_strictly_positive_gaps():
    current = LSIComponents(c1=20, c2=16, c3=5, c4=15, c5=12, c6=0)
    gaps = calculate_gaps(current)
    assert [g.component for g in gaps] == ["c3", "c6"]
    assert all(g.gap > 0 for g in gaps)


@pytest.mark.parametrize(
    "scores",
    [(0, 0, 0, 0, 0, 0), (10, 10, 10, 8, 8, 5), (20, 20, 20, 15, 15, 10)],
)
def test_no_gaps_against_itself(scores):
    x = LSIComponents(*scores)
    assert calculate_gaps(x, x) == []


def test_custom_target_and_sorted_descending():
    current = LSIComponents(c1=5, c2=12, c3=19, c4=3, c5=14, c6=2)
    target = LSIComponents(c1=20, c2=20, c3=20, c4=15, c5=15, c6=10)
    gaps = calculate_gaps(current, target)
    values = [g.gap for g in gaps]
    assert values == sorted(values, reverse=True)
    assert gaps[0].component == "c1"
    assert gaps[0].priority == 8  # 15 / 20 * 10 = 7.5 -> 8


def test_priority_rounds_halves_up():
    """A 5-point gap on a 20-point component is 2.5, reported as priority 3."""
    gaps = calculate_gaps(LSIComponents(c1=11, c2=16, c3=16, c4=12, c5=12, c6=8))
    assert [(g.component, g.gap, g.priority) for g in gaps] == [("c1", 5.0, 3)]

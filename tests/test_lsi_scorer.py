"""
Tests for LSI aggregation: totals, percentages, classification bands.
"""

from __future__ import annotations

import pytest

from reputeos_lsi.analysis_engine.components import ComponentInputs
from reputeos_lsi.analysis_engine.scorer import (
    LSI_CLASSIFICATIONS,
    calculate_component_percentage,
    calculate_lsi,
    calculate_lsi_percentage,
    get_lsi_classification,
)


@pytest.mark.parametrize(
    "score,label",
    [
        (0, "Severe Impairment"),
        (35, "Severe Impairment"),
        (35.9, "Severe Impairment"),
        (36, "Reputation Vulnerability"),
        (55, "Reputation Vulnerability"),
        (56, "Functional Legitimacy"),
        (70, "Functional Legitimacy"),
        (71, "Strong Authority"),
        (85, "Strong Authority"),
        (86, "Elite Authority"),
        (100, "Elite Authority"),
    ],
)
def test_classification_boundaries(score, label):
    """Lower bounds are inclusive."""
    assert get_lsi_classification(score).label == label


def test_classification_bands_exhaustive():
    """Every score in [0, 100] at 0.1 resolution maps to exactly one band."""
    labels = {band.label for band in LSI_CLASSIFICATIONS}
    for tenth in range(0, 1001):
        score = tenth / 10
        matches = [
            band for band in LSI_CLASSIFICATIONS
            if band is get_lsi_classification(score)
        ]
        assert len(matches) == 1
        assert matches[0].label in labels


def test_classification_detail():
    band = get_lsi_classification(90)
    assert band.to_dict() == {
        "label": "Elite Authority",
        "description": "Top 5% reputation standing",
        "color": "#10B981",
    }


def test_max_inputs_total_100(max_inputs):
    result = calculate_lsi(max_inputs)
    assert result.total_score == 100.0
    assert result.percentage == 100
    assert result.classification.label == "Elite Authority"
    assert result.social_data is True


def test_zero_inputs_total(zero_inputs):
    """All-zero inputs: only the guarded c1 and c6 defaults score."""
    result = calculate_lsi(zero_inputs)
    assert result.components.to_dict() == {"c1": 5.0, "c2": 0.0, "c3": 0.0, "c4": 0.0, "c5": 0.0, "c6": 5.0}
    assert result.total_score == 10.0
    assert result.percentage == 10


def test_missing_social_scores_neutral(zero_inputs):
    inputs = ComponentInputs(
        c1=zero_inputs.c1,
        c2=zero_inputs.c2,
        c3=None,
        c4=zero_inputs.c4,
        c5=zero_inputs.c5,
        c6=zero_inputs.c6,
    )
    result = calculate_lsi(inputs)
    assert result.components.c3 == 10.0
    assert result.total_score == 20.0
    assert result.social_data is False


def test_total_equals_sum_of_components(max_inputs, zero_inputs):
    for inputs in (max_inputs, zero_inputs):
        result = calculate_lsi(inputs)
        assert result.total_score == round(sum(result.components.to_dict().values()), 1)


@pytest.mark.parametrize("total,expected", [(72.5, 73), (72.4, 72), (0.0, 0), (85.5, 86)])
def test_lsi_percentage_rounds_half_up(total, expected):
    assert calculate_lsi_percentage(total) == expected


def test_component_percentage():
    assert calculate_component_percentage("c4", 7.5) == 50
    assert calculate_component_percentage("c6", 10.0) == 100
    assert calculate_component_percentage("c1", 0.0) == 0

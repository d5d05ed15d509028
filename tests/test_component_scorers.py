"""
Tests for the six component scorers: bounds, documented examples, and input records.
"""

from __future__ import annotations

import pytest

from reputeos_lsi.analysis_engine.components import (
    SCORERS,
    ComponentInputs,
    CrisisMoatInput,
    EliteDiscourseInput,
    MediaFramingInput,
    SearchReputationInput,
    SocialBacklashInput,
    ThirdPartyValidationInput,
    score_c1,
    score_c2,
    score_c3,
    score_c4,
    score_c5,
    score_c6,
)
from reputeos_lsi.analysis_engine.models import COMPONENT_CONFIG
from reputeos_lsi.core.exceptions import ComponentInputError

HUGE = 1e12


def test_c1_search_reputation_example():
    """16/20 positive, panel, wikipedia, 10% negative -> 6.4 + 4 + 3 + 4.5 = 17.9."""
    score = score_c1(SearchReputationInput(16, 20, True, True, 0.1))
    assert score == pytest.approx(17.9)


def test_c1_zero_results_is_guarded():
    """No results: ratio term is 0, only the (1 - negative) term scores."""
    assert score_c1(SearchReputationInput(0, 0, False, False, 0.0)) == 5.0


def test_c2_media_framing_example():
    """5/10 positive (4) + 4 tier-1 (2) + 3 quotes (1.5) + 0.5 consistency (1.5) = 9.0."""
    assert score_c2(MediaFramingInput(5, 10, 4, 3, 0.5)) == pytest.approx(9.0)


def test_c2_tier1_and_quotes_saturate():
    """Tier-1 caps at 5 (10 mentions), quotes at 4 (8 quotes)."""
    low = score_c2(MediaFramingInput(0, 0, 10, 8, 0.0))
    high = score_c2(MediaFramingInput(0, 0, 1000, 1000, 0.0))
    assert low == high == 9.0


@pytest.mark.parametrize(
    "response_time,bonus",
    [(0.5, 2.0), (1.0, 1.0), (3.9, 1.0), (4.0, 0.0), (48.0, 0.0), (None, 0.0)],
)
def test_c3_crisis_response_bonus(response_time, bonus):
    """Response under 1h adds 2, under 4h adds 1; none observed adds nothing."""
    base = SocialBacklashInput(5, 0, 5, 0, 0.0)
    timed = SocialBacklashInput(5, 0, 5, 0, 0.0, response_time)
    assert score_c3(timed) - score_c3(base) == pytest.approx(bonus)


def test_c3_net_sentiment_scale():
    """All negative sentiment scores 0 on the sentiment term, balanced scores 5."""
    assert score_c3(SocialBacklashInput(0, 0, 10, 0, 0.0)) == 0.0
    assert score_c3(SocialBacklashInput(5, 0, 5, 0, 0.0)) == 5.0
    assert score_c3(SocialBacklashInput(10, 0, 0, 0, 0.0)) == 10.0


def test_c4_elite_discourse_example():
    """8 peers (2) + 2 endorsements (1) + 3 invitations (1.5) + 5 citations (1) = 5.5."""
    assert score_c4(EliteDiscourseInput(8, 2, 3, 5)) == pytest.approx(5.5)


def test_c5_third_party_validation_example():
    """1 award (2) + 6 analysts (3) + 1 ranking (0.5) + 1 certification (0.5) = 6.0."""
    assert score_c5(ThirdPartyValidationInput(1, 6, 1, 1)) == pytest.approx(6.0)


def test_c6_no_crises_counts_as_full_recovery():
    """crises_handled = 0 earns the full 4 recovery points."""
    assert score_c6(CrisisMoatInput(0, 0, 0, 0.0, 100)) == 4.0


@pytest.mark.parametrize("speed,bonus", [(1, 1.0), (23.9, 1.0), (24, 0.5), (71, 0.5), (72, 0.0)])
def test_c6_recovery_speed_bonus(speed, bonus):
    """Under 24h adds 1, under 72h adds 0.5."""
    assert score_c6(CrisisMoatInput(0, 0, 0, 0.0, speed)) == pytest.approx(4.0 + bonus)


def test_c6_partial_recovery():
    """1 of 2 crises recovered -> 2 points; trust 0.5 -> 1; slow recovery -> 0."""
    assert score_c6(CrisisMoatInput(2, 1, 0, 0.5, 200)) == pytest.approx(3.0)


ZERO_RECORDS = {
    "c1": SearchReputationInput(0, 0, False, False, 0.0),
    "c2": MediaFramingInput(0, 0, 0, 0, 0.0),
    "c3": SocialBacklashInput(0, 0, 0, 0, 0.0),
    "c4": EliteDiscourseInput(0, 0, 0, 0),
    "c5": ThirdPartyValidationInput(0, 0, 0, 0),
    "c6": CrisisMoatInput(0, 0, 0, 0.0, 0),
}

HUGE_RECORDS = {
    "c1": SearchReputationInput(HUGE, HUGE, True, True, 0.0),
    "c2": MediaFramingInput(HUGE, HUGE, HUGE, HUGE, 1.0),
    "c3": SocialBacklashInput(HUGE, 0, 0, HUGE, HUGE, 0.1),
    "c4": EliteDiscourseInput(HUGE, HUGE, HUGE, HUGE),
    "c5": ThirdPartyValidationInput(HUGE, HUGE, HUGE, HUGE),
    "c6": CrisisMoatInput(HUGE, HUGE, HUGE, 1.0, 0),
}

# Out-of-range values a caller might leak past validation; scorers still clamp
SKEWED_RECORDS = {
    "c1": SearchReputationInput(50, 10, True, True, -3.0),
    "c2": MediaFramingInput(50, 10, 100, 100, 7.0),
    "c3": SocialBacklashInput(100, 0, 0, HUGE, HUGE, 0.0),
    "c4": EliteDiscourseInput(HUGE, 0, 0, 0),
    "c5": ThirdPartyValidationInput(HUGE, HUGE, 0, 0),
    "c6": CrisisMoatInput(1, 50, 100, 9.0, 0),
}


@pytest.mark.parametrize("key", sorted(SCORERS))
@pytest.mark.parametrize("records", [ZERO_RECORDS, HUGE_RECORDS, SKEWED_RECORDS], ids=["zero", "huge", "skewed"])
def test_scores_stay_within_component_bounds(key, records):
    """Every scorer output lies in [0, component max] and has one decimal."""
    score = SCORERS[key](records[key])
    maximum = COMPONENT_CONFIG[key].max_score
    assert 0.0 <= score <= maximum
    assert score == round(score, 1)


@pytest.mark.parametrize("key", sorted(SCORERS))
def test_huge_inputs_reach_component_max(key):
    """Saturated inputs score exactly the component maximum."""
    assert SCORERS[key](HUGE_RECORDS[key]) == COMPONENT_CONFIG[key].max_score


def test_input_record_from_dict_requires_fields():
    """Missing numeric field raises ComponentInputError naming the field."""
    with pytest.raises(ComponentInputError) as exc:
        EliteDiscourseInput.from_dict({"peer_mentions": 1, "leader_endorsements": 1, "citations": 1})
    assert exc.value.field == "c4.speaking_invitations"


def test_input_record_rejects_bool_for_number_and_number_for_bool():
    """True is not a count and 1 is not a flag."""
    with pytest.raises(ComponentInputError):
        ThirdPartyValidationInput.from_dict(
            {"awards": True, "analyst_mentions": 1, "ranking_lists": 1, "certifications": 1}
        )
    with pytest.raises(ComponentInputError):
        SearchReputationInput.from_dict({
            "positive_results": 1,
            "total_results": 2,
            "knowledge_panel_present": 1,
            "wikipedia_present": False,
            "negative_content_ratio": 0.1,
        })


def test_social_input_crisis_response_time_optional():
    record = SocialBacklashInput.from_dict({
        "positive_sentiment": 1,
        "neutral_sentiment": 1,
        "negative_sentiment": 1,
        "mention_volume": 3,
        "engagement_rate": 0.02,
    })
    assert record.crisis_response_time is None


def test_component_inputs_from_dict_requires_all_records(max_inputs):
    """All six records are required for direct scoring."""
    payload = max_inputs.to_dict()
    del payload["c4"]
    with pytest.raises(ComponentInputError, match="c4"):
        ComponentInputs.from_dict(payload)


def test_component_inputs_dict_round_trip(max_inputs):
    assert ComponentInputs.from_dict(max_inputs.to_dict()) == max_inputs


def test_component_scores_round_halves_up():
    """One peer mention is 0.25 points, reported as 0.3."""
    assert score_c4(EliteDiscourseInput(1, 0, 0, 0)) == 0.3
    assert score_c4(EliteDiscourseInput(3, 0, 0, 0)) == 0.8  # 0.75

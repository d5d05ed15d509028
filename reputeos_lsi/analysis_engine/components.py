"""
Component scorers: one pure function per LSI dimension (C1..C6).

Each scorer maps a structured input record to a bounded sub-score. Every
additive term is capped on its own before summation, and the total is
clamped to [0, component max] a second time before rounding to one decimal.
Scorers never raise on numeric input; missing fields are rejected earlier by
the from_dict constructors.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Mapping

from reputeos_lsi.analysis_engine.models import COMPONENT_CONFIG, require_number
from reputeos_lsi.analysis_engine.statistics import clamp, round_score
from reputeos_lsi.core.exceptions import ComponentInputError

C1_MAX = COMPONENT_CONFIG["c1"].max_score
C2_MAX = COMPONENT_CONFIG["c2"].max_score
C3_MAX = COMPONENT_CONFIG["c3"].max_score
C4_MAX = COMPONENT_CONFIG["c4"].max_score
C5_MAX = COMPONENT_CONFIG["c5"].max_score
C6_MAX = COMPONENT_CONFIG["c6"].max_score


def _optional_number(payload: Mapping[str, Any], key: str, path: str) -> float | None:
    if payload.get(key) is None:
        return None
    return require_number(payload, key, path)


def _flag(payload: Mapping[str, Any], key: str, path: str) -> bool:
    if key not in payload or payload[key] is None:
        raise ComponentInputError(f"{path}.{key} is required", field=f"{path}.{key}")
    value = payload[key]
    if not isinstance(value, bool):
        raise ComponentInputError(f"{path}.{key} must be a boolean", field=f"{path}.{key}")
    return value


def _finish(total: float, maximum: float) -> float:
    return round_score(clamp(total, 0.0, maximum))


# -----------------------------------------------------------------------------
# Input records
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class SearchReputationInput:
    positive_results: float
    total_results: float
    knowledge_panel_present: bool
    wikipedia_present: bool
    negative_content_ratio: float
    """Share of negative content, [0, 1]."""

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any], path: str = "c1") -> SearchReputationInput:
        return cls(
            positive_results=require_number(payload, "positive_results", path),
            total_results=require_number(payload, "total_results", path),
            knowledge_panel_present=_flag(payload, "knowledge_panel_present", path),
            wikipedia_present=_flag(payload, "wikipedia_present", path),
            negative_content_ratio=require_number(payload, "negative_content_ratio", path),
        )


@dataclass(frozen=True)
class MediaFramingInput:
    positive_mentions: float
    total_mentions: float
    tier1_mentions: float
    expert_quotes: float
    narrative_consistency: float
    """[0, 1]."""

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any], path: str = "c2") -> MediaFramingInput:
        return cls(
            positive_mentions=require_number(payload, "positive_mentions", path),
            total_mentions=require_number(payload, "total_mentions", path),
            tier1_mentions=require_number(payload, "tier1_mentions", path),
            expert_quotes=require_number(payload, "expert_quotes", path),
            narrative_consistency=require_number(payload, "narrative_consistency", path),
        )


@dataclass(frozen=True)
class SocialBacklashInput:
    positive_sentiment: float
    neutral_sentiment: float
    negative_sentiment: float
    mention_volume: float
    engagement_rate: float
    crisis_response_time: float | None = None
    """Hours to respond to the last crisis; None when no crisis was observed."""

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any], path: str = "c3") -> SocialBacklashInput:
        return cls(
            positive_sentiment=require_number(payload, "positive_sentiment", path),
            neutral_sentiment=require_number(payload, "neutral_sentiment", path),
            negative_sentiment=require_number(payload, "negative_sentiment", path),
            mention_volume=require_number(payload, "mention_volume", path),
            engagement_rate=require_number(payload, "engagement_rate", path),
            crisis_response_time=_optional_number(payload, "crisis_response_time", path),
        )


@dataclass(frozen=True)
class EliteDiscourseInput:
    peer_mentions: float
    leader_endorsements: float
    speaking_invitations: float
    citations: float

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any], path: str = "c4") -> EliteDiscourseInput:
        return cls(
            peer_mentions=require_number(payload, "peer_mentions", path),
            leader_endorsements=require_number(payload, "leader_endorsements", path),
            speaking_invitations=require_number(payload, "speaking_invitations", path),
            citations=require_number(payload, "citations", path),
        )


@dataclass(frozen=True)
class ThirdPartyValidationInput:
    awards: float
    analyst_mentions: float
    ranking_lists: float
    certifications: float

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any], path: str = "c5") -> ThirdPartyValidationInput:
        return cls(
            awards=require_number(payload, "awards", path),
            analyst_mentions=require_number(payload, "analyst_mentions", path),
            ranking_lists=require_number(payload, "ranking_lists", path),
            certifications=require_number(payload, "certifications", path),
        )


@dataclass(frozen=True)
class CrisisMoatInput:
    crises_handled: float
    crises_recovered: float
    proactive_narratives: float
    trust_index: float
    """[0, 1]."""
    recovery_speed: float
    """Average hours to recover."""

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any], path: str = "c6") -> CrisisMoatInput:
        return cls(
            crises_handled=require_number(payload, "crises_handled", path),
            crises_recovered=require_number(payload, "crises_recovered", path),
            proactive_narratives=require_number(payload, "proactive_narratives", path),
            trust_index=require_number(payload, "trust_index", path),
            recovery_speed=require_number(payload, "recovery_speed", path),
        )


@dataclass(frozen=True)
class ComponentInputs:
    """
    The six component input records for one scoring invocation.

    c3 is None when the source snapshot had no social mentions at all; the
    aggregator then scores C3 at its neutral midpoint.
    """

    c1: SearchReputationInput
    c2: MediaFramingInput
    c3: SocialBacklashInput | None
    c4: EliteDiscourseInput
    c5: ThirdPartyValidationInput
    c6: CrisisMoatInput

    def to_dict(self) -> dict[str, Any]:
        return {
            "c1": asdict(self.c1),
            "c2": asdict(self.c2),
            "c3": asdict(self.c3) if self.c3 is not None else None,
            "c4": asdict(self.c4),
            "c5": asdict(self.c5),
            "c6": asdict(self.c6),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> ComponentInputs:
        """Build from a direct-input payload; all six records are required."""
        records: dict[str, Any] = {}
        for key, record_cls in _INPUT_TYPES.items():
            raw = payload.get(key) if isinstance(payload, Mapping) else None
            if not isinstance(raw, Mapping):
                raise ComponentInputError(f"{key} input record is required", field=key)
            records[key] = record_cls.from_dict(raw, key)
        return cls(**records)


_INPUT_TYPES: dict[str, Any] = {
    "c1": SearchReputationInput,
    "c2": MediaFramingInput,
    "c3": SocialBacklashInput,
    "c4": EliteDiscourseInput,
    "c5": ThirdPartyValidationInput,
    "c6": CrisisMoatInput,
}


# -----------------------------------------------------------------------------
# Scorers
# -----------------------------------------------------------------------------


def score_c1(data: SearchReputationInput) -> float:
    """
    Search Reputation (0-20).

    Positive ratio up to 8, knowledge panel +4, encyclopedia profile +3,
    (1 - negative content ratio) up to 5.
    """
    ratio = data.positive_results / data.total_results if data.total_results > 0 else 0.0
    score = clamp(ratio * 8, 0.0, 8.0)
    if data.knowledge_panel_present:
        score += 4
    if data.wikipedia_present:
        score += 3
    score += (1 - clamp(data.negative_content_ratio, 0.0, 1.0)) * 5
    return _finish(score, C1_MAX)


def score_c2(data: MediaFramingInput) -> float:
    """
    Media Framing (0-20).

    Positive ratio up to 8, tier-1 mentions up to 5 (saturates at 10),
    expert quotes up to 4 (saturates at 8), narrative consistency up to 3.
    """
    ratio = data.positive_mentions / data.total_mentions if data.total_mentions > 0 else 0.0
    score = clamp(ratio * 8, 0.0, 8.0)
    score += clamp(data.tier1_mentions / 2, 0.0, 5.0)
    score += clamp(data.expert_quotes / 2, 0.0, 4.0)
    score += clamp(data.narrative_consistency, 0.0, 1.0) * 3
    return _finish(score, C2_MAX)


def score_c3(data: SocialBacklashInput) -> float:
    """
    Social Backlash (0-20); higher means less backlash.

    Net sentiment up to 10, log10 volume up to 4, engagement up to 4,
    crisis response bonus +2 under 1h or +1 under 4h.
    """
    score = 0.0
    total = data.positive_sentiment + data.neutral_sentiment + data.negative_sentiment
    if total > 0:
        net = (data.positive_sentiment - data.negative_sentiment) / total
        score += clamp((net + 1) / 2 * 10, 0.0, 10.0)
    score += clamp(math.log10(max(data.mention_volume, 0.0) + 1) * 2, 0.0, 4.0)
    score += clamp(data.engagement_rate * 100, 0.0, 4.0)
    if data.crisis_response_time is not None:
        if data.crisis_response_time < 1:
            score += 2
        elif data.crisis_response_time < 4:
            score += 1
    return _finish(score, C3_MAX)


def score_c4(data: EliteDiscourseInput) -> float:
    """Elite Discourse (0-15): peers /4 cap 5, endorsements /2 cap 4, invitations /2 cap 4, citations /5 cap 2."""
    score = clamp(data.peer_mentions / 4, 0.0, 5.0)
    score += clamp(data.leader_endorsements / 2, 0.0, 4.0)
    score += clamp(data.speaking_invitations / 2, 0.0, 4.0)
    score += clamp(data.citations / 5, 0.0, 2.0)
    return _finish(score, C4_MAX)


def score_c5(data: ThirdPartyValidationInput) -> float:
    """Third-Party Validation (0-15): awards x2 cap 6, analysts /2 cap 4, rankings /2 cap 3, certifications /2 cap 2."""
    score = clamp(data.awards * 2, 0.0, 6.0)
    score += clamp(data.analyst_mentions / 2, 0.0, 4.0)
    score += clamp(data.ranking_lists / 2, 0.0, 3.0)
    score += clamp(data.certifications / 2, 0.0, 2.0)
    return _finish(score, C5_MAX)


def score_c6(data: CrisisMoatInput) -> float:
    """
    Crisis Moat (0-10); higher means more resilient.

    No crises handled counts as full recovery (4 points): absence of crisis
    is a positive signal, not missing data.
    """
    if data.crises_handled > 0:
        score = clamp(data.crises_recovered / data.crises_handled * 4, 0.0, 4.0)
    else:
        score = 4.0
    score += clamp(data.proactive_narratives / 2, 0.0, 3.0)
    score += clamp(data.trust_index, 0.0, 1.0) * 2
    if data.recovery_speed < 24:
        score += 1
    elif data.recovery_speed < 72:
        score += 0.5
    return _finish(score, C6_MAX)


SCORERS = {
    "c1": score_c1,
    "c2": score_c2,
    "c3": score_c3,
    "c4": score_c4,
    "c5": score_c5,
    "c6": score_c6,
}

"""
Pydantic request/response models for the LSI API.

Boundary validation: counts are non-negative, ratios lie in [0, 1], notes are
at most 1000 characters. The scoring core only clamps; it does not re-check
these ranges.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator

from reputeos_lsi.analysis_engine.components import ComponentInputs
from reputeos_lsi.analysis_engine.models import LSIComponents


class SearchReputationModel(BaseModel):
    positive_results: float = Field(..., ge=0)
    total_results: float = Field(..., ge=0)
    knowledge_panel_present: bool
    wikipedia_present: bool
    negative_content_ratio: float = Field(..., ge=0, le=1)


class MediaFramingModel(BaseModel):
    positive_mentions: float = Field(..., ge=0)
    total_mentions: float = Field(..., ge=0)
    tier1_mentions: float = Field(..., ge=0)
    expert_quotes: float = Field(..., ge=0)
    narrative_consistency: float = Field(..., ge=0, le=1)


class SocialBacklashModel(BaseModel):
    positive_sentiment: float = Field(..., ge=0)
    neutral_sentiment: float = Field(..., ge=0)
    negative_sentiment: float = Field(..., ge=0)
    mention_volume: float = Field(..., ge=0)
    engagement_rate: float = Field(..., ge=0)
    crisis_response_time: float | None = Field(None, ge=0, description="Hours; omit when no crisis")


class EliteDiscourseModel(BaseModel):
    peer_mentions: float = Field(..., ge=0)
    leader_endorsements: float = Field(..., ge=0)
    speaking_invitations: float = Field(..., ge=0)
    citations: float = Field(..., ge=0)


class ThirdPartyValidationModel(BaseModel):
    awards: float = Field(..., ge=0)
    analyst_mentions: float = Field(..., ge=0)
    ranking_lists: float = Field(..., ge=0)
    certifications: float = Field(..., ge=0)


class CrisisMoatModel(BaseModel):
    crises_handled: float = Field(..., ge=0)
    crises_recovered: float = Field(..., ge=0)
    proactive_narratives: float = Field(..., ge=0)
    trust_index: float = Field(..., ge=0, le=1)
    recovery_speed: float = Field(..., ge=0, description="Average hours to recover")


class ComponentInputsModel(BaseModel):
    """Six direct component input records (manual scoring)."""

    c1: SearchReputationModel
    c2: MediaFramingModel
    c3: SocialBacklashModel
    c4: EliteDiscourseModel
    c5: ThirdPartyValidationModel
    c6: CrisisMoatModel

    def to_inputs(self) -> ComponentInputs:
        return ComponentInputs.from_dict(self.model_dump())


class ComponentScoresModel(BaseModel):
    """Target profile, one score per component."""

    c1: float = Field(..., ge=0, le=20)
    c2: float = Field(..., ge=0, le=20)
    c3: float = Field(..., ge=0, le=20)
    c4: float = Field(..., ge=0, le=15)
    c5: float = Field(..., ge=0, le=15)
    c6: float = Field(..., ge=0, le=10)

    def to_components(self) -> LSIComponents:
        return LSIComponents.from_dict(self.model_dump())


class CalculateLSIRequest(BaseModel):
    """POST /api/lsi/calculate body: exactly one of inputs or snapshot."""

    client_id: str = Field(..., min_length=1, max_length=128, description="Subject (client) id")
    inputs: ComponentInputsModel | None = Field(None, description="Direct component inputs")
    snapshot: dict[str, Any] | None = Field(None, description="Discovery run snapshot")
    target_scores: ComponentScoresModel | None = Field(None, description="Target profile; default 80% of max")
    notes: str | None = Field(None, max_length=1000)

    @model_validator(mode="after")
    def _one_source(self) -> CalculateLSIRequest:
        if (self.inputs is None) == (self.snapshot is None):
            raise ValueError("provide exactly one of inputs or snapshot")
        return self


class CalculateLSIResponse(BaseModel):
    success: bool = Field(..., description="True when the run was scored and stored")
    lsi_run: dict[str, Any] = Field(..., description="Stored run with classification detail and alerts")


class DeriveRequest(BaseModel):
    """POST /api/lsi/derive body: a discovery snapshot."""

    snapshot: dict[str, Any]


class RunsResponse(BaseModel):
    client_id: str
    runs: list[dict[str, Any]] = Field(default_factory=list, description="Newest first")


class ValidationRequest(BaseModel):
    """
    POST /api/lsi/{client_id}/validation body. Frame distributions are
    percentages keyed by frame name; runs do not store them, so frame shift
    rows appear only when the caller supplies both sides.
    """

    target: float | None = Field(None, ge=0, le=100)
    baseline: float | None = Field(None, ge=0, le=100)
    baseline_frames: dict[str, float] | None = None
    current_frames: dict[str, float] | None = None

    @model_validator(mode="after")
    def _non_negative_frames(self) -> ValidationRequest:
        for frames in (self.baseline_frames, self.current_frames):
            if frames and any(v < 0 for v in frames.values()):
                raise ValueError("frame percentages must be non-negative")
        return self

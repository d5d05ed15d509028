"""
Domain models for LSI scoring.

Discovery input (Mention, DiscoverRunSnapshot), component scores
(LSIComponents), run statistics and gaps, and the persisted LSIRun record.
Plain dataclasses; no ORM coupling so the run store stays swappable.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from reputeos_lsi.analysis_engine.statistics import round_score
from reputeos_lsi.core.exceptions import ComponentInputError, SnapshotError

CATEGORY_SEARCH = "search"
CATEGORY_NEWS = "news"
CATEGORY_SOCIAL = "social"
CATEGORY_ACADEMIC = "academic"
CATEGORY_VIDEO = "video"
CATEGORY_FINANCIAL = "financial"
CATEGORY_REGULATORY = "regulatory"

CATEGORIES = frozenset({
    CATEGORY_SEARCH,
    CATEGORY_NEWS,
    CATEGORY_SOCIAL,
    CATEGORY_ACADEMIC,
    CATEGORY_VIDEO,
    CATEGORY_FINANCIAL,
    CATEGORY_REGULATORY,
})

FRAME_EXPERT = "expert"
FRAME_FOUNDER = "founder"
FRAME_LEADER = "leader"
FRAME_FAMILY = "family"
FRAME_CRISIS = "crisis"
FRAME_OTHER = "other"

FRAMES = (FRAME_EXPERT, FRAME_FOUNDER, FRAME_LEADER, FRAME_FAMILY, FRAME_CRISIS, FRAME_OTHER)

COMPONENT_KEYS = ("c1", "c2", "c3", "c4", "c5", "c6")


@dataclass(frozen=True)
class ComponentSpec:
    """Static description of one LSI component."""

    key: str
    name: str
    max_score: float
    description: str
    factors: tuple[str, ...]


COMPONENT_CONFIG: Mapping[str, ComponentSpec] = MappingProxyType({
    "c1": ComponentSpec(
        "c1", "Search Reputation", 20.0,
        "Search results sentiment & frame distribution",
        (
            "First page search results sentiment",
            "Knowledge panel presence & accuracy",
            "Wikipedia presence",
            "Negative content ratio",
        ),
    ),
    "c2": ComponentSpec(
        "c2", "Media Framing", 20.0,
        "Journalist quotes & expert positioning",
        (
            "Positive journalist mentions",
            "Expert quote frequency",
            "Media outlet quality",
            "Narrative consistency",
        ),
    ),
    "c3": ComponentSpec(
        "c3", "Social Backlash", 20.0,
        "Social media sentiment & volume",
        (
            "Social sentiment ratio",
            "Mention volume trends",
            "Crisis response effectiveness",
            "Community engagement",
        ),
    ),
    "c4": ComponentSpec(
        "c4", "Elite Discourse", 15.0,
        "Industry leader mentions & citations",
        (
            "Peer executive mentions",
            "Industry leader endorsements",
            "Conference speaking invitations",
            "Thought leadership citations",
        ),
    ),
    "c5": ComponentSpec(
        "c5", "Third-Party Validation", 15.0,
        "Awards, rankings & analyst coverage",
        (
            "Industry awards & recognition",
            "Analyst firm mentions",
            "Ranking list inclusions",
            "Certification credibility",
        ),
    ),
    "c6": ComponentSpec(
        "c6", "Crisis Moat", 10.0,
        "Resilience & narrative defense",
        (
            "Crisis response history",
            "Proactive narrative control",
            "Stakeholder trust index",
            "Reputation recovery speed",
        ),
    ),
})

MAX_LSI_SCORE = 100.0


def require_number(payload: Mapping[str, Any], key: str, path: str) -> float:
    """Required numeric field; bool is rejected so True/False never scores as 1/0."""
    if key not in payload or payload[key] is None:
        raise ComponentInputError(f"{path}.{key} is required", field=f"{path}.{key}")
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ComponentInputError(f"{path}.{key} must be a number", field=f"{path}.{key}")
    return float(value)


@dataclass(frozen=True)
class LSIComponents:
    """Six component scores: c1-c3 in [0,20], c4-c5 in [0,15], c6 in [0,10]."""

    c1: float
    c2: float
    c3: float
    c4: float
    c5: float
    c6: float

    def get(self, key: str) -> float:
        return float(getattr(self, key))

    def total(self) -> float:
        return round_score(sum(self.get(k) for k in COMPONENT_KEYS))

    def to_dict(self) -> dict[str, float]:
        return {k: self.get(k) for k in COMPONENT_KEYS}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any], path: str = "components") -> LSIComponents:
        return cls(**{k: require_number(payload, k, path) for k in COMPONENT_KEYS})


def default_target(fraction: float = 0.8) -> LSIComponents:
    """Target profile at fraction of each component's maximum (default 80%)."""
    return LSIComponents(
        **{k: round_score(COMPONENT_CONFIG[k].max_score * fraction) for k in COMPONENT_KEYS}
    )


@dataclass(frozen=True)
class LSIStats:
    """Process-control statistics over a run history."""

    mean: float
    stddev: float
    ucl: float
    lcl: float

    def to_dict(self) -> dict[str, float]:
        return {"mean": self.mean, "stddev": self.stddev, "ucl": self.ucl, "lcl": self.lcl}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> LSIStats:
        return cls(
            mean=float(payload.get("mean", 0.0)),
            stddev=float(payload.get("stddev", 0.0)),
            ucl=float(payload.get("ucl", 0.0)),
            lcl=float(payload.get("lcl", 0.0)),
        )


@dataclass(frozen=True)
class LSIGap:
    """One unmet component target."""

    component: str
    name: str
    gap: float
    priority: int
    """Severity 0-10: gap / component max * 10, halves rounded up."""
    rank: int
    """1 = largest gap."""
    cumulative_share: float
    pareto: bool
    """True for the 'vital few': preceding cumulative share below 80%."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "component": self.component,
            "name": self.name,
            "gap": self.gap,
            "priority": self.priority,
            "rank": self.rank,
            "cumulative_share": self.cumulative_share,
            "pareto": self.pareto,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> LSIGap:
        return cls(
            component=str(payload.get("component", "")),
            name=str(payload.get("name", "")),
            gap=float(payload.get("gap", 0.0)),
            priority=int(payload.get("priority", 0)),
            rank=int(payload.get("rank", 0)),
            cumulative_share=float(payload.get("cumulative_share", 0.0)),
            pareto=bool(payload.get("pareto", False)),
        )


def _snapshot_number(payload: Mapping[str, Any], key: str, path: str | None = None) -> float | None:
    """Optional numeric snapshot field; None when absent, SnapshotError when not a number."""
    value = payload.get(key)
    if value is None:
        return None
    name = f"{path}.{key}" if path else key
    if isinstance(value, bool):
        raise SnapshotError(f"{name} must be a number", field=name)
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise SnapshotError(f"{name} must be a number", field=name) from e
    if not math.isfinite(number):
        raise SnapshotError(f"{name} must be finite", field=name)
    return number


def _snapshot_flag(payload: Mapping[str, Any], key: str, path: str) -> bool:
    value = payload.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise SnapshotError(f"{path}.{key} must be a boolean", field=f"{path}.{key}")
    return value


def _snapshot_mapping(payload: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = payload.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise SnapshotError(f"{key} must be an object", field=key)
    return value


def _snapshot_strings(payload: Mapping[str, Any], key: str) -> tuple[str, ...]:
    value = payload.get(key)
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        raise SnapshotError(f"{key} must be a list", field=key)
    return tuple(str(item) for item in value)


@dataclass(frozen=True)
class Mention:
    """
    One observed reference to the subject, already classified upstream.

    sentiment is clamped to [-1, 1]; frame is lower-cased.
    """

    source: str
    category: str
    sentiment: float
    frame: str = FRAME_OTHER
    title: str | None = None
    snippet: str | None = None
    is_expert_quote: bool = False
    tier: int | None = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any], index: int = 0) -> Mention:
        if not isinstance(payload, Mapping):
            raise SnapshotError(f"mentions[{index}] must be an object", field=f"mentions[{index}]")
        source = payload.get("source")
        category = payload.get("category")
        if not source or not isinstance(source, str):
            raise SnapshotError(f"mentions[{index}].source is required", field=f"mentions[{index}].source")
        if not category or not isinstance(category, str):
            raise SnapshotError(f"mentions[{index}].category is required", field=f"mentions[{index}].category")
        path = f"mentions[{index}]"
        sentiment = _snapshot_number(payload, "sentiment", path) or 0.0
        tier = _snapshot_number(payload, "tier", path)
        return cls(
            source=source.strip(),
            category=category.strip().lower(),
            sentiment=min(max(sentiment, -1.0), 1.0),
            frame=str(payload.get("frame") or FRAME_OTHER).strip().lower(),
            title=payload.get("title"),
            snippet=payload.get("snippet"),
            is_expert_quote=_snapshot_flag(payload, "is_expert_quote", path),
            tier=int(tier) if tier is not None else None,
        )


@dataclass(frozen=True)
class SentimentDistribution:
    """Percentages of positive/neutral/negative mentions; average in [-1, 1] when known."""

    positive: float = 50.0
    neutral: float = 30.0
    negative: float = 20.0
    average: float | None = None

    def to_dict(self) -> dict[str, float | None]:
        return {
            "positive": self.positive,
            "neutral": self.neutral,
            "negative": self.negative,
            "average": self.average,
        }


@dataclass(frozen=True)
class FrameDistribution:
    """Percentage of mentions per frame; roughly sums to 100 (drift tolerated)."""

    expert: float = 20.0
    founder: float = 10.0
    leader: float = 10.0
    family: float = 30.0
    crisis: float = 5.0
    other: float = 25.0

    def get(self, frame: str) -> float:
        return float(getattr(self, frame, 0.0) or 0.0)

    def to_dict(self) -> dict[str, float]:
        return {f: self.get(f) for f in FRAMES}


def _pct(payload: Mapping[str, Any], key: str, default: float) -> float:
    value = _snapshot_number(payload, key)
    return default if value is None else value


@dataclass(frozen=True)
class DiscoverRunSnapshot:
    """
    Aggregate output of one discovery scan for one subject.

    Produced by the discovery pipeline; read-only input to signal extraction.
    """

    total_mentions: int
    sentiment: SentimentDistribution
    frames: FrameDistribution
    mentions: tuple[Mention, ...] = ()
    top_keywords: tuple[str, ...] = ()
    crisis_signals: tuple[str, ...] = ()
    archetype_hints: tuple[str, ...] = ()
    analysis_summary: str = ""
    run_id: str | None = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> DiscoverRunSnapshot:
        """
        Parse a stored discovery record. Missing distributions fall back to
        the platform defaults; total_mentions falls back to len(mentions).
        """
        if not isinstance(payload, Mapping):
            raise SnapshotError("snapshot must be an object")
        raw_mentions = payload.get("mentions") or []
        if not isinstance(raw_mentions, (list, tuple)):
            raise SnapshotError("mentions must be a list", field="mentions")
        mentions = tuple(Mention.from_dict(m, i) for i, m in enumerate(raw_mentions))

        sent_raw = _snapshot_mapping(payload, "sentiment_dist")
        if sent_raw:
            sentiment = SentimentDistribution(
                positive=_pct(sent_raw, "positive", 0.0),
                neutral=_pct(sent_raw, "neutral", 0.0),
                negative=_pct(sent_raw, "negative", 0.0),
                average=_snapshot_number(sent_raw, "average", "sentiment_dist"),
            )
        else:
            sentiment = SentimentDistribution()

        frame_raw = _snapshot_mapping(payload, "frame_dist")
        if frame_raw:
            frames = FrameDistribution(**{f: _pct(frame_raw, f, 0.0) for f in FRAMES})
        else:
            frames = FrameDistribution()

        total = _snapshot_number(payload, "total_mentions")
        run_id = payload.get("id") or payload.get("run_id")
        return cls(
            total_mentions=max(int(total), 0) if total is not None else len(mentions),
            sentiment=sentiment,
            frames=frames,
            mentions=mentions,
            top_keywords=_snapshot_strings(payload, "top_keywords"),
            crisis_signals=_snapshot_strings(payload, "crisis_signals"),
            archetype_hints=_snapshot_strings(payload, "archetype_hints"),
            analysis_summary=str(payload.get("analysis_summary") or ""),
            run_id=str(run_id) if run_id else None,
        )

    def by_category(self, category: str) -> list[Mention]:
        return [m for m in self.mentions if m.category == category]


@dataclass(frozen=True)
class LSIRun:
    """
    One persisted scoring event. Immutable; history is append-only and
    ordered by run_date.
    """

    id: str
    client_id: str
    run_date: int
    """Unix timestamp (seconds) of the scoring event."""
    total_score: float
    percentage: int
    classification: str
    components: LSIComponents
    stats: LSIStats
    gaps: tuple[LSIGap, ...] = ()
    source_run_id: str | None = None
    notes: str | None = None
    alerts: tuple[dict[str, Any], ...] = field(default=(), compare=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "client_id": self.client_id,
            "run_date": self.run_date,
            "total_score": self.total_score,
            "percentage": self.percentage,
            "classification": self.classification,
            "components": self.components.to_dict(),
            "stats": self.stats.to_dict(),
            "gaps": [g.to_dict() for g in self.gaps],
            "source_run_id": self.source_run_id,
            "notes": self.notes,
        }

"""
Signal extraction: component inputs from a discovery snapshot.

Responsibilities:
- Partition classified mentions by category (search, news, social, academic,
  video, financial, regulatory).
- Derive the six component input records with fixed rules and allow-lists;
  no external calls.
- Summarise a snapshot (dominant frames, crisis and regulatory risk) for
  downstream consumers.

Total over any well-formed snapshot, including one with zero mentions:
counts default to 0, and a snapshot without social mentions yields no C3
input so the aggregator applies the neutral C3 default.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

from reputeos_lsi.analysis_engine.components import (
    ComponentInputs,
    CrisisMoatInput,
    EliteDiscourseInput,
    MediaFramingInput,
    SearchReputationInput,
    SocialBacklashInput,
    ThirdPartyValidationInput,
)
from reputeos_lsi.analysis_engine.models import (
    CATEGORY_ACADEMIC,
    CATEGORY_FINANCIAL,
    CATEGORY_NEWS,
    CATEGORY_REGULATORY,
    CATEGORY_SEARCH,
    CATEGORY_SOCIAL,
    CATEGORY_VIDEO,
    FRAME_CRISIS,
    FRAME_EXPERT,
    FRAME_LEADER,
    FRAMES,
    DiscoverRunSnapshot,
    Mention,
)
from reputeos_lsi.analysis_engine.statistics import round_half_up
from reputeos_lsi.lsi_logging import get_logger

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# Source allow-lists (read-only; extend here, not in the rules)
# -----------------------------------------------------------------------------

TIER1_SOURCES: Mapping[str, int] = MappingProxyType({
    "Bloomberg": 1,
    "Reuters": 1,
    "Financial Times": 1,
    "Wall Street Journal": 1,
    "The Economist": 1,
    "New York Times": 1,
    "The Guardian": 1,
    "Business Standard": 1,
    "Economic Times": 1,
    "Livemint": 1,
    "Moneycontrol": 1,
    "Forbes India": 1,
    "NDTV Profit": 1,
    "Hindustan Times Business": 1,
})

AUTHORITY_SOURCES = frozenset({
    "Crunchbase",
    "PitchBook",
    "Tracxn",
    "Semantic Scholar",
    "Google Scholar",
    "SSRN",
    "ResearchGate",
    "IIM Bangalore",
    "IIM Ahmedabad",
    "IIT Bombay",
    "TED/TEDx",
    "Podcast Index",
    "LinkedIn",
})

FUNDING_DATABASES = frozenset({"Crunchbase", "PitchBook", "Tracxn", "Wellfound/AngelList"})

REGULATORY_SOURCES = frozenset({
    "SEBI",
    "RBI",
    "MCA India",
    "NCLT",
    "NCLAT",
    "CCI",
    "ED/CBI/SFIO (Enforcement)",
    "eCourts India",
})

KNOWLEDGE_PANEL_SOURCES = frozenset({"Google Knowledge Graph"})
ENCYCLOPEDIA_SOURCES = frozenset({"Wikipedia"})
PROFESSIONAL_PROFILE_SOURCES = frozenset({"LinkedIn Profile"})
CITATION_INDEXES = frozenset({"Semantic Scholar", "Google Scholar"})

SEARCH_ENGINE_MARKER = "google"
PODCAST_MARKER = "podcast"
TALK_MARKER = "ted"
RANKING_TITLE_MARKERS = ("top", "list", "rank")

# -----------------------------------------------------------------------------
# Thresholds
# -----------------------------------------------------------------------------

POSITIVE_SEARCH_SENTIMENT = 0.2
POSITIVE_NEWS_SENTIMENT = 0.1
STRONG_NEGATIVE_SENTIMENT = -0.3
STRONG_POSITIVE_SENTIMENT = 0.3
NARRATIVE_CONSISTENCY_BOOST = 1.5
ENGAGEMENT_CAP = 0.1
CRISIS_FRAME_CONCERN_PCT = 10.0
SLOW_CRISIS_RESPONSE_HOURS = 48.0
PROACTIVE_NARRATIVE_CAP = 10
ACADEMIC_CREDENTIAL_MIN = 2

# Peer-mention weights: profile depth x3, conference talks x4
PROFILE_PEER_WEIGHT = 3
TALK_PEER_WEIGHT = 4
TALK_ENDORSEMENT_WEIGHT = 2
CITATION_WEIGHT = 2

TRUST_LOW = 0.2
TRUST_MEDIUM = 0.5
TRUST_HIGH = 0.8
RECOVERY_HOURS_REGULATORY = 120.0
RECOVERY_HOURS_DEFAULT = 24.0

SUMMARY_KEYWORDS_MAX = 10


def _is_tier1(mention: Mention) -> bool:
    return TIER1_SOURCES.get(mention.source) == 1 or mention.tier == 1


def _is_regulatory(mention: Mention) -> bool:
    return mention.category == CATEGORY_REGULATORY or mention.source in REGULATORY_SOURCES


def _regulatory_issues(snapshot: DiscoverRunSnapshot) -> int:
    """Regulatory mentions that are crisis-framed or strongly negative."""
    return sum(
        1
        for m in snapshot.mentions
        if _is_regulatory(m)
        and (m.frame == FRAME_CRISIS or m.sentiment < STRONG_NEGATIVE_SENTIMENT)
    )


def _search_input(snapshot: DiscoverRunSnapshot) -> SearchReputationInput:
    search = snapshot.by_category(CATEGORY_SEARCH)
    engine_results = [m for m in search if SEARCH_ENGINE_MARKER in m.source.lower()]
    positive = sum(1 for m in engine_results if m.sentiment > POSITIVE_SEARCH_SENTIMENT)
    negative_ratio = (snapshot.sentiment.negative or 0.0) / 100
    return SearchReputationInput(
        positive_results=positive,
        total_results=len(engine_results),
        knowledge_panel_present=any(m.source in KNOWLEDGE_PANEL_SOURCES for m in search),
        wikipedia_present=any(m.source in ENCYCLOPEDIA_SOURCES for m in search),
        negative_content_ratio=min(max(negative_ratio, 0.0), 1.0),
    )


def _media_input(snapshot: DiscoverRunSnapshot) -> MediaFramingInput:
    news = snapshot.by_category(CATEGORY_NEWS)
    expert_quotes = sum(
        1 for m in news if m.frame in (FRAME_EXPERT, FRAME_LEADER) or m.is_expert_quote
    )
    expert_leader_ratio = (snapshot.frames.expert + snapshot.frames.leader) / 100
    return MediaFramingInput(
        positive_mentions=sum(1 for m in news if m.sentiment > POSITIVE_NEWS_SENTIMENT),
        total_mentions=len(news),
        tier1_mentions=sum(1 for m in news if _is_tier1(m)),
        expert_quotes=expert_quotes,
        narrative_consistency=min(max(expert_leader_ratio * NARRATIVE_CONSISTENCY_BOOST, 0.0), 1.0),
    )


def _social_input(snapshot: DiscoverRunSnapshot) -> SocialBacklashInput | None:
    social = snapshot.by_category(CATEGORY_SOCIAL)
    if not social:
        return None
    n = len(social)
    sentiment = snapshot.sentiment
    positive = round_half_up(n * max(sentiment.positive, 0.0) / 100)
    neutral = round_half_up(n * max(sentiment.neutral, 0.0) / 100)
    negative = round_half_up(n * max(sentiment.negative, 0.0) / 100)
    # crisis-framed social mentions move from the positive to the negative bucket
    crisis_framed = sum(1 for m in social if m.frame == FRAME_CRISIS)
    total = snapshot.total_mentions or len(snapshot.mentions)
    return SocialBacklashInput(
        positive_sentiment=max(positive - crisis_framed, 0),
        neutral_sentiment=neutral,
        negative_sentiment=negative + crisis_framed,
        mention_volume=n,
        engagement_rate=min(math.log10(max(total, 0) + 1) / 4, ENGAGEMENT_CAP),
        crisis_response_time=SLOW_CRISIS_RESPONSE_HOURS if snapshot.crisis_signals else None,
    )


def _elite_input(snapshot: DiscoverRunSnapshot) -> EliteDiscourseInput:
    academic = snapshot.by_category(CATEGORY_ACADEMIC)
    video = snapshot.by_category(CATEGORY_VIDEO)
    podcasts = sum(1 for m in video if PODCAST_MARKER in m.source.lower())
    talks = sum(1 for m in video if TALK_MARKER in m.source.lower())
    profile_depth = sum(1 for m in snapshot.mentions if m.source in PROFESSIONAL_PROFILE_SOURCES)
    citations = sum(1 for m in academic if m.source in CITATION_INDEXES)
    return EliteDiscourseInput(
        peer_mentions=profile_depth * PROFILE_PEER_WEIGHT + talks * TALK_PEER_WEIGHT,
        leader_endorsements=talks * TALK_ENDORSEMENT_WEIGHT + podcasts,
        speaking_invitations=talks + podcasts,
        citations=citations * CITATION_WEIGHT,
    )


def _validation_input(snapshot: DiscoverRunSnapshot) -> ThirdPartyValidationInput:
    financial = snapshot.by_category(CATEGORY_FINANCIAL)
    funding = [m for m in financial if m.source in FUNDING_DATABASES]
    rankings = sum(
        1
        for m in financial
        if any(marker in (m.title or "").lower() for marker in RANKING_TITLE_MARKERS)
    )
    academic_count = len(snapshot.by_category(CATEGORY_ACADEMIC))
    return ThirdPartyValidationInput(
        # funding history counts as one validation award
        awards=1 if funding else 0,
        analyst_mentions=sum(1 for m in snapshot.mentions if m.source in AUTHORITY_SOURCES),
        ranking_lists=rankings,
        certifications=1 if academic_count > ACADEMIC_CREDENTIAL_MIN else 0,
    )


def _trust_index(has_regulatory_issues: bool, crisis_frame_pct: float) -> float:
    if has_regulatory_issues:
        return TRUST_LOW
    if crisis_frame_pct > CRISIS_FRAME_CONCERN_PCT:
        return TRUST_MEDIUM
    return TRUST_HIGH


def _crisis_input(snapshot: DiscoverRunSnapshot) -> CrisisMoatInput:
    has_regulatory_issues = _regulatory_issues(snapshot) > 0
    crises = len(snapshot.crisis_signals)
    strongly_negative = sum(
        1 for m in snapshot.mentions if m.sentiment < STRONG_NEGATIVE_SENTIMENT
    )
    proactive = sum(
        1
        for m in snapshot.mentions
        if m.frame == FRAME_EXPERT and m.sentiment > STRONG_POSITIVE_SENTIMENT
    )
    return CrisisMoatInput(
        crises_handled=crises,
        crises_recovered=max(crises - strongly_negative, 0),
        proactive_narratives=min(proactive, PROACTIVE_NARRATIVE_CAP),
        trust_index=_trust_index(has_regulatory_issues, snapshot.frames.crisis),
        recovery_speed=RECOVERY_HOURS_REGULATORY if has_regulatory_issues else RECOVERY_HOURS_DEFAULT,
    )


def extract_component_inputs(snapshot: DiscoverRunSnapshot) -> ComponentInputs:
    """
    Derive the six component input records from one discovery snapshot.

    Pure rule-based aggregation over mentions partitioned by category.
    """
    inputs = ComponentInputs(
        c1=_search_input(snapshot),
        c2=_media_input(snapshot),
        c3=_social_input(snapshot),
        c4=_elite_input(snapshot),
        c5=_validation_input(snapshot),
        c6=_crisis_input(snapshot),
    )
    logger.debug(
        "signals_extracted",
        run_id=snapshot.run_id,
        mention_count=len(snapshot.mentions),
        social_data=inputs.c3 is not None,
    )
    return inputs


@dataclass(frozen=True)
class SignalSummary:
    """Compact view of a snapshot for archetype and reporting consumers."""

    total_mentions: int
    dominant_frame: str
    secondary_frame: str
    sentiment_profile: dict[str, float | None]
    top_keywords: tuple[str, ...]
    archetype_hints: tuple[str, ...]
    crisis_signals: tuple[str, ...]
    has_crisis_risk: bool
    has_regulatory_risk: bool
    summary: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_mentions": self.total_mentions,
            "dominant_frame": self.dominant_frame,
            "secondary_frame": self.secondary_frame,
            "sentiment_profile": self.sentiment_profile,
            "top_keywords": list(self.top_keywords),
            "archetype_hints": list(self.archetype_hints),
            "crisis_signals": list(self.crisis_signals),
            "has_crisis_risk": self.has_crisis_risk,
            "has_regulatory_risk": self.has_regulatory_risk,
            "summary": self.summary,
        }


def build_signal_summary(snapshot: DiscoverRunSnapshot) -> SignalSummary:
    """Dominant/secondary frame by percentage (ties keep frame order), risks, top keywords."""
    ranked = sorted(FRAMES, key=lambda f: snapshot.frames.get(f), reverse=True)
    return SignalSummary(
        total_mentions=snapshot.total_mentions,
        dominant_frame=ranked[0],
        secondary_frame=ranked[1],
        sentiment_profile=snapshot.sentiment.to_dict(),
        top_keywords=snapshot.top_keywords[:SUMMARY_KEYWORDS_MAX],
        archetype_hints=snapshot.archetype_hints,
        crisis_signals=snapshot.crisis_signals,
        has_crisis_risk=bool(snapshot.crisis_signals),
        has_regulatory_risk=_regulatory_issues(snapshot) > 0,
        summary=snapshot.analysis_summary,
    )

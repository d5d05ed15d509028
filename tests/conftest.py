"""
Pytest fixtures for ReputeOS LSI tests. Uses a temporary SQLite DB for the run store.
"""

from __future__ import annotations

from typing import Any

import pytest

from reputeos_lsi.analysis_engine.components import (
    ComponentInputs,
    CrisisMoatInput,
    EliteDiscourseInput,
    MediaFramingInput,
    SearchReputationInput,
    SocialBacklashInput,
    ThirdPartyValidationInput,
)
from reputeos_lsi.analysis_engine.models import LSIComponents, LSIRun, LSIStats


@pytest.fixture
def run_store_db(tmp_path, monkeypatch):
    """
    Point the run store at a temporary SQLite DB and init tables.
    Resets engine and settings caches so each test gets a fresh DB. Unset DB URLs so we use SQLite.
    """
    monkeypatch.delenv("REPUTEOS_DB_URL", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("LSI_DB_PATH", str(tmp_path / "lsi_runs.db"))

    from reputeos_lsi.config import get_settings
    import reputeos_lsi.database.run_store as store

    get_settings.cache_clear()
    store.reset_engine_for_test()
    store.init_db()
    yield store
    store.reset_engine_for_test()
    get_settings.cache_clear()


@pytest.fixture
def client(run_store_db):
    """FastAPI TestClient. Depends on run_store_db so the temp DB is set before the app runs."""
    from fastapi.testclient import TestClient

    from reputeos_lsi.api_server.server import app

    return TestClient(app)


@pytest.fixture
def max_inputs() -> ComponentInputs:
    """Inputs that saturate every component (total 100)."""
    return ComponentInputs(
        c1=SearchReputationInput(20, 20, True, True, 0.0),
        c2=MediaFramingInput(10, 10, 10, 8, 1.0),
        c3=SocialBacklashInput(100, 0, 0, 1_000_000, 0.5, 0.5),
        c4=EliteDiscourseInput(20, 8, 8, 10),
        c5=ThirdPartyValidationInput(3, 8, 6, 4),
        c6=CrisisMoatInput(10, 10, 6, 1.0, 1),
    )


@pytest.fixture
def zero_inputs() -> ComponentInputs:
    """All-zero inputs: c1 5.0, c6 5.0, everything else 0 (total 10)."""
    return ComponentInputs(
        c1=SearchReputationInput(0, 0, False, False, 0.0),
        c2=MediaFramingInput(0, 0, 0, 0, 0.0),
        c3=SocialBacklashInput(0, 0, 0, 0, 0.0),
        c4=EliteDiscourseInput(0, 0, 0, 0),
        c5=ThirdPartyValidationInput(0, 0, 0, 0),
        c6=CrisisMoatInput(0, 0, 0, 0.0, 0),
    )


@pytest.fixture
def max_inputs_payload() -> dict[str, Any]:
    """JSON body form of max_inputs."""
    return {
        "c1": {
            "positive_results": 20,
            "total_results": 20,
            "knowledge_panel_present": True,
            "wikipedia_present": True,
            "negative_content_ratio": 0.0,
        },
        "c2": {
            "positive_mentions": 10,
            "total_mentions": 10,
            "tier1_mentions": 10,
            "expert_quotes": 8,
            "narrative_consistency": 1.0,
        },
        "c3": {
            "positive_sentiment": 100,
            "neutral_sentiment": 0,
            "negative_sentiment": 0,
            "mention_volume": 1000000,
            "engagement_rate": 0.5,
            "crisis_response_time": 0.5,
        },
        "c4": {"peer_mentions": 20, "leader_endorsements": 8, "speaking_invitations": 8, "citations": 10},
        "c5": {"awards": 3, "analyst_mentions": 8, "ranking_lists": 6, "certifications": 4},
        "c6": {
            "crises_handled": 10,
            "crises_recovered": 10,
            "proactive_narratives": 6,
            "trust_index": 1.0,
            "recovery_speed": 1,
        },
    }


@pytest.fixture
def rich_snapshot_payload() -> dict[str, Any]:
    """Stored discovery record with mentions in every category."""
    return {
        "id": "discover-run-1",
        "total_mentions": 20,
        "sentiment_dist": {"positive": 60, "neutral": 30, "negative": 10},
        "frame_dist": {"expert": 30, "founder": 10, "leader": 10, "family": 20, "crisis": 15, "other": 15},
        "top_keywords": [f"kw{i}" for i in range(12)],
        "crisis_signals": ["lawsuit rumours"],
        "archetype_hints": ["Visionary"],
        "analysis_summary": "Mixed coverage with one regulatory flag.",
        "mentions": [
            {"source": "Google Search", "category": "search", "sentiment": 0.5},
            {"source": "Google Search", "category": "search", "sentiment": -0.4},
            {"source": "Google Knowledge Graph", "category": "search", "sentiment": 0.0},
            {"source": "Wikipedia", "category": "search", "sentiment": 0.1},
            {"source": "Reuters", "category": "news", "sentiment": 0.6, "frame": "expert"},
            {"source": "Local Blog", "category": "news", "sentiment": 0.05, "frame": "leader"},
            {"source": "Bloomberg", "category": "news", "sentiment": -0.5, "frame": "crisis"},
            {"source": "Small Paper", "category": "news", "sentiment": 0.2, "tier": 1},
            {"source": "Twitter", "category": "social", "sentiment": 0.5},
            {"source": "Twitter", "category": "social", "sentiment": 0.5},
            {"source": "Twitter", "category": "social", "sentiment": 0.5},
            {"source": "Twitter", "category": "social", "sentiment": -0.6, "frame": "crisis"},
            {"source": "Semantic Scholar", "category": "academic", "sentiment": 0.2},
            {"source": "Semantic Scholar", "category": "academic", "sentiment": 0.2},
            {"source": "SSRN", "category": "academic", "sentiment": 0.1},
            {"source": "TEDx Talks", "category": "video", "sentiment": 0.4},
            {"source": "Podcast Index", "category": "video", "sentiment": 0.3},
            {"source": "YouTube", "category": "video", "sentiment": 0.1},
            {"source": "LinkedIn Profile", "category": "professional", "sentiment": 0.2},
            {"source": "Crunchbase", "category": "financial", "sentiment": 0.1, "title": "Acme raises Series B"},
            {"source": "Tracxn", "category": "financial", "sentiment": 0.2, "title": "Top 10 fintech startups"},
            {"source": "SEBI", "category": "regulatory", "sentiment": -0.5, "frame": "crisis"},
        ],
    }


def _components(total: float) -> LSIComponents:
    # spread a total across components in proportion to their maxima
    share = total / 100
    return LSIComponents(
        c1=round(20 * share, 1),
        c2=round(20 * share, 1),
        c3=round(20 * share, 1),
        c4=round(15 * share, 1),
        c5=round(15 * share, 1),
        c6=round(10 * share, 1),
    )


@pytest.fixture
def make_run():
    """Factory for LSIRun values (not persisted)."""

    def _make(
        total: float,
        *,
        run_id: str | None = None,
        client_id: str = "client-a",
        run_date: int = 1_700_000_000,
        components: LSIComponents | None = None,
    ) -> LSIRun:
        return LSIRun(
            id=run_id or f"run-{client_id}-{run_date}-{total}",
            client_id=client_id,
            run_date=run_date,
            total_score=total,
            percentage=round(total),
            classification="Functional Legitimacy",
            components=components or _components(total),
            stats=LSIStats(mean=total, stddev=0.0, ucl=total, lcl=total),
        )

    return _make

"""
Tests for the LSI pipeline: scoring, history stats, gaps, alerts and persistence.
"""

from __future__ import annotations

import pytest

from reputeos_lsi.analysis_engine.models import DiscoverRunSnapshot, LSIComponents
from reputeos_lsi.analytics import score_and_record, score_only
from reputeos_lsi.core.exceptions import LSIError


def test_first_run_recorded(run_store_db, max_inputs):
    run = score_and_record("client-a", inputs=max_inputs, notes="kickoff")
    assert run.total_score == 100.0
    assert run.classification == "Elite Authority"
    assert run.stats.mean == 100.0 and run.stats.stddev == 0.0
    assert run.gaps == ()
    assert run.alerts == ()
    assert run_store_db.get_latest_run("client-a") == run


def test_second_run_uses_history_and_raises_drop_alert(run_store_db, max_inputs, zero_inputs):
    score_and_record("client-a", inputs=max_inputs)
    run = score_and_record("client-a", inputs=zero_inputs)
    assert run.total_score == 10.0
    assert run.stats.mean == 55.0
    assert run.stats.ucl == 100.0
    assert run.stats.lcl == 0.0
    assert len(run.gaps) == 6
    assert [a["type"] for a in run.alerts] == ["narrative_drift"]
    assert run.alerts[0]["severity"] == "critical"
    assert run_store_db.get_recent_scores("client-a") == [10.0, 100.0]


def test_control_limit_alert_from_prior_window(run_store_db, make_run, zero_inputs):
    run_store_db.append_run(make_run(50.0, run_date=1))
    run_store_db.append_run(make_run(52.0, run_date=2))
    run = score_and_record("client-a", inputs=zero_inputs)
    assert [a["type"] for a in run.alerts] == ["narrative_drift", "out_of_control"]


def test_snapshot_mode_records_source_run(run_store_db, rich_snapshot_payload):
    snapshot = DiscoverRunSnapshot.from_dict(rich_snapshot_payload)
    run = score_and_record("client-s", snapshot=snapshot)
    assert run.source_run_id == "discover-run-1"
    assert run_store_db.get_latest_run("client-s").source_run_id == "discover-run-1"


def test_custom_target(run_store_db, zero_inputs):
    target = LSIComponents(c1=5, c2=0, c3=0, c4=0, c5=0, c6=6)
    run = score_and_record("client-a", inputs=zero_inputs, target=target)
    assert [(g.component, g.gap) for g in run.gaps] == [("c6", 1.0)]


def test_requires_exactly_one_source(run_store_db, max_inputs):
    with pytest.raises(LSIError):
        score_and_record("client-a")
    with pytest.raises(LSIError):
        score_and_record("client-a", inputs=max_inputs, snapshot=DiscoverRunSnapshot.from_dict({}))


def test_requires_client_id(run_store_db, max_inputs):
    with pytest.raises(LSIError):
        score_and_record("   ", inputs=max_inputs)


def test_score_only_does_not_persist(run_store_db, max_inputs):
    run = score_only("client-a", inputs=max_inputs)
    assert run.total_score == 100.0
    assert run_store_db.list_runs("client-a") == []


def test_history_window_from_settings(run_store_db, monkeypatch, make_run, zero_inputs):
    """Only the configured number of prior runs feed the control statistics."""
    from reputeos_lsi.config import get_settings

    monkeypatch.setenv("LSI_HISTORY_WINDOW", "1")
    get_settings.cache_clear()
    run_store_db.append_run(make_run(90.0, run_date=1))
    run_store_db.append_run(make_run(30.0, run_date=2))
    run = score_and_record("client-a", inputs=zero_inputs)
    assert run.stats.mean == 20.0  # (10 + 30) / 2


def test_concurrent_runs_for_one_client_are_all_recorded(run_store_db, max_inputs):
    from concurrent.futures import ThreadPoolExecutor

    from reputeos_lsi.analytics.lsi_pipeline import _client_locks

    with ThreadPoolExecutor(max_workers=4) as pool:
        runs = list(pool.map(lambda i: score_and_record("busy", inputs=max_inputs, run_date=i), range(8)))
    assert len({r.id for r in runs}) == 8
    assert len(run_store_db.list_runs("busy")) == 8
    # registry entries are released once no caller holds them
    assert len(_client_locks) == 0

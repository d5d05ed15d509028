"""
Test that lsi_logging can be imported without circular import and logger works.
"""

from __future__ import annotations


def test_logging_import():
    """Import get_logger from lsi_logging and use the logger."""
    from reputeos_lsi.lsi_logging import get_logger

    logger = get_logger("test")
    assert logger is not None
    assert hasattr(logger, "info")
    assert hasattr(logger, "debug")
    assert hasattr(logger, "warning")
    assert hasattr(logger, "error")
    # Smoke test: call info (should not raise)
    logger.info("test_message", key="value")


def test_bind_client():
    from reputeos_lsi.lsi_logging import bind_client

    logger = bind_client("client-a")
    logger.info("client_scoped_message", total_score=72.4)


def test_client_context_binds_and_restores():
    import structlog

    from reputeos_lsi.lsi_logging import client_context

    with client_context("client-a", mode="inputs"):
        assert structlog.contextvars.get_contextvars() == {"client_id": "client-a", "mode": "inputs"}
        with client_context("client-b"):
            assert structlog.contextvars.get_contextvars()["client_id"] == "client-b"
        assert structlog.contextvars.get_contextvars()["client_id"] == "client-a"
    assert "client_id" not in structlog.contextvars.get_contextvars()


class _RecordingLogger:
    """Stands in for a module logger; records each event with the context bound at call time."""

    def __init__(self):
        self.events = []

    def _record(self, event, **kw):
        import structlog

        self.events.append((event, dict(structlog.contextvars.get_contextvars())))

    info = debug = warning = error = exception = _record


def test_pipeline_logs_carry_client_context(run_store_db, max_inputs, monkeypatch):
    from reputeos_lsi.analytics import lsi_pipeline
    from reputeos_lsi.database import run_store

    recorder = _RecordingLogger()
    monkeypatch.setattr(lsi_pipeline, "logger", recorder)
    monkeypatch.setattr(run_store, "logger", recorder)
    lsi_pipeline.score_and_record("client-ctx", inputs=max_inputs)
    events = dict(recorder.events)
    assert {"lsi_run_appended", "lsi_calculated"} <= set(events)
    assert events["lsi_calculated"] == {"client_id": "client-ctx", "mode": "inputs"}
    assert events["lsi_run_appended"]["client_id"] == "client-ctx"

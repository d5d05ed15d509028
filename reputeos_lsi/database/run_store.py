"""
LSI run store: SQLAlchemy-backed, append-only history of scoring events.

Uses REPUTEOS_DB_URL / DATABASE_URL when set; otherwise SQLite (LSI_DB_PATH
or reputeos_lsi.db). Runs are inserted once and never updated or deleted;
reads are ordered by run_date with insertion order as the tie-break.
"""

from __future__ import annotations

import json
import time
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import Column, Float, Integer, String, Text, create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from reputeos_lsi.analysis_engine.models import LSIComponents, LSIGap, LSIRun, LSIStats
from reputeos_lsi.config.env import get_database_url
from reputeos_lsi.core.exceptions import RunStoreError
from reputeos_lsi.lsi_logging import get_logger

logger = get_logger(__name__)

Base = declarative_base()

# -----------------------------------------------------------------------------
# SQLAlchemy models
# -----------------------------------------------------------------------------


class LSIRunRow(Base):
    """
    One LSI scoring event per row (append-only). Components, stats and gaps
    are stored as JSON text so the schema stays portable across SQLite/Postgres.
    """

    __tablename__ = "lsi_runs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    run_id = Column(String(36), unique=True, nullable=False, index=True)
    client_id = Column(String(128), nullable=False, index=True)
    run_date = Column(Integer, nullable=False, index=True)  # Unix seconds
    total_score = Column(Float, nullable=False)
    percentage = Column(Integer, nullable=False)
    classification = Column(String(64), nullable=False)
    components = Column(Text, nullable=False)  # JSON object c1..c6
    stats = Column(Text, nullable=False)  # JSON object mean/stddev/ucl/lcl
    gaps = Column(Text, nullable=False, default="[]")  # JSON array
    source_run_id = Column(String(128), nullable=True)
    notes = Column(String(1000), nullable=True)
    created_at = Column(Integer, nullable=False)

    def to_run(self) -> LSIRun:
        return LSIRun(
            id=self.run_id,
            client_id=self.client_id,
            run_date=int(self.run_date),
            total_score=float(self.total_score),
            percentage=int(self.percentage),
            classification=self.classification,
            components=LSIComponents.from_dict(json.loads(self.components)),
            stats=LSIStats.from_dict(json.loads(self.stats)),
            gaps=tuple(LSIGap.from_dict(g) for g in json.loads(self.gaps or "[]")),
            source_run_id=self.source_run_id,
            notes=self.notes,
        )


# -----------------------------------------------------------------------------
# Engine and session
# -----------------------------------------------------------------------------

_engine = None
_SessionLocal: sessionmaker | None = None


def _safe_url(url: str) -> str:
    return url.split("?")[0].split("//")[-1].split("@")[-1]


def _get_engine():
    """Create or return cached engine."""
    global _engine
    if _engine is None:
        url = get_database_url()
        connect_args = {}
        if url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        _engine = create_engine(url, connect_args=connect_args, pool_pre_ping=True)
        logger.info("lsi_run_store_engine", url=_safe_url(url))
    return _engine


def _get_session_factory() -> sessionmaker:
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_get_engine())
    return _SessionLocal


@contextmanager
def _session_scope() -> Iterator[Session]:
    """Context manager for a single session. Commits on success, rolls back on error."""
    factory = _get_session_factory()
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db() -> None:
    """Create the lsi_runs table if it does not exist. Safe to call on every startup."""
    try:
        Base.metadata.create_all(bind=_get_engine())
        logger.info("lsi_run_store_init_db", url=_safe_url(get_database_url()))
    except SQLAlchemyError as e:
        logger.exception("lsi_run_store_init_db_failed", error=str(e))
        raise RunStoreError("could not initialise LSI run store") from e


def append_run(run: LSIRun) -> LSIRun:
    """
    Insert one run. Raises RunStoreError if the run id already exists or the
    write fails; existing rows are never modified.
    """
    client_id = (run.client_id or "").strip()
    if not client_id:
        raise RunStoreError("client_id is required", field="client_id")
    try:
        with _session_scope() as session:
            session.add(
                LSIRunRow(
                    run_id=run.id,
                    client_id=client_id,
                    run_date=int(run.run_date),
                    total_score=float(run.total_score),
                    percentage=int(run.percentage),
                    classification=run.classification,
                    components=json.dumps(run.components.to_dict()),
                    stats=json.dumps(run.stats.to_dict()),
                    gaps=json.dumps([g.to_dict() for g in run.gaps]),
                    source_run_id=run.source_run_id,
                    notes=run.notes,
                    created_at=int(time.time()),
                )
            )
            session.flush()
        logger.info(
            "lsi_run_appended",
            client_id=client_id,
            run_id=run.id,
            total_score=run.total_score,
        )
        return run
    except IntegrityError as e:
        logger.warning("lsi_run_duplicate", client_id=client_id, run_id=run.id)
        raise RunStoreError(f"run {run.id} already exists", field="id") from e
    except SQLAlchemyError as e:
        logger.exception("lsi_run_append_failed", client_id=client_id, error=str(e))
        raise RunStoreError("could not append LSI run") from e


def _newest_first(session: Session, client_id: str):
    return (
        session.query(LSIRunRow)
        .filter(LSIRunRow.client_id == client_id)
        .order_by(LSIRunRow.run_date.desc(), LSIRunRow.id.desc())
    )


def get_recent_scores(client_id: str, limit: int = 12) -> list[float]:
    """Return up to limit total scores for client_id, newest first."""
    if limit <= 0:
        return []
    try:
        with _session_scope() as session:
            rows = _newest_first(session, client_id.strip()).limit(limit).all()
            return [float(r.total_score) for r in rows]
    except SQLAlchemyError as e:
        logger.exception("lsi_recent_scores_failed", client_id=client_id, error=str(e))
        raise RunStoreError("could not read LSI history") from e


def list_runs(client_id: str, limit: int | None = None, *, ascending: bool = False) -> list[LSIRun]:
    """
    Return the most recent runs for client_id (all when limit is None).
    ascending=True returns the same window ordered oldest first.
    """
    try:
        with _session_scope() as session:
            q = _newest_first(session, client_id.strip())
            if limit is not None:
                q = q.limit(max(limit, 0))
            runs = [r.to_run() for r in q.all()]
    except SQLAlchemyError as e:
        logger.exception("lsi_list_runs_failed", client_id=client_id, error=str(e))
        raise RunStoreError("could not read LSI history") from e
    if ascending:
        runs.reverse()
    return runs


def get_latest_run(client_id: str) -> LSIRun | None:
    runs = list_runs(client_id, 1)
    return runs[0] if runs else None


def reset_engine_for_test() -> None:
    """
    Clear cached engine and session factory. For tests only; use with a new LSI_DB_PATH.
    """
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None

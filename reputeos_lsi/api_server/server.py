"""
FastAPI server: LSI scoring API over the run store.

Mounts the LSI router under /api and a liveness check. The run store table is
created on startup. Authentication and rate limiting belong to the hosting
application.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse

from reputeos_lsi import __version__
from reputeos_lsi.api_server.lsi_routes import router as lsi_router
from reputeos_lsi.core.exceptions import LSIError
from reputeos_lsi.database import init_db
from reputeos_lsi.lsi_logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the run store table on startup."""
    init_db()
    logger.info("api_started", version=__version__)
    yield
    logger.info("api_stopped")


app = FastAPI(
    title="ReputeOS LSI API",
    description="LSI scoring, run history and proof-of-improvement reports.",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(lsi_router, prefix="/api")


@app.get("/health")
def health() -> dict[str, str]:
    """Liveness check: API is up."""
    return {"status": "ok"}


@app.exception_handler(HTTPException)
def http_exception_handler(request: Any, exc: HTTPException) -> JSONResponse:
    """Consistent JSON error response for HTTPException."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )


@app.exception_handler(LSIError)
def lsi_error_handler(request: Any, exc: LSIError) -> JSONResponse:
    """Contract violations that escape a route become 400 with the error code."""
    logger.warning("lsi_error", code=exc.code, message=exc.message, field=exc.field)
    return JSONResponse(status_code=400, content={"detail": exc.message, "code": exc.code})

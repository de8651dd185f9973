"""
StoryShare Backend — Health Check Route
=========================================

What:  Liveness/readiness probe for Docker and load balancers.
How:   Opens a pooled connection, runs `SELECT 1` and times the round trip.

    healthy:   database reachable (HTTP 200, latency reported)
    unhealthy: database unreachable (HTTP 503, latency null)

The probe goes straight to the engine, not through get_db_session, so a
failing database still produces a 503 body instead of a dependency error.
"""

import logging
import time
from typing import Optional

from fastapi import APIRouter, Response
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app import __version__
from app.database import engine
from app.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_started_at = time.monotonic()


async def ping_database() -> Optional[float]:
    """Round-trip time of `SELECT 1` in milliseconds, or None if it failed."""
    start = time.perf_counter()
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Health check: database unreachable: %s", str(e))
        return None
    return round((time.perf_counter() - start) * 1000, 2)


@router.get("/health", response_model=HealthResponse, summary="Service health check")
async def health_check(response: Response) -> HealthResponse:
    latency_ms = await ping_database()
    if latency_ms is None:
        response.status_code = 503

    return HealthResponse(
        status="healthy" if latency_ms is not None else "unhealthy",
        version=__version__,
        database="connected" if latency_ms is not None else "disconnected",
        database_latency_ms=latency_ms,
        uptime_seconds=round(time.monotonic() - _started_at, 2),
    )

"""
Notes API: Health Check Routes
================================

What:  Liveness and readiness endpoints.
Who:   Called by Docker health checks, load balancers, and monitoring systems.

    GET /api/healthchecker  → always 200 with a static message (process is up)
    GET /health             → 200 when the database answers SELECT 1, else 503
"""

import logging
import time

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from notes_api import __version__
from notes_api.database import ping_database
from notes_api.schemas.note import HealthCheckerResponse, HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

HEALTHCHECKER_MESSAGE = "Simple CRUD API for notes with FastAPI, SQLAlchemy and PostgreSQL"

# Track when the service started for uptime reporting
_start_time = time.time()


@router.get(
    "/api/healthchecker",
    response_model=HealthCheckerResponse,
    summary="Liveness probe",
)
async def health_checker() -> HealthCheckerResponse:
    return HealthCheckerResponse(message=HEALTHCHECKER_MESSAGE)


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Readiness probe",
    description="Runs SELECT 1 against the connection pool and reports the result.",
)
async def health_check():
    db_status = "connected"
    overall = "healthy"

    try:
        await ping_database()
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    payload = HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if overall != "healthy":
        return JSONResponse(status_code=503, content=payload.model_dump())
    return payload

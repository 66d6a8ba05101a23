"""
RootNote Backend — Health Check Route
=====================================

What:  Health check endpoint for monitoring and container probes.
How:   Pings the plant store's database and reports aggregate status.

Status levels:
    - healthy:   database answers `SELECT 1` (HTTP 200)
    - unhealthy: database unreachable or store closed (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends, Response

from rootnote import __version__
from rootnote.dependencies import get_store
from rootnote.exceptions import StorageError
from rootnote.schemas.plant import HealthResponse
from rootnote.services.plant_store import PlantStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Health"])

# Process start, for uptime reporting
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(
    response: Response,
    store: PlantStore = Depends(get_store),
) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        await store.ping()
    except StorageError as e:
        db_status = "disconnected"
        overall = "unhealthy"
        response.status_code = 503
        logger.warning("Health check: database unreachable: %s", e.message)

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )

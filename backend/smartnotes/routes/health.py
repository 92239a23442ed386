"""
SmartNotesX Backend — Health Check Routes
===========================================

What:  `GET /` (liveness banner) and `GET /health` (dependency probe).
How:   /health runs `SELECT 1` against the database and asks the media store
       for its own health. Database down → 503 "unhealthy"; media store down
       → 200 "degraded".
Who:   Load balancers, Docker health checks, uptime monitors.
"""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from smartnotes import __version__
from smartnotes.schemas.common import envelope

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/", summary="API banner")
async def root():
    return envelope(message="SmartNotesX API is running")


@router.get("/health", summary="Service health check")
async def health_check(request: Request):
    db_status = "connected"
    media_status = "available"
    overall = "healthy"

    try:
        await request.app.state.database.ping()
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", e)

    try:
        if not await request.app.state.media_store.health_check():
            media_status = "unavailable"
    except Exception as e:
        media_status = "unavailable"
        logger.warning("Health check: media store unreachable: %s", e)
    if media_status != "available" and overall == "healthy":
        overall = "degraded"

    body = envelope(
        {
            "status": overall,
            "version": __version__,
            "database": db_status,
            "mediaStore": media_status,
            "uptimeSeconds": round(time.time() - _start_time, 2),
        }
    )
    if overall == "unhealthy":
        body["success"] = False
    return JSONResponse(status_code=503 if overall == "unhealthy" else 200, content=body)

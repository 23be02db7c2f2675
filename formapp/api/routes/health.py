"""Health & Readiness Probe — round-trips the database for the load balancer / orchestrator.

Invariants:
    - GET /health returns 200 only if SELECT 1 succeeds right now (not just at startup)
    - Database failure yields 503, never an exception
    - Both bodies carry status, database, timestamp and version
    - version comes from the settings the app was built with (app.state.settings)
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from formapp.infrastructure.database import DatabaseSessionManager, get_db_manager

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(
    request: Request,
    db_manager: DatabaseSessionManager = Depends(get_db_manager),
):
    settings = request.app.state.settings
    db_ok = await db_manager.health_check()
    body = {
        "status": "healthy" if db_ok else "unhealthy",
        "database": "connected" if db_ok else "disconnected",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.app_version,
    }
    if not db_ok:
        logger.warning("Health check failed: database unreachable")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body,
        )
    return body

"""
LinkRisk Health API Routes

Health check and status endpoints.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from linkrisk import __version__
from linkrisk.api.dependencies import get_engine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check():
    """
    Basic health check endpoint.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": "linkrisk-api",
        "version": __version__,
    }


@router.get("/ready")
async def readiness_check(engine=Depends(get_engine)):
    """
    Readiness check - reports how many providers run live.

    The engine is ready even with no keys; unconfigured providers answer
    synthetically.
    """
    status = engine.get_provider_status()
    live = [pid for pid, s in status.items() if s["configured"]]

    return {
        "status": "ready",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "providers_total": len(status),
        "providers_live": len(live),
        "live": live,
    }

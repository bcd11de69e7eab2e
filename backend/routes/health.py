"""Health and readiness check routes."""

import time

from fastapi import APIRouter, Depends, Request

from routes.spotify import get_track_cache
from routes.weather import get_conditions_cache
from services.conditions import ConditionsCache
from services.track_status import TrackStatusCache

router = APIRouter()


@router.get("/ready")
async def ready(request: Request) -> dict:
    """Lightweight readiness check, no cache access."""
    return {"status": "ok", "service": "status-facade", "commit": request.app.state.settings.git_sha}


@router.get("/health")
async def health(
    track: TrackStatusCache = Depends(get_track_cache),
    conditions: ConditionsCache = Depends(get_conditions_cache),
) -> dict:
    """Cache freshness and upstream auth state. Never triggers a refresh."""
    return {
        "status": "ok",
        "timestamp": int(time.time() * 1000),
        "spotify": {
            "lastUpdated": track.last_updated_ms,
            "status": "authenticated" if track.authenticated else "unauthenticated",
        },
        "weather": {
            "lastUpdated": conditions.last_updated_ms,
            "status": "ok" if conditions.snapshot else "error",
        },
    }

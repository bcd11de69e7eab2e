"""Current weather route backed by the OpenWeatherMap cache."""

import logging

from fastapi import APIRouter, Depends, Request

from services.conditions import ConditionsCache

logger = logging.getLogger(__name__)

router = APIRouter()

FRESHNESS_WINDOW_SECONDS = 2700  # 2,700,000 ms


def get_conditions_cache(request: Request) -> ConditionsCache:
    return request.app.state.conditions_cache


@router.get("/weather")
async def weather(request: Request, conditions: ConditionsCache = Depends(get_conditions_cache)) -> dict:
    """Cached conditions, or a localized error body when none are available. Always 200."""
    if conditions.is_stale(FRESHNESS_WINDOW_SECONDS):
        logger.debug("Weather cache %.0fs old; refreshing before responding", conditions.age())
        await conditions.refresh()
    snapshot = conditions.snapshot
    if snapshot is None:
        return {"error": request.app.state.settings.weather_error_message}
    return snapshot.to_dict()

"""Now-playing route backed by the Spotify playback cache."""

import logging

from fastapi import APIRouter, Depends, Request, Response

from services.spotify_client import ALBUM_ART_HOST
from services.track_status import TrackStatusCache

logger = logging.getLogger(__name__)

router = APIRouter()

FRESHNESS_WINDOW_SECONDS = 15

CSP_HEADER = f"img-src 'self' data: {ALBUM_ART_HOST};"


def get_track_cache(request: Request) -> TrackStatusCache:
    return request.app.state.track_cache


@router.get("/spotify")
async def spotify(response: Response, track: TrackStatusCache = Depends(get_track_cache)) -> dict:
    """Current playback, refreshed first if older than the freshness window."""
    if track.is_stale(FRESHNESS_WINDOW_SECONDS):
        logger.debug("Playback cache %.1fs old; refreshing before responding", track.age())
        await track.refresh()
    response.headers["Content-Security-Policy"] = CSP_HEADER
    return track.snapshot.to_dict()

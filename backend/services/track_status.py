"""Cached Spotify playback status with single-flight refresh.

Only one currently-playing call sequence runs at a time. Callers that
arrive while it is in flight are queued and resolved, in arrival order,
with the snapshot that sequence produced.
"""

import asyncio
import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable

from errors import AuthExpiredError, MalformedResponseError, StatusFacadeError
from services.cache import CacheState
from services.spotify_client import SpotifyClient

logger = logging.getLogger(__name__)

# One token refresh + retry per refresh() call, never more.
MAX_AUTH_RETRIES = 1


@dataclass(frozen=True)
class NotPlaying:
    def to_dict(self) -> dict:
        return {"playing": False}


@dataclass(frozen=True)
class Playing:
    name: str
    artist: str
    album_cover: str | None = None

    def to_dict(self) -> dict:
        return {
            "playing": True,
            "name": self.name,
            "artist": self.artist,
            "albumCover": self.album_cover,
        }


PlaybackSnapshot = NotPlaying | Playing

NOT_PLAYING = NotPlaying()


def parse_playback(data: dict | None) -> PlaybackSnapshot:
    """Build a snapshot from a currently-playing payload (None = HTTP 204)."""
    if not data or not data.get("item"):
        return NOT_PLAYING

    item = data["item"]
    try:
        artist = ", ".join(a["name"] for a in item.get("artists") or [])
        images = (item.get("album") or {}).get("images") or []
        album_cover = images[0].get("url") if images else None
        return Playing(name=item["name"], artist=artist, album_cover=album_cover or None)
    except (KeyError, TypeError, AttributeError) as e:
        raise MalformedResponseError("Spotify", f"unexpected item shape: {e!r}") from e


class TrackStatusCache(CacheState):
    def __init__(self, client: SpotifyClient, clock: Callable[[], float] = time.time):
        super().__init__(NOT_PLAYING, clock)
        self._client = client
        self._waiters: deque[asyncio.Future] = deque()
        self.access_token: str | None = None

    @property
    def authenticated(self) -> bool:
        return bool(self.access_token)

    async def refresh_access_token(self) -> bool:
        """Fetch a new bearer token. On failure the current token is kept."""
        try:
            token = await self._client.request_access_token()
        except StatusFacadeError as e:
            logger.warning("Spotify token refresh failed: %s", e)
            return False
        except Exception:
            logger.exception("Unexpected error refreshing Spotify token")
            return False

        self.access_token = token
        logger.info("Spotify access token refreshed")
        return True

    async def refresh(self) -> PlaybackSnapshot:
        """Refresh the playback snapshot, coalescing with any in-flight refresh."""
        if self.refreshing:
            waiter = asyncio.get_running_loop().create_future()
            self._waiters.append(waiter)
            return await waiter

        self.refreshing = True
        try:
            self._store(await self._fetch_snapshot())
        finally:
            self.refreshing = False
            self._resolve_waiters()
        return self.snapshot

    def _resolve_waiters(self) -> None:
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(self.snapshot)

    async def _fetch_snapshot(self) -> PlaybackSnapshot:
        for attempt in range(MAX_AUTH_RETRIES + 1):
            try:
                return parse_playback(await self._client.currently_playing(self.access_token))
            except AuthExpiredError as e:
                if attempt < MAX_AUTH_RETRIES:
                    logger.info("Spotify token rejected; refreshing and retrying")
                    await self.refresh_access_token()
                    continue
                logger.warning("Spotify playback fetch failed after token refresh: %s", e)
            except StatusFacadeError as e:
                logger.warning("Spotify playback fetch failed: %s", e)
            except Exception:
                logger.exception("Unexpected error fetching Spotify playback")
            return NOT_PLAYING
        return NOT_PLAYING

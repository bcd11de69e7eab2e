"""Background refresh loops that keep the caches warm."""

import asyncio
import logging
from typing import Awaitable, Callable

from services.conditions import ConditionsCache
from services.track_status import TrackStatusCache

logger = logging.getLogger(__name__)

TOKEN_REFRESH_INTERVAL_SECONDS = 2700  # 45 min
TRACK_REFRESH_INTERVAL_SECONDS = 15
CONDITIONS_REFRESH_INTERVAL_SECONDS = 2700  # 45 min


async def run_every(interval_seconds: float, job: Callable[[], Awaitable[object]], name: str) -> None:
    """Run ``job`` every ``interval_seconds`` until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await job()
        except Exception:
            logger.exception("Background job %s failed", name)


class BackgroundRefresher:
    """Owns the periodic refresh tasks for both caches."""

    def __init__(
        self,
        track: TrackStatusCache,
        conditions: ConditionsCache,
        token_interval: float = TOKEN_REFRESH_INTERVAL_SECONDS,
        track_interval: float = TRACK_REFRESH_INTERVAL_SECONDS,
        conditions_interval: float = CONDITIONS_REFRESH_INTERVAL_SECONDS,
    ):
        self._track = track
        self._conditions = conditions
        self._intervals = {
            "spotify-token": token_interval,
            "spotify-track": track_interval,
            "weather": conditions_interval,
        }
        self._tasks: list[asyncio.Task] = []

    async def warm_up(self) -> None:
        """Fetch a token and both snapshots before serving traffic."""
        await self._track.refresh_access_token()
        await self._track.refresh()
        await self._conditions.refresh()
        logger.info(
            "Caches warmed: spotify=%s weather=%s",
            "authenticated" if self._track.authenticated else "unauthenticated",
            "ok" if self._conditions.snapshot else "error",
        )

    async def start(self) -> None:
        await self.warm_up()
        jobs = {
            "spotify-token": self._track.refresh_access_token,
            "spotify-track": self._track.refresh,
            "weather": self._conditions.refresh,
        }
        for name, job in jobs.items():
            task = asyncio.create_task(run_every(self._intervals[name], job, name), name=name)
            self._tasks.append(task)

    async def stop(self) -> None:
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()

    @property
    def running(self) -> bool:
        return any(not task.done() for task in self._tasks)

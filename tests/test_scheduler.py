"""Background refresh loops."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from services.scheduler import BackgroundRefresher, run_every


def _caches():
    track = MagicMock()
    track.refresh_access_token = AsyncMock(return_value=True)
    track.refresh = AsyncMock()
    track.authenticated = True
    conditions = MagicMock()
    conditions.refresh = AsyncMock()
    conditions.snapshot = None
    return track, conditions


@pytest.mark.asyncio
async def test_run_every_survives_job_errors():
    calls = 0

    async def job():
        nonlocal calls
        calls += 1
        if calls == 1:
            raise RuntimeError("boom")

    task = asyncio.create_task(run_every(0.001, job, "test"))
    while calls < 3:
        await asyncio.sleep(0.001)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert calls >= 3


@pytest.mark.asyncio
async def test_start_warms_up_in_order_then_schedules():
    track, conditions = _caches()
    calls = []
    track.refresh_access_token.side_effect = lambda: calls.append("token")
    track.refresh.side_effect = lambda: calls.append("track")
    conditions.refresh.side_effect = lambda: calls.append("weather")

    refresher = BackgroundRefresher(track, conditions, token_interval=3600, track_interval=3600, conditions_interval=3600)
    await refresher.start()

    assert calls == ["token", "track", "weather"]
    assert refresher.running is True

    await refresher.stop()
    assert refresher.running is False


@pytest.mark.asyncio
async def test_periodic_jobs_call_refresh():
    track, conditions = _caches()
    refresher = BackgroundRefresher(track, conditions, token_interval=3600, track_interval=0.001, conditions_interval=3600)
    await refresher.start()

    while track.refresh.await_count < 3:
        await asyncio.sleep(0.001)
    await refresher.stop()

    assert track.refresh_access_token.await_count == 1
    assert conditions.refresh.await_count == 1

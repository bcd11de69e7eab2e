"""In-memory snapshot state shared by the upstream caches.

Note: Each uvicorn worker holds its own cache instances. With --workers 2,
each upstream is polled once per worker. This is acceptable for a status
widget; the single-flight guard still holds within a worker.
"""

import time
from typing import Any, Callable


class CacheState:
    """Last-known snapshot plus freshness bookkeeping for one upstream.

    ``last_updated`` is epoch seconds (0.0 until the first completed refresh)
    and is only written once a refresh attempt finishes.
    """

    def __init__(self, initial: Any = None, clock: Callable[[], float] = time.time):
        self._snapshot = initial
        self._clock = clock
        self.last_updated: float = 0.0
        self.refreshing: bool = False

    @property
    def snapshot(self) -> Any:
        return self._snapshot

    @property
    def last_updated_ms(self) -> int:
        return int(self.last_updated * 1000)

    def age(self) -> float:
        """Seconds since the last completed refresh."""
        return self._clock() - self.last_updated

    def is_stale(self, window_seconds: float) -> bool:
        return self.age() > window_seconds

    def _store(self, snapshot: Any, touch: bool = True) -> None:
        self._snapshot = snapshot
        if touch:
            self.last_updated = max(self.last_updated, self._clock())

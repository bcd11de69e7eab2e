"""Cached current weather for a fixed city.

Concurrent refresh triggers are dropped rather than queued: the data is
read on a 45-minute cadence. A failed fetch clears the snapshot so the
endpoint reports an error instead of serving an old value.
"""

import logging
import time
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Callable

from errors import MalformedResponseError, StatusFacadeError
from services.cache import CacheState
from services.weather_client import OpenWeatherClient

logger = logging.getLogger(__name__)

CITY = "Irkutsk, RU"
UNITS = "metric"
LANG = "ru"


@dataclass(frozen=True)
class ConditionsSnapshot:
    description: str
    temp: str  # Celsius, one decimal place

    def to_dict(self) -> dict:
        return {"description": self.description, "temp": self.temp}


def format_temperature(value: float) -> str:
    """One decimal place, halves rounded away from zero.

    Works on the exact binary value of the float, so 21.25 gives "21.3"
    while 21.15 (stored as 21.1499...) gives "21.1".
    """
    return str(Decimal(float(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def parse_conditions(data: dict) -> ConditionsSnapshot:
    try:
        return ConditionsSnapshot(
            description=data["weather"][0]["description"],
            temp=format_temperature(data["main"]["temp"]),
        )
    except (KeyError, IndexError, TypeError, ValueError, InvalidOperation) as e:
        raise MalformedResponseError("OpenWeatherMap", f"unexpected payload shape: {e!r}") from e


class ConditionsCache(CacheState):
    def __init__(self, client: OpenWeatherClient, clock: Callable[[], float] = time.time):
        super().__init__(None, clock)
        self._client = client

    async def refresh(self) -> None:
        if self.refreshing:
            logger.debug("Weather refresh already in flight; dropping trigger")
            return

        self.refreshing = True
        try:
            data = await self._client.current_conditions(CITY, units=UNITS, lang=LANG)
            if data.get("cod") == 200:
                self._store(parse_conditions(data))
            else:
                logger.warning("Weather upstream returned cod=%s: %s", data.get("cod"), data.get("message"))
                self._store(None, touch=False)
        except StatusFacadeError as e:
            logger.warning("Weather refresh failed: %s", e)
            self._store(None, touch=False)
        except Exception:
            logger.exception("Unexpected error refreshing weather")
            self._store(None, touch=False)
        finally:
            self.refreshing = False

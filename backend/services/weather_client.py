"""OpenWeatherMap client for current conditions by city name.

Requires an API key (WEATHER_API_KEY) passed as the ``appid`` query param.
Error payloads come back as JSON with a non-200 ``cod`` and are returned
as-is; the caller decides what counts as success.
"""

import logging

import httpx

from config import Settings
from errors import ConfigMissingError, MalformedResponseError, UpstreamUnavailableError

logger = logging.getLogger(__name__)

OPENWEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"

UPSTREAM = "OpenWeatherMap"


class OpenWeatherClient:
    def __init__(self, http: httpx.AsyncClient, settings: Settings):
        self._http = http
        self._settings = settings

    async def current_conditions(self, city: str, units: str = "metric", lang: str = "ru") -> dict:
        """Fetch current weather for ``city``."""
        if not self._settings.weather_api_key:
            raise ConfigMissingError(["WEATHER_API_KEY"])

        try:
            resp = await self._http.get(
                OPENWEATHER_URL,
                params={
                    "q": city,
                    "units": units,
                    "lang": lang,
                    "appid": self._settings.weather_api_key,
                },
            )
        except httpx.HTTPError as e:
            raise UpstreamUnavailableError(UPSTREAM, str(e)) from e

        logger.debug("OpenWeatherMap %s -> HTTP %s", city, resp.status_code)
        try:
            data = resp.json()
        except ValueError as e:
            raise MalformedResponseError(UPSTREAM, f"response is not JSON (HTTP {resp.status_code})") from e
        if not isinstance(data, dict):
            raise MalformedResponseError(UPSTREAM, f"expected object, got {type(data).__name__}")
        return data

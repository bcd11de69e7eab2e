"""Shared fixtures: test settings, a controllable clock and mock upstream HTTP."""

import httpx
import pytest

from config import Settings


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def test_settings() -> Settings:
    s = Settings()
    s.spotify_client_id = "client-id"
    s.spotify_client_secret = "client-secret"
    s.spotify_refresh_token = "refresh-token"
    s.weather_api_key = "weather-key"
    s.weather_error_message = "Ошибка получения данных"
    s.background_refresh = False
    s.environment = "local"
    return s


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mock_http():
    """Factory for an AsyncClient whose requests are answered by ``handler``."""

    def _make(handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make


def playing_payload(name="Song", artists=("A", "B"), images=("https://i.scdn.co/image/1", "https://i.scdn.co/image/2")):
    return {
        "is_playing": True,
        "item": {
            "name": name,
            "artists": [{"name": a} for a in artists],
            "album": {"images": [{"url": u, "height": 640, "width": 640} for u in images]},
        },
    }


def weather_payload(description="ясно", temp=21.456, cod=200):
    return {
        "cod": cod,
        "weather": [{"id": 800, "main": "Clear", "description": description}],
        "main": {"temp": temp, "humidity": 40},
        "name": "Irkutsk",
    }

"""Centralized configuration — all env vars in one place."""

import os

from dotenv import load_dotenv

# Local development: credentials may live in a .env file; real env vars win.
load_dotenv(os.getenv("DOTENV_PATH"))


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
        self.git_sha: str = os.getenv("GIT_SHA", "unknown")
        self.environment: str = os.getenv("ENVIRONMENT", "local")
        self.host: str = os.getenv("HOST", "0.0.0.0")
        self.port: int = int(os.getenv("PORT", "3000"))
        self.background_refresh: bool = os.getenv("BACKGROUND_REFRESH", "true").lower() in ("1", "true", "yes")
        self.upstream_timeout_seconds: float = float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "10"))

        # Spotify (refresh-token grant)
        self.spotify_client_id: str | None = os.getenv("SPOTIFY_CLIENT_ID")
        self.spotify_client_secret: str | None = os.getenv("SPOTIFY_CLIENT_SECRET")
        self.spotify_refresh_token: str | None = os.getenv("SPOTIFY_REFRESH_TOKEN")

        # OpenWeatherMap
        self.weather_api_key: str | None = os.getenv("WEATHER_API_KEY")
        self.weather_error_message: str = os.getenv("WEATHER_ERROR_MESSAGE", "Ошибка получения данных")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def validate(self) -> list[str]:
        """Return list of missing upstream credential env vars."""
        required = [
            "SPOTIFY_CLIENT_ID",
            "SPOTIFY_CLIENT_SECRET",
            "SPOTIFY_REFRESH_TOKEN",
            "WEATHER_API_KEY",
        ]
        return [var for var in required if not getattr(self, _attr_for(var))]


settings = Settings()


def _attr_for(env_var: str) -> str:
    """Map env var name to Settings attribute name."""
    mapping = {
        "SPOTIFY_CLIENT_ID": "spotify_client_id",
        "SPOTIFY_CLIENT_SECRET": "spotify_client_secret",
        "SPOTIFY_REFRESH_TOKEN": "spotify_refresh_token",
        "WEATHER_API_KEY": "weather_api_key",
    }
    return mapping.get(env_var, env_var.lower())

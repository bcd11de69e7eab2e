"""FastAPI application entry point for the now-playing/weather status facade."""

import logging
import sys

import httpx
import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from config import Settings, settings
from errors import register_error_handlers
from services.conditions import ConditionsCache
from services.scheduler import BackgroundRefresher
from services.spotify_client import SpotifyClient
from services.track_status import TrackStatusCache
from services.weather_client import OpenWeatherClient

# Structured logging: JSON for production, human-readable for local
if settings.is_production:
    logging.basicConfig(
        level=logging.INFO,
        format='{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
        stream=sys.stdout,
    )
else:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

logger = logging.getLogger(__name__)


def create_app(config: Settings = settings, http_client: httpx.AsyncClient | None = None) -> FastAPI:
    app = FastAPI(title="Status Facade", version="1.0.0")

    # CORS: public read-only widget
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # Security headers
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        if config.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    # Centralized error handlers
    register_error_handlers(app)

    # Caches are owned by the app and reach handlers through app.state
    owns_http = http_client is None
    http = http_client or httpx.AsyncClient(timeout=config.upstream_timeout_seconds)
    app.state.settings = config
    app.state.http = http
    app.state.track_cache = TrackStatusCache(SpotifyClient(http, config))
    app.state.conditions_cache = ConditionsCache(OpenWeatherClient(http, config))
    app.state.refresher = BackgroundRefresher(app.state.track_cache, app.state.conditions_cache)

    from routes.health import router as health_router
    from routes.spotify import router as spotify_router
    from routes.weather import router as weather_router

    app.include_router(health_router)
    app.include_router(spotify_router)
    app.include_router(weather_router)

    @app.on_event("startup")
    async def _start_background_refresh() -> None:
        missing = config.validate()
        if missing:
            logger.warning("Missing env vars (upstream calls will fail): %s", ", ".join(missing))
        if config.background_refresh:
            await app.state.refresher.start()
        else:
            logger.info("Background refresh disabled (BACKGROUND_REFRESH=false)")

    @app.on_event("shutdown")
    async def _stop_background_refresh() -> None:
        await app.state.refresher.stop()
        if owns_http:
            await http.aclose()

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port)

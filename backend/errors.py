"""Upstream failure taxonomy and centralized FastAPI error handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class StatusFacadeError(Exception):
    """Base exception with HTTP status code."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class AuthExpiredError(StatusFacadeError):
    """Upstream rejected the bearer token (HTTP 401)."""

    def __init__(self, upstream: str):
        super().__init__(f"{upstream} rejected the access token", status_code=502)


class UpstreamUnavailableError(StatusFacadeError):
    def __init__(self, upstream: str, detail: str):
        super().__init__(f"{upstream} unavailable: {detail}", status_code=502)


class MalformedResponseError(StatusFacadeError):
    def __init__(self, upstream: str, detail: str):
        super().__init__(f"{upstream} returned an unexpected payload: {detail}", status_code=502)


class ConfigMissingError(StatusFacadeError):
    def __init__(self, missing: list[str]):
        super().__init__(f"Missing configuration: {', '.join(missing)}", status_code=503)
        self.missing = missing


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(StatusFacadeError)
    async def handle_facade_error(_request: Request, exc: StatusFacadeError):
        return JSONResponse({"error": str(exc)}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse(
            {"error": "Internal server error"},
            status_code=500,
        )

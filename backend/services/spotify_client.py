"""Spotify Web API client: playback status and refresh-token grant.

Auth:
    Long-lived refresh token (SPOTIFY_REFRESH_TOKEN) exchanged for a
    short-lived bearer token at the accounts endpoint. Expiry is not tracked
    locally; a 401 from the player endpoint signals it.
"""

import logging

import httpx

from config import Settings
from errors import AuthExpiredError, ConfigMissingError, MalformedResponseError, UpstreamUnavailableError

logger = logging.getLogger(__name__)

SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"
SPOTIFY_CURRENTLY_PLAYING_URL = "https://api.spotify.com/v1/me/player/currently-playing"

# Host serving album art, allowed through the /spotify CSP header.
ALBUM_ART_HOST = "https://i.scdn.co"

UPSTREAM = "Spotify"


class SpotifyClient:
    def __init__(self, http: httpx.AsyncClient, settings: Settings):
        self._http = http
        self._settings = settings

    def _credentials(self) -> dict[str, str]:
        creds = {
            "SPOTIFY_CLIENT_ID": self._settings.spotify_client_id,
            "SPOTIFY_CLIENT_SECRET": self._settings.spotify_client_secret,
            "SPOTIFY_REFRESH_TOKEN": self._settings.spotify_refresh_token,
        }
        missing = [name for name, value in creds.items() if not value]
        if missing:
            raise ConfigMissingError(missing)
        return creds

    async def request_access_token(self) -> str:
        """Exchange the refresh token for a new bearer token."""
        creds = self._credentials()
        try:
            resp = await self._http.post(
                SPOTIFY_TOKEN_URL,
                data={
                    "grant_type": "refresh_token",
                    "refresh_token": creds["SPOTIFY_REFRESH_TOKEN"],
                    "client_id": creds["SPOTIFY_CLIENT_ID"],
                    "client_secret": creds["SPOTIFY_CLIENT_SECRET"],
                },
            )
        except httpx.HTTPError as e:
            raise UpstreamUnavailableError(UPSTREAM, str(e)) from e

        try:
            data = resp.json()
        except ValueError as e:
            raise MalformedResponseError(UPSTREAM, f"token response is not JSON (HTTP {resp.status_code})") from e

        token = data.get("access_token") if isinstance(data, dict) else None
        if not token:
            logger.debug("Spotify token endpoint returned HTTP %s without access_token", resp.status_code)
            error = data.get("error") if isinstance(data, dict) else None
            raise UpstreamUnavailableError(UPSTREAM, f"token exchange failed (HTTP {resp.status_code}, {error})")
        return token

    async def currently_playing(self, token: str | None) -> dict | None:
        """Fetch the player's current item. Returns None when nothing is playing."""
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        try:
            resp = await self._http.get(SPOTIFY_CURRENTLY_PLAYING_URL, headers=headers)
        except httpx.HTTPError as e:
            raise UpstreamUnavailableError(UPSTREAM, str(e)) from e

        logger.debug("Spotify currently-playing -> HTTP %s", resp.status_code)
        if resp.status_code == 401:
            raise AuthExpiredError(UPSTREAM)
        if resp.status_code == 204:
            return None
        if not resp.is_success:
            raise UpstreamUnavailableError(UPSTREAM, f"HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise MalformedResponseError(UPSTREAM, "currently-playing response is not JSON") from e
        if not isinstance(data, dict):
            raise MalformedResponseError(UPSTREAM, f"expected object, got {type(data).__name__}")
        return data

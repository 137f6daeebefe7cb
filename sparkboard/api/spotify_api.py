from typing import Any

import httpx
from httpx import Timeout
from loguru import logger

from sparkboard.client import _handle_response_error
from sparkboard.exceptions import APIError, ConfigurationError, NetworkError
from sparkboard.utils.validation import validate_non_empty

SPOTIFY_API_BASE_URL = 'https://api.spotify.com/v1'


class SpotifyApi:
    """
    Minimal Spotify Web API client for picking tracks to add as music sparks.

    Needs a user access token obtained elsewhere (OAuth happens outside this library).
    """

    def __init__(self, access_token: str | None) -> None:
        if not access_token:
            raise ConfigurationError("A Spotify access token is required (SPARKBOARD_SPOTIFY_TOKEN)")
        self._http = httpx.AsyncClient(
            base_url=SPOTIFY_API_BASE_URL,
            headers={'authorization': f'Bearer {access_token}'},
            timeout=Timeout(timeout=15.0)
        )

    async def __aenter__(self) -> "SpotifyApi":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http.aclose()

    async def _get(self, url: str, params: dict[str, Any]) -> dict[str, Any]:
        logger.debug(f'GET request to spotify {url}', query_params=params)
        try:
            response = await self._http.get(url, params=params)
        except httpx.TimeoutException as e:
            raise NetworkError(f"Request timed out: {e}")
        except httpx.RequestError as e:
            raise NetworkError(f"Network error: {e}")
        _handle_response_error(response)
        try:
            return response.json()
        except Exception:
            raise APIError(f'Non-JSON response ({response.status_code}): {response.text}', status_code=response.status_code)

    async def search_tracks(self, query: str, limit: int = 20) -> list[dict[str, Any]]:
        """
        Searches tracks by free text.

        :param query: Search text
        :param limit: Maximum number of tracks (default 20)
        :return: Spotify track objects
        """
        validate_non_empty(query, "query")
        json_response = await self._get('/search', {'q': query, 'type': 'track', 'limit': limit})
        return (json_response.get('tracks') or {}).get('items', [])

    async def get_top_tracks(self, limit: int = 20) -> list[dict[str, Any]]:
        """Gets the token owner's top tracks."""
        json_response = await self._get('/me/top/tracks', {'limit': limit})
        return json_response.get('items', [])


def format_duration(millis: int) -> str:
    """Format a track duration as m:ss."""
    total_seconds = round(millis / 1000)
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes}:{seconds:02d}"

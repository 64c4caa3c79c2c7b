"""Spotify Web API adapter implementing the MusicService port over httpx."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from dialectic_dj.application.interfaces.music_service import MusicService
from dialectic_dj.domain.shared.constants import SpotifyConstants
from dialectic_dj.domain.shared.exceptions import (
    AuthenticationFailedError,
    RemoteServiceError,
    TrackNotFoundError,
)
from dialectic_dj.domain.shared.messages import ErrorMessages

from .models import PlaybackPayload, SearchPayload, TrackPayload

if TYPE_CHECKING:
    from dialectic_dj.domain.auth.entities import OAuthToken
    from dialectic_dj.domain.music.entities import PlaybackSnapshot, Track
    from dialectic_dj.domain.music.value_objects import TrackId

logger = logging.getLogger(__name__)

P = TypeVar("P", bound=BaseModel)
T = TypeVar("T")

_AUTH_STATUSES = frozenset({401, 403})
_NOT_FOUND_STATUSES = frozenset({400, 404})


def error_detail(response: httpx.Response) -> str:
    """Pull the human readable message out of a Spotify error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or response.reason_phrase

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return body.get("error_description") or error
    return response.text[:200]


class SpotifyWebClient(MusicService):
    """Client bound to one access token; cheap to create per call.

    The underlying ``httpx.AsyncClient`` is owned by the caller and shared
    across instances.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        token: OAuthToken,
        *,
        base_url: str = SpotifyConstants.API_BASE_URL,
    ) -> None:
        self._http = http
        self._token = token
        self._base_url = base_url.rstrip("/")

    @property
    def token(self) -> OAuthToken:
        return self._token

    async def search(self, query: str, limit: int = SpotifyConstants.SEARCH_LIMIT) -> list[Track]:
        response = await self._request(
            "search", "GET", "/search", params={"q": query, "type": "track", "limit": limit}
        )
        page = self._parse("search", SearchPayload, response)
        return self._convert(
            "search", lambda: [item.to_domain() for item in page.tracks.items if item.id]
        )

    async def get_track(self, track_id: TrackId) -> Track:
        response = await self._request(
            "get_track", "GET", f"/tracks/{track_id.value}", not_found=track_id.value
        )
        payload = self._parse("get_track", TrackPayload, response)
        return self._convert("get_track", payload.to_domain)

    async def add_to_queue(self, track_id: TrackId, device_id: str | None = None) -> None:
        params = {"uri": track_id.uri}
        if device_id:
            params["device_id"] = device_id
        await self._request("add_to_queue", "POST", "/me/player/queue", params=params)

    async def skip_to_next(self, device_id: str | None = None) -> None:
        params = {"device_id": device_id} if device_id else None
        await self._request("skip_to_next", "POST", "/me/player/next", params=params)

    async def current_playback(self) -> PlaybackSnapshot | None:
        response = await self._request(
            "current_playback",
            "GET",
            "/me/player",
            params={"additional_types": SpotifyConstants.ADDITIONAL_TYPES},
        )
        # 204 (or an empty body) means nothing is active on any device
        if response.status_code == 204 or not response.content.strip():
            return None

        payload = self._parse("current_playback", PlaybackPayload, response)
        return self._convert("current_playback", payload.to_domain)

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        not_found: str | None = None,
    ) -> httpx.Response:
        headers = {"Authorization": self._token.authorization_header}
        try:
            response = await self._http.request(
                method, f"{self._base_url}{path}", params=params, headers=headers
            )
        except httpx.HTTPError as e:
            raise RemoteServiceError(
                operation, ErrorMessages.REMOTE_TRANSPORT_ERROR.format(operation=operation, error=e)
            ) from e

        if response.status_code < 400:
            return response

        status = response.status_code
        message = ErrorMessages.REMOTE_HTTP_ERROR.format(
            operation=operation, status=status, detail=error_detail(response)
        )
        logger.debug("Spotify %s %s -> %d", method, path, status)

        if status in _AUTH_STATUSES:
            raise AuthenticationFailedError(message, status_code=status)
        if not_found is not None and status in _NOT_FOUND_STATUSES:
            raise TrackNotFoundError(not_found, message)
        raise RemoteServiceError(operation, message, status_code=status)

    @staticmethod
    def _parse(operation: str, model: type[P], response: httpx.Response) -> P:
        try:
            return model.model_validate_json(response.content)
        except PydanticValidationError as e:
            raise RemoteServiceError(
                operation, ErrorMessages.REMOTE_BAD_PAYLOAD.format(operation=operation)
            ) from e

    @staticmethod
    def _convert(operation: str, build: Callable[[], T]) -> T:
        try:
            return build()
        except ValueError as e:
            raise RemoteServiceError(
                operation, ErrorMessages.REMOTE_BAD_PAYLOAD.format(operation=operation)
            ) from e

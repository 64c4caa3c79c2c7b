"""Refresh-token grant against the Spotify accounts service."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError as PydanticValidationError

from dialectic_dj.application.interfaces.token_refresher import TokenRefresher
from dialectic_dj.domain.shared.constants import SpotifyConstants
from dialectic_dj.domain.shared.datetime_utils import expires_in
from dialectic_dj.domain.shared.exceptions import AuthenticationFailedError, RemoteServiceError
from dialectic_dj.domain.shared.messages import ErrorMessages

from .client import error_detail
from .models import TokenPayload

if TYPE_CHECKING:
    from dialectic_dj.domain.auth.entities import OAuthToken

logger = logging.getLogger(__name__)

_OPERATION = "refresh_token"
_REJECTED_STATUSES = frozenset({400, 401})


class SpotifyTokenRefresher(TokenRefresher):
    """Posts ``grant_type=refresh_token`` with HTTP basic client credentials."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        client_id: str,
        client_secret: str,
        accounts_base_url: str = SpotifyConstants.ACCOUNTS_BASE_URL,
    ) -> None:
        self._http = http
        self._auth = httpx.BasicAuth(client_id, client_secret)
        self._token_url = f"{accounts_base_url.rstrip('/')}{SpotifyConstants.TOKEN_PATH}"

    async def refresh(self, token: OAuthToken) -> OAuthToken:
        if token.refresh_token is None:
            raise AuthenticationFailedError(ErrorMessages.NO_REFRESH_TOKEN)

        data = {
            "grant_type": "refresh_token",
            "refresh_token": token.refresh_token.get_secret_value(),
        }
        logger.debug("Requesting token refresh from %s", self._token_url)
        try:
            response = await self._http.post(self._token_url, data=data, auth=self._auth)
        except httpx.HTTPError as e:
            raise RemoteServiceError(
                _OPERATION, ErrorMessages.REMOTE_TRANSPORT_ERROR.format(operation=_OPERATION, error=e)
            ) from e

        if response.status_code in _REJECTED_STATUSES:
            raise AuthenticationFailedError(
                ErrorMessages.REFRESH_REJECTED.format(
                    status=response.status_code, detail=error_detail(response)
                ),
                status_code=response.status_code,
            )
        if response.status_code >= 400:
            raise RemoteServiceError(
                _OPERATION,
                ErrorMessages.REMOTE_HTTP_ERROR.format(
                    operation=_OPERATION, status=response.status_code, detail=error_detail(response)
                ),
                status_code=response.status_code,
            )

        try:
            payload = TokenPayload.model_validate_json(response.content)
        except PydanticValidationError as e:
            raise RemoteServiceError(
                _OPERATION, ErrorMessages.REMOTE_BAD_PAYLOAD.format(operation=_OPERATION)
            ) from e

        return token.with_refresh(
            access_token=payload.access_token,
            expires_at=expires_in(payload.expires_in),
            refresh_token=payload.refresh_token,
            scopes=payload.scopes,
        )

"""Credential Provider - guarded OAuth state yielding ready-to-use music service clients."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING
from uuid import UUID

from ...domain.shared.exceptions import (
    AuthenticationFailedError,
    EntityNotFoundError,
    NotAuthenticatedError,
)
from ...domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ...domain.auth.entities import OAuthToken, PlaySession
    from ...domain.auth.repository import SessionRepository
    from ..interfaces.music_service import MusicService
    from ..interfaces.token_refresher import TokenRefresher

logger = logging.getLogger(__name__)

ClientFactory = Callable[["OAuthToken"], "MusicService"]


class CredentialProvider:
    """Holds the session's OAuth token and hands out clients built from it.

    All reads and writes of the token happen under one ``asyncio.Lock`` so that
    concurrent callers with an expired token queue behind a single refresh
    instead of racing to overwrite each other's token/expiry pair.

    A rejected refresh leaves the stored token untouched: the session stays
    bound and later calls retry the refresh until an administrator installs
    new credentials.
    """

    def __init__(
        self,
        *,
        client_factory: ClientFactory,
        token_refresher: TokenRefresher,
        session_repository: SessionRepository | None = None,
        refresh_margin_seconds: float = 0.0,
    ) -> None:
        self._client_factory = client_factory
        self._refresher = token_refresher
        self._session_repo = session_repository
        self._refresh_margin = refresh_margin_seconds

        self._lock = asyncio.Lock()
        self._token: OAuthToken | None = None
        self._session: PlaySession | None = None

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    @property
    def session_id(self) -> UUID | None:
        return self._session.id if self._session else None

    async def install_token(self, token: OAuthToken, *, session: PlaySession | None = None) -> None:
        """Store credentials obtained by the authorization flow."""
        async with self._lock:
            if session is not None:
                self._session = session
            self._token = token
            await self._persist_locked()
        logger.info(
            LogTemplates.CREDENTIALS_INSTALLED, token.expires_at.isoformat(timespec="seconds")
        )

    async def restore(self, session_id: UUID) -> PlaySession:
        """Load a persisted session and its token."""
        session = None
        if self._session_repo is not None:
            session = await self._session_repo.get_session(session_id)
        if session is None:
            raise EntityNotFoundError(
                "Session",
                str(session_id),
                ErrorMessages.SESSION_NOT_FOUND.format(session_id=session_id),
            )

        async with self._lock:
            self._session = session
            self._token = session.token

        if session.token is None:
            logger.warning(LogTemplates.CREDENTIALS_MISSING)
        else:
            logger.info(LogTemplates.CREDENTIALS_RESTORED, session_id)
        return session

    async def acquire_client(self) -> MusicService | None:
        """Return a client with a valid token, or None when no credentials are held.

        Raises:
            AuthenticationFailedError: The music service rejected the refresh.
        """
        async with self._lock:
            if self._token is None:
                return None

            if self._token.is_expired(self._refresh_margin):
                await self._refresh_locked()

            token = self._token

        return self._client_factory(token)

    async def require_client(self) -> MusicService:
        """Like ``acquire_client`` but raise when unauthenticated."""
        client = await self.acquire_client()
        if client is None:
            raise NotAuthenticatedError(ErrorMessages.NOT_AUTHENTICATED)
        return client

    async def _refresh_locked(self) -> None:
        assert self._token is not None
        logger.info(
            LogTemplates.TOKEN_REFRESHING, self._token.expires_at.isoformat(timespec="seconds")
        )

        if not self._token.can_refresh:
            logger.warning(LogTemplates.TOKEN_REFRESH_FAILED, ErrorMessages.NO_REFRESH_TOKEN)
            raise AuthenticationFailedError(ErrorMessages.NO_REFRESH_TOKEN)

        try:
            refreshed = await self._refresher.refresh(self._token)
        except AuthenticationFailedError as e:
            logger.warning(LogTemplates.TOKEN_REFRESH_FAILED, e.message)
            raise

        self._token = refreshed
        logger.info(
            LogTemplates.TOKEN_REFRESHED, refreshed.expires_at.isoformat(timespec="seconds")
        )
        await self._persist_locked()

    async def _persist_locked(self) -> None:
        if self._session is None or self._session_repo is None:
            return

        self._session = self._session.model_copy(update={"token": self._token})
        try:
            await self._session_repo.update_session(self._session)
        except Exception as e:
            # The in-memory token stays authoritative for this process
            logger.warning(LogTemplates.TOKEN_PERSIST_FAILED, self._session.id, e)

"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the player, its credentials and its adapters.
Components are created on-demand and cached for reuse throughout the application.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    import httpx

    from ..application.interfaces.music_service import MusicService
    from ..application.interfaces.token_refresher import TokenRefresher
    from ..application.services.credential_provider import CredentialProvider
    from ..application.services.player_service import PlayerCommander, PlayerOrchestrator
    from ..domain.auth.entities import OAuthToken
    from ..domain.auth.repository import SessionRepository
    from ..domain.music.repository import TrackStore
    from ..infrastructure.persistence.database import Database
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed.
    """

    settings: Settings

    # Persistence layer
    _database: Database | None = None
    _track_store: TrackStore | None = None
    _session_repository: SessionRepository | None = None

    # Infrastructure adapters
    _http_client: httpx.AsyncClient | None = None
    _token_refresher: TokenRefresher | None = None

    # Application services
    _credential_provider: CredentialProvider | None = None
    _player: PlayerOrchestrator | None = None
    _commander: PlayerCommander | None = None

    # === Database ===

    @property
    def database(self) -> Database:
        """Get the database connection manager."""
        if self._database is None:
            from ..infrastructure.persistence.database import Database

            self._database = Database(self.settings.database.url, settings=self.settings.database)
        return self._database

    # === Repositories ===

    @property
    def track_store(self) -> TrackStore:
        """Get the persisted track queue."""
        if self._track_store is None:
            from ..infrastructure.persistence.repositories.track_repository import (
                SQLiteTrackStore,
            )

            self._track_store = SQLiteTrackStore(self.database)
        return self._track_store

    @property
    def session_repository(self) -> SessionRepository:
        """Get the play session repository."""
        if self._session_repository is None:
            from ..infrastructure.persistence.repositories.session_repository import (
                SQLiteSessionRepository,
            )

            self._session_repository = SQLiteSessionRepository(self.database)
        return self._session_repository

    # === Infrastructure Adapters ===

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Get the HTTP client shared by all Spotify adapters."""
        if self._http_client is None:
            import httpx

            self._http_client = httpx.AsyncClient(timeout=self.settings.spotify.request_timeout_s)
        return self._http_client

    @property
    def token_refresher(self) -> TokenRefresher:
        """Get the OAuth token refresher."""
        if self._token_refresher is None:
            from ..infrastructure.spotify.auth import SpotifyTokenRefresher

            spotify = self.settings.spotify
            self._token_refresher = SpotifyTokenRefresher(
                self.http_client,
                client_id=spotify.client_id,
                client_secret=spotify.client_secret.get_secret_value(),
                accounts_base_url=spotify.accounts_base_url,
            )
        return self._token_refresher

    def music_service_for(self, token: OAuthToken) -> MusicService:
        """Build a Spotify client bound to ``token``."""
        from ..infrastructure.spotify.client import SpotifyWebClient

        return SpotifyWebClient(
            self.http_client, token, base_url=self.settings.spotify.api_base_url
        )

    # === Application Services ===

    @property
    def credential_provider(self) -> CredentialProvider:
        """Get the credential provider."""
        if self._credential_provider is None:
            from ..application.services.credential_provider import CredentialProvider

            self._credential_provider = CredentialProvider(
                client_factory=self.music_service_for,
                token_refresher=self.token_refresher,
                session_repository=self.session_repository,
                refresh_margin_seconds=self.settings.spotify.refresh_margin_s,
            )
        return self._credential_provider

    @property
    def player(self) -> PlayerOrchestrator:
        """Get the playback orchestrator."""
        if self._player is None:
            from ..application.services.player_service import PlayerOrchestrator

            player = self.settings.player
            self._player = PlayerOrchestrator(
                credentials=self.credential_provider,
                track_store=self.track_store if player.persist_queue else None,
                wake_lead_seconds=player.wake_lead_seconds,
                command_queue_size=player.command_queue_size,
                remote_call_timeout_s=player.remote_call_timeout_s,
                restore_limit=player.restore_limit,
            )
        return self._player

    @property
    def commander(self) -> PlayerCommander:
        """Get the public player API."""
        if self._commander is None:
            from ..application.services.player_service import PlayerCommander

            self._commander = PlayerCommander(self.player)
        return self._commander

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Initialize the database, restore credentials and start the player."""
        await self.database.initialize()

        session_id = self.settings.session_id
        if session_id is not None:
            await self.credential_provider.restore(session_id)
        else:
            logger.warning(LogTemplates.CREDENTIALS_MISSING)

        await self.player.start()

    async def shutdown(self) -> None:
        """Shutdown and cleanup all resources."""
        try:
            if self._player is not None:
                await self._player.stop()
        except Exception as exc:
            logger.warning(LogTemplates.CONTAINER_SHUTDOWN_ERROR, exc)

        try:
            if self._http_client is not None:
                await self._http_client.aclose()
        except Exception as exc:
            logger.warning(LogTemplates.CONTAINER_SHUTDOWN_ERROR, exc)

        if self._database is not None:
            await self._database.close()


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)

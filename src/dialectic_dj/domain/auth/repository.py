"""Session repository interface."""

from abc import ABC, abstractmethod
from uuid import UUID

from dialectic_dj.domain.auth.entities import OAuthToken, PlaySession


class SessionRepository(ABC):
    """Abstract repository for play sessions and their stored credentials."""

    @abstractmethod
    async def create_session(self, name: str, token: OAuthToken | None = None) -> PlaySession:
        """Create and persist a new session.

        Args:
            name: Display name for the session.
            token: Credentials obtained by the authorization flow, if any.

        Returns:
            The created session with its generated id.
        """
        ...

    @abstractmethod
    async def update_session(self, session: PlaySession) -> None:
        """Persist the session's name and token."""
        ...

    @abstractmethod
    async def get_session(self, session_id: UUID) -> PlaySession | None:
        """Retrieve a session by id, or None if it does not exist."""
        ...

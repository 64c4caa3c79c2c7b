"""Port interface for refreshing OAuth access tokens."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.auth.entities import OAuthToken


class TokenRefresher(ABC):
    """Exchanges a refresh token for a new access token."""

    @abstractmethod
    async def refresh(self, token: "OAuthToken") -> "OAuthToken":
        """Return a refreshed copy of ``token``.

        Raises:
            AuthenticationFailedError: The grant was rejected (revoked or invalid).
            RemoteServiceError: The token endpoint could not be reached.
        """
        ...

"""OAuth credential and play session entities."""

from __future__ import annotations

from datetime import timedelta
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from dialectic_dj.domain.shared.constants import SpotifyConstants
from dialectic_dj.domain.shared.datetime_utils import utcnow
from dialectic_dj.domain.shared.types import NonEmptyStr, UtcDatetimeField


class OAuthToken(BaseModel):
    """Access/refresh token pair with its expiry and granted scopes."""

    model_config = ConfigDict(frozen=True)

    access_token: SecretStr
    refresh_token: SecretStr | None = None
    expires_at: UtcDatetimeField
    scopes: frozenset[str] = Field(default_factory=lambda: frozenset(SpotifyConstants.SCOPES))
    token_type: str = "Bearer"

    def is_expired(self, margin_seconds: float = 0.0) -> bool:
        """True when the token is expired or will be within ``margin_seconds``."""
        return utcnow() + timedelta(seconds=margin_seconds) >= self.expires_at

    @property
    def can_refresh(self) -> bool:
        return self.refresh_token is not None and bool(self.refresh_token.get_secret_value())

    @property
    def authorization_header(self) -> str:
        return f"{self.token_type} {self.access_token.get_secret_value()}"

    def with_refresh(
        self,
        *,
        access_token: str,
        expires_at: UtcDatetimeField,
        refresh_token: str | None = None,
        scopes: frozenset[str] | None = None,
    ) -> OAuthToken:
        """Return the refreshed token; the old refresh token is kept unless rotated."""
        return self.model_copy(
            update={
                "access_token": SecretStr(access_token),
                "expires_at": expires_at,
                "refresh_token": SecretStr(refresh_token) if refresh_token else self.refresh_token,
                "scopes": scopes if scopes is not None else self.scopes,
            }
        )


class PlaySession(BaseModel):
    """A named listening session that owns one set of credentials."""

    model_config = ConfigDict(strict=True)

    id: UUID = Field(default_factory=uuid4)
    name: NonEmptyStr
    token: OAuthToken | None = None
    created_at: UtcDatetimeField = Field(default_factory=utcnow)

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

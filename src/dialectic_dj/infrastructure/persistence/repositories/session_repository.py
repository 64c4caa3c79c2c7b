"""SQLite implementation of the play session repository."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from uuid import UUID

from pydantic import SecretStr

from dialectic_dj.domain.auth.entities import OAuthToken, PlaySession
from dialectic_dj.domain.auth.repository import SessionRepository
from dialectic_dj.domain.shared.constants import DatabaseTables
from dialectic_dj.domain.shared.datetime_utils import parse_iso, to_iso, utcnow
from dialectic_dj.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ..database import Database

logger = logging.getLogger(__name__)


class SQLiteSessionRepository(SessionRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    async def create_session(self, name: str, token: OAuthToken | None = None) -> PlaySession:
        session = PlaySession(name=name, token=token)
        now = to_iso(utcnow())

        await self._db.execute(
            f"""
            INSERT INTO {DatabaseTables.SESSIONS} (
                id, name, access_token, refresh_token, expires_at, scopes, token_type,
                created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                str(session.id),
                session.name,
                *self._token_columns(token),
                to_iso(session.created_at),
                now,
            ),
        )
        logger.info(LogTemplates.SESSION_CREATED, session.id, session.name)
        return session

    async def update_session(self, session: PlaySession) -> None:
        await self._db.execute(
            f"""
            INSERT INTO {DatabaseTables.SESSIONS} (
                id, name, access_token, refresh_token, expires_at, scopes, token_type,
                created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                name = excluded.name,
                access_token = excluded.access_token,
                refresh_token = excluded.refresh_token,
                expires_at = excluded.expires_at,
                scopes = excluded.scopes,
                token_type = excluded.token_type,
                updated_at = excluded.updated_at
            """,
            (
                str(session.id),
                session.name,
                *self._token_columns(session.token),
                to_iso(session.created_at),
                to_iso(utcnow()),
            ),
        )
        logger.debug(LogTemplates.SESSION_UPDATED, session.id)

    async def get_session(self, session_id: UUID) -> PlaySession | None:
        row = await self._db.fetch_one(
            f"SELECT * FROM {DatabaseTables.SESSIONS} WHERE id = ?", (str(session_id),)
        )
        if row is None:
            return None
        return self._row_to_session(row)

    @staticmethod
    def _token_columns(token: OAuthToken | None) -> tuple[Any, ...]:
        if token is None:
            return (None, None, None, None, None)
        return (
            token.access_token.get_secret_value(),
            token.refresh_token.get_secret_value() if token.refresh_token else None,
            to_iso(token.expires_at),
            " ".join(sorted(token.scopes)),
            token.token_type,
        )

    @staticmethod
    def _row_to_session(row: dict[str, Any]) -> PlaySession:
        token = None
        if row["access_token"] is not None:
            token = OAuthToken(
                access_token=SecretStr(row["access_token"]),
                refresh_token=SecretStr(row["refresh_token"]) if row["refresh_token"] else None,
                expires_at=parse_iso(row["expires_at"]),
                scopes=frozenset((row["scopes"] or "").split()),
                token_type=row["token_type"] or "Bearer",
            )

        return PlaySession(
            id=UUID(row["id"]),
            name=row["name"],
            token=token,
            created_at=parse_iso(row["created_at"]),
        )

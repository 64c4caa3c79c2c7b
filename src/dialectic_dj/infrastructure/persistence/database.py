"""SQLite database with per-operation connections and WAL mode."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import aiosqlite

from dialectic_dj.domain.shared.constants import DatabaseTables, SQLPragmas
from dialectic_dj.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...config.settings import DatabaseSettings

logger = logging.getLogger(__name__)

_MEMORY_PATH = ":memory:"
_SHARED_MEMORY_URI = "file:dialectic-dj-{name}?mode=memory&cache=shared"

_SCHEMA: tuple[str, ...] = (
    f"""
    CREATE TABLE IF NOT EXISTS {DatabaseTables.ALBUMS} (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        cover_image_url TEXT
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {DatabaseTables.TRACKS} (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        duration_ms INTEGER NOT NULL,
        album_id TEXT REFERENCES {DatabaseTables.ALBUMS}(id),
        album_name TEXT,
        album_cover_url TEXT
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {DatabaseTables.ARTISTS} (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL UNIQUE
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {DatabaseTables.ARTIST_TO_TRACK} (
        track_id TEXT NOT NULL REFERENCES {DatabaseTables.TRACKS}(id) ON DELETE CASCADE,
        artist_id INTEGER NOT NULL REFERENCES {DatabaseTables.ARTISTS}(id) ON DELETE CASCADE,
        position INTEGER NOT NULL,
        PRIMARY KEY (track_id, artist_id)
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {DatabaseTables.QUEUED_TRACKS} (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        track_id TEXT NOT NULL REFERENCES {DatabaseTables.TRACKS}(id),
        added_at TEXT NOT NULL
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {DatabaseTables.PLAYED_TRACKS} (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        track_id TEXT NOT NULL REFERENCES {DatabaseTables.TRACKS}(id),
        played_at TEXT NOT NULL
    )
    """,
    f"CREATE INDEX IF NOT EXISTS idx_played_tracks_played_at ON {DatabaseTables.PLAYED_TRACKS}(played_at)",
    f"""
    CREATE TABLE IF NOT EXISTS {DatabaseTables.SESSIONS} (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        access_token TEXT,
        refresh_token TEXT,
        expires_at TEXT,
        scopes TEXT,
        token_type TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
)


class Database:
    def __init__(self, url: str, settings: DatabaseSettings | None = None) -> None:
        if url.startswith("sqlite:///"):
            self._db_path = url[len("sqlite:///"):]
        elif url.startswith("sqlite://"):
            self._db_path = url[len("sqlite://"):] or _MEMORY_PATH
        else:
            self._db_path = url

        self._initialized = False
        self._keepalive_conn: aiosqlite.Connection | None = None
        # One shared-cache database per instance
        self._memory_uri = _SHARED_MEMORY_URI.format(name=uuid4().hex)
        self._busy_timeout = settings.busy_timeout_ms if settings else 5000
        self._connection_timeout = settings.connection_timeout_s if settings else 10

    @property
    def db_path(self) -> str:
        return self._db_path

    @property
    def is_memory(self) -> bool:
        return self._db_path == _MEMORY_PATH

    async def initialize(self) -> None:
        if self._initialized:
            return

        if not self.is_memory:
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)

        # The shared in-memory database lives only while a connection is open
        if self.is_memory and self._keepalive_conn is None:
            self._keepalive_conn = await self._connect()

        async with self.transaction() as conn:
            for statement in _SCHEMA:
                await conn.execute(statement)

        self._initialized = True
        logger.info(LogTemplates.DATABASE_INITIALIZED, self._db_path)

    async def _connect(self) -> aiosqlite.Connection:
        if self.is_memory:
            db_path, uri = self._memory_uri, True
        else:
            db_path, uri = self._db_path, False

        conn = await aiosqlite.connect(db_path, uri=uri, timeout=self._connection_timeout)
        conn.row_factory = aiosqlite.Row

        await conn.execute(SQLPragmas.JOURNAL_MODE_WAL)
        await conn.execute(SQLPragmas.FOREIGN_KEYS_ON)
        await conn.execute(SQLPragmas.BUSY_TIMEOUT.format(timeout=self._busy_timeout))

        return conn

    @asynccontextmanager
    async def connection(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        conn = await self._connect()
        try:
            yield conn
        finally:
            await conn.close()

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        """Get a transaction context manager with auto-commit/rollback."""
        async with self.connection() as conn:
            try:
                yield conn
                await conn.commit()
            except Exception:
                await conn.rollback()
                raise

    async def execute(self, sql: str, parameters: tuple[Any, ...] = ()) -> int:
        """Execute a statement in its own transaction and return the affected row count."""
        async with self.transaction() as conn:
            cursor = await conn.execute(sql, parameters)
            return cursor.rowcount

    async def fetch_one(self, sql: str, parameters: tuple[Any, ...] = ()) -> dict[str, Any] | None:
        async with self.connection() as conn:
            cursor = await conn.execute(sql, parameters)
            row = await cursor.fetchone()
            return dict(row) if row else None

    async def fetch_all(self, sql: str, parameters: tuple[Any, ...] = ()) -> list[dict[str, Any]]:
        async with self.connection() as conn:
            cursor = await conn.execute(sql, parameters)
            rows = await cursor.fetchall()
            return [dict(row) for row in rows]

    async def close(self) -> None:
        """Close the keepalive connection of an in-memory database."""
        if self._keepalive_conn is not None:
            try:
                await self._keepalive_conn.close()
            finally:
                self._keepalive_conn = None
        self._initialized = False
        logger.info(LogTemplates.DATABASE_CLOSED)

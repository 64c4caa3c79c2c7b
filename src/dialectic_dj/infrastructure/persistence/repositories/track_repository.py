"""SQLite implementation of the track store and persisted play queue."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import aiosqlite

from dialectic_dj.domain.music.entities import Album, Artist, Track
from dialectic_dj.domain.music.repository import TrackStore
from dialectic_dj.domain.shared.constants import DatabaseTables
from dialectic_dj.domain.shared.datetime_utils import to_iso, utcnow
from dialectic_dj.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ..database import Database

logger = logging.getLogger(__name__)


class SQLiteTrackStore(TrackStore):
    def __init__(self, database: Database) -> None:
        self._db = database

    async def save_track(self, track: Track) -> None:
        """Upsert a track with its album and artists."""
        async with self._db.transaction() as conn:
            await self._save_track(conn, track)

    async def add_to_queue(self, track: Track) -> None:
        async with self._db.transaction() as conn:
            await self._save_track(conn, track)
            await conn.execute(
                f"INSERT INTO {DatabaseTables.QUEUED_TRACKS} (track_id, added_at) VALUES (?, ?)",
                (track.id.value, to_iso(utcnow())),
            )
        logger.debug(LogTemplates.TRACK_SAVED, track.id)

    async def list_queue(self, limit: int) -> list[Track]:
        rows = await self._db.fetch_all(
            f"""
            SELECT t.* FROM {DatabaseTables.QUEUED_TRACKS} q
            JOIN {DatabaseTables.TRACKS} t ON t.id = q.track_id
            ORDER BY q.id ASC
            LIMIT ?
            """,
            (limit,),
        )
        return [await self._row_to_track(row) for row in rows]

    async def pop_queue(self) -> Track | None:
        async with self._db.transaction() as conn:
            cursor = await conn.execute(
                f"SELECT id, track_id FROM {DatabaseTables.QUEUED_TRACKS} ORDER BY id ASC LIMIT 1"
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            await conn.execute(
                f"DELETE FROM {DatabaseTables.QUEUED_TRACKS} WHERE id = ?", (row["id"],)
            )
            track_id = row["track_id"]

        logger.debug(LogTemplates.TRACK_POPPED, track_id)
        return await self.get_track_by_id(track_id)

    async def get_track_by_id(self, track_id: str) -> Track | None:
        row = await self._db.fetch_one(
            f"SELECT * FROM {DatabaseTables.TRACKS} WHERE id = ?", (track_id,)
        )
        if row is None:
            return None
        return await self._row_to_track(row)

    async def record_play(self, track: Track) -> None:
        async with self._db.transaction() as conn:
            await self._save_track(conn, track)
            await conn.execute(
                f"INSERT INTO {DatabaseTables.PLAYED_TRACKS} (track_id, played_at) VALUES (?, ?)",
                (track.id.value, to_iso(utcnow())),
            )
        logger.debug(LogTemplates.PLAY_RECORDED, track.id)

    async def count_plays(self, track_id: str) -> int:
        row = await self._db.fetch_one(
            f"SELECT COUNT(*) AS count FROM {DatabaseTables.PLAYED_TRACKS} WHERE track_id = ?",
            (track_id,),
        )
        return row["count"] if row else 0

    async def _save_track(self, conn: aiosqlite.Connection, track: Track) -> None:
        album = track.album
        if album is not None and album.id is not None:
            await conn.execute(
                f"""
                INSERT INTO {DatabaseTables.ALBUMS} (id, name, cover_image_url) VALUES (?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name, cover_image_url = excluded.cover_image_url
                """,
                (album.id, album.name, album.cover_image_url),
            )

        await conn.execute(
            f"""
            INSERT INTO {DatabaseTables.TRACKS}
                (id, name, duration_ms, album_id, album_name, album_cover_url)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                name = excluded.name,
                duration_ms = excluded.duration_ms,
                album_id = excluded.album_id,
                album_name = excluded.album_name,
                album_cover_url = excluded.album_cover_url
            """,
            (
                track.id.value,
                track.name,
                track.duration_ms,
                album.id if album else None,
                album.name if album else None,
                album.cover_image_url if album else None,
            ),
        )

        await conn.execute(
            f"DELETE FROM {DatabaseTables.ARTIST_TO_TRACK} WHERE track_id = ?", (track.id.value,)
        )
        for position, artist in enumerate(track.artists):
            await conn.execute(
                f"INSERT OR IGNORE INTO {DatabaseTables.ARTISTS} (name) VALUES (?)", (artist.name,)
            )
            await conn.execute(
                f"""
                INSERT OR IGNORE INTO {DatabaseTables.ARTIST_TO_TRACK} (track_id, artist_id, position)
                SELECT ?, id, ? FROM {DatabaseTables.ARTISTS} WHERE name = ?
                """,
                (track.id.value, position, artist.name),
            )

    async def _row_to_track(self, row: dict[str, Any]) -> Track:
        artist_rows = await self._db.fetch_all(
            f"""
            SELECT a.name FROM {DatabaseTables.ARTIST_TO_TRACK} link
            JOIN {DatabaseTables.ARTISTS} a ON a.id = link.artist_id
            WHERE link.track_id = ?
            ORDER BY link.position ASC
            """,
            (row["id"],),
        )

        album = None
        if row["album_name"] is not None:
            album = Album(
                id=row["album_id"],
                name=row["album_name"],
                cover_image_url=row["album_cover_url"],
            )

        return Track(
            id=row["id"],
            name=row["name"],
            duration_ms=row["duration_ms"],
            album=album,
            artists=tuple(Artist(name=r["name"]) for r in artist_rows),
        )

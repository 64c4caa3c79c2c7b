"""
Tests for the SQLite persistence layer

Tests for:
- Database URL handling and schema creation
- Track store: saved tracks, FIFO queue, play history
- Session repository: create, update, fetch
"""

from uuid import uuid4

import pytest

from dialectic_dj.domain.auth.entities import PlaySession
from dialectic_dj.domain.music.entities import Track
from dialectic_dj.infrastructure.persistence.database import Database


class TestDatabase:
    @pytest.mark.parametrize(
        ("url", "path"),
        [
            ("sqlite:///data/dj.db", "data/dj.db"),
            ("sqlite:////var/lib/dj.db", "/var/lib/dj.db"),
            ("sqlite://", ":memory:"),
            ("sqlite:///:memory:", ":memory:"),
            ("plain.db", "plain.db"),
        ],
    )
    def test_url_parsing(self, url, path):
        assert Database(url).db_path == path

    @pytest.mark.asyncio
    async def test_initialize_creates_tables(self, in_memory_database):
        rows = await in_memory_database.fetch_all(
            "SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name"
        )
        names = {row["name"] for row in rows}
        assert {
            "albums",
            "tracks",
            "artists",
            "artist_to_track",
            "queued_tracks",
            "played_tracks",
            "sessions",
        } <= names

    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(self, in_memory_database):
        await in_memory_database.initialize()

        row = await in_memory_database.fetch_one("SELECT COUNT(*) AS n FROM tracks")
        assert row["n"] == 0

    @pytest.mark.asyncio
    async def test_file_database(self, tmp_path):
        db = Database(f"sqlite:///{tmp_path / 'nested' / 'dj.db'}")
        await db.initialize()
        try:
            assert (tmp_path / "nested" / "dj.db").exists()
            assert db.is_memory is False
        finally:
            await db.close()

    @pytest.mark.asyncio
    async def test_memory_databases_are_isolated(self, in_memory_database):
        other = Database(":memory:")
        await other.initialize()
        try:
            await in_memory_database.execute(
                "INSERT INTO albums (id, name) VALUES (?, ?)", ("album-1", "first-only")
            )

            query = "SELECT name FROM albums WHERE id = ?"
            assert await in_memory_database.fetch_one(query, ("album-1",)) == {"name": "first-only"}
            assert await other.fetch_one(query, ("album-1",)) is None
        finally:
            await other.close()


class TestTrackStore:
    @pytest.mark.asyncio
    async def test_saved_track_round_trips_album_and_artists(self, track_store, track_factory):
        track = track_factory("t1", "Song", 200_000, artists=("Daft Punk", "Pharrell Williams"))

        await track_store.save_track(track)
        loaded = await track_store.get_track_by_id("t1")

        assert loaded == track
        assert loaded.name == "Song"
        assert loaded.duration_ms == 200_000
        assert loaded.album.name == "Album of Song"
        assert loaded.album_art_url == "https://i.scdn.co/image/t1"
        assert loaded.artist_names == "Daft Punk, Pharrell Williams"

    @pytest.mark.asyncio
    async def test_unknown_track(self, track_store):
        assert await track_store.get_track_by_id("missing") is None

    @pytest.mark.asyncio
    async def test_track_without_album(self, track_store):
        track = Track(id="bare", name="Bare", duration_ms=1000)

        await track_store.save_track(track)
        loaded = await track_store.get_track_by_id("bare")

        assert loaded.album is None
        assert loaded.artists == ()

    @pytest.mark.asyncio
    async def test_saving_again_updates_metadata(self, track_store, track_factory):
        await track_store.save_track(track_factory("t1", "Old name", artists=("A", "B")))
        await track_store.save_track(track_factory("t1", "New name", artists=("B",)))

        loaded = await track_store.get_track_by_id("t1")

        assert loaded.name == "New name"
        assert loaded.artist_names == "B"

    @pytest.mark.asyncio
    async def test_queue_is_fifo(self, track_store, track_factory):
        for i in range(3):
            await track_store.add_to_queue(track_factory(f"t{i}", f"Track {i}"))

        queued = await track_store.list_queue(limit=10)

        assert [t.id.value for t in queued] == ["t0", "t1", "t2"]

    @pytest.mark.asyncio
    async def test_list_queue_respects_limit(self, track_store, track_factory):
        for i in range(5):
            await track_store.add_to_queue(track_factory(f"t{i}", f"Track {i}"))

        queued = await track_store.list_queue(limit=2)

        assert [t.id.value for t in queued] == ["t0", "t1"]

    @pytest.mark.asyncio
    async def test_queue_allows_duplicates(self, track_store, track_factory):
        track = track_factory("dup", "Again")
        await track_store.add_to_queue(track)
        await track_store.add_to_queue(track)

        assert len(await track_store.list_queue(limit=10)) == 2

    @pytest.mark.asyncio
    async def test_pop_returns_oldest(self, track_store, track_factory):
        await track_store.add_to_queue(track_factory("first", "First"))
        await track_store.add_to_queue(track_factory("second", "Second"))

        popped = await track_store.pop_queue()

        assert popped.id.value == "first"
        assert [t.id.value for t in await track_store.list_queue(limit=10)] == ["second"]

    @pytest.mark.asyncio
    async def test_pop_empty_queue(self, track_store):
        assert await track_store.pop_queue() is None

    @pytest.mark.asyncio
    async def test_popped_track_stays_saved(self, track_store, track_factory):
        await track_store.add_to_queue(track_factory("kept", "Kept"))
        await track_store.pop_queue()

        assert await track_store.get_track_by_id("kept") is not None

    @pytest.mark.asyncio
    async def test_play_history(self, track_store, track_factory):
        track = track_factory("hit", "Hit")

        await track_store.record_play(track)
        await track_store.record_play(track)

        assert await track_store.count_plays("hit") == 2
        assert await track_store.count_plays("never") == 0
        assert await track_store.get_track_by_id("hit") == track


class TestSessionRepository:
    @pytest.mark.asyncio
    async def test_create_and_get(self, session_repository, token_factory):
        token = token_factory(access_token="a-1", refresh_token="r-1")

        created = await session_repository.create_session("Friday night", token)
        loaded = await session_repository.get_session(created.id)

        assert loaded.id == created.id
        assert loaded.name == "Friday night"
        assert loaded.token.access_token.get_secret_value() == "a-1"
        assert loaded.token.refresh_token.get_secret_value() == "r-1"
        assert loaded.token.scopes == token.scopes
        assert abs((loaded.token.expires_at - token.expires_at).total_seconds()) < 1

    @pytest.mark.asyncio
    async def test_session_without_token(self, session_repository):
        created = await session_repository.create_session("Empty")

        loaded = await session_repository.get_session(created.id)

        assert loaded.token is None
        assert loaded.is_authenticated is False

    @pytest.mark.asyncio
    async def test_update_replaces_token(self, session_repository, token_factory):
        session = await session_repository.create_session("Party", token_factory())
        rotated = session.model_copy(
            update={"token": token_factory(access_token="a-2", refresh_token=None)}
        )

        await session_repository.update_session(rotated)
        loaded = await session_repository.get_session(session.id)

        assert loaded.token.access_token.get_secret_value() == "a-2"
        assert loaded.token.refresh_token is None

    @pytest.mark.asyncio
    async def test_update_inserts_unknown_session(self, session_repository, token_factory):
        session = PlaySession(name="Imported", token=token_factory())

        await session_repository.update_session(session)

        assert (await session_repository.get_session(session.id)).name == "Imported"

    @pytest.mark.asyncio
    async def test_missing_session(self, session_repository):
        assert await session_repository.get_session(uuid4()) is None

import asyncio
from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio
from pydantic import SecretStr

from dialectic_dj.application.interfaces.music_service import MusicService
from dialectic_dj.domain.auth.entities import OAuthToken
from dialectic_dj.domain.music.entities import (
    Album,
    Artist,
    PlayableItem,
    PlaybackSnapshot,
    TargetDevice,
    Track,
)
from dialectic_dj.domain.music.value_objects import PlayableItemType
from dialectic_dj.domain.shared.exceptions import TrackNotFoundError

# ============================================================================
# Fakes
# ============================================================================


class FakeMusicService(MusicService):
    """In-memory music service that records every call.

    ``fail`` maps an operation name to the exception it should raise.
    ``delay`` maps an operation name to seconds to stall before answering.
    ``gates`` holds an operation until its event is set.
    """

    def __init__(self, catalog=(), playback=None):
        self.catalog = {track.id.value: track for track in catalog}
        self.playback = playback
        self.calls: list[tuple] = []
        self.fail: dict[str, Exception] = {}
        self.delay: dict[str, float] = {}
        self.gates: dict[str, asyncio.Event] = {}

    async def _enter(self, operation, *args):
        self.calls.append((operation, *args))
        if operation in self.delay:
            await asyncio.sleep(self.delay[operation])
        if operation in self.gates:
            await self.gates[operation].wait()
        if operation in self.fail:
            raise self.fail[operation]

    def calls_to(self, operation):
        return [call[1:] for call in self.calls if call[0] == operation]

    async def search(self, query, limit=5):
        await self._enter("search", query, limit)
        matches = [t for t in self.catalog.values() if query.lower() in t.name.lower()]
        return matches[:limit]

    async def get_track(self, track_id):
        await self._enter("get_track", track_id.value)
        try:
            return self.catalog[track_id.value]
        except KeyError:
            raise TrackNotFoundError(track_id.value) from None

    async def add_to_queue(self, track_id, device_id=None):
        await self._enter("add_to_queue", track_id.value, device_id)

    async def skip_to_next(self, device_id=None):
        await self._enter("skip_to_next", device_id)

    async def current_playback(self):
        await self._enter("current_playback")
        return self.playback


# ============================================================================
# Domain Entity Fixtures
# ============================================================================


def make_track(track_id="track-a", name="Track A", duration_ms=180_000, artists=("Artist",)):
    return Track(
        id=track_id,
        name=name,
        duration_ms=duration_ms,
        album=Album(
            id=f"album-{track_id}",
            name=f"Album of {name}",
            cover_image_url=f"https://i.scdn.co/image/{track_id}",
        ),
        artists=tuple(Artist(name=a) for a in artists),
    )


def make_token(*, expires_in=3600.0, refresh_token="refresh-1", access_token="access-1"):
    return OAuthToken(
        access_token=SecretStr(access_token),
        refresh_token=SecretStr(refresh_token) if refresh_token else None,
        expires_at=datetime.now(UTC) + timedelta(seconds=expires_in),
    )


def playing(track=None, *, device_id="device-1", episode=False):
    """Build a live playback report for ``track`` on ``device_id``."""
    if episode:
        item = PlayableItem(type=PlayableItemType.EPISODE, name="Podcast", duration_ms=1_200_000)
    elif track is not None:
        item = PlayableItem(
            type=PlayableItemType.TRACK,
            name=track.name,
            duration_ms=track.duration_ms,
            track=track,
        )
    else:
        item = None

    return PlaybackSnapshot(
        device=TargetDevice(id=device_id, name="Living Room", type="Speaker", is_active=True),
        item=item,
        progress_ms=0,
        is_playing=item is not None,
    )


@pytest.fixture
def track_factory():
    return make_track


@pytest.fixture
def token_factory():
    return make_token


@pytest.fixture
def playback_factory():
    return playing


@pytest.fixture
def sample_track():
    return make_track()


@pytest.fixture
def fake_service():
    return FakeMusicService()


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def in_memory_database():
    """Create an in-memory SQLite database for testing."""
    from dialectic_dj.infrastructure.persistence.database import Database

    db = Database(":memory:")
    await db.initialize()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def track_store(in_memory_database):
    from dialectic_dj.infrastructure.persistence.repositories.track_repository import (
        SQLiteTrackStore,
    )

    return SQLiteTrackStore(in_memory_database)


@pytest_asyncio.fixture
async def session_repository(in_memory_database):
    from dialectic_dj.infrastructure.persistence.repositories.session_repository import (
        SQLiteSessionRepository,
    )

    return SQLiteSessionRepository(in_memory_database)

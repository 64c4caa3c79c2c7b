"""Core domain entities for the music bounded context."""

from __future__ import annotations

import time
from collections import deque
from collections.abc import Iterable, Iterator
from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict, Field

from dialectic_dj.domain.music.value_objects import PlayableItemType, TrackIdField
from dialectic_dj.domain.shared.datetime_utils import utcnow
from dialectic_dj.domain.shared.types import (
    DurationMs,
    HttpUrlStr,
    NonEmptyStr,
    NonNegativeInt,
    TrackNameStr,
    UtcDatetimeField,
)


class Artist(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True)

    name: NonEmptyStr


class Album(BaseModel):
    """Album reference carried by a track: name plus first cover image."""

    model_config = ConfigDict(frozen=True, strict=True)

    id: NonEmptyStr | None = None
    name: str
    cover_image_url: HttpUrlStr | None = None


class Track(BaseModel):
    """Immutable value object representing a playable track.

    Two tracks are equal when their identifiers are equal, whatever the metadata.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    id: TrackIdField
    name: TrackNameStr
    duration_ms: DurationMs
    album: Album | None = None
    artists: tuple[Artist, ...] = ()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Track):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def duration(self) -> timedelta:
        return timedelta(milliseconds=self.duration_ms)

    @property
    def album_art_url(self) -> str | None:
        return self.album.cover_image_url if self.album else None

    @property
    def artist_names(self) -> str:
        return ", ".join(artist.name for artist in self.artists)

    @property
    def duration_formatted(self) -> str:
        """Format duration as MM:SS or HH:MM:SS."""
        hours, remainder = divmod(self.duration_ms // 1000, 3600)
        minutes, seconds = divmod(remainder, 60)

        if hours > 0:
            return f"{hours}:{minutes:02d}:{seconds:02d}"
        return f"{minutes}:{seconds:02d}"

    def seconds_until_wake(self, lead_seconds: float) -> float:
        """Delay before the next track must be staged, clamped at zero for short tracks."""
        return max(0.0, self.duration.total_seconds() - lead_seconds)


class TrackQueue:
    """FIFO of tracks waiting to be staged. Duplicates are allowed."""

    def __init__(self, tracks: Iterable[Track] = ()) -> None:
        self._tracks: deque[Track] = deque(tracks)

    def __len__(self) -> int:
        return len(self._tracks)

    def __iter__(self) -> Iterator[Track]:
        return iter(self._tracks)

    def __bool__(self) -> bool:
        return bool(self._tracks)

    def append(self, track: Track) -> None:
        self._tracks.append(track)

    def extend(self, tracks: Iterable[Track]) -> None:
        self._tracks.extend(tracks)

    def pop_front(self) -> Track | None:
        if not self._tracks:
            return None
        return self._tracks.popleft()

    def push_front(self, track: Track) -> None:
        self._tracks.appendleft(track)

    def peek(self) -> Track | None:
        return self._tracks[0] if self._tracks else None

    def snapshot(self) -> list[Track]:
        return list(self._tracks)


class InProgressTrack(BaseModel):
    """The track believed to be playing and when it was staged."""

    model_config = ConfigDict(frozen=True, strict=True)

    track: Track
    started_monotonic: float = Field(default_factory=time.monotonic)
    started_at: UtcDatetimeField = Field(default_factory=utcnow)

    @property
    def elapsed(self) -> timedelta:
        return timedelta(seconds=time.monotonic() - self.started_monotonic)


class TargetDevice(BaseModel):
    """Remote playback endpoint the player directs commands to."""

    model_config = ConfigDict(frozen=True, strict=True)

    id: NonEmptyStr
    name: str = ""
    type: str = ""
    is_active: bool = False


class PlayableItem(BaseModel):
    """An item the remote player reports; only track items carry a Track."""

    model_config = ConfigDict(frozen=True, strict=True)

    type: PlayableItemType
    name: str = ""
    duration_ms: DurationMs = 0
    track: Track | None = None

    @property
    def is_track(self) -> bool:
        return self.type == PlayableItemType.TRACK and self.track is not None


class PlaybackSnapshot(BaseModel):
    """Live report of what the remote player is doing right now."""

    model_config = ConfigDict(frozen=True, strict=True)

    device: TargetDevice | None = None
    item: PlayableItem | None = None
    progress_ms: NonNegativeInt | None = None
    is_playing: bool = False
    read_at: datetime = Field(default_factory=utcnow)

    @property
    def current_track(self) -> Track | None:
        if self.item is None or not self.item.is_track:
            return None
        return self.item.track

    @property
    def remaining(self) -> timedelta | None:
        if self.item is None or self.progress_ms is None:
            return None
        return timedelta(milliseconds=max(0, self.item.duration_ms - self.progress_ms))


class PlayerState(BaseModel):
    """Combined view of the live track and the waiting queue."""

    model_config = ConfigDict(frozen=True, strict=True)

    current_track: Track | None = None
    queue: list[Track] = Field(default_factory=list)

"""Port interface for the remote music streaming service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from dialectic_dj.domain.shared.types import NonEmptyStr, PositiveInt

if TYPE_CHECKING:
    from ...domain.music.entities import PlaybackSnapshot, Track
    from ...domain.music.value_objects import TrackId


class MusicService(ABC):
    """A ready-to-call client bound to one set of credentials.

    Implementations raise ``RemoteServiceError`` for transport/API failures,
    ``AuthenticationFailedError`` when the credentials are rejected and
    ``TrackNotFoundError`` when a track lookup misses.
    """

    @abstractmethod
    async def search(self, query: NonEmptyStr, limit: PositiveInt = 5) -> list["Track"]:
        """Search for tracks matching a query."""
        ...

    @abstractmethod
    async def get_track(self, track_id: "TrackId") -> "Track":
        """Fetch full metadata for a single track."""
        ...

    @abstractmethod
    async def add_to_queue(self, track_id: "TrackId", device_id: str | None = None) -> None:
        """Append a track to the remote device's own play queue."""
        ...

    @abstractmethod
    async def skip_to_next(self, device_id: str | None = None) -> None:
        """Skip the remote device to the next item in its queue."""
        ...

    @abstractmethod
    async def current_playback(self) -> "PlaybackSnapshot | None":
        """Read the live playback report, or None when nothing is active."""
        ...

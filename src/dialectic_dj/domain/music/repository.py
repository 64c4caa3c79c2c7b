"""
Music Domain Repository Interfaces

Abstract base classes defining the contracts for track persistence.
Implementations live in the infrastructure layer.
"""

from abc import ABC, abstractmethod

from dialectic_dj.domain.music.entities import Track


class TrackStore(ABC):
    """Abstract store for track records and the persisted play queue.

    The player treats the store as an optional mirror of its in-memory queue.
    """

    @abstractmethod
    async def add_to_queue(self, track: Track) -> None:
        """Save the track (and its album/artists) and append it to the queue.

        Args:
            track: The track to persist and enqueue.
        """
        ...

    @abstractmethod
    async def list_queue(self, limit: int) -> list[Track]:
        """List queued tracks, oldest first.

        Args:
            limit: Maximum number of tracks to return.

        Returns:
            Up to ``limit`` tracks in FIFO order.
        """
        ...

    @abstractmethod
    async def pop_queue(self) -> Track | None:
        """Remove and return the oldest queued track.

        Returns:
            The track, or None if the queue is empty.
        """
        ...

    @abstractmethod
    async def get_track_by_id(self, track_id: str) -> Track | None:
        """Look up a saved track.

        Args:
            track_id: The service-assigned track id.

        Returns:
            The track if it was ever saved, None otherwise.
        """
        ...

    @abstractmethod
    async def record_play(self, track: Track) -> None:
        """Record that a track was handed to the remote player."""
        ...

"""
Music Bounded Context

Tracks, the play queue, remote playback reports and the track store contract.
"""

from dialectic_dj.domain.music.entities import (
    Album,
    Artist,
    InProgressTrack,
    PlayableItem,
    PlaybackSnapshot,
    PlayerState,
    TargetDevice,
    Track,
    TrackQueue,
)
from dialectic_dj.domain.music.repository import TrackStore
from dialectic_dj.domain.music.value_objects import PlayableItemType, TrackId

__all__ = [
    # Entities
    "Track",
    "Album",
    "Artist",
    "TrackQueue",
    "InProgressTrack",
    "TargetDevice",
    "PlayableItem",
    "PlaybackSnapshot",
    "PlayerState",
    # Value Objects
    "TrackId",
    "PlayableItemType",
    # Repository
    "TrackStore",
]

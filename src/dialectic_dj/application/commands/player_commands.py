"""
Player Commands

Messages accepted by the player orchestrator. Commands that need an answer
carry a single-use future that the orchestrator resolves exactly once.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.music.entities import Track
    from ...domain.music.value_objects import TrackId


def _new_reply() -> asyncio.Future:
    return asyncio.get_running_loop().create_future()


@dataclass(frozen=True)
class StartCommand:
    """Resolve the device if needed and stage the head of the queue."""


@dataclass(frozen=True)
class WakeCommand:
    """Timer tick: re-read playback and stage the next queued track."""


@dataclass(frozen=True)
class AddTrackCommand:
    """Fetch a track's metadata and append it to the queue."""

    track_id: TrackId
    reply: asyncio.Future[Track] = field(default_factory=_new_reply, repr=False)


@dataclass(frozen=True)
class GetCurrentTrackCommand:
    """Read the track the remote device is playing right now."""

    reply: asyncio.Future[Track | None] = field(default_factory=_new_reply, repr=False)


@dataclass(frozen=True)
class GetTrackQueueCommand:
    """Snapshot the tracks waiting to be staged."""

    reply: asyncio.Future[list[Track]] = field(default_factory=_new_reply, repr=False)


PlayerCommand = (
    StartCommand | WakeCommand | AddTrackCommand | GetCurrentTrackCommand | GetTrackQueueCommand
)

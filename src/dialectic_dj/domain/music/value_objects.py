"""Immutable value objects for the music bounded context."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Annotated

from pydantic import PlainSerializer, PlainValidator

from dialectic_dj.domain.shared.constants import SpotifyConstants
from dialectic_dj.domain.shared.exceptions import InvalidTrackIdError
from dialectic_dj.domain.shared.messages import ErrorMessages

_ID_FORBIDDEN = re.compile(r"[\s:/?#]")
_URL_PATTERN = re.compile(r"^https?://open\.spotify\.com/(?:intl-[a-z-]+/)?track/([^/?#]+)")


@dataclass(frozen=True)
class TrackId:
    """Opaque, service-assigned track identifier (a Spotify base-62 id)."""

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ValueError(ErrorMessages.EMPTY_TRACK_ID)

    def __str__(self) -> str:
        return self.value

    def __hash__(self) -> int:
        return hash(self.value)

    @property
    def uri(self) -> str:
        return f"{SpotifyConstants.TRACK_URI_PREFIX}{self.value}"

    @classmethod
    def parse(cls, raw: str) -> TrackId:
        """Parse a bare id, a ``spotify:track:`` URI, or an open.spotify.com URL."""
        candidate = (raw or "").strip()
        if candidate.startswith(SpotifyConstants.TRACK_URI_PREFIX):
            candidate = candidate[len(SpotifyConstants.TRACK_URI_PREFIX):]
        else:
            match = _URL_PATTERN.match(candidate)
            if match:
                candidate = match.group(1)

        if not candidate or _ID_FORBIDDEN.search(candidate):
            raise InvalidTrackIdError(raw)
        return cls(candidate)


# Serializes as plain string in JSON, stores as TrackId in the model.
TrackIdField = Annotated[
    TrackId,
    PlainValidator(lambda v: TrackId(v) if isinstance(v, str) else v),
    PlainSerializer(lambda v: v.value, return_type=str),
]


class PlayableItemType(Enum):
    """Kinds of playable item the music service reports."""

    TRACK = "track"
    EPISODE = "episode"

    @classmethod
    def from_payload(cls, value: str | None) -> PlayableItemType:
        # Anything that is not explicitly a track is treated as non-music
        try:
            return cls(value or cls.EPISODE.value)
        except ValueError:
            return cls.EPISODE

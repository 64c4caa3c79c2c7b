"""Pydantic models for Spotify Web API payloads and their domain conversions."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from dialectic_dj.domain.music.entities import (
    Album,
    Artist,
    PlayableItem,
    PlaybackSnapshot,
    TargetDevice,
    Track,
)
from dialectic_dj.domain.music.value_objects import PlayableItemType


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class ImagePayload(_Payload):
    url: str
    width: int | None = None
    height: int | None = None


class AlbumPayload(_Payload):
    id: str | None = None
    name: str = ""
    images: list[ImagePayload] = Field(default_factory=list)

    def to_domain(self) -> Album:
        return Album(
            id=self.id or None,
            name=self.name,
            cover_image_url=self.images[0].url if self.images else None,
        )


class ArtistPayload(_Payload):
    id: str | None = None
    name: str


class TrackPayload(_Payload):
    """A full track object, or any other playable item when ``type`` differs."""

    id: str | None = None
    name: str = ""
    duration_ms: int = 0
    type: str = "track"
    album: AlbumPayload | None = None
    artists: list[ArtistPayload] = Field(default_factory=list)

    def to_domain(self) -> Track:
        return Track(
            id=self.id or "",
            name=self.name,
            duration_ms=self.duration_ms,
            album=self.album.to_domain() if self.album else None,
            artists=tuple(Artist(name=a.name) for a in self.artists if a.name),
        )

    def to_playable(self) -> PlayableItem:
        item_type = PlayableItemType.from_payload(self.type)
        # Local files report as tracks but carry no id
        track = self.to_domain() if item_type is PlayableItemType.TRACK and self.id else None
        return PlayableItem(
            type=item_type,
            name=self.name,
            duration_ms=max(0, self.duration_ms),
            track=track,
        )


class DevicePayload(_Payload):
    id: str | None = None
    name: str = ""
    type: str = ""
    is_active: bool = False

    def to_domain(self) -> TargetDevice | None:
        # Restricted devices come back without an id and cannot be targeted
        if not self.id:
            return None
        return TargetDevice(id=self.id, name=self.name, type=self.type, is_active=self.is_active)


class PlaybackPayload(_Payload):
    device: DevicePayload | None = None
    item: TrackPayload | None = None
    progress_ms: int | None = None
    is_playing: bool = False
    currently_playing_type: str | None = None

    def to_domain(self) -> PlaybackSnapshot:
        return PlaybackSnapshot(
            device=self.device.to_domain() if self.device else None,
            item=self.item.to_playable() if self.item else None,
            progress_ms=max(0, self.progress_ms) if self.progress_ms is not None else None,
            is_playing=self.is_playing,
        )


class TrackPage(_Payload):
    items: list[TrackPayload] = Field(default_factory=list)


class SearchPayload(_Payload):
    tracks: TrackPage = Field(default_factory=TrackPage)


class TokenPayload(_Payload):
    """Response of the accounts service token endpoint."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 3600
    scope: str | None = None
    refresh_token: str | None = None

    @property
    def scopes(self) -> frozenset[str] | None:
        return frozenset(self.scope.split()) if self.scope else None

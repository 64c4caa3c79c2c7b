"""Spotify Web API adapters built on httpx."""

from dialectic_dj.infrastructure.spotify.auth import SpotifyTokenRefresher
from dialectic_dj.infrastructure.spotify.client import SpotifyWebClient

__all__ = [
    "SpotifyWebClient",
    "SpotifyTokenRefresher",
]

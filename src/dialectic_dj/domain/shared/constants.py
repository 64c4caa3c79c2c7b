"""Centralized constants for the music service, player timing, and database schema."""

from __future__ import annotations


class SpotifyConstants:
    """Spotify Web API endpoints and OAuth details."""

    API_BASE_URL = "https://api.spotify.com/v1"
    ACCOUNTS_BASE_URL = "https://accounts.spotify.com"
    TOKEN_PATH = "/api/token"

    TRACK_URI_PREFIX = "spotify:track:"

    SCOPES: tuple[str, ...] = (
        "user-modify-playback-state",
        "user-read-playback-state",
        "user-read-currently-playing",
    )

    ADDITIONAL_TYPES = "track,episode"
    SEARCH_LIMIT = 5


class PlayerConstants:
    """Player timing and channel defaults."""

    # Stage the next track this long before the current one ends
    WAKE_LEAD_SECONDS = 10.0
    COMMAND_QUEUE_SIZE = 64
    REMOTE_CALL_TIMEOUT_SECONDS = 15.0
    TOKEN_REFRESH_MARGIN_SECONDS = 60.0


class DatabaseTables:
    """Database table names."""

    ALBUMS = "albums"
    TRACKS = "tracks"
    ARTISTS = "artists"
    ARTIST_TO_TRACK = "artist_to_track"
    QUEUED_TRACKS = "queued_tracks"
    PLAYED_TRACKS = "played_tracks"
    SESSIONS = "sessions"


class SQLPragmas:
    """SQLite pragma statements."""

    JOURNAL_MODE_WAL = "PRAGMA journal_mode=WAL"
    FOREIGN_KEYS_ON = "PRAGMA foreign_keys=ON"
    BUSY_TIMEOUT = "PRAGMA busy_timeout={timeout}"

"""Centralized message constants for error messages and log templates."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Track Validation Errors
    EMPTY_TRACK_ID = "Track ID cannot be empty"

    # Remote Service Errors
    NO_PLAYBACK_DEVICE = "No playback device available"
    REMOTE_TIMEOUT = "Music service call '{operation}' timed out after {timeout}s"
    REMOTE_HTTP_ERROR = "Music service call '{operation}' failed with HTTP {status}: {detail}"
    REMOTE_TRANSPORT_ERROR = "Music service call '{operation}' failed: {error}"
    REMOTE_BAD_PAYLOAD = "Music service call '{operation}' returned an unexpected payload"

    # Authentication Errors
    NOT_AUTHENTICATED = "The admin for this session does not have valid credentials"
    REFRESH_REJECTED = "Token refresh rejected with HTTP {status}: {detail}"
    NO_REFRESH_TOKEN = "Access token expired and no refresh token is available"
    SESSION_NOT_FOUND = "Session {session_id} not found"

    # Time/Date Validation Errors
    TIMEZONE_REQUIRED_UTC_DATETIME = "Timestamp must be timezone-aware"

    # Settings Validation Errors
    INVALID_DATABASE_URL = "Database URL must start with sqlite://"
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    SPOTIFY_CREDENTIALS_REQUIRED = (
        "SPOTIFY__CLIENT_ID and SPOTIFY__CLIENT_SECRET environment variables are required"
    )

    # Player
    PLAYER_NOT_RUNNING = "Player is not running"
    PLAYER_STOPPED_BEFORE_REPLY = "Player stopped before replying to {command}"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters.
    """

    # Database Lifecycle
    DATABASE_INITIALIZED = "Database initialized at %s"
    DATABASE_CLOSED = "Database manager closed"

    # Repository Operations
    TRACK_SAVED = "Saved track %s to queue store"
    TRACK_POPPED = "Popped track %s from queue store"
    PLAY_RECORDED = "Recorded play for track %s"
    SESSION_CREATED = "Created session %s (%s)"
    SESSION_UPDATED = "Updated session %s"

    # Credentials
    CREDENTIALS_INSTALLED = "Installed credentials (expires at %s)"
    CREDENTIALS_RESTORED = "Restored credentials from session %s"
    CREDENTIALS_MISSING = "No credentials available; music service calls are disabled"
    TOKEN_REFRESHING = "Access token expired at %s, refreshing"
    TOKEN_REFRESHED = "Access token refreshed (expires at %s)"
    TOKEN_REFRESH_FAILED = "Access token refresh failed: %s"
    TOKEN_PERSIST_FAILED = "Failed to persist refreshed token for session %s: %r"

    # Player Lifecycle
    PLAYER_STARTED = "Player task started"
    PLAYER_STOPPED = "Player task stopped"
    PLAYER_ALREADY_RUNNING = "Player task is already running"
    PLAYER_CRASHED = "Player task crashed"
    PLAYER_QUEUE_RESTORED = "Restored %d queued tracks from store"
    PLAYER_COMMAND_RECEIVED = "Player received %s"
    PLAYER_COMMAND_FAILED = "Unhandled error while processing %s"

    # Device Resolution
    DEVICE_RESOLVED = "Target device resolved: %s (%s)"
    DEVICE_RESOLUTION_FAILED = "Failed to resolve target device: %s"
    DEVICE_UNRESOLVED = "No target device resolved; cannot stage %s"

    # Playback
    START_EMPTY_QUEUE = "Start requested but queue is empty"
    START_FAILED = "Failed to start playback: %s"
    WAKE_RECEIVED = "Wake received with %d queued tracks"
    WAKE_NO_PLAYBACK = "Wake found no active playback; not advancing"
    WAKE_FAILED = "Failed to advance to next track: %s"
    WAKE_EMPTY_QUEUE = "No track to play next"
    TRACK_STAGED = "Staged '%s' on device %s"
    STAGE_FAILED = "Failed to stage '%s': %s"
    WAKE_ARMED = "Waking player in %.1f seconds for '%s'"
    SKIP_FAILED = "Failed to skip to staged track: %s"

    # Queue
    TRACK_QUEUED = "Queued '%s' (%s), %d tracks waiting"
    TRACK_QUEUE_FAILED = "Failed to add track %s to queue: %s"
    CURRENT_TRACK_FAILED = "Failed to find current track: %s"
    STORE_FAILED = "Queue store operation '%s' failed: %r"

    # Application Lifecycle
    APP_STARTING = "Starting Dialectic DJ (environment=%s)"
    APP_READY = "Dialectic DJ ready"
    APP_STOPPED = "Dialectic DJ stopped"
    APP_KEYBOARD_INTERRUPT = "Interrupted, shutting down"
    APP_FATAL_ERROR = "Fatal error: %s"
    APP_SHUTDOWN_TIMEOUT = "Shutdown did not finish within %.1f seconds"
    CONTAINER_SHUTDOWN_ERROR = "Error during container shutdown: %r"

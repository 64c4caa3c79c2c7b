"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when domain validation fails."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class EntityNotFoundError(DomainError):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, identifier: str | int, message: str | None = None) -> None:
        msg = message or f"{entity_type} with id '{identifier}' not found"
        super().__init__(msg, code="ENTITY_NOT_FOUND")
        self.entity_type = entity_type
        self.identifier = identifier


class InvalidTrackIdError(ValidationError):
    """Raised when a track identifier cannot be parsed."""

    def __init__(self, value: str) -> None:
        super().__init__(f"Invalid track id: '{value}'", field="track_id")
        self.code = "INVALID_TRACK_ID"
        self.value = value


class TrackNotFoundError(EntityNotFoundError):
    """Raised when the music service has no track with the given id."""

    def __init__(self, track_id: str, message: str | None = None) -> None:
        super().__init__("Track", track_id, message)
        self.code = "TRACK_NOT_FOUND"
        self.track_id = track_id


class RemoteServiceError(DomainError):
    """Raised when a call to the music service fails or times out."""

    def __init__(
        self, operation: str, message: str | None = None, status_code: int | None = None
    ) -> None:
        msg = message or f"Music service call '{operation}' failed"
        super().__init__(msg, code="REMOTE_SERVICE_ERROR")
        self.operation = operation
        self.status_code = status_code


class AuthenticationFailedError(DomainError):
    """Raised when the music service rejects the stored credentials."""

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message or "Music service rejected the credentials", code="AUTH_FAILED")
        self.status_code = status_code


class NotAuthenticatedError(DomainError):
    """Raised when no credentials have been installed yet."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message or "The admin for this session does not have valid credentials",
            code="NOT_AUTHENTICATED",
        )


class NoPlaybackDeviceError(DomainError):
    """Raised when no remote playback device can be targeted."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "No playback device available", code="NO_PLAYBACK_DEVICE")


class ChannelClosedError(DomainError):
    """Raised when the player task is not running to receive commands."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "Player command channel is closed", code="CHANNEL_CLOSED")

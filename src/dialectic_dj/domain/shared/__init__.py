"""
Shared Domain Kernel

Contains the exception hierarchy, constrained types and helpers shared across contexts.
"""

from dialectic_dj.domain.shared.exceptions import (
    AuthenticationFailedError,
    ChannelClosedError,
    DomainError,
    EntityNotFoundError,
    InvalidTrackIdError,
    NoPlaybackDeviceError,
    NotAuthenticatedError,
    RemoteServiceError,
    TrackNotFoundError,
    ValidationError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "EntityNotFoundError",
    "InvalidTrackIdError",
    "TrackNotFoundError",
    "RemoteServiceError",
    "AuthenticationFailedError",
    "NotAuthenticatedError",
    "NoPlaybackDeviceError",
    "ChannelClosedError",
]

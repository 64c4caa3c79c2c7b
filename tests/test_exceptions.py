"""Tests for domain exception messages, codes and hierarchy."""

import pytest

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


class TestDomainExceptions:
    def test_domain_error_defaults_code_to_class_name(self):
        error = DomainError("Something went wrong")

        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.code == "DomainError"

    def test_validation_error_with_field(self):
        error = ValidationError("bad", field="name")

        assert error.code == "VALIDATION_ERROR"
        assert error.field == "name"

    def test_entity_not_found_default_message(self):
        error = EntityNotFoundError("Session", "abc")

        assert error.message == "Session with id 'abc' not found"
        assert error.entity_type == "Session"
        assert error.identifier == "abc"

    def test_invalid_track_id(self):
        error = InvalidTrackIdError("not a track")

        assert isinstance(error, ValidationError)
        assert error.code == "INVALID_TRACK_ID"
        assert error.field == "track_id"
        assert "not a track" in error.message

    def test_track_not_found(self):
        error = TrackNotFoundError("abc")

        assert isinstance(error, EntityNotFoundError)
        assert error.track_id == "abc"
        assert error.code == "TRACK_NOT_FOUND"
        assert error.message == "Track with id 'abc' not found"

    def test_remote_service_error(self):
        error = RemoteServiceError("skip_to_next", status_code=502)

        assert error.operation == "skip_to_next"
        assert error.status_code == 502
        assert "skip_to_next" in error.message

    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (AuthenticationFailedError(), "AUTH_FAILED"),
            (NotAuthenticatedError(), "NOT_AUTHENTICATED"),
            (NoPlaybackDeviceError(), "NO_PLAYBACK_DEVICE"),
            (ChannelClosedError(), "CHANNEL_CLOSED"),
        ],
    )
    def test_default_messages_and_codes(self, error, code):
        assert error.code == code
        assert error.message
        assert isinstance(error, DomainError)

    def test_not_authenticated_message(self):
        assert "valid credentials" in NotAuthenticatedError().message

    def test_exceptions_can_be_caught_as_domain_error(self):
        with pytest.raises(DomainError):
            raise TrackNotFoundError("abc")

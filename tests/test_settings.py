"""
Unit Tests for Application Settings Configuration

Tests for:
- Default values for the nested settings groups
- Loading settings from environment variables (flat and nested)
- Custom validators (database URL, log level) and range limits
- Settings caching and clearing
"""

from uuid import uuid4

import pytest
from pydantic import SecretStr, ValidationError

from dialectic_dj.config.settings import (
    DatabaseSettings,
    PlayerSettings,
    Settings,
    SpotifySettings,
    clear_settings_cache,
    get_settings,
)

_ENV_VARS = (
    "ENVIRONMENT",
    "DEBUG",
    "LOG_LEVEL",
    "SESSION_ID",
    "DATABASE__URL",
    "SPOTIFY__CLIENT_ID",
    "SPOTIFY__CLIENT_SECRET",
    "PLAYER__WAKE_LEAD_SECONDS",
    "PLAYER__PERSIST_QUEUE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


class TestDatabaseSettings:
    def test_create_with_defaults(self):
        db = DatabaseSettings()

        assert db.url == "sqlite:///data/ddj.db"
        assert db.busy_timeout_ms == 5000
        assert db.connection_timeout_s == 10

    def test_url_alias(self):
        assert DatabaseSettings(database_url="sqlite:///x.db").url == "sqlite:///x.db"

    def test_invalid_url_scheme_raises_error(self):
        with pytest.raises(ValidationError):
            DatabaseSettings(url="postgresql://localhost/db")

    def test_busy_timeout_range(self):
        with pytest.raises(ValidationError):
            DatabaseSettings(busy_timeout_ms=999)

    def test_immutability(self):
        db = DatabaseSettings()

        with pytest.raises(ValidationError):
            db.url = "sqlite:///other.db"


class TestSpotifySettings:
    def test_defaults_have_no_credentials(self):
        spotify = SpotifySettings()

        assert spotify.has_credentials is False
        assert spotify.api_base_url == "https://api.spotify.com/v1"
        assert spotify.accounts_base_url == "https://accounts.spotify.com"

    def test_credentials_via_aliases(self):
        spotify = SpotifySettings(
            rspotify_client_id="id", rspotify_client_secret=SecretStr("secret")
        )

        assert spotify.has_credentials is True
        assert spotify.client_secret.get_secret_value() == "secret"

    def test_request_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            SpotifySettings(request_timeout_s=0)


class TestPlayerSettings:
    def test_create_with_defaults(self):
        player = PlayerSettings()

        assert player.wake_lead_seconds == 10.0
        assert player.command_queue_size == 64
        assert player.remote_call_timeout_s == 15.0
        assert player.persist_queue is True
        assert player.restore_limit == 500

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"wake_lead_seconds": -1.0},
            {"command_queue_size": 0},
            {"remote_call_timeout_s": 0.0},
            {"restore_limit": 0},
        ],
    )
    def test_out_of_range(self, kwargs):
        with pytest.raises(ValidationError):
            PlayerSettings(**kwargs)


class TestSettings:
    def test_create_with_all_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.environment == "development"
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert settings.session_id is None
        assert isinstance(settings.player, PlayerSettings)

    def test_load_from_environment_variables(self, monkeypatch):
        session_id = uuid4()
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("DEBUG", "true")
        monkeypatch.setenv("SESSION_ID", str(session_id))

        settings = Settings(_env_file=None)

        assert settings.environment == "production"
        assert settings.debug is True
        assert settings.session_id == session_id

    def test_load_nested_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("DATABASE__URL", "sqlite:///:memory:")
        monkeypatch.setenv("SPOTIFY__CLIENT_ID", "client")
        monkeypatch.setenv("SPOTIFY__CLIENT_SECRET", "shh")
        monkeypatch.setenv("PLAYER__WAKE_LEAD_SECONDS", "5")
        monkeypatch.setenv("PLAYER__PERSIST_QUEUE", "false")

        settings = Settings(_env_file=None)

        assert settings.database.url == "sqlite:///:memory:"
        assert settings.spotify.has_credentials is True
        assert settings.player.wake_lead_seconds == 5.0
        assert settings.player.persist_queue is False

    def test_log_level_validation_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")

        assert Settings(_env_file=None).log_level == "DEBUG"

    def test_log_level_validation_invalid(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "LOUD")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_nested_validation_propagates(self, monkeypatch):
        monkeypatch.setenv("DATABASE__URL", "mysql://nope")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_environment_validation(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "staging")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)


class TestSettingsCaching:
    def test_get_settings_returns_cached_instance(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "test")

        assert get_settings() is get_settings()

    def test_clear_settings_cache(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "test")
        first = get_settings()

        clear_settings_cache()
        monkeypatch.setenv("ENVIRONMENT", "production")
        second = get_settings()

        assert first is not second
        assert first.environment == "test"
        assert second.environment == "production"

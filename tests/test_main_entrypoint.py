"""
Tests for main.py - Main Entry Point

Tests for the main entry point including:
- Settings validation (missing Spotify credentials)
- Exit codes for clean stop, interrupt and fatal errors
- serve(): initialize, wait for the stop signal, shutdown
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pydantic import SecretStr

from dialectic_dj.main import cli, main, serve


def _settings(has_credentials=True):
    settings = MagicMock()
    settings.log_level = "INFO"
    settings.debug = False
    settings.environment = "test"
    settings.spotify.has_credentials = has_credentials
    settings.spotify.client_secret = SecretStr("secret")
    return settings


class TestMain:
    def test_missing_credentials_returns_1(self):
        with (
            patch("dialectic_dj.config.settings.get_settings", return_value=_settings(False)),
            patch("dialectic_dj.main.setup_logging"),
            patch("dialectic_dj.config.container.create_container") as mock_create,
        ):
            assert main() == 1

        mock_create.assert_not_called()

    def test_clean_run_returns_0(self):
        with (
            patch("dialectic_dj.config.settings.get_settings", return_value=_settings()),
            patch("dialectic_dj.main.setup_logging") as mock_logging,
            patch("dialectic_dj.config.container.create_container") as mock_create,
            patch("dialectic_dj.main.serve", new=MagicMock()) as mock_serve,
            patch("dialectic_dj.main.asyncio.run") as mock_run,
        ):
            assert main() == 0

        mock_logging.assert_called_once_with("INFO")
        mock_serve.assert_called_once_with(mock_create.return_value)
        mock_run.assert_called_once_with(mock_serve.return_value)

    def test_debug_forces_debug_logging(self):
        settings = _settings()
        settings.debug = True
        with (
            patch("dialectic_dj.config.settings.get_settings", return_value=settings),
            patch("dialectic_dj.main.setup_logging") as mock_logging,
            patch("dialectic_dj.config.container.create_container"),
            patch("dialectic_dj.main.serve", new=MagicMock()),
            patch("dialectic_dj.main.asyncio.run"),
        ):
            main()

        mock_logging.assert_called_once_with("DEBUG")

    def test_keyboard_interrupt_returns_0(self):
        with (
            patch("dialectic_dj.config.settings.get_settings", return_value=_settings()),
            patch("dialectic_dj.main.setup_logging"),
            patch("dialectic_dj.config.container.create_container"),
            patch("dialectic_dj.main.serve", new=MagicMock()),
            patch("dialectic_dj.main.asyncio.run", side_effect=KeyboardInterrupt),
        ):
            assert main() == 0

    def test_fatal_error_returns_1(self):
        with (
            patch("dialectic_dj.config.settings.get_settings", return_value=_settings()),
            patch("dialectic_dj.main.setup_logging"),
            patch("dialectic_dj.config.container.create_container"),
            patch("dialectic_dj.main.serve", new=MagicMock()),
            patch("dialectic_dj.main.asyncio.run", side_effect=RuntimeError("boom")),
        ):
            assert main() == 1

    def test_cli_exits_with_main_status(self):
        with patch("dialectic_dj.main.main", return_value=3), pytest.raises(SystemExit) as exc_info:
            cli()

        assert exc_info.value.code == 3


class TestServe:
    @pytest.mark.asyncio
    async def test_initializes_waits_and_shuts_down(self):
        container = MagicMock()
        container.initialize = AsyncMock()
        container.shutdown = AsyncMock()
        stop = asyncio.Event()

        task = asyncio.create_task(serve(container, stop_event=stop))
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        container.initialize.assert_awaited_once()
        container.shutdown.assert_not_awaited()

        stop.set()
        await task

        container.shutdown.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_shuts_down_when_initialize_fails(self):
        container = MagicMock()
        container.initialize = AsyncMock(side_effect=RuntimeError("no database"))
        container.shutdown = AsyncMock()

        with pytest.raises(RuntimeError, match="no database"):
            await serve(container, stop_event=asyncio.Event())

        container.shutdown.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_shutdown_timeout_is_logged(self, caplog):
        async def slow_shutdown():
            await asyncio.sleep(10)

        container = MagicMock()
        container.initialize = AsyncMock()
        container.shutdown = slow_shutdown
        stop = asyncio.Event()
        stop.set()

        await serve(container, shutdown_timeout=0.01, stop_event=stop)

        assert "Shutdown did not finish within 0.0 seconds" in caplog.text

#!/usr/bin/env python3
"""Main entry point for Dialectic DJ."""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from typing import TYPE_CHECKING

from dialectic_dj.domain.shared.messages import ErrorMessages, LogTemplates
from dialectic_dj.utils.logging import setup_logging

if TYPE_CHECKING:
    from dialectic_dj.config.container import Container

logger = logging.getLogger(__name__)


async def serve(
    container: Container,
    *,
    shutdown_timeout: float = 30.0,
    stop_event: asyncio.Event | None = None,
) -> None:
    """Run the player until SIGINT/SIGTERM (or ``stop_event``), then shut down."""
    stop = stop_event or asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)

    try:
        await container.initialize()
        logger.info(LogTemplates.APP_READY)
        await stop.wait()
    finally:
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(sig)
        try:
            await asyncio.wait_for(container.shutdown(), timeout=shutdown_timeout)
        except TimeoutError:
            logger.warning(LogTemplates.APP_SHUTDOWN_TIMEOUT, shutdown_timeout)


def main() -> int:
    from dialectic_dj.config.settings import get_settings

    settings = get_settings()
    setup_logging("DEBUG" if settings.debug else settings.log_level)

    if not settings.spotify.has_credentials:
        logger.error(ErrorMessages.SPOTIFY_CREDENTIALS_REQUIRED)
        return 1

    logger.info(LogTemplates.APP_STARTING, settings.environment)

    from dialectic_dj.config.container import create_container

    container = create_container(settings)

    try:
        asyncio.run(serve(container))
        logger.info(LogTemplates.APP_STOPPED)
        return 0
    except KeyboardInterrupt:
        logger.info(LogTemplates.APP_KEYBOARD_INTERRUPT)
        return 0
    except Exception as e:
        logger.exception(LogTemplates.APP_FATAL_ERROR, e)
        return 1


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover

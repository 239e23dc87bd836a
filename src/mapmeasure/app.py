"""Startup for a MapMeasure measuring session.

A presentation layer calls :func:`start_session` once and then drives
the returned machine with clicks and commands.
"""

from pathlib import Path

from loguru import logger

from mapmeasure.config.manager import ConfigManager
from mapmeasure.core.logging import setup_logging
from mapmeasure.core.workflow import InteractionMachine
from mapmeasure.version import __version_display__


def start_session(config_dir: str | Path | None = None) -> InteractionMachine:
    """Load settings, configure logging and return a machine waiting for an image."""
    config = ConfigManager(config_dir)
    config.load()
    setup_logging(config)
    logger.info(f"{__version_display__} starting")
    return InteractionMachine(config=config)

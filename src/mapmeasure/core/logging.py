"""Log sink configuration for MapMeasure.

Modules log through ``from loguru import logger``; this module decides
where those records go. Called once by :func:`mapmeasure.app.start_session`.
"""

import sys
from pathlib import Path

from loguru import logger
from platformdirs import user_log_dir

from mapmeasure.config.manager import ConfigManager


CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> <level>{level: <8}</level> "
    "<cyan>{name}</cyan> | <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}"
LOG_FILENAME = "mapmeasure.log"

_log_dir: Path | None = None


def get_log_dir() -> Path:
    if _log_dir is None:
        return Path(user_log_dir("MapMeasure", "MapMeasure"))
    return _log_dir


def set_log_dir(path: str | Path | None):
    """Send the file sink somewhere other than the per-user log directory."""
    global _log_dir
    _log_dir = Path(path) if path is not None else None


def get_current_log_path() -> Path:
    return get_log_dir() / LOG_FILENAME


def setup_logging(config: ConfigManager) -> list[int]:
    """Replace loguru's sinks with the ones the ``logging`` group asks for.

    The console sink honours ``log_level``; the file sink always records
    DEBUG so workflow transitions can be traced afterwards. Returns the
    loguru handler ids.
    """
    settings = {
        key: config.get("logging", key, default)
        for key, default in (
            ("log_level", "INFO"),
            ("log_to_file", True),
            ("log_console_output", True),
            ("log_retention_days", 30),
            ("log_max_size_mb", 50),
        )
    }

    logger.remove()
    handlers = []
    if settings["log_console_output"]:
        handlers.append(
            logger.add(sys.stderr, format=CONSOLE_FORMAT, level=settings["log_level"], colorize=True)
        )
    if settings["log_to_file"]:
        log_path = get_current_log_path()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logger.add(
                str(log_path),
                format=FILE_FORMAT,
                level="DEBUG",
                rotation=f"{settings['log_max_size_mb']} MB",
                retention=f"{settings['log_retention_days']} days",
                compression="zip",
                encoding="utf-8",
            )
        )
        logger.debug(f"Writing log to {log_path}")

    logger.info(f"Logging ready (console={settings['log_level']}, sinks={len(handlers)})")
    return handlers

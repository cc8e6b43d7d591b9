"""Logging for the groom_protocol namespace.

Everything logs under ``groom_protocol.*``. The pose backends (MediaPipe and
its absl dependency) log through their own loggers and are capped at WARNING
so per-frame chatter does not drown out gesture transitions.
"""

import logging
import sys
from pathlib import Path

from groom_protocol.core.config import LoggingSettings

ROOT_LOGGER = "groom_protocol"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
BACKEND_LOGGERS = ("mediapipe", "absl")


def setup_logging(settings: LoggingSettings, debug: bool = False) -> logging.Logger:
    """Configure the groom_protocol logger from its settings section.

    Args:
        settings: ``LOG_*`` settings (level and optional file)
        debug: Force DEBUG regardless of the configured level

    Returns:
        The configured namespace logger
    """
    level = logging.DEBUG if debug else getattr(logging, settings.level.upper(), logging.INFO)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if settings.file:
        log_path = Path(settings.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    app_logger = logging.getLogger(ROOT_LOGGER)
    app_logger.setLevel(level)
    for handler in app_logger.handlers:
        handler.close()
    app_logger.handlers.clear()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        app_logger.addHandler(handler)

    for name in BACKEND_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    app_logger.debug(
        "Logging at %s%s",
        logging.getLevelName(level),
        f" to {settings.file}" if settings.file else "",
    )
    return app_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the groom_protocol namespace.

    Args:
        name: Module name (typically __name__)
    """
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"

    return logging.getLogger(name)

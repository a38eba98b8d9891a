"""
Core Log Utilities for panda-log.

Configures the application's own logging and reports where it is written,
so the viewer can open its own log like any other file.
"""

import logging
from pathlib import Path
from typing import Optional

from panda_log.protocols import get_config

logger = logging.getLogger(__name__)

ROOT_LOGGER_NAME = "panda_log"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_log_dir() -> Path:
    """Return configured log directory or default."""
    config = get_config()
    if config.log_dir:
        return Path(config.log_dir)
    return Path.home() / ".local" / "share" / "panda_log" / "logs"


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the package logger.

    Installs a stream handler and, when a log file is given, a file handler.
    Calling again replaces the handlers installed by a previous call.

    Args:
        level: Level name (defaults to the configured log_level)
        log_file: Path of a log file to write, or None for console only

    Returns:
        logging.Logger: The configured package logger
    """
    config = get_config()
    level_name = (level or config.log_level).upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level_name}")

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    package_logger.addHandler(stream_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    package_logger.setLevel(numeric_level)
    logger.debug(f"Logging configured at {level_name} (file: {log_file})")
    return package_logger


def default_log_file_path() -> str:
    """Return the log file path derived from configuration."""
    return str(get_log_dir() / get_config().log_file_name)


def get_current_log_file_path() -> Optional[str]:
    """Get the file the package logger currently writes to, if any."""
    for name in (ROOT_LOGGER_NAME, None):
        for handler in logging.getLogger(name).handlers:
            if isinstance(handler, logging.FileHandler):
                return handler.baseFilename
    return None

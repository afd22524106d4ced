"""
Centralized logging configuration for the availability core.

All module loggers live under the "salon_availability" namespace. Handlers
are attached once to the namespace logger and module loggers propagate to it.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from logging.handlers import RotatingFileHandler

LOGGER_NAMESPACE = "salon_availability"

DEFAULT_FORMAT = (
    "%(asctime)s - salon-availability - %(levelname)s - %(name)s - "
    "[%(filename)s:%(lineno)d] - %(message)s"
)


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    log_dir: str = "logs",
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the namespace logger of the availability core.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file name (relative to log_dir)
        log_dir: Directory for log files
        max_bytes: Maximum log file size before rotation
        backup_count: Number of backup log files to keep
        format_string: Custom format string; defaults to DEFAULT_FORMAT

    Returns:
        The "salon_availability" logger
    """
    root = logging.getLogger(LOGGER_NAMESPACE)
    level = getattr(logging, log_level.upper(), logging.INFO)
    root.setLevel(level)

    # Handlers are attached on first call only
    if root.handlers:
        return root

    formatter = logging.Formatter(format_string or DEFAULT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if log_file:
        log_dir_path = Path(log_dir)
        log_dir_path.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_dir_path / log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    return root


def get_logger(name: str, **kwargs) -> logging.Logger:
    """
    Get a module logger under the availability namespace.

    The namespace logger is configured from application settings on first
    use; keyword arguments override the level/file/dir taken from settings.
    """
    from config import settings

    options = {
        "log_level": settings.log_level,
        "log_file": settings.log_file,
        "log_dir": settings.log_dir,
    }
    options.update(kwargs)
    setup_logging(**options)

    if name == LOGGER_NAMESPACE or name.startswith(f"{LOGGER_NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")

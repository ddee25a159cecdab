"""
Centralized logging configuration for the VarOmeter client.

Provides:
- Console handler: WARNING and above for library loggers
- Optional file handler: full DEBUG detail with rotation
- Progress logger: always prints status updates to the console
"""

import logging
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

PROGRESS_LOGGER_NAME = "varometer.progress"

# Module-level state
_logging_initialized = False
_log_file_path: Optional[str] = None
_installed_handlers: list[logging.Handler] = []


def setup_logging(
    log_dir: Optional[str] = None,
    job_name: str = "varometer",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
    max_bytes: int = 5 * 1024 * 1024,  # 5MB
    backup_count: int = 3
) -> Optional[str]:
    """
    Initialize logging with a console handler and an optional rotating file.

    Args:
        log_dir: Directory for log files. If None, no log file is written.
        job_name: Name prefix for log file.
        console_level: Log level for console output (default: WARNING).
        file_level: Log level for file output (default: DEBUG).
        max_bytes: Maximum size per log file before rotation.
        backup_count: Number of backup files to keep.

    Returns:
        Path to the log file, or None when logging to console only.
    """
    global _logging_initialized, _log_file_path

    if _logging_initialized:
        return _log_file_path

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
    _installed_handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    root_logger.addHandler(console_handler)
    _installed_handlers.append(console_handler)

    if log_dir:
        log_path = Path(log_dir) / "logs"
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"{job_name}_{timestamp}.log"
        _log_file_path = str(log_file)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        ))
        root_logger.addHandler(file_handler)
        _installed_handlers.append(file_handler)

    # Retry chatter from requests' connection pool
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    _logging_initialized = True

    return _log_file_path


def get_progress_logger() -> logging.Logger:
    """
    Get a logger that always prints to console.

    Used for polling status changes and elapsed time, which the user should
    see regardless of the console level chosen in setup_logging().

    Returns:
        Logger configured to always output INFO to console.
    """
    logger = logging.getLogger(PROGRESS_LOGGER_NAME)

    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(console_handler)
        logger.setLevel(logging.INFO)
        # Avoid duplicate lines through the root console handler
        logger.propagate = False

    return logger


def get_log_file_path() -> Optional[str]:
    """Get the path to the current log file."""
    return _log_file_path


def reset_logging():
    """Reset logging state. Useful for testing."""
    global _logging_initialized, _log_file_path
    _logging_initialized = False
    _log_file_path = None

    root_logger = logging.getLogger()
    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    progress_logger = logging.getLogger(PROGRESS_LOGGER_NAME)
    progress_logger.handlers.clear()

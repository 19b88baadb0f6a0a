"""
Logging setup for scanrelay.

Diagnostics go to stderr; an optional rotating log file can be added.
"""

import logging
import sys
import traceback
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Rotation for the optional log file
LOG_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
LOG_BACKUP_COUNT = 5


def setup_logging(level: str = 'INFO', log_file: Optional[str] = None) -> None:
    """
    Configure root logging.

    Args:
        level: Level name, e.g. 'INFO' or 'DEBUG'
        log_file: Optional path of a rotating log file
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    handlers = [logging.StreamHandler(sys.stderr)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(
            log_path,
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding='utf-8'
        ))

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True
    )


def log_exception(logger: logging.Logger, message: str, exception: Exception,
                  level: int = logging.ERROR) -> None:
    """Log an exception with its type; the traceback goes to DEBUG."""
    logger.log(level, "%s: %s (%s)", message, exception, type(exception).__name__)
    logger.debug("Traceback:\n%s", ''.join(traceback.format_exception(
        type(exception), exception, exception.__traceback__)))

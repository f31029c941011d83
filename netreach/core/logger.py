import os
import sys
from typing import Optional

from loguru import logger

from netreach.core.constants import LOG_FILE, LOG_LEVEL


def configure_logging(level: str = LOG_LEVEL, log_file: Optional[str] = LOG_FILE):
    """
    Install the application log sinks.

    Called by entry points only; importing the library leaves loguru untouched.

    Args:
        level: Minimum level for the stderr sink
        log_file: Path of the rotating debug log, or None to skip file logging
    """
    logger.remove()  # Remove default handler

    # Add stderr handler only if available (not in windowed exe)
    if sys.stderr:
        logger.add(
            sys.stderr,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
            level=level,
        )

    if log_file:
        try:
            log_dir = os.path.dirname(log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
        except OSError as e:
            logger.warning(f"Cannot create log directory for {log_file}: {e}")
            return logger
        logger.add(
            log_file,
            rotation="1 MB",
            retention="10 days",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            level="DEBUG",
        )

    return logger


def get_logger():
    return logger

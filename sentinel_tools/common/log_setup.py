"""
================================================================================
Logger Bootstrap
================================================================================

One-time loguru setup shared by the harness, fixtures and tools.

Every line carries the worker thread name, since parallel UI tests interleave
their output.

================================================================================
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from .config import get_config


DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{thread.name}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

_configured = False


def init_logger(
    level: Optional[str] = None,
    format_string: Optional[str] = None,
    log_file: Optional[str] = None,
    force: bool = False,
) -> None:
    """
    Replace loguru's default handler with the harness handlers.

    Args:
        level: Minimum level (default: logging.level)
        format_string: loguru format (default: logging.format or DEFAULT_FORMAT)
        log_file: Also write to this file with rotation (default: logging.file)
        force: Reconfigure even if already initialized

    Example:
        init_logger()
        init_logger(level="DEBUG", log_file="logs/sentinel.log")
    """
    global _configured
    if _configured and not force:
        return

    level = str(level or get_config("logging.level", "INFO")).upper()
    format_string = format_string or get_config("logging.format", DEFAULT_FORMAT)

    logger.remove()
    logger.add(sys.stderr, level=level, format=format_string, colorize=True)

    log_file = log_file or get_config("logging.file")
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        # enqueue: worker threads write through one queue
        logger.add(
            log_file,
            level=level,
            format=format_string,
            rotation=get_config("logging.rotation", "10 MB"),
            retention=get_config("logging.retention", "7 days"),
            enqueue=True,
        )

    _configured = True
    logger.debug(f"Logger initialized (level {level})")

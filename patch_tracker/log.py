# patch_tracker/log.py
from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger


def configure_logging(debug: bool = False, log_file: str = "") -> None:
    """
    Configure loguru sinks.

    - stderr always (DEBUG when debug, else INFO)
    - optional file sink, rotated daily, kept for 30 days
    """
    logger.remove()

    logger.add(
        sys.stderr,
        level="DEBUG" if debug else "INFO",
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
    )

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            rotation="00:00",
            retention="30 days",
            level="DEBUG" if debug else "INFO",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
        )

    logger.debug("Logging configured")

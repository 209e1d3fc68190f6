"""loguru setup for the FocusFlow runner."""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

from .settings import APP_DIR

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
    "<level>{message}</level>"
)
LOG_ROTATION = "1 MB"
LOG_RETENTION = "7 days"


def setup_logging(level: str = "INFO", log_dir: Path | None = None) -> Path:
    """Replace loguru's default handler with console + rotating file sinks.

    Returns the path of the log file.
    """
    logger.remove()

    logger.add(
        sys.stderr,
        format=LOG_FORMAT,
        level=level,
        colorize=True,
    )

    log_dir = log_dir or APP_DIR / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "focusflow.log"
    logger.add(
        log_file,
        format=LOG_FORMAT,
        level=level,
        rotation=LOG_ROTATION,
        retention=LOG_RETENTION,
        encoding="utf-8",
    )
    return log_file

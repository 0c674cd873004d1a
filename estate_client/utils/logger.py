"""Logging setup for the estate client."""

import logging
import sys
from pathlib import Path
from typing import Optional

from estate_client.utils.config import log_level

APP_LOGGER = "estate_client"


def setup_logger(
    name: str = APP_LOGGER,
    level: Optional[int] = None,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Configure and return a logger.

    Args:
        name: Logger name.
        level: Logging level. None = ESTATE_LOG_LEVEL (default INFO).
        log_file: Optional path to log file. If None, logs to stderr only.

    Returns:
        Configured logger.
    """
    log = logging.getLogger(name)
    if log.handlers:
        return log

    if level is None:
        level = logging.getLevelName(log_level())
        if not isinstance(level, int):
            level = logging.INFO
    log.setLevel(level)
    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    h = logging.StreamHandler(sys.stderr)
    h.setFormatter(fmt)
    log.addHandler(h)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(fmt)
        log.addHandler(fh)

    return log


def get_logger(name: str = APP_LOGGER) -> logging.Logger:
    """Return the application logger. Use after setup_logger has been called."""
    return logging.getLogger(name)


def mask_token(token: str | None) -> str:
    """Shorten a bearer token for log lines: keep the last 4 chars only."""
    if not token:
        return "<none>"
    if len(token) <= 8:
        return "****"
    return f"****{token[-4:]}"

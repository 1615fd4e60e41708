"""Centralized logging configuration."""

import logging
import sys
from typing import Optional

FORMATS = {
    # Development - human readable
    "standard": "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    # Production - structured logging
    "json": '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}',
}


def setup_logging(
    level: str = "WARNING",
    format_style: str = "standard",
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Configure logging for applications embedding credstore (and for the CLI).

    The library itself never calls this; it only emits records.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        format_style: 'standard' for dev, 'json' for production
        log_file: Optional file path to write logs

    Returns:
        Root logger
    """
    if format_style not in FORMATS:
        raise ValueError(f"Unknown log format: '{format_style}'")

    # Logs go to stderr so CLI output on stdout stays clean
    handlers = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=FORMATS[format_style],
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )

    return logging.getLogger()


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Usage:
        from credstore.utils.logging import get_logger
        logger = get_logger(__name__)
        logger.info("Something happened")
    """
    return logging.getLogger(name)

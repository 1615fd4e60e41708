"""Logging and decorator helpers."""

from credstore.utils.decorators import log_call
from credstore.utils.logging import get_logger, setup_logging

__all__ = [
    "log_call",
    "get_logger",
    "setup_logging",
]

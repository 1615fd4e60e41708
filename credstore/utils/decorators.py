"""Reusable decorators."""

import functools
from typing import Callable

from credstore.utils.logging import get_logger

logger = get_logger(__name__)


def log_call(func: Callable) -> Callable:
    """
    Log when a method is called and how it finished.

    Arguments and return values are never logged, since they may be secrets.

    Usage:
        class Entry:
            @log_call
            def get_password(self):
                ...
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger.debug(f"Calling {func.__qualname__}")
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            logger.debug(f"{func.__qualname__} raised {type(e).__name__}")
            raise
        logger.debug(f"{func.__qualname__} returned")
        return result

    return wrapper

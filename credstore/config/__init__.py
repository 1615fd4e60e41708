"""Configuration of keystore selection and logging."""

from credstore.config.exceptions import (
    ConfigError,
    ConfigNotFoundError,
    ConfigParseError,
    ConfigValidationError,
    KeystoreConflictError,
)
from credstore.config.loader import ConfigLoader, Settings, load_settings

__all__ = [
    "ConfigLoader",
    "Settings",
    "load_settings",
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigParseError",
    "ConfigValidationError",
    "KeystoreConflictError",
]

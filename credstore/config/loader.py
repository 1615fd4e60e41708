"""Configuration loader - loads, merges and validates credstore settings."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from credstore.config.exceptions import (
    ConfigNotFoundError,
    ConfigParseError,
    ConfigValidationError,
)
from credstore.config.merger import deep_merge
from credstore import keystores
from credstore.utils.logging import FORMATS

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "credstore"
CONFIG_FILE = "credstore.yaml"

DEFAULTS = {
    "keystore": {
        "features": [],
        "modules": [],
    },
    "logging": {
        "level": "WARNING",
        "format": "standard",
        "file": None,
    },
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    """Validated credstore settings."""

    keystore_features: tuple = ()
    keystore_modules: tuple = ()
    log_level: str = "WARNING"
    log_format: str = "standard"
    log_file: Optional[str] = None


def _split_list(value: str) -> list:
    return [item.strip() for item in value.split(",") if item.strip()]


class ConfigLoader:
    """
    Loads and merges credstore configuration from multiple sources.

    Load order (later wins):
        1. Built-in defaults (no keystore features: mock store)
        2. credstore.yaml in the config dir (optional)
        3. environments/{env}.yaml (optional environment overrides)
        4. CREDSTORE_* environment variables

    Usage:
        loader = ConfigLoader()
        settings = loader.load(environment="ci")
    """

    def __init__(self, config_dir: Optional[Path] = None):
        explicit = config_dir or os.environ.get("CREDSTORE_CONFIG_DIR")
        self.config_dir = Path(explicit) if explicit else DEFAULT_CONFIG_DIR

        if explicit and not self.config_dir.is_dir():
            raise ConfigNotFoundError(f"Config directory not found: {self.config_dir}")

    def _load_yaml(self, path: Path) -> dict:
        """Load and parse a YAML file."""
        if not path.exists():
            raise ConfigNotFoundError(f"Config file not found: {path}")

        try:
            with open(path) as f:
                content = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigParseError(f"Invalid YAML in {path}: {e}")

        if not isinstance(content, dict):
            raise ConfigParseError(f"Expected a mapping at the top of {path}")

        logger.debug(f"Loaded config: {path}")
        return content

    def _load_if_exists(self, path: Path) -> dict:
        """Load YAML file if it exists, otherwise return empty dict."""
        if path.exists():
            return self._load_yaml(path)
        return {}

    def _env_overrides(self) -> dict:
        """Collect overrides from CREDSTORE_* environment variables."""
        keystore = {}
        log = {}

        if "CREDSTORE_FEATURES" in os.environ:
            keystore["features"] = _split_list(os.environ["CREDSTORE_FEATURES"])
        if "CREDSTORE_MODULES" in os.environ:
            keystore["modules"] = _split_list(os.environ["CREDSTORE_MODULES"])
        if os.environ.get("CREDSTORE_LOG_LEVEL"):
            log["level"] = os.environ["CREDSTORE_LOG_LEVEL"]

        return {"keystore": keystore, "logging": log}

    def _validate(self, config: dict) -> Settings:
        """Check merged config and turn it into Settings."""
        for section in ("keystore", "logging"):
            if not isinstance(config[section], dict):
                raise ConfigValidationError(f"'{section}' must be a mapping")

        keystore = config["keystore"]
        log = config["logging"]

        for key in ("features", "modules"):
            value = keystore.get(key)
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigValidationError(
                    f"keystore.{key} must be a list of strings, got: {value!r}"
                )

        level = str(log.get("level", "")).upper()
        if level not in LOG_LEVELS:
            raise ConfigValidationError(
                f"logging.level must be one of {', '.join(LOG_LEVELS)}, got: {log.get('level')!r}"
            )
        if log.get("format") not in FORMATS:
            raise ConfigValidationError(
                f"logging.format must be one of {', '.join(FORMATS)}, got: {log.get('format')!r}"
            )

        # Two keystores for one platform must fail before any entry is created
        keystores.check_features(keystore["features"])

        return Settings(
            keystore_features=tuple(keystore["features"]),
            keystore_modules=tuple(keystore["modules"]),
            log_level=level,
            log_format=log["format"],
            log_file=log.get("file"),
        )

    def load(self, environment: Optional[str] = None) -> Settings:
        """
        Load complete settings.

        Args:
            environment: Optional environment (e.g., "ci", "prod");
                defaults to CREDSTORE_ENV

        Returns:
            Validated Settings
        """
        environment = environment or os.environ.get("CREDSTORE_ENV")

        # 1-2. Defaults plus base config
        base_path = self.config_dir / CONFIG_FILE
        config = deep_merge(DEFAULTS, self._load_if_exists(base_path))

        # 3. Environment overrides (if specified)
        if environment:
            env_path = self.config_dir / "environments" / f"{environment}.yaml"
            env_config = self._load_if_exists(env_path)
            if env_config:
                config = deep_merge(config, env_config)
                logger.info(f"Merged environment config: {env_path}")
            else:
                logger.debug(f"No environment config at {env_path}")

        # 4. Environment variables
        config = deep_merge(config, self._env_overrides())

        return self._validate(config)


def load_settings(
    config_dir: Optional[Path] = None, environment: Optional[str] = None
) -> Settings:
    """Shortcut for ConfigLoader(config_dir).load(environment)."""
    return ConfigLoader(config_dir=config_dir).load(environment=environment)

"""
Keystore registry and platform selection.

Native keystores live outside this package. A keystore module registers a
builder factory under one of the known feature names:

    @register_keystore("linux-native")
    def keyutils_builder():
        return KeyutilsCredentialBuilder()

Which registered keystore becomes the platform default is decided by the
configured features (see credstore.config). At most one enabled feature may
apply to any platform; with none, the mock store is used.
"""

import importlib
import sys
from typing import Callable, Dict, Iterable, Optional

from credstore import mock
from credstore.config.exceptions import ConfigValidationError, KeystoreConflictError
from credstore.credential import CredentialBuilder
from credstore.utils.logging import get_logger

logger = get_logger(__name__)

# Feature name -> platforms it can run on (normalized sys.platform values)
KEYSTORE_PLATFORMS: Dict[str, tuple] = {
    "apple-native": ("darwin", "ios"),
    "windows-native": ("win32",),
    "linux-native": ("linux",),
    "sync-secret-service": ("linux", "freebsd", "openbsd"),
    "async-secret-service": ("linux", "freebsd", "openbsd"),
}

KEYSTORES: Dict[str, Callable[[], CredentialBuilder]] = {}


def register_keystore(feature: str):
    """
    Decorator to register a zero-argument builder factory for a feature.

    Raises:
        ConfigValidationError: If the feature name is unknown
        KeystoreConflictError: If another factory already claims the feature
    """
    if feature not in KEYSTORE_PLATFORMS:
        raise ConfigValidationError(
            f"Unknown keystore feature: '{feature}'. "
            f"Known: {', '.join(sorted(KEYSTORE_PLATFORMS))}"
        )

    def decorator(factory):
        existing = KEYSTORES.get(feature)
        if existing is not None and existing is not factory:
            raise KeystoreConflictError(
                f"Keystore '{feature}' is already provided by "
                f"{existing.__module__}.{existing.__qualname__}"
            )
        KEYSTORES[feature] = factory
        logger.debug(f"Registered keystore '{feature}' from {factory.__module__}")
        return factory

    return decorator


def get_keystore(feature: str) -> Callable[[], CredentialBuilder]:
    """
    Get the builder factory registered for a feature.

    Raises:
        ConfigValidationError: If no module has registered the feature
    """
    if feature not in KEYSTORES:
        available = ", ".join(sorted(KEYSTORES)) or "none"
        raise ConfigValidationError(
            f"Keystore '{feature}' is enabled but not registered. "
            f"Add its module to keystore.modules. Registered: {available}"
        )
    return KEYSTORES[feature]


def normalize_platform(platform: Optional[str] = None) -> str:
    """Map sys.platform style names (e.g. 'freebsd14') to feature platforms."""
    platform = platform or sys.platform
    for prefix in ("freebsd", "openbsd", "linux"):
        if platform.startswith(prefix):
            return prefix
    return platform


def check_features(features: Iterable[str]) -> None:
    """
    Validate a set of enabled keystore features.

    Raises:
        ConfigValidationError: If a feature is unknown
        KeystoreConflictError: If two features apply to the same platform
    """
    features = list(features)
    unknown = [f for f in features if f not in KEYSTORE_PLATFORMS]
    if unknown:
        raise ConfigValidationError(
            f"Unknown keystore feature(s): {', '.join(unknown)}. "
            f"Known: {', '.join(sorted(KEYSTORE_PLATFORMS))}"
        )

    platforms = sorted({p for f in features for p in KEYSTORE_PLATFORMS[f]})
    conflicts = []
    for platform in platforms:
        applying = sorted({f for f in features if platform in KEYSTORE_PLATFORMS[f]})
        if len(applying) > 1:
            conflicts.append(f"{', '.join(applying)} all target '{platform}'")

    if conflicts:
        raise KeystoreConflictError(
            f"At most one keystore may be enabled per platform; "
            f"{'; '.join(conflicts)}"
        )


def select_keystore(
    features: Iterable[str], platform: Optional[str] = None
) -> Optional[str]:
    """Return the enabled feature that applies to the platform, if any."""
    features = list(features)
    check_features(features)
    platform = normalize_platform(platform)
    for feature in features:
        if platform in KEYSTORE_PLATFORMS[feature]:
            return feature
    return None


def import_keystore_modules(modules: Iterable[str]) -> None:
    """Import keystore modules so their register_keystore calls run."""
    for name in modules:
        try:
            importlib.import_module(name)
        except ImportError as e:
            raise ConfigValidationError(f"Cannot import keystore module '{name}': {e}")


def default_credential_builder(settings=None, platform: Optional[str] = None):
    """
    Construct the platform default credential builder.

    Called at most once per registry, the first time an entry is created
    without an override builder.

    Args:
        settings: Settings to select from; loaded from config if omitted
        platform: Platform to select for; defaults to sys.platform
    """
    if settings is None:
        from credstore.config import load_settings

        settings = load_settings()

    import_keystore_modules(settings.keystore_modules)
    feature = select_keystore(settings.keystore_features, platform)

    if feature is None:
        return mock.default_credential_builder()

    builder = get_keystore(feature)()
    logger.info(f"Using keystore '{feature}' ({type(builder).__name__})")
    return builder

"""
Platform-independent storage of passwords and secrets.

An Entry names a secret by service, user and optional target, and keeps it
in a credential provided by the configured keystore (the in-memory mock
store when none is configured).
"""

from credstore.credential import (
    Credential,
    CredentialBuilder,
    CredentialPersistence,
    Identity,
)
from credstore.errors import (
    AmbiguousError,
    BadEncodingError,
    InvalidError,
    KeyringError,
    NoEntryError,
    NoStorageAccessError,
    PlatformFailureError,
    TooLongError,
)
from credstore.mock import MockCredential, MockCredentialBuilder
from credstore.registry import (
    CredentialBuilderRegistry,
    get_default_registry,
    set_default_credential_builder,
)
from credstore.entry import Entry
from credstore.keystores import register_keystore

__version__ = "1.0.0"

__all__ = [
    "Entry",
    "Credential",
    "CredentialBuilder",
    "CredentialPersistence",
    "Identity",
    "CredentialBuilderRegistry",
    "get_default_registry",
    "set_default_credential_builder",
    "register_keystore",
    "MockCredential",
    "MockCredentialBuilder",
    "KeyringError",
    "NoEntryError",
    "AmbiguousError",
    "BadEncodingError",
    "InvalidError",
    "TooLongError",
    "NoStorageAccessError",
    "PlatformFailureError",
]

"""In-memory credential store for tests and as the platform fallback."""

import threading
from typing import Optional

from credstore.credential import (
    Credential,
    CredentialBuilder,
    CredentialPersistence,
    Identity,
)
from credstore.errors import KeyringError, NoEntryError
from credstore.utils.logging import get_logger

logger = get_logger(__name__)


class MockCredential(Credential):
    """
    Holds one secret in memory.

    Nothing is shared between credentials, even for the same identity, so a
    secret lives exactly as long as the entry holding it.

    Tests can inject failures:
        cred = MockCredential(Identity("svc", "alice"))
        cred.set_error(PlatformFailureError("boom"))
        cred.get_password()  # raises PlatformFailureError, once
    """

    def __init__(self, identity: Identity):
        self.identity = identity
        self._lock = threading.Lock()
        self._secret: Optional[bytes] = None
        self._error: Optional[KeyringError] = None

    def __repr__(self) -> str:
        return (
            f"MockCredential(target={self.identity.target!r}, "
            f"service={self.identity.service!r}, user={self.identity.user!r})"
        )

    def set_error(self, error: KeyringError) -> None:
        """Make the next operation on this credential raise `error`."""
        with self._lock:
            self._error = error

    def preset_secret(self, secret: bytes) -> None:
        """Store a value directly, leaving any injected error in place."""
        with self._lock:
            self._secret = bytes(secret)

    def preset_password(self, password: str) -> None:
        self.preset_secret(password.encode("utf-8"))

    def _take_error(self) -> None:
        # Caller holds the lock
        error, self._error = self._error, None
        if error is not None:
            raise error

    def set_secret(self, secret: bytes) -> None:
        with self._lock:
            self._take_error()
            self._secret = bytes(secret)

    def get_secret(self) -> bytes:
        with self._lock:
            self._take_error()
            if self._secret is None:
                raise NoEntryError()
            return self._secret

    def delete_credential(self) -> None:
        with self._lock:
            self._take_error()
            if self._secret is None:
                raise NoEntryError()
            self._secret = None


class MockCredentialBuilder(CredentialBuilder):
    """Builds a fresh, empty MockCredential for every identity."""

    def __init__(self):
        self._count_lock = threading.Lock()
        self.build_count = 0

    def __repr__(self) -> str:
        return "MockCredentialBuilder()"

    def build(self, target: Optional[str], service: str, user: str) -> MockCredential:
        with self._count_lock:
            self.build_count += 1
        return MockCredential(Identity(service=service, user=user, target=target))

    def persistence(self) -> CredentialPersistence:
        return CredentialPersistence.ENTRY_ONLY


def default_credential_builder() -> MockCredentialBuilder:
    """Return the builder used when no native keystore is configured."""
    logger.info("Using in-memory mock credential store")
    return MockCredentialBuilder()

"""Entry - the public handle on one stored password or secret."""

from typing import Optional, Type, TypeVar

from credstore.credential import Credential
from credstore.registry import CredentialBuilderRegistry, get_default_registry
from credstore.utils.decorators import log_call
from credstore.utils.logging import get_logger

logger = get_logger(__name__)

C = TypeVar("C", bound=Credential)


class Entry:
    """
    A password or secret identified by service, user and optional target.

    Each entry owns exactly one credential and forwards every operation to
    it. Deleting the credential leaves the entry usable.

    Usage:
        entry = Entry.create("my-app", "alice")
        entry.set_password("hunter2")
        entry.get_password()  # "hunter2"
        entry.delete_credential()
    """

    def __init__(self, credential: Credential):
        if not isinstance(credential, Credential):
            raise TypeError(
                f"Entry needs a Credential, got {type(credential).__name__}"
            )
        self._credential = credential

    def __repr__(self) -> str:
        return f"Entry({self._credential!r})"

    @classmethod
    def create(
        cls,
        service: str,
        user: str,
        registry: Optional[CredentialBuilderRegistry] = None,
    ) -> "Entry":
        """
        Create an entry for the given service and user.

        The default credential builder is used, unless a registry is given.

        Raises:
            KeyringError: If the builder can't make a credential for them
        """
        return cls._build(None, service, user, registry)

    @classmethod
    def create_with_target(
        cls,
        target: str,
        service: str,
        user: str,
        registry: Optional[CredentialBuilderRegistry] = None,
    ) -> "Entry":
        """Create an entry for the given target, service, and user."""
        return cls._build(target, service, user, registry)

    @classmethod
    def create_with_credential(cls, credential: Credential) -> "Entry":
        """Create an entry that uses the given credential for storage."""
        return cls(credential)

    @classmethod
    def _build(cls, target, service, user, registry) -> "Entry":
        registry = registry or get_default_registry()
        credential = registry.build(target, service, user)
        logger.debug(f"Created entry for service '{service}', user '{user}'")
        return cls(credential)

    @log_call
    def set_password(self, password: str) -> None:
        """
        Set the password for this entry.

        Can raise AmbiguousError if more than one platform credential matches
        this entry. That only happens on some platforms, and only if a
        third-party application wrote the duplicate.
        """
        self._credential.set_password(password)

    @log_call
    def set_secret(self, secret: bytes) -> None:
        """Set the secret for this entry. Bytes are stored unchanged."""
        self._credential.set_secret(secret)

    @log_call
    def get_password(self) -> str:
        """
        Retrieve the password saved for this entry.

        Raises:
            NoEntryError: If there isn't one
            AmbiguousError: If more than one platform credential matches
            BadEncodingError: If the stored secret isn't UTF-8; its `raw`
                attribute has the bytes, which get_secret() also returns
        """
        return self._credential.get_password()

    @log_call
    def get_secret(self) -> bytes:
        """Retrieve the secret saved for this entry."""
        return self._credential.get_secret()

    @log_call
    def delete_credential(self) -> None:
        """
        Delete the underlying credential for this entry.

        Raises:
            NoEntryError: If there isn't one
            AmbiguousError: If more than one platform credential matches

        Only the stored record goes away; this Entry object can be reused.
        """
        self._credential.delete_credential()

    def get_credential(self) -> Credential:
        """Return the wrapped credential, for callers that know its concrete type."""
        return self._credential.as_any()

    def get_credential_as(self, credential_type: Type[C]) -> Optional[C]:
        """Return the wrapped credential if it is a `credential_type`, else None."""
        credential = self._credential.as_any()
        if isinstance(credential, credential_type):
            return credential
        return None

"""Abstract base classes for platform credentials and their builders."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from credstore.errors import decode_password


@dataclass(frozen=True)
class Identity:
    """The (target, service, user) triple naming a logical secret."""

    service: str
    user: str
    target: Optional[str] = None


class CredentialPersistence(Enum):
    """How long credentials made by a builder survive."""

    ENTRY_ONLY = "entry_only"  # gone when the entry is dropped
    PROCESS_ONLY = "process_only"
    UNTIL_REBOOT = "until_reboot"
    UNTIL_DELETE = "until_delete"


class Credential(ABC):
    """
    Abstract base class that all platform credentials must implement.

    A credential is bound to one identity in one keystore, e.g.:
    - a generic password in the macOS keychain
    - a generic credential in the Windows credential manager
    - a key in the Linux kernel keyring
    - an item in a Secret Service collection

    Implementations must be safe to call from several threads at once.
    """

    @abstractmethod
    def set_secret(self, secret: bytes) -> None:
        """
        Store a secret, replacing any existing one.

        Args:
            secret: Raw bytes, stored exactly as given

        Raises:
            AmbiguousError: If more than one record matches
            KeyringError: If the keystore fails
        """
        pass

    @abstractmethod
    def get_secret(self) -> bytes:
        """
        Retrieve the stored secret.

        Returns:
            The exact bytes last stored

        Raises:
            NoEntryError: If nothing is stored
            AmbiguousError: If more than one record matches
        """
        pass

    @abstractmethod
    def delete_credential(self) -> None:
        """
        Remove the stored record.

        Raises:
            NoEntryError: If nothing is stored
            AmbiguousError: If more than one record matches
        """
        pass

    def set_password(self, password: str) -> None:
        """Store a password as its UTF-8 encoding."""
        self.set_secret(password.encode("utf-8"))

    def get_password(self) -> str:
        """
        Retrieve the stored secret as a password.

        Raises:
            BadEncodingError: If the stored bytes are not UTF-8
        """
        return decode_password(self.get_secret())

    def as_any(self) -> "Credential":
        """Return the concrete credential so callers can reach its richer model."""
        return self


class CredentialBuilder(ABC):
    """Abstract base class for objects that build credentials from identities."""

    @abstractmethod
    def build(self, target: Optional[str], service: str, user: str) -> Credential:
        """
        Create a credential for the given identity.

        Must not keep per-call state, as builders are shared across threads.

        Raises:
            InvalidError: If the keystore can't represent the identity
        """
        pass

    def persistence(self) -> CredentialPersistence:
        """Lifetime of the credentials this builder makes."""
        return CredentialPersistence.UNTIL_DELETE

    def as_any(self) -> "CredentialBuilder":
        return self

"""Portable exceptions raised by credentials and entries."""

from typing import Optional


class KeyringError(Exception):
    """Base exception for every credential store failure."""

    pass


class NoEntryError(KeyringError):
    """Raised when there is no stored value for an identity."""

    def __init__(self, message: str = "No matching entry found in secure storage"):
        super().__init__(message)


class AmbiguousError(KeyringError):
    """
    Raised when more than one stored credential matches an identity.

    This can only happen on keystores whose storage model allows duplicate
    records, and then usually because a third-party application wrote them.
    The matching credentials are attached so callers can pick one.
    """

    def __init__(self, credentials: Optional[list] = None):
        self.credentials = list(credentials or [])
        super().__init__(
            f"Entry is matched by {len(self.credentials)} credentials"
        )


class BadEncodingError(KeyringError):
    """Raised when a stored secret is read as a password but is not UTF-8."""

    def __init__(self, raw: bytes):
        self.raw = bytes(raw)
        super().__init__("Password cannot be UTF-8 encoded")


class InvalidError(KeyringError):
    """Raised when an argument is not acceptable to the keystore."""

    def __init__(self, attribute: str, reason: str):
        self.attribute = attribute
        self.reason = reason
        super().__init__(f"Attribute '{attribute}' is invalid: {reason}")


class TooLongError(InvalidError):
    """Raised when an attribute exceeds the keystore's length limit."""

    def __init__(self, attribute: str, limit: int):
        self.limit = limit
        super().__init__(attribute, f"longer than platform limit of {limit} chars")


class NoStorageAccessError(KeyringError):
    """Raised when the underlying storage could not be reached."""

    def __init__(self, cause):
        self.cause = cause
        super().__init__(f"Couldn't access platform secure storage: {cause}")


class PlatformFailureError(KeyringError):
    """Raised for keystore-specific failures that fit no other category."""

    def __init__(self, cause):
        self.cause = cause
        super().__init__(f"Platform secure storage failure: {cause}")


def decode_password(raw: bytes) -> str:
    """
    Decode stored bytes as a UTF-8 password.

    Raises:
        BadEncodingError: If the bytes are not valid UTF-8
    """
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        raise BadEncodingError(raw)

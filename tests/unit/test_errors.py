"""Tests for the error taxonomy."""

import pytest

from credstore.errors import (
    AmbiguousError,
    BadEncodingError,
    InvalidError,
    KeyringError,
    NoEntryError,
    NoStorageAccessError,
    PlatformFailureError,
    TooLongError,
    decode_password,
)


class TestErrorHierarchy:
    """All storage errors share one base class."""

    @pytest.mark.parametrize(
        "error",
        [
            NoEntryError(),
            AmbiguousError([]),
            BadEncodingError(b"\xff"),
            InvalidError("user", "contains NUL"),
            TooLongError("service", 32),
            NoStorageAccessError("keychain locked"),
            PlatformFailureError(OSError(5, "I/O error")),
        ],
    )
    def test_is_keyring_error(self, error):
        """Every error should be catchable as KeyringError."""
        assert isinstance(error, KeyringError)

    def test_too_long_is_invalid(self):
        """TooLongError should be a kind of InvalidError."""
        # Arrange
        error = TooLongError("target", 255)

        # Assert
        assert isinstance(error, InvalidError)
        assert error.attribute == "target"
        assert error.limit == 255
        assert "255" in str(error)


class TestErrorPayloads:
    """Errors carry the details callers need."""

    def test_bad_encoding_keeps_raw_bytes(self):
        """BadEncodingError should expose the exact stored bytes."""
        error = BadEncodingError(bytearray(b"\xff\xfe"))

        assert error.raw == b"\xff\xfe"
        assert isinstance(error.raw, bytes)

    def test_ambiguous_lists_candidates(self):
        """AmbiguousError should carry the matching credentials."""
        candidates = [object(), object()]

        error = AmbiguousError(candidates)

        assert error.credentials == candidates
        assert "2 credentials" in str(error)

    def test_platform_failure_wraps_cause(self):
        """PlatformFailureError should keep the backend's own error."""
        cause = OSError(13, "Permission denied")

        error = PlatformFailureError(cause)

        assert error.cause is cause
        assert "Permission denied" in str(error)

    def test_invalid_describes_attribute(self):
        """InvalidError message should name the attribute and reason."""
        error = InvalidError("user", "contains NUL")

        assert "'user'" in str(error)
        assert "contains NUL" in str(error)


class TestDecodePassword:
    """Tests for decode_password."""

    def test_decodes_utf8(self):
        """Should decode valid UTF-8, including multi-byte characters."""
        assert decode_password("桜です".encode("utf-8")) == "桜です"

    def test_empty_bytes(self):
        """Empty bytes are an empty password, not an error."""
        assert decode_password(b"") == ""

    def test_invalid_utf8_raises_bad_encoding(self):
        """Should raise BadEncodingError carrying the bytes."""
        with pytest.raises(BadEncodingError) as exc_info:
            decode_password(b"\xff\xfe")

        assert exc_info.value.raw == b"\xff\xfe"

"""Tests for the in-memory mock credential store."""

import threading

import pytest

from credstore.credential import Credential, CredentialBuilder, CredentialPersistence, Identity
from credstore.errors import (
    AmbiguousError,
    BadEncodingError,
    NoEntryError,
    NoStorageAccessError,
    PlatformFailureError,
)
from credstore.mock import MockCredential, MockCredentialBuilder, default_credential_builder


@pytest.fixture
def credential():
    return MockCredential(Identity(service="svc", user="alice"))


class TestCredentialABC:
    """Verify the abstract interfaces cannot be instantiated directly."""

    def test_cannot_instantiate_credential(self):
        with pytest.raises(TypeError):
            Credential()  # type: ignore[abstract]

    def test_cannot_instantiate_builder(self):
        with pytest.raises(TypeError):
            CredentialBuilder()  # type: ignore[abstract]

    def test_builder_default_persistence(self):
        """Builders that don't say otherwise persist until deleted."""

        class Builder(CredentialBuilder):
            def build(self, target, service, user):
                return MockCredential(Identity(service, user, target))

        assert Builder().persistence() == CredentialPersistence.UNTIL_DELETE


class TestMockCredential:
    """Tests for MockCredential storage behavior."""

    def test_missing_secret_raises_no_entry(self, credential):
        """Never-written credential should raise NoEntryError."""
        with pytest.raises(NoEntryError):
            credential.get_secret()

        with pytest.raises(NoEntryError):
            credential.get_password()

    def test_set_and_get_secret(self, credential):
        """Should return exactly the stored bytes."""
        # Arrange
        secret = bytes(range(256))

        # Act
        credential.set_secret(secret)

        # Assert
        assert credential.get_secret() == secret

    def test_password_stored_as_utf8(self, credential):
        """Passwords should be stored as their UTF-8 bytes."""
        credential.set_password("このきれいな花は桜です")

        assert credential.get_secret() == "このきれいな花は桜です".encode("utf-8")

    def test_non_utf8_secret_read_as_password(self, credential):
        """Should raise BadEncodingError with the raw bytes attached."""
        # Arrange
        credential.set_secret(b"\xff\xfe")

        # Act & Assert
        with pytest.raises(BadEncodingError) as exc_info:
            credential.get_password()

        assert exc_info.value.raw == b"\xff\xfe"
        assert credential.get_secret() == b"\xff\xfe"

    def test_delete_then_get(self, credential):
        """Deleted credential should raise NoEntryError, not a stale value."""
        # Arrange
        credential.set_password("hunter2")

        # Act
        credential.delete_credential()

        # Assert
        with pytest.raises(NoEntryError):
            credential.get_password()

    def test_delete_missing_raises_no_entry(self, credential):
        """Deleting when nothing is stored should raise NoEntryError."""
        with pytest.raises(NoEntryError):
            credential.delete_credential()

    def test_as_any_returns_self(self, credential):
        assert credential.as_any() is credential

    def test_repr_hides_secret(self, credential):
        """repr should identify the credential without showing the secret."""
        credential.set_password("hunter2")

        text = repr(credential)

        assert "svc" in text
        assert "alice" in text
        assert "hunter2" not in text


class TestMockErrorInjection:
    """Tests for pre-configured failures and values."""

    def test_injected_error_raised_once(self, credential):
        """Next call should raise the injected error, later calls behave normally."""
        # Arrange
        credential.set_password("hunter2")
        credential.set_error(NoStorageAccessError("keychain locked"))

        # Act & Assert
        with pytest.raises(NoStorageAccessError):
            credential.get_password()

        assert credential.get_password() == "hunter2"

    def test_injected_error_blocks_write(self, credential):
        """A failed set should leave the previous value in place."""
        # Arrange
        credential.set_password("old")
        credential.set_error(PlatformFailureError("disk full"))

        # Act
        with pytest.raises(PlatformFailureError):
            credential.set_password("new")

        # Assert
        assert credential.get_password() == "old"

    def test_injected_error_blocks_delete(self, credential):
        """A failed delete should keep the stored value."""
        credential.set_password("hunter2")
        credential.set_error(AmbiguousError([object(), object()]))

        with pytest.raises(AmbiguousError) as exc_info:
            credential.delete_credential()

        assert len(exc_info.value.credentials) == 2
        assert credential.get_password() == "hunter2"

    def test_preset_value_keeps_pending_error(self, credential):
        """Presetting a value should not consume an injected error."""
        # Arrange
        credential.set_error(PlatformFailureError("boom"))

        # Act
        credential.preset_password("preset")

        # Assert
        with pytest.raises(PlatformFailureError):
            credential.get_password()
        assert credential.get_password() == "preset"


class TestMockCredentialBuilder:
    """Tests for MockCredentialBuilder."""

    def test_builds_credential_for_identity(self):
        """Built credential should carry the requested identity."""
        builder = MockCredentialBuilder()

        credential = builder.build("tgt", "svc", "alice")

        assert isinstance(credential, MockCredential)
        assert credential.identity == Identity(service="svc", user="alice", target="tgt")

    def test_credentials_are_independent(self):
        """Two credentials for one identity should not share storage."""
        # Arrange
        builder = MockCredentialBuilder()
        first = builder.build(None, "svc", "alice")
        second = builder.build(None, "svc", "alice")

        # Act
        first.set_password("hunter2")

        # Assert
        with pytest.raises(NoEntryError):
            second.get_password()

    def test_persistence_is_entry_only(self):
        assert MockCredentialBuilder().persistence() == CredentialPersistence.ENTRY_ONLY

    @pytest.mark.threaded
    def test_build_count_under_threads(self):
        """build_count should count every build made from many threads."""
        # Arrange
        builder = MockCredentialBuilder()

        def worker():
            for i in range(100):
                builder.build(None, "svc", f"user-{i}")

        threads = [threading.Thread(target=worker) for _ in range(8)]

        # Act
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        # Assert
        assert builder.build_count == 800

    def test_module_default_builder(self):
        assert isinstance(default_credential_builder(), MockCredentialBuilder)


class TestMockCredentialThreads:
    """MockCredential must be usable from several threads at once."""

    @pytest.mark.threaded
    def test_concurrent_writes_leave_one_whole_value(self, credential):
        """Concurrent writers should never leave a torn value behind."""
        # Arrange
        values = [bytes([i]) * 64 for i in range(16)]
        barrier = threading.Barrier(len(values))

        def writer(value):
            barrier.wait()
            for _ in range(50):
                credential.set_secret(value)
                credential.get_secret()

        threads = [threading.Thread(target=writer, args=(v,)) for v in values]

        # Act
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        # Assert
        assert credential.get_secret() in values

"""
Process-wide default credential builder.

Entry.create() and Entry.create_with_target() ask a registry for the builder
to use. A registry holds two things, each with its own lock:

- an optional override, installed with set_default() under a reader/writer
  lock (many concurrent resolves, exclusive installs)
- the platform default, built at most once on first use by LazyDefault

The override always wins. Setting it is the only mutation; it cannot be
cleared, and the platform default is never rebuilt once it exists.

A set_default() racing with entry creation is linearized by the write lock:
every build that took the read lock first uses the old builder, every build
after it uses the new one (last writer wins).
"""

import threading
from contextlib import contextmanager
from typing import Callable, Optional

from credstore import keystores
from credstore.credential import Credential, CredentialBuilder
from credstore.utils.logging import get_logger

logger = get_logger(__name__)


class RWLock:
    """
    Reader/writer lock on top of threading.Condition.

    Writers are preferred: once a writer is waiting, new readers queue behind
    it, so a writer only waits for the reads already in flight. A thread that
    already holds the read side can take it again without waiting.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False
        self._writers_waiting = 0
        self._local = threading.local()

    def _read_depth(self) -> int:
        return getattr(self._local, "depth", 0)

    @contextmanager
    def read_locked(self):
        depth = self._read_depth()
        with self._cond:
            if not depth:
                while self._writing or self._writers_waiting:
                    self._cond.wait()
            self._readers += 1
        self._local.depth = depth + 1
        try:
            yield
        finally:
            self._local.depth = depth
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self):
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writing or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()


class LazyDefault:
    """
    Calls a factory at most once, however many threads ask at the same time.

    If the factory raises, nothing is cached and the error propagates; the
    next caller tries again.
    """

    def __init__(self, factory: Callable[[], CredentialBuilder]):
        self._factory = factory
        self._lock = threading.Lock()
        self._value: Optional[CredentialBuilder] = None

    @property
    def is_built(self) -> bool:
        return self._value is not None

    def get(self) -> CredentialBuilder:
        value = self._value
        if value is not None:
            return value

        with self._lock:
            if self._value is None:
                logger.debug("Constructing platform default credential builder")
                value = self._factory()
                if not isinstance(value, CredentialBuilder):
                    raise TypeError(
                        f"Default factory returned {type(value).__name__}, "
                        f"not a CredentialBuilder"
                    )
                self._value = value
            return self._value


def _platform_default() -> CredentialBuilder:
    return keystores.default_credential_builder()


class CredentialBuilderRegistry:
    """
    Resolves which builder backs convenience entry creation.

    Usage:
        registry = CredentialBuilderRegistry()
        registry.set_default(MyBuilder())
        entry = Entry.create("svc", "alice", registry=registry)

    Args:
        default_factory: Zero-argument callable making the platform default
            builder. Defaults to the configured keystore selection.
    """

    def __init__(self, default_factory: Optional[Callable[[], CredentialBuilder]] = None):
        self._lock = RWLock()
        self._override: Optional[CredentialBuilder] = None
        self._default = LazyDefault(default_factory or _platform_default)

    def set_default(self, builder: CredentialBuilder) -> None:
        """
        Install `builder` as the override, replacing any previous one.

        Blocks until in-flight resolves and builds have finished. Meant to be
        called once at startup, before entries are created.
        """
        if not isinstance(builder, CredentialBuilder):
            raise TypeError(
                f"Expected a CredentialBuilder, got {type(builder).__name__}"
            )

        with self._lock.write_locked():
            self._override = builder

        logger.info(f"Default credential builder set to {builder!r}")

    def _current(self) -> CredentialBuilder:
        # Caller holds the read lock
        if self._override is not None:
            return self._override
        return self._default.get()

    def resolve(self) -> CredentialBuilder:
        """Return the override if set, else the (lazily built) platform default."""
        with self._lock.read_locked():
            return self._current()

    def build(self, target: Optional[str], service: str, user: str) -> Credential:
        """Build a credential with the current builder, holding the read lock."""
        with self._lock.read_locked():
            return self._current().build(target, service, user)


_registry = CredentialBuilderRegistry()


def get_default_registry() -> CredentialBuilderRegistry:
    """Return the process-wide registry used when no registry is passed."""
    return _registry


def set_default_credential_builder(builder: CredentialBuilder) -> None:
    """
    Set the builder used by default to create entries.

    Meant for clients that bring their own credential store and want to use it
    everywhere. For per-entry control use Entry.create_with_credential().
    """
    _registry.set_default(builder)

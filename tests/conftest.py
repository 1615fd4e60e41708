"""Shared pytest fixtures."""

import pytest

import credstore.registry
from credstore.mock import MockCredentialBuilder
from credstore.registry import CredentialBuilderRegistry

CREDSTORE_ENV_VARS = (
    "CREDSTORE_CONFIG_DIR",
    "CREDSTORE_ENV",
    "CREDSTORE_FEATURES",
    "CREDSTORE_MODULES",
    "CREDSTORE_LOG_LEVEL",
)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "threaded: test starts several threads against shared state",
    )


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep CREDSTORE_* variables from the developer's shell out of tests."""
    for var in CREDSTORE_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def default_registry(monkeypatch):
    """Give every test a fresh process-wide registry backed by the mock store."""
    registry = CredentialBuilderRegistry(default_factory=MockCredentialBuilder)
    monkeypatch.setattr(credstore.registry, "_registry", registry)
    return registry

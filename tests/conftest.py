"""Pytest configuration and shared fixtures for SimpleDB tests."""

import pytest

from simpledb import CommandDispatcher, Store, TransactionalEngine
from simpledb.config import get_config


@pytest.fixture
def engine() -> TransactionalEngine:
    """Provide a fresh engine."""
    return TransactionalEngine()


@pytest.fixture
def store() -> Store:
    """Provide a fresh thread-safe store."""
    with Store() as store:
        yield store


@pytest.fixture
def dispatcher(store) -> CommandDispatcher:
    """Provide a dispatcher that echoes input lines, like a session transcript."""
    return CommandDispatcher(store, echo=True)


@pytest.fixture(autouse=True)
def reset_config():
    """Drop the cached configuration around each test."""
    get_config.cache_clear()
    yield
    get_config.cache_clear()

"""Shared pytest fixtures for remember-cursor tests."""

import logging

import pytest

from fakes import DB_FILE, FakeHost, MemoryFileSystem, RecordingSleep
from remember_cursor.config.settings import Settings
from remember_cursor.services.position_store import PositionStore


@pytest.fixture
def memory_fs():
    return MemoryFileSystem()


@pytest.fixture
def store(memory_fs):
    position_store = PositionStore(memory_fs, DB_FILE)
    position_store.load()
    return position_store


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def sleep(host):
    return RecordingSleep(host)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by CLI invocations between tests."""
    yield
    logger = logging.getLogger("remember_cursor")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)

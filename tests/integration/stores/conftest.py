"""Pytest fixtures for MongoDB integration tests.

Tests run against MFLIX_TEST_MONGODB_URI (default localhost) in a
throwaway database and skip when no server answers.
"""

import os
from collections.abc import AsyncIterator
from uuid import uuid4

import pytest
import pytest_asyncio

from mflix.config.models import MongoDBConfig
from mflix.db.client import MongoClientManager
from mflix.db.errors import ConnectionError


@pytest.fixture(scope="session")
def mongodb_uri() -> str:
    return os.environ.get("MFLIX_TEST_MONGODB_URI", "mongodb://localhost:27017")


@pytest.fixture
def mongodb_config(mongodb_uri: str) -> MongoDBConfig:
    """Config pointing at a database unique to the test."""
    return MongoDBConfig(
        connection_url=mongodb_uri,
        database=f"mflix_test_{uuid4().hex[:12]}",
        server_selection_timeout_ms=1000,
    )


@pytest_asyncio.fixture(scope="function")
async def mongo_client(mongodb_config: MongoDBConfig) -> AsyncIterator[MongoClientManager]:
    """Connected client; the test database is dropped afterwards.

    Skips tests if MongoDB is not available.
    """
    manager = MongoClientManager(mongodb_config)
    try:
        await manager.connect()
    except ConnectionError:
        await manager.close()
        pytest.skip("MongoDB not available (run 'docker run -p 27017:27017 mongo:7')")

    yield manager

    await manager.client.drop_database(mongodb_config.database)
    await manager.close()

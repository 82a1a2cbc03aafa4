"""
Pytest configuration and shared fixtures for MDB_GATEWAY tests.

This module provides:
- Mock Motor client, database and collection fixtures
- A fake cursor that yields documents in server batches
- Store handle fixtures wired to the mocks
- Testcontainers fixtures for integration tests
"""

import asyncio
import os
from typing import Any, AsyncGenerator, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase

from mdb_gateway.config import GatewayConfig
from mdb_gateway.core.connection import StoreHandle
from mdb_gateway.observability import get_metrics_collector

# ============================================================================
# FAKE CURSOR
# ============================================================================


class FakeCursor:
    """
    Stand-in for ``AsyncIOMotorCursor``.

    Yields ``batches`` in order, one server round-trip per batch. When
    ``error`` is set it is raised after ``fail_after`` documents have been
    yielded (after the last document if ``fail_after`` is None).
    """

    def __init__(
        self,
        batches: Optional[List[List[Dict[str, Any]]]] = None,
        error: Optional[BaseException] = None,
        fail_after: Optional[int] = None,
        delay: float = 0.0,
    ):
        self.batches = [list(batch) for batch in (batches or [])]
        self.error = error
        self.fail_after = fail_after
        self.delay = delay
        self.batches_fetched = 0
        self.closed = False

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        yielded = 0
        for batch in self.batches:
            await asyncio.sleep(self.delay)
            self.batches_fetched += 1
            for doc in batch:
                if self.error is not None and self.fail_after == yielded:
                    raise self.error
                yield doc
                yielded += 1
        if self.error is not None:
            raise self.error

    async def close(self) -> None:
        self.closed = True


# ============================================================================
# MOCK MONGODB FIXTURES
# ============================================================================


def make_mock_collection(name: str = "test_collection") -> MagicMock:
    """Create a mock collection with the async methods the gateway calls."""
    collection = MagicMock(spec=AsyncIOMotorCollection)
    collection.name = name
    collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id=ObjectId()))
    collection.insert_many = AsyncMock(return_value=MagicMock(inserted_ids=[]))
    collection.find_one = AsyncMock(return_value=None)
    # Motor's find() is synchronous and returns a cursor
    collection.find = MagicMock(return_value=FakeCursor())
    collection.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))
    collection.delete_many = AsyncMock(return_value=MagicMock(deleted_count=2))
    return collection


@pytest.fixture
def mock_mongo_collection() -> MagicMock:
    """Create a mock MongoDB collection."""
    return make_mock_collection()


@pytest.fixture
def mock_mongo_database() -> MagicMock:
    """
    Create a mock MongoDB database.

    Collections are created on first access and cached, so a test can
    configure ``db["users"]`` and the gateway sees the same mock.
    """
    db = MagicMock(spec=AsyncIOMotorDatabase)
    db.name = "test_db"
    collections: Dict[str, MagicMock] = {}

    def get_collection(self, name: str) -> MagicMock:
        if name not in collections:
            collections[name] = make_mock_collection(name)
        return collections[name]

    db.__getitem__ = get_collection
    return db


@pytest.fixture
def mock_mongo_client(mock_mongo_database: MagicMock) -> MagicMock:
    """Create a mock MongoDB client whose databases share one mock."""
    client = MagicMock(spec=AsyncIOMotorClient)
    client.admin = MagicMock()
    client.admin.command = AsyncMock(return_value={"ok": 1})
    client.close = MagicMock()
    client.__getitem__ = lambda self, db_name: mock_mongo_database
    mock_mongo_database.client = client
    return client


# ============================================================================
# STORE HANDLE FIXTURES
# ============================================================================


@pytest.fixture
def gateway_config() -> GatewayConfig:
    """Provide a default configuration for a store handle."""
    return GatewayConfig(
        mongo_uri="mongodb://localhost:27017",
        db_name="test_db",
        max_pool_size=10,
        min_pool_size=1,
    )


@pytest.fixture
def store_handle(
    mock_mongo_client: MagicMock, mock_mongo_database: MagicMock, gateway_config: GatewayConfig
) -> StoreHandle:
    """Create a StoreHandle over the mocked client."""
    return StoreHandle(mock_mongo_client, mock_mongo_database, config=gateway_config)


@pytest.fixture
def slow_call():
    """Factory for async side effects that outlive short test deadlines."""

    def factory(seconds: float = 1.0, result: Any = None):
        async def _slow(*args, **kwargs):
            await asyncio.sleep(seconds)
            return result

        return _slow

    return factory


@pytest.fixture
def fake_cursor():
    """The FakeCursor class, for tests that build their own result batches."""
    return FakeCursor


# ============================================================================
# METRICS AND ENVIRONMENT
# ============================================================================


@pytest.fixture(autouse=True)
def reset_metrics():
    """Start every test with an empty process-wide metrics collector."""
    get_metrics_collector().reset()
    yield
    get_metrics_collector().reset()


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch):
    """Reset environment variables before each test."""
    env_vars_to_clear = [
        "MONGO_URI",
        "DB_NAME",
        "MONGO_MAX_POOL_SIZE",
        "MONGO_MIN_POOL_SIZE",
    ]
    env_vars_to_clear.extend(
        f"MDB_GATEWAY_{name.upper()}_TIMEOUT"
        for name in (
            "connect",
            "ping",
            "insert_one",
            "insert_many",
            "find_one",
            "find_many",
            "find_all",
            "delete_one",
            "delete_many",
        )
    )
    for var in env_vars_to_clear:
        monkeypatch.delenv(var, raising=False)
    yield


# ============================================================================
# TESTCONTAINERS FIXTURES (Real MongoDB for Integration Tests)
# ============================================================================


def start_mongodb_container(image: str = "mongo:7.0"):
    """
    Start a MongoDB test container, skipping the calling test when it can't.

    Building the container already talks to the Docker daemon, so both
    construction and ``start()`` sit inside the skip guard.
    """
    try:
        from docker.errors import DockerException
        from testcontainers.mongodb import MongoDbContainer
    except ImportError:
        pytest.skip("testcontainers not installed. Install with: pip install -e '.[test]'")

    try:
        container = MongoDbContainer(image=image)
        container.start()
    except DockerException as e:
        pytest.skip(f"Could not start MongoDB container: {e}")
    return container


@pytest.fixture(scope="session")
def mongodb_container():
    """
    Start a MongoDB container for integration tests.

    Session-scoped: the container starts once and is reused. Skips when
    testcontainers or a Docker daemon is not available.
    """
    container = start_mongodb_container()
    try:
        yield container
    finally:
        container.stop()


@pytest.fixture
def mongodb_connection_string(mongodb_container) -> str:
    """Connection string for the test container."""
    return mongodb_container.get_connection_url()


@pytest.fixture
async def real_store(mongodb_connection_string) -> AsyncGenerator[StoreHandle, None]:
    """
    Connect a StoreHandle to the test container.

    Uses a unique database per test and drops it afterwards.
    """
    from mdb_gateway import connect

    db_name = f"test_db_{os.getpid()}_{ObjectId()}"
    handle = await connect(mongodb_connection_string, db_name)
    yield handle
    if not handle.closed:
        await handle.client.drop_database(db_name)
        await handle.close()

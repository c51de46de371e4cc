"""
Pytest configuration and shared fixtures for MDB_LITE tests.

This module provides:
- Mock PyMongo client, session, database and collection fixtures
- Connected and failed client handle fixtures
- Testcontainers-backed MongoDB fixtures for integration tests
"""

import uuid
from typing import Any, Dict, List
from unittest.mock import MagicMock

import pytest
from pymongo import MongoClient
from pymongo.client_session import ClientSession

from mdb_lite.database import connection as connection_module
from mdb_lite.database.client import MongoClientHandle
from mdb_lite.exceptions import ConnectionFailedError
from mdb_lite.observability import get_metrics_collector


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: tests that need a real MongoDB server (Docker)"
    )


# ============================================================================
# MOCK MONGODB FIXTURES
# ============================================================================


@pytest.fixture
def mock_session() -> MagicMock:
    """Create a mock client session usable as a context manager."""
    session = MagicMock(spec=ClientSession)
    session.__enter__.return_value = session
    return session


@pytest.fixture
def mock_mongo_collection() -> MagicMock:
    """Create a mock MongoDB collection."""
    collection = MagicMock()
    collection.name = "users"
    collection.find_one.return_value = None
    collection.count_documents.return_value = 0
    return collection


@pytest.fixture
def mock_mongo_database(mock_mongo_collection: MagicMock) -> MagicMock:
    """Create a mock MongoDB database returning ``mock_mongo_collection``."""
    db = MagicMock()
    db.name = "app"
    db.__getitem__.return_value = mock_mongo_collection
    db.command.return_value = {"ok": 1.0}
    return db


@pytest.fixture
def mock_mongo_client(mock_session: MagicMock, mock_mongo_database: MagicMock) -> MagicMock:
    """Create a mock MongoClient wired to the session and database mocks."""
    client = MagicMock(spec=MongoClient)
    client.start_session.return_value = mock_session
    client.__getitem__.return_value = mock_mongo_database
    client.admin = MagicMock()
    client.admin.command.return_value = {"ok": 1.0}
    return client


@pytest.fixture
def client_handle(mock_mongo_client: MagicMock) -> MongoClientHandle:
    """A connected handle backed by the mock client."""
    return MongoClientHandle(
        "localhost:27017", client=mock_mongo_client, uri="mongodb://localhost:27017"
    )


@pytest.fixture
def failed_handle(mock_mongo_client: MagicMock) -> MongoClientHandle:
    """A handle with a sticky connection error and a mock client that must stay unused."""
    error = ConnectionFailedError("db.example:27017", "connection refused")
    return MongoClientHandle(
        "db.example:27017",
        client=mock_mongo_client,
        error=error,
        uri="mongodb://db.example:27017",
    )


# ============================================================================
# GLOBAL STATE
# ============================================================================


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch):
    """Reset environment variables before each test."""
    env_vars_to_clear = [
        "MONGO_URI",
        "MONGO_SOCKET_TIMEOUT_MS",
        "MONGO_SERVER_SELECTION_TIMEOUT_MS",
        "MONGO_APP_NAME",
    ]
    for var in env_vars_to_clear:
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture(autouse=True)
def reset_global_state(monkeypatch):
    """Clear the default handle and the global metrics between tests."""
    monkeypatch.setattr(connection_module, "_default_client", None)
    get_metrics_collector().reset()
    yield
    get_metrics_collector().reset()


# ============================================================================
# TESTCONTAINERS FIXTURES (Real MongoDB for Integration Tests)
# ============================================================================


@pytest.fixture(scope="session")
def mongodb_container():
    """
    Start a MongoDB container for integration tests.

    Session-scoped: the container starts once and is reused for all
    integration tests. Skips when testcontainers or Docker are unavailable.
    """
    mongodb = pytest.importorskip(
        "testcontainers.mongodb",
        reason="testcontainers not installed. Install with: pip install -e '.[test]'",
    )

    try:
        container = mongodb.MongoDbContainer("mongo:7.0")
        container.start()
    except Exception as e:
        pytest.skip(f"MongoDB container could not be started: {e}")

    yield container

    container.stop()


@pytest.fixture
def mongodb_connection_string(mongodb_container) -> str:
    """Connection string for the test container."""
    return mongodb_container.get_connection_url()


@pytest.fixture
def real_handle(mongodb_connection_string):
    """A handle connected to the test container, closed after the test."""
    handle = connection_module.connect(mongodb_connection_string)
    if handle.error is not None:
        pytest.fail(f"Failed to connect to MongoDB container: {handle.error}")

    yield handle

    handle.close()


@pytest.fixture
def test_db_name(real_handle) -> str:
    """A unique database name per test, dropped afterwards."""
    db_name = f"test_db_{uuid.uuid4().hex[:12]}"

    yield db_name

    real_handle.client.drop_database(db_name)


@pytest.fixture
def people() -> List[Dict[str, Any]]:
    """Five documents with distinct ages."""
    return [
        {"name": "ada", "age": 36, "team": "core"},
        {"name": "grace", "age": 45, "team": "core"},
        {"name": "linus", "age": 28, "team": "kernel"},
        {"name": "barbara", "age": 52, "team": "core"},
        {"name": "ken", "age": 61, "team": "kernel"},
    ]


@pytest.fixture
def seeded_people(real_handle, test_db_name, people) -> str:
    """Insert ``people`` into ``<test_db_name>.people`` and return the collection name."""
    real_handle.insert(test_db_name, "people", *[dict(p) for p in people])
    return "people"

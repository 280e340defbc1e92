"""
Pytest configuration and shared fixtures for noodle_persistence tests.

This module provides:
- Mock motor collection and client fixtures
- Menu and order status record factories
- Testcontainers MongoDB fixtures for integration tests
"""

import uuid
from typing import Any, AsyncGenerator, Dict, List
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection

from noodle_persistence.config import PersistenceConfig
from noodle_persistence.core import NoodlePersistence
from noodle_persistence.fixtures import egg_fried_rice, satay_skewers, standard_menu_item
from noodle_persistence.observability import get_metrics_collector

# ============================================================================
# MOCK MONGODB FIXTURES
# ============================================================================


def make_cursor(documents: List[Dict[str, Any]] | None = None) -> MagicMock:
    """Build a motor cursor mock whose modifiers chain and whose to_list returns documents."""
    cursor = MagicMock()
    cursor.skip = MagicMock(return_value=cursor)
    cursor.limit = MagicMock(return_value=cursor)
    cursor.sort = MagicMock(return_value=cursor)
    cursor.to_list = AsyncMock(return_value=list(documents or []))
    return cursor


def make_collection(name: str = "test_collection") -> MagicMock:
    """Create a mock motor collection with async CRUD methods."""
    collection = MagicMock(spec=AsyncIOMotorCollection)
    collection.name = name
    collection.database = MagicMock()
    collection.database.command = AsyncMock(return_value={"results": [], "ok": 1})
    collection.find = MagicMock(return_value=make_cursor())
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id="test_id"))
    collection.insert_many = AsyncMock(return_value=MagicMock(inserted_ids=["id1", "id2"]))
    collection.replace_one = AsyncMock(return_value=MagicMock(modified_count=1))
    collection.bulk_write = AsyncMock(return_value=MagicMock(upserted_count=0))
    collection.find_one_and_replace = AsyncMock(return_value=None)
    collection.find_one_and_delete = AsyncMock(return_value=None)
    collection.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))
    collection.delete_many = AsyncMock(return_value=MagicMock(deleted_count=2))
    collection.count_documents = AsyncMock(return_value=0)
    collection.aggregate = MagicMock(return_value=make_cursor())
    collection.list_indexes = MagicMock(return_value=make_cursor())
    collection.create_index = AsyncMock(return_value="test_index")
    collection.drop_index = AsyncMock()
    return collection


@pytest.fixture
def cursor_factory():
    """Provide make_cursor to tests that need custom query results."""
    return make_cursor


@pytest.fixture
def mock_mongo_collection() -> MagicMock:
    """Create a mock MongoDB collection."""
    return make_collection()


@pytest.fixture
def mock_menu_collection() -> MagicMock:
    """Create a mock of the menu collection."""
    return make_collection("menu")


@pytest.fixture
def mock_mongo_client() -> MagicMock:
    """Create a mock MongoDB client; every database hands out mock collections."""
    client = MagicMock(spec=AsyncIOMotorClient)
    client.admin = MagicMock()
    client.admin.command = AsyncMock(return_value={"ok": 1})
    client.close = MagicMock()

    collections: Dict[str, MagicMock] = {}

    def get_collection(name: str) -> MagicMock:
        if name not in collections:
            collections[name] = make_collection(name)
        return collections[name]

    database = MagicMock()
    database.__getitem__ = MagicMock(side_effect=get_collection)
    client.__getitem__ = MagicMock(return_value=database)
    client.collections = collections
    return client


# ============================================================================
# PERSISTENCE FIXTURES
# ============================================================================


@pytest.fixture
def persistence_config() -> PersistenceConfig:
    """Provide a valid configuration for NoodlePersistence."""
    return PersistenceConfig(
        mongo_uri="mongodb://localhost:27017",
        db_name="test_db",
        max_pool_size=10,
        min_pool_size=1,
    )


@pytest.fixture
async def persistence(
    mock_mongo_client: MagicMock, persistence_config: PersistenceConfig
) -> AsyncGenerator[NoodlePersistence, None]:
    """Create a NoodlePersistence instance with a mocked MongoDB client."""
    with patch(
        "noodle_persistence.core.connection.AsyncIOMotorClient", return_value=mock_mongo_client
    ):
        instance = NoodlePersistence(persistence_config)
        await instance.initialize()
        yield instance
        await instance.shutdown()


@pytest.fixture(autouse=True)
def reset_metrics():
    """Start every test with an empty global metrics collector."""
    get_metrics_collector().reset()
    yield
    get_metrics_collector().reset()


# ============================================================================
# TEST DATA FACTORIES
# ============================================================================


@pytest.fixture
def menu_items():
    """Three menu items sharing Egg and Peanuts."""
    return [standard_menu_item(), egg_fried_rice(), satay_skewers()]


@pytest.fixture
def order_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def sample_menu_seed() -> List[Dict[str, Any]]:
    """Provide raw menu item dictionaries as found in a seed file."""
    return [
        {
            "name": "Yummy Noodles",
            "description": "Rich noodles with a peanut and cashew sauce",
            "ingredients": [
                {"name": "Noodles", "description": "Crisp, lovely noodles"},
                {"name": "Peanuts", "description": "A Nut"},
            ],
            "cost": "12.99",
            "minutes_to_prepare": 5,
        },
        {
            "name": "Egg Fried Rice",
            "ingredients": [{"name": "Rice"}, {"name": "Egg"}],
            "cost": 6.5,
            "minutes_to_prepare": 4,
        },
    ]


# ============================================================================
# TESTCONTAINERS FIXTURES (Real MongoDB for Integration Tests)
# ============================================================================


@pytest.fixture(scope="session")
def mongodb_container():
    """
    Start a MongoDB Atlas Local container for integration tests.

    Session-scoped: the container starts once and is reused by all
    integration tests.
    """
    try:
        from testcontainers.mongodb import MongoDbContainer
    except ImportError:
        pytest.skip("testcontainers not installed. Install with: pip install -e '.[test]'")

    with MongoDbContainer(image="mongodb/mongodb-atlas-local:latest") as container:
        yield container


@pytest.fixture
def mongodb_connection_string(mongodb_container) -> str:
    """Connection string using localhost and the container's exposed port."""
    exposed_port = mongodb_container.get_exposed_port(27017)
    return f"mongodb://localhost:{exposed_port}/?directConnection=true"


@pytest.fixture
async def real_mongo_client(mongodb_connection_string):
    """
    Create a real motor client connected to the testcontainer.

    Automatically closes the client after the test.
    """
    client = AsyncIOMotorClient(
        mongodb_connection_string, uuidRepresentation="standard", tz_aware=True
    )

    try:
        await client.admin.command("ping")
    except (RuntimeError, OSError) as e:
        pytest.fail(f"Failed to connect to MongoDB container: {e}")

    yield client

    client.close()


@pytest.fixture
async def real_mongo_db(real_mongo_client):
    """
    Create a uniquely named database and drop it after the test.
    """
    db_name = f"test_db_{uuid.uuid4().hex[:12]}"
    db = real_mongo_client[db_name]

    yield db

    try:
        await real_mongo_client.drop_database(db_name)
    except (ConnectionError, RuntimeError, OSError):
        pass  # Ignore cleanup errors


@pytest.fixture
async def real_persistence(mongodb_connection_string, real_mongo_db):
    """
    Create a fully initialized NoodlePersistence against the testcontainer.
    """
    instance = NoodlePersistence(
        PersistenceConfig(
            mongo_uri=mongodb_connection_string,
            db_name=real_mongo_db.name,
            max_pool_size=5,
            min_pool_size=1,
        )
    )
    await instance.initialize()
    yield instance
    await instance.shutdown()

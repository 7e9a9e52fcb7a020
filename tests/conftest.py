"""Test configuration for the MongoDB data source package."""

import pytest
from mongomock_motor import AsyncMongoMockClient

from datasource_mongo import MongoConnectionManager, MongoDataSource

pytest_plugins = ["pytest_asyncio"]


@pytest.fixture
def mongo_connection():
    """Create a MongoDB connection backed by mongomock."""
    connection = MongoConnectionManager.__new__(MongoConnectionManager)
    connection._client = AsyncMongoMockClient()
    connection._database = "test_db"
    connection._url = "mongodb://mock:27017"

    async def _mock_connect():
        return connection._client

    connection.connect = _mock_connect
    return connection


@pytest.fixture
def data_source(mongo_connection):
    """MongoDataSource over an empty mock collection."""
    return MongoDataSource(mongo_connection, "test_collection")


@pytest.fixture
def raw_collection(mongo_connection):
    """The mock collection behind ``data_source``, for seeding and inspection."""
    return mongo_connection.get_collection("test_collection")

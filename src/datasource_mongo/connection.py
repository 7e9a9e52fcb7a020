"""MongoConnectionManager — Motor client lifecycle, default database, health check."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .exceptions import MongoConnectionError

if TYPE_CHECKING:
    from motor.motor_asyncio import (
        AsyncIOMotorClient,
        AsyncIOMotorCollection,
        AsyncIOMotorDatabase,
    )

logger = logging.getLogger("datasource_mongo.connection")


class MongoConnectionManager:
    """Wrap Motor client with lifecycle and health-check helpers.

    ``database`` is the default database handed out by :meth:`get_database`
    and :meth:`get_collection`; data sources may still name their own.
    Usable as ``async with MongoConnectionManager(...) as connection:``,
    which connects on entry and closes on exit.
    """

    def __init__(
        self,
        url: str = "mongodb://localhost:27017",
        *,
        database: str | None = None,
        server_selection_timeout_ms: int = 5000,
        connect_timeout_ms: int = 10000,
        **kwargs: Any,
    ) -> None:
        self._url = url
        self._database = database
        self._server_selection_timeout_ms = server_selection_timeout_ms
        self._connect_timeout_ms = connect_timeout_ms
        self._kwargs = kwargs
        self._client: AsyncIOMotorClient[Any] | None = None

    @property
    def database_name(self) -> str | None:
        return self._database

    async def connect(self) -> AsyncIOMotorClient[Any]:
        """Create and cache the Motor client. Idempotent."""
        if self._client is not None:
            return self._client
        try:
            from motor.motor_asyncio import AsyncIOMotorClient
        except ImportError as e:
            raise MongoConnectionError(
                "motor is required; install with motor>=3.3.0"
            ) from e
        try:
            self._client = AsyncIOMotorClient(
                self._url,
                serverSelectionTimeoutMS=self._server_selection_timeout_ms,
                connectTimeoutMS=self._connect_timeout_ms,
                **self._kwargs,
            )
        except Exception as e:
            raise MongoConnectionError(str(e)) from e
        logger.debug("Motor client created for %s", self._url)
        return self._client

    @property
    def client(self) -> AsyncIOMotorClient[Any]:
        """Return the Motor client; raises if not connected."""
        if self._client is None:
            raise MongoConnectionError("Not connected; call connect() first")
        return self._client

    def get_database(self, name: str | None = None) -> AsyncIOMotorDatabase[Any]:
        """Return ``name`` or the default database."""
        database_name = name or self._database
        if not database_name:
            raise MongoConnectionError(
                "Database name must be set on data source or connection"
            )
        return self.client.get_database(database_name)

    def get_collection(
        self, name: str, *, database: str | None = None
    ) -> AsyncIOMotorCollection[Any]:
        """Collection ``name`` in ``database`` (or the default database)."""
        return self.get_database(database).get_collection(name)

    async def __aenter__(self) -> MongoConnectionManager:
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the client (synchronous; Motor client.close() is sync)."""
        if self._client is not None:
            self._client.close()
            self._client = None

    async def health_check(self) -> bool:
        """Ping the server; return True if reachable."""
        if self._client is None:
            return False
        try:
            await self._client.admin.command("ping")
            return True
        except Exception:  # noqa: BLE001
            logger.warning("MongoDB ping failed for %s", self._url, exc_info=True)
            return False

"""MongoDB client lifecycle management.

One client per process, shared by every store. The driver owns
connection pooling; this wrapper only decides where to connect and
translates connection failures.
"""

import structlog
from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from mflix.config.loader import get_mongodb_uri
from mflix.config.models.storage import MongoDBConfig
from mflix.db.errors import ConnectionError

logger = structlog.get_logger(__name__)


class MongoClientManager:
    """Owns the AsyncMongoClient and hands out the configured database.

    Usage:
        manager = MongoClientManager(config)
        await manager.connect()
        try:
            users = manager.database["users"]
        finally:
            await manager.close()
    """

    def __init__(
        self,
        config: MongoDBConfig | None = None,
        client: AsyncMongoClient | None = None,
    ) -> None:
        """Initialize client configuration.

        Args:
            config: MongoDB settings. Defaults are used when omitted.
            client: Pre-built client, mostly for tests. Skips URL resolution.
        """
        self._config = config or MongoDBConfig()
        self._uri = self._config.connection_url or get_mongodb_uri()
        self._client: AsyncMongoClient | None = client

    async def connect(self) -> None:
        """Create the client and verify the server answers a ping."""
        created = self._client is None
        if created:
            self._client = AsyncMongoClient(
                self._uri,
                serverSelectionTimeoutMS=self._config.server_selection_timeout_ms,
                maxPoolSize=self._config.max_pool_size,
            )

        try:
            await self._client.admin.command("ping")
        except PyMongoError as e:
            logger.error("mongodb_client_connection_failed", error=str(e))
            if created:
                await self._client.close()
                self._client = None
            raise ConnectionError(f"Failed to connect to MongoDB: {e}", cause=e) from e

        logger.info(
            "mongodb_client_connected",
            database=self._config.database,
            max_pool_size=self._config.max_pool_size,
        )

    async def close(self) -> None:
        """Close the client and release its pool."""
        if self._client is not None:
            await self._client.close()
            self._client = None
            logger.info("mongodb_client_closed")

    @property
    def client(self) -> AsyncMongoClient:
        if self._client is None:
            raise ConnectionError("MongoDB client is not connected")
        return self._client

    @property
    def database(self) -> AsyncDatabase:
        """The configured MFlix database."""
        return self.client[self._config.database]

    @property
    def config(self) -> MongoDBConfig:
        return self._config

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    async def health_check(self) -> bool:
        """Return True if the server answers a ping."""
        if self._client is None:
            return False

        try:
            await self._client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.warning("mongodb_health_check_failed", error=str(e))
            return False

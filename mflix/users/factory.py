"""UserStore factory for creating backend instances."""

from mflix.config.models.storage import StorageConfig
from mflix.db.client import MongoClientManager
from mflix.observability.logging import get_logger
from mflix.users.store import UserStore
from mflix.users.stores.inmemory import InMemoryUserStore
from mflix.users.stores.mongodb import MongoDBUserStore

logger = get_logger(__name__)


async def create_user_store(
    config: StorageConfig,
    client: MongoClientManager | None = None,
    *,
    record_metrics: bool = True,
) -> UserStore:
    """Create a UserStore instance based on configuration.

    For the mongodb backend the client is connected if needed and the
    unique indexes are created before the store is returned.

    Args:
        config: Storage configuration from settings
        client: Shared MongoDB client. Created from config when omitted.
        record_metrics: Record Prometheus store metrics

    Returns:
        Configured UserStore instance

    Raises:
        ValueError: If backend type is not supported
    """
    backend = config.backend

    if backend == "inmemory":
        logger.info("creating_user_store", backend="inmemory")
        return InMemoryUserStore()

    if backend == "mongodb":
        client = client or MongoClientManager(config.mongodb)
        if not client.is_connected:
            await client.connect()

        logger.info(
            "creating_user_store",
            backend="mongodb",
            database=config.mongodb.database,
        )
        store = MongoDBUserStore.from_database(
            client.database,
            config.mongodb,
            record_metrics=record_metrics,
        )
        await store.ensure_indexes()
        return store

    raise ValueError(f"Unsupported user store backend: {backend}")

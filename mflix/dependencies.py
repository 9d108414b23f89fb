"""Process-wide wiring of settings, logging, and stores.

The HTTP layer (or a script) calls these accessors; instances are
created once from settings and reused. ``shutdown`` releases them and
resets the module state, which is also how tests start clean.
"""

import asyncio

from mflix.config import get_settings
from mflix.config.settings import Settings
from mflix.db.client import MongoClientManager
from mflix.movies.reports import MovieReports
from mflix.observability.logging import get_logger, setup_logging
from mflix.users.factory import create_user_store
from mflix.users.store import UserStore

logger = get_logger(__name__)

_mongo_client: MongoClientManager | None = None
_user_store: UserStore | None = None
_movie_reports: MovieReports | None = None
_mongo_client_lock = asyncio.Lock()


def configure_logging(settings: Settings | None = None) -> None:
    """Apply the logging section of the settings."""
    logging_config = (settings or get_settings()).observability.logging
    setup_logging(
        level=logging_config.level,
        format=logging_config.format,
        redact_pii=logging_config.redact_pii,
    )


async def get_mongo_client(settings: Settings | None = None) -> MongoClientManager:
    """Get the shared MongoDB client, connecting it on first access."""
    global _mongo_client
    async with _mongo_client_lock:
        if _mongo_client is None:
            settings = settings or get_settings()
            client = MongoClientManager(settings.storage.mongodb)
            await client.connect()
            _mongo_client = client
    return _mongo_client


async def get_user_store(settings: Settings | None = None) -> UserStore:
    """Get the shared UserStore for the configured backend."""
    global _user_store
    if _user_store is None:
        settings = settings or get_settings()
        client = None
        if settings.storage.backend == "mongodb":
            client = await get_mongo_client(settings)
        _user_store = await create_user_store(
            settings.storage,
            client,
            record_metrics=settings.observability.metrics.enabled,
        )
    return _user_store


async def get_movie_reports(settings: Settings | None = None) -> MovieReports:
    """Get the movie reports bound to the configured movies collection."""
    global _movie_reports
    if _movie_reports is None:
        settings = settings or get_settings()
        client = await get_mongo_client(settings)
        _movie_reports = MovieReports.from_database(client.database, settings.storage.mongodb)
    return _movie_reports


async def shutdown() -> None:
    """Close the MongoDB client and forget every shared instance."""
    global _mongo_client, _mongo_client_lock, _user_store, _movie_reports
    if _mongo_client is not None:
        await _mongo_client.close()
    _mongo_client = None
    _user_store = None
    _movie_reports = None
    _mongo_client_lock = asyncio.Lock()
    logger.info("dependencies_shutdown")

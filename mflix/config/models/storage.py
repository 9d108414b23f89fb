"""Storage backend configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

BackendType = Literal["inmemory", "mongodb"]


class MongoDBConfig(BaseModel):
    """MongoDB connection and collection settings.

    The connection URL usually carries credentials, so it is expected
    from MFLIX_STORAGE__MONGODB__CONNECTION_URL or MONGODB_URI rather
    than from a committed TOML file.
    """

    connection_url: str | None = Field(
        default=None,
        description="MongoDB connection string (from env var)",
    )
    database: str = Field(default="sample_mflix", min_length=1, description="Database name")
    users_collection: str = Field(default="users", min_length=1, description="Users collection")
    sessions_collection: str = Field(
        default="sessions", min_length=1, description="Sessions collection"
    )
    movies_collection: str = Field(
        default="movies", min_length=1, description="Movies collection"
    )
    server_selection_timeout_ms: int = Field(
        default=5000,
        gt=0,
        description="How long the driver waits for a reachable server",
    )
    max_pool_size: int = Field(
        default=100,
        gt=0,
        description="Maximum connections in the driver pool",
    )


class StorageConfig(BaseModel):
    """Configuration for the user/session store."""

    backend: BackendType = Field(default="mongodb", description="Backend type")
    mongodb: MongoDBConfig = Field(
        default_factory=MongoDBConfig,
        description="MongoDB settings",
    )

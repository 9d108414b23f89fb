"""Configuration model exports."""

from mflix.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
)
from mflix.config.models.storage import MongoDBConfig, StorageConfig

__all__ = [
    # Observability
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
    # Storage
    "MongoDBConfig",
    "StorageConfig",
]

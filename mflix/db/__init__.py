"""MongoDB infrastructure: client lifecycle and the store error hierarchy."""

from mflix.db.client import MongoClientManager
from mflix.db.errors import (
    ConnectionError,
    DuplicateEntityError,
    InvalidArgumentError,
    NotFoundError,
    OperationFailedError,
    StoreError,
)

__all__ = [
    "MongoClientManager",
    "StoreError",
    "ConnectionError",
    "DuplicateEntityError",
    "NotFoundError",
    "InvalidArgumentError",
    "OperationFailedError",
]

"""User/session store backends."""

from mflix.users.store import UserStore
from mflix.users.stores.inmemory import InMemoryUserStore
from mflix.users.stores.mongodb import MongoDBUserStore

__all__ = [
    "UserStore",
    "InMemoryUserStore",
    "MongoDBUserStore",
]

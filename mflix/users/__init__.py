"""Users and their login sessions.

Models, the UserStore interface, its in-memory and MongoDB backends,
and the factory selecting one from configuration.
"""

from mflix.users.factory import create_user_store
from mflix.users.models import Session, User
from mflix.users.store import UserStore
from mflix.users.stores import InMemoryUserStore, MongoDBUserStore

__all__ = [
    "User",
    "Session",
    "UserStore",
    "InMemoryUserStore",
    "MongoDBUserStore",
    "create_user_store",
]

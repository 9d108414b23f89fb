"""UserStore abstract interface."""

from abc import ABC, abstractmethod
from typing import Any

from mflix.users.models import Session, User


class UserStore(ABC):
    """Abstract interface for user and session storage.

    Users are keyed by email; sessions by ``user_id`` (the user's
    email), one per user. Reads return ``None`` for missing documents;
    writes raise ``StoreError`` subclasses.
    """

    @abstractmethod
    async def add_user(self, user: User) -> bool:
        """Insert a user.

        Raises:
            DuplicateEntityError: A user with the same email exists
            OperationFailedError: The store rejected the write
        """
        pass

    @abstractmethod
    async def create_user_session(self, user_id: str, jwt: str) -> bool:
        """Issue the session of a user.

        Raises:
            DuplicateEntityError: The user already has a session
            OperationFailedError: The store rejected the write
        """
        pass

    @abstractmethod
    async def get_user(self, email: str) -> User | None:
        """Get a user by email."""
        pass

    @abstractmethod
    async def get_user_session(self, user_id: str) -> Session | None:
        """Get the session of a user."""
        pass

    @abstractmethod
    async def delete_user_sessions(self, user_id: str) -> bool:
        """Delete every session of a user.

        Returns whether the store acknowledged the delete, which is
        also True when the user had no session.
        """
        pass

    @abstractmethod
    async def delete_user(self, email: str) -> bool:
        """Delete a user and, first, its sessions.

        Returns False without touching the user document when the
        session delete was not acknowledged.

        Raises:
            NotFoundError: No user with this email
            OperationFailedError: The store rejected a write
        """
        pass

    @abstractmethod
    async def update_user_preferences(
        self, email: str, preferences: dict[str, Any] | None
    ) -> bool:
        """Replace the preferences of a user as a whole.

        Raises:
            InvalidArgumentError: ``preferences`` is None
            NotFoundError: No user with this email
            OperationFailedError: The store rejected the write
        """
        pass

"""In-memory implementation of UserStore."""

import copy
from typing import Any

from mflix.db.errors import DuplicateEntityError, InvalidArgumentError, NotFoundError
from mflix.observability.logging import get_logger
from mflix.users.models import Session, User
from mflix.users.store import UserStore

logger = get_logger(__name__)


class InMemoryUserStore(UserStore):
    """In-memory implementation of UserStore for testing and development.

    Dict storage keyed by email and user_id. Every write counts as
    acknowledged. Not suitable for production use.
    """

    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._sessions: dict[str, Session] = {}

    async def add_user(self, user: User) -> bool:
        if user.email in self._users:
            raise DuplicateEntityError(f"User with email {user.email} already exists")
        self._users[user.email] = user.model_copy(deep=True)
        logger.info("user_added", email=user.email)
        return True

    async def create_user_session(self, user_id: str, jwt: str) -> bool:
        if user_id in self._sessions:
            raise DuplicateEntityError(f"Session for user with id {user_id} already exists")
        self._sessions[user_id] = Session(user_id=user_id, jwt=jwt)
        logger.info("user_session_created", user_id=user_id)
        return True

    async def get_user(self, email: str) -> User | None:
        user = self._users.get(email)
        return user.model_copy(deep=True) if user else None

    async def get_user_session(self, user_id: str) -> Session | None:
        session = self._sessions.get(user_id)
        return session.model_copy() if session else None

    async def delete_user_sessions(self, user_id: str) -> bool:
        deleted = self._sessions.pop(user_id, None) is not None
        logger.info("user_sessions_deleted", user_id=user_id, deleted=deleted)
        return True

    async def delete_user(self, email: str) -> bool:
        if email not in self._users:
            raise NotFoundError(f"User with email {email} doesn't exist")
        if not await self.delete_user_sessions(email):
            return False
        del self._users[email]
        logger.info("user_deleted", email=email)
        return True

    async def update_user_preferences(
        self, email: str, preferences: dict[str, Any] | None
    ) -> bool:
        if preferences is None:
            raise InvalidArgumentError("User preferences should not be null")
        user = self._users.get(email)
        if user is None:
            raise NotFoundError(f"User with email {email} doesn't exist")
        user.preferences = copy.deepcopy(preferences)
        logger.info("user_preferences_updated", email=email)
        return True

"""MongoDB implementation of UserStore.

Uniqueness and existence checks are expressed as conditional writes so
that no read-then-write window exists:

- users are inserted with a ``$setOnInsert`` upsert on ``email``
- sessions are issued with a ``$setOnInsert`` upsert on ``user_id``
- preference updates check ``matched_count``

The unique indexes created by ``ensure_indexes`` make concurrent upserts
for the same key fail with a duplicate key error instead of racing.
"""

from contextlib import AbstractContextManager, nullcontext
from typing import Any

from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import ConnectionFailure, DuplicateKeyError, PyMongoError

from mflix.config.models.storage import MongoDBConfig
from mflix.db.errors import (
    ConnectionError,
    DuplicateEntityError,
    InvalidArgumentError,
    NotFoundError,
    OperationFailedError,
    StoreError,
)
from mflix.observability.logging import get_logger
from mflix.observability.metrics import track_operation
from mflix.users.models import Session, User
from mflix.users.store import UserStore

logger = get_logger(__name__)


def _translate(error: PyMongoError, message: str) -> StoreError:
    """Wrap a driver exception in the matching StoreError."""
    if isinstance(error, ConnectionFailure):
        return ConnectionError(f"{message}: {error}", cause=error)
    return OperationFailedError(str(error), cause=error)


class MongoDBUserStore(UserStore):
    """MongoDB implementation of UserStore.

    Collections:
    - users: {_id, name, email, hashedpw, preferences}
    - sessions: {_id, user_id, jwt}
    """

    def __init__(
        self,
        users: AsyncCollection,
        sessions: AsyncCollection,
        *,
        record_metrics: bool = True,
    ) -> None:
        """Initialize with the two collections.

        Args:
            users: The users collection
            sessions: The sessions collection
            record_metrics: Record Prometheus store metrics
        """
        self._users = users
        self._sessions = sessions
        self._record_metrics = record_metrics

    @classmethod
    def from_database(
        cls,
        database: AsyncDatabase,
        config: MongoDBConfig | None = None,
        *,
        record_metrics: bool = True,
    ) -> "MongoDBUserStore":
        """Build the store from a database handle and collection names."""
        config = config or MongoDBConfig()
        return cls(
            database[config.users_collection],
            database[config.sessions_collection],
            record_metrics=record_metrics,
        )

    def _track(self, operation: str) -> AbstractContextManager[None]:
        if not self._record_metrics:
            return nullcontext()
        return track_operation("mongodb_user_store", operation)

    async def ensure_indexes(self) -> None:
        """Create the unique indexes on users.email and sessions.user_id."""
        try:
            with self._track("ensure_indexes"):
                await self._users.create_index("email", unique=True)
                await self._sessions.create_index("user_id", unique=True)
        except PyMongoError as e:
            logger.error("mongodb_ensure_indexes_error", error=str(e))
            raise _translate(e, "Failed to create indexes") from e
        logger.info("mongodb_indexes_ensured")

    # =========================================================================
    # USERS
    # =========================================================================

    async def add_user(self, user: User) -> bool:
        """Insert a user unless its email is already registered."""
        document = user.to_document()
        email = document.pop("email")
        try:
            with self._track("add_user"):
                result = await self._users.update_one(
                    {"email": email},
                    {"$setOnInsert": document},
                    upsert=True,
                )
        except DuplicateKeyError as e:
            raise DuplicateEntityError(
                f"User with email {email} already exists", cause=e
            ) from e
        except PyMongoError as e:
            logger.error("user_add_error", email=email, error=str(e))
            raise _translate(e, "Failed to add user") from e

        if not result.acknowledged:
            return False
        if result.upserted_id is None:
            raise DuplicateEntityError(f"User with email {email} already exists")

        logger.info("user_added", email=email)
        return True

    async def get_user(self, email: str) -> User | None:
        try:
            with self._track("get_user"):
                document = await self._users.find_one({"email": email})
        except PyMongoError as e:
            logger.error("user_get_error", email=email, error=str(e))
            raise _translate(e, "Failed to get user") from e
        return User.from_document(document) if document else None

    async def delete_user(self, email: str) -> bool:
        """Delete the sessions of a user, then the user."""
        try:
            with self._track("delete_user"):
                existing = await self._users.find_one({"email": email}, {"_id": 1})
                if existing is None:
                    raise NotFoundError(f"User with email {email} doesn't exist")

                if not await self.delete_user_sessions(email):
                    logger.warning("user_delete_aborted", email=email)
                    return False

                result = await self._users.delete_one({"email": email})
        except PyMongoError as e:
            logger.error("user_delete_error", email=email, error=str(e))
            raise _translate(e, "Failed to delete user") from e

        logger.info("user_deleted", email=email, acknowledged=result.acknowledged)
        return result.acknowledged

    async def update_user_preferences(
        self, email: str, preferences: dict[str, Any] | None
    ) -> bool:
        """Replace the preferences field; existing keys are not kept."""
        if preferences is None:
            raise InvalidArgumentError("User preferences should not be null")

        try:
            with self._track("update_user_preferences"):
                result = await self._users.update_one(
                    {"email": email},
                    {"$set": {"preferences": preferences}},
                )
        except PyMongoError as e:
            logger.error("user_preferences_update_error", email=email, error=str(e))
            raise _translate(e, "Failed to update user preferences") from e

        if not result.acknowledged:
            return False
        if result.matched_count == 0:
            raise NotFoundError(f"User with email {email} doesn't exist")

        logger.info("user_preferences_updated", email=email)
        return True

    # =========================================================================
    # SESSIONS
    # =========================================================================

    async def create_user_session(self, user_id: str, jwt: str) -> bool:
        """Issue a session; an existing one is never replaced."""
        try:
            with self._track("create_user_session"):
                result = await self._sessions.update_one(
                    {"user_id": user_id},
                    {"$setOnInsert": {"jwt": jwt}},
                    upsert=True,
                )
        except DuplicateKeyError as e:
            raise DuplicateEntityError(
                f"Session for user with id {user_id} already exists", cause=e
            ) from e
        except PyMongoError as e:
            logger.error("user_session_create_error", user_id=user_id, error=str(e))
            raise _translate(e, "Failed to create user session") from e

        if not result.acknowledged:
            return False
        if result.upserted_id is None:
            raise DuplicateEntityError(f"Session for user with id {user_id} already exists")

        logger.info("user_session_created", user_id=user_id)
        return True

    async def get_user_session(self, user_id: str) -> Session | None:
        try:
            with self._track("get_user_session"):
                document = await self._sessions.find_one({"user_id": user_id})
        except PyMongoError as e:
            logger.error("user_session_get_error", user_id=user_id, error=str(e))
            raise _translate(e, "Failed to get user session") from e
        return Session.from_document(document) if document else None

    async def delete_user_sessions(self, user_id: str) -> bool:
        """Delete all sessions of a user; zero matches still count as success."""
        try:
            with self._track("delete_user_sessions"):
                result = await self._sessions.delete_many({"user_id": user_id})
        except PyMongoError as e:
            logger.error("user_sessions_delete_error", user_id=user_id, error=str(e))
            raise _translate(e, "Failed to delete user sessions") from e

        logger.info(
            "user_sessions_deleted",
            user_id=user_id,
            acknowledged=result.acknowledged,
        )
        return result.acknowledged

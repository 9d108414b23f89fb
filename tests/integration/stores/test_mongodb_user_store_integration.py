"""Integration tests for MongoDBUserStore against a live server."""

import asyncio

import pytest
import pytest_asyncio

from mflix.config.models import StorageConfig
from mflix.db.errors import DuplicateEntityError, InvalidArgumentError, NotFoundError
from mflix.users import MongoDBUserStore, User, create_user_store

pytestmark = pytest.mark.integration


@pytest_asyncio.fixture
async def store(mongo_client, mongodb_config) -> MongoDBUserStore:
    config = StorageConfig(backend="mongodb", mongodb=mongodb_config)
    return await create_user_store(config, mongo_client, record_metrics=False)


@pytest.fixture
def sample_user() -> User:
    return User(name="Ned Stark", email="ned@stark.io", hashedpw="hash", preferences={"theme": "dark"})


class TestUsers:
    """User lifecycle against MongoDB."""

    @pytest.mark.asyncio
    async def test_add_and_get_user(self, store, sample_user):
        assert await store.add_user(sample_user) is True

        retrieved = await store.get_user("ned@stark.io")

        assert retrieved is not None
        assert retrieved.id is not None
        assert retrieved.name == "Ned Stark"
        assert retrieved.preferences == {"theme": "dark"}

    @pytest.mark.asyncio
    async def test_duplicate_email_keeps_original(self, store, sample_user):
        await store.add_user(sample_user)

        with pytest.raises(DuplicateEntityError):
            await store.add_user(User(name="Impostor", email="ned@stark.io"))

        assert (await store.get_user("ned@stark.io")).name == "Ned Stark"

    @pytest.mark.asyncio
    async def test_concurrent_adds_yield_one_user(self, store):
        """Only one of several concurrent adds for the same email wins."""
        results = await asyncio.gather(
            *(store.add_user(User(name=f"Ned {i}", email="ned@stark.io")) for i in range(5)),
            return_exceptions=True,
        )

        assert results.count(True) == 1
        assert all(isinstance(r, DuplicateEntityError) for r in results if r is not True)

    @pytest.mark.asyncio
    async def test_preferences_replaced(self, store, sample_user):
        await store.add_user(sample_user)

        await store.update_user_preferences("ned@stark.io", {"lang": "en"})

        assert (await store.get_user("ned@stark.io")).preferences == {"lang": "en"}

    @pytest.mark.asyncio
    async def test_update_preferences_errors(self, store):
        with pytest.raises(InvalidArgumentError):
            await store.update_user_preferences("ned@stark.io", None)
        with pytest.raises(NotFoundError):
            await store.update_user_preferences("ned@stark.io", {"lang": "en"})


class TestSessions:
    """Session lifecycle against MongoDB."""

    @pytest.mark.asyncio
    async def test_session_issued_once(self, store):
        assert await store.create_user_session("ned@stark.io", "jwt-1") is True

        with pytest.raises(DuplicateEntityError):
            await store.create_user_session("ned@stark.io", "jwt-2")

        assert (await store.get_user_session("ned@stark.io")).jwt == "jwt-1"

    @pytest.mark.asyncio
    async def test_delete_sessions_without_sessions(self, store):
        assert await store.delete_user_sessions("ned@stark.io") is True

    @pytest.mark.asyncio
    async def test_delete_user_cascades(self, store, sample_user):
        await store.add_user(sample_user)
        await store.create_user_session("ned@stark.io", "jwt-1")

        assert await store.delete_user("ned@stark.io") is True

        assert await store.get_user("ned@stark.io") is None
        assert await store.get_user_session("ned@stark.io") is None

    @pytest.mark.asyncio
    async def test_delete_missing_user(self, store):
        with pytest.raises(NotFoundError):
            await store.delete_user("ghost@nowhere.io")

"""Tests for the store error hierarchy."""

import pytest

from mflix.db.errors import (
    ConnectionError,
    DuplicateEntityError,
    InvalidArgumentError,
    NotFoundError,
    OperationFailedError,
    StoreError,
)


class TestStoreErrors:
    """Tests for StoreError subclasses."""

    @pytest.mark.parametrize(
        "error_class",
        [
            ConnectionError,
            DuplicateEntityError,
            NotFoundError,
            InvalidArgumentError,
            OperationFailedError,
        ],
    )
    def test_subclasses_store_error(self, error_class: type[StoreError]) -> None:
        error = error_class("message")
        assert isinstance(error, StoreError)
        assert str(error) == "message"
        assert error.cause is None

    def test_cause_kept(self) -> None:
        original = ValueError("driver failure")
        error = OperationFailedError("write rejected", cause=original)
        assert error.cause is original

    def test_connection_error_is_not_builtin(self) -> None:
        assert not issubclass(ConnectionError, OSError)

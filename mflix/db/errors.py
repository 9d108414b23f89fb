"""Store error hierarchy.

All store implementations raise these errors so callers never have to
handle driver-specific exceptions.
"""


class StoreError(Exception):
    """Base exception for all store errors.

    Backend-specific errors are wrapped in one of the StoreError
    subclasses, with the original exception kept on ``cause``.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class ConnectionError(StoreError):
    """Raised when the store cannot be reached.

    Examples:
        - Server selection timeout
        - Network errors
    """

    pass


class DuplicateEntityError(StoreError):
    """Raised when a write would create a second entity with the same key.

    Examples:
        - Adding a user whose email is already registered
        - Creating a session for a user that already has one
    """

    pass


class NotFoundError(StoreError):
    """Raised when the target of a write operation does not exist.

    Reads never raise this: a missing document is returned as ``None``.
    """

    pass


class InvalidArgumentError(StoreError):
    """Raised on invalid input, before the store is contacted."""

    pass


class OperationFailedError(StoreError):
    """Raised when the database rejects a write.

    Carries the driver's message; the operation is not retried.
    """

    pass

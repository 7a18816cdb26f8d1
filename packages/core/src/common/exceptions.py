"""Exception hierarchy shared by the store, the services and the HTTP layer."""


class AppBaseError(Exception):
    """Base class for every error the application raises on purpose."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AppBaseError):
    """A request parameter is malformed or out of range.

    Only the first offending field is reported.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class UnauthorizedError(AppBaseError):
    """The API key is missing, unknown or inactive."""


class NotFoundError(AppBaseError):
    """A point lookup found no record."""


class InternalError(AppBaseError):
    """Unexpected failure; surfaced generically and never retried here."""


class StorageError(InternalError):
    """The underlying database rejected an operation."""


class DuplicateRecordError(StorageError):
    """A UNIQUE constraint was violated on insert."""


class KeyCollisionError(InternalError):
    """A freshly generated API key already existed. Safe to retry."""

    retryable = True

"""Errors raised by tile store I/O against object storage."""


class StorageError(Exception):
    """An object storage request failed for a reason other than absence.

    ``key`` names the object (or listing prefix) involved, when there is one,
    and ``cause`` holds the backend exception.
    """

    def __init__(self, message: str, key: str | None = None, cause: Exception | None = None):
        self.key = key
        self.cause = cause
        super().__init__(message)


class StorageNotFoundError(StorageError):
    """Backend-internal classification of a missing object.

    Clients turn this into a ``None`` result; it never reaches store callers.
    """


class StoragePermissionError(StorageError):
    """Credentials were rejected or the bucket denied the request."""


class StorageConnectionError(StorageError):
    """The endpoint could not be reached or the request timed out."""


class StoreClosedError(StorageError):
    """The store was destroyed and its connection pool released."""

"""Abstract base class for object storage backends."""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ObjectMetadata:
    """Result of a metadata-only lookup of an existing object."""

    key: str
    size: int
    last_modified: datetime | None = None
    content_type: str = "application/octet-stream"


@dataclass(frozen=True)
class ObjectSummary:
    """One entry of a prefix listing."""

    key: str
    size: int


@dataclass
class StorageObject:
    """Wrapper returned by get_object that carries content alongside metadata."""

    content: bytes
    content_type: str = "application/octet-stream"
    last_modified: datetime | None = None

    @property
    def size(self) -> int:
        return len(self.content)


class ObjectStorageClient(ABC):
    """Backend-agnostic interface for the blob operations a tile store needs.

    Absence is part of the normal result of ``get_object`` and
    ``head_object`` (``None``); every other failure raises ``StorageError``.
    """

    @abstractmethod
    def get_object(self, key: str) -> StorageObject | None:
        """Download content by key, or return None if it does not exist."""

    @abstractmethod
    def head_object(self, key: str) -> ObjectMetadata | None:
        """Fetch object metadata only, or return None if it does not exist."""

    @abstractmethod
    def put_object(self, key: str, content: bytes, content_type: str) -> None:
        """Upload content under key, replacing any existing object."""

    @abstractmethod
    def delete_object(self, key: str) -> None:
        """Delete a single object. No-op if the key doesn't exist."""

    @abstractmethod
    def delete_objects(self, keys: Iterable[str], quiet: bool = True) -> list[str]:
        """Delete a batch of keys in one request.

        Returns the keys the backend reported as failed. In quiet mode
        these are not raised.
        """

    @abstractmethod
    def list_objects(self, prefix: str) -> Iterator[ObjectSummary]:
        """Lazily yield every object under prefix, page by page."""

    def check_access(self) -> None:
        """Verify that the configured bucket is reachable. Override if needed."""

    def close(self) -> None:
        """Release pooled connections. Override if needed."""

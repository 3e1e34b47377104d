"""Object storage capability used by the tile blob store."""

from .base import ObjectMetadata, ObjectStorageClient, ObjectSummary, StorageObject
from .exceptions import (
    StorageConnectionError,
    StorageError,
    StorageNotFoundError,
    StoragePermissionError,
    StoreClosedError,
)
from .factory import create_storage_client

__all__ = [
    "ObjectMetadata",
    "ObjectStorageClient",
    "ObjectSummary",
    "StorageObject",
    "StorageError",
    "StorageNotFoundError",
    "StoragePermissionError",
    "StorageConnectionError",
    "StoreClosedError",
    "create_storage_client",
]

"""Tile cache blob store on S3-compatible object storage."""

from .blob_store import ClearNotAllowedError, S3BlobStore
from .bulk_delete import BulkDeleter
from .config import BlobStoreConfig
from .key_builder import LAYER_METADATA_OBJECT_NAME, TMSKeyBuilder
from .listeners import BlobStoreListener, BlobStoreListenerList
from .storage import (
    StorageConnectionError,
    StorageError,
    StoragePermissionError,
    StoreClosedError,
)
from .tile import TileObject, TileRange

__all__ = [
    "S3BlobStore",
    "BlobStoreConfig",
    "BulkDeleter",
    "TMSKeyBuilder",
    "LAYER_METADATA_OBJECT_NAME",
    "BlobStoreListener",
    "BlobStoreListenerList",
    "TileObject",
    "TileRange",
    "StorageError",
    "StoragePermissionError",
    "StorageConnectionError",
    "StoreClosedError",
    "ClearNotAllowedError",
]

"""
S3-backed tile blob store.

Tiles are stored one object per tile under the key layout produced by
:class:`~tile_blobstore.key_builder.TMSKeyBuilder`. Per-layer metadata lives
in a single properties object next to the layer's gridset directories.
"""

import logging
from typing import Optional

from . import properties
from .bulk_delete import BulkDeleter
from .config import BlobStoreConfig
from .key_builder import TMSKeyBuilder
from .listeners import BlobStoreListener, BlobStoreListenerList
from .storage.base import ObjectStorageClient
from .storage.exceptions import StorageError, StoreClosedError
from .storage.factory import create_storage_client
from .tile import TileObject, TileRange

logger = logging.getLogger(__name__)

METADATA_CONTENT_TYPE = "text/plain"


class ClearNotAllowedError(RuntimeError):
    """Raised when clearing the whole store is requested.

    The bucket may host other logical stores under different prefixes.
    """


class S3BlobStore:
    """
    Tile store on S3-compatible object storage.

    Operations are synchronous and may be called from several threads at
    once. Nothing serializes operations on the same key: concurrent writers
    get last-writer-wins, and the existence check in :meth:`put` may race
    with a concurrent delete, in which case ``tile_stored`` is sent where
    ``tile_updated`` would have been accurate.
    """

    def __init__(
        self,
        config: BlobStoreConfig,
        client: Optional[ObjectStorageClient] = None,
    ):
        """
        Initialize the store.

        Args:
            config: Store configuration
            client: Optional pre-configured storage client. Built from
                ``config`` when omitted.

        Raises:
            ValueError: If the bucket cannot be accessed.
        """
        self.config = config
        self.bucket_name = config.bucket
        self.key_builder = TMSKeyBuilder(config.prefix)
        self.listeners = BlobStoreListenerList()
        self._client: Optional[ObjectStorageClient] = (
            client if client is not None else create_storage_client(config)
        )

        if config.check_bucket_access:
            try:
                self._client.check_access()
            except StorageError as e:
                self._client.close()
                raise ValueError(f"Unable to access bucket '{self.bucket_name}': {e}") from e

        logger.info(
            "S3BlobStore initialized. Bucket: %s, Prefix: %s",
            self.bucket_name,
            self.key_builder.prefix or "(none)",
        )

    @property
    def client(self) -> ObjectStorageClient:
        if self._client is None:
            raise StoreClosedError(f"Blob store on bucket '{self.bucket_name}' has been destroyed")
        return self._client

    def destroy(self) -> None:
        """Release the storage client's connection pool. Later calls are no-ops."""
        if self._client is None:
            return
        client, self._client = self._client, None
        client.close()
        logger.info("S3BlobStore destroyed. Bucket: %s", self.bucket_name)

    def add_listener(self, listener: BlobStoreListener) -> None:
        self.listeners.add_listener(listener)

    def remove_listener(self, listener: BlobStoreListener) -> bool:
        return self.listeners.remove_listener(listener)

    def put(self, tile: TileObject) -> None:
        """Store a tile's blob, then notify listeners.

        Raises:
            ValueError: If the tile has no blob or no format.
            StorageError: If the existence check or the write fails.
        """
        if tile.blob is None:
            raise ValueError("Tile blob is required")
        if tile.blob_format is None:
            raise ValueError("Tile format is required")

        client = self.client
        key = self.key_builder.for_tile(tile)

        # existence only matters to pick between stored and updated
        old = None if self.listeners.is_empty() else client.head_object(key)

        logger.debug("Storing %s", key)
        client.put_object(key, tile.blob, tile.blob_format)
        tile.blob_size = len(tile.blob)

        if not self.listeners.is_empty():
            if old is not None:
                self.listeners.send_tile_updated(tile, old.size)
            else:
                self.listeners.send_tile_stored(tile)

    def get(self, tile: TileObject) -> bool:
        """Fill in a tile's blob from storage. Returns False if it is not cached."""
        key = self.key_builder.for_tile(tile)
        obj = self.client.get_object(key)
        if obj is None:
            return False
        tile.blob = obj.content
        tile.blob_size = obj.size
        if obj.last_modified is not None:
            tile.created = int(obj.last_modified.timestamp() * 1000)
        return True

    def delete(self, tile: TileObject) -> bool:
        """Delete one tile. Returns False if it was not stored."""
        client = self.client
        key = self.key_builder.for_tile(tile)
        old = client.head_object(key)
        if old is None:
            return False

        client.delete_object(key)
        tile.blob_size = old.size
        self.listeners.send_tile_deleted(tile)
        return True

    def delete_layer(self, layer_name: str) -> bool:
        """Delete every tile of a layer and its metadata.

        A layer exists if it has at least one tile or a metadata object.
        Returns whether it existed.
        """
        client = self.client
        prefix = self.key_builder.for_layer(layer_name)
        tile_count = BulkDeleter(client).delete_under_prefix(prefix)
        metadata_key = self.key_builder.layer_metadata(layer_name)

        if tile_count > 0:
            layer_existed = True
        else:
            layer_existed = client.head_object(metadata_key) is not None

        if layer_existed:
            client.delete_object(metadata_key)
            logger.info("Deleted layer %s (%d tiles)", layer_name, tile_count)
            self.listeners.send_layer_deleted(layer_name)
        return layer_existed

    def delete_by_gridset_id(self, layer_name: str, gridset_id: str) -> bool:
        """Delete every tile of a layer on one gridset. Returns whether any existed."""
        prefix = self.key_builder.for_gridset(layer_name, gridset_id)
        tile_count = BulkDeleter(self.client).delete_under_prefix(prefix)
        if tile_count > 0:
            logger.info(
                "Deleted gridset %s of layer %s (%d tiles)", gridset_id, layer_name, tile_count
            )
            self.listeners.send_gridset_deleted(layer_name, gridset_id)
        return tile_count > 0

    def delete_range(self, tile_range: TileRange) -> bool:
        raise NotImplementedError("Tile range deletion is not supported by S3BlobStore")

    def rename(self, old_layer_name: str, new_layer_name: str) -> bool:
        raise NotImplementedError("Layer rename is not supported by S3BlobStore")

    def clear(self) -> None:
        raise ClearNotAllowedError(
            f"clear() must not be called on S3BlobStore (bucket '{self.bucket_name}')"
        )

    def get_layer_metadata(self, layer_name: str, key: str) -> Optional[str]:
        """Return one metadata value of a layer, or None if unset."""
        return self._load_layer_metadata(layer_name).get(key)

    def put_layer_metadata(self, layer_name: str, key: str, value: str) -> None:
        """Set one metadata value of a layer.

        The layer's whole metadata object is read, updated and rewritten;
        concurrent writers to the same layer may lose updates.
        """
        if not isinstance(key, str) or not isinstance(value, str):
            raise ValueError("Layer metadata keys and values must be strings")
        metadata = self._load_layer_metadata(layer_name)
        metadata[key] = value
        resource_key = self.key_builder.layer_metadata(layer_name)
        self.client.put_object(resource_key, properties.dumps(metadata), METADATA_CONTENT_TYPE)

    def _load_layer_metadata(self, layer_name: str) -> dict:
        obj = self.client.get_object(self.key_builder.layer_metadata(layer_name))
        return properties.loads(obj.content if obj is not None else None)

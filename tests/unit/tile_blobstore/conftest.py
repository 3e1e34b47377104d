"""Shared fixtures for tile blob store tests."""

from collections.abc import Iterable, Iterator
from datetime import datetime, timezone

import pytest

from tile_blobstore.blob_store import S3BlobStore
from tile_blobstore.config import BlobStoreConfig
from tile_blobstore.listeners import BlobStoreListener
from tile_blobstore.storage.base import (
    ObjectMetadata,
    ObjectStorageClient,
    ObjectSummary,
    StorageObject,
)
from tile_blobstore.tile import TileObject

LAST_MODIFIED = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


class InMemoryStorageClient(ObjectStorageClient):
    """Dict-backed storage client that records batch deletes."""

    def __init__(self):
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.delete_batches: list[list[str]] = []
        self.head_calls: list[str] = []
        self.close_calls = 0

    def get_object(self, key: str) -> StorageObject | None:
        if key not in self.objects:
            return None
        content, content_type = self.objects[key]
        return StorageObject(content=content, content_type=content_type, last_modified=LAST_MODIFIED)

    def head_object(self, key: str) -> ObjectMetadata | None:
        self.head_calls.append(key)
        if key not in self.objects:
            return None
        content, content_type = self.objects[key]
        return ObjectMetadata(key=key, size=len(content), last_modified=LAST_MODIFIED, content_type=content_type)

    def put_object(self, key: str, content: bytes, content_type: str) -> None:
        self.objects[key] = (content, content_type)

    def delete_object(self, key: str) -> None:
        self.objects.pop(key, None)

    def delete_objects(self, keys: Iterable[str], quiet: bool = True) -> list[str]:
        keys = list(keys)
        self.delete_batches.append(keys)
        for key in keys:
            self.objects.pop(key, None)
        return []

    def list_objects(self, prefix: str) -> Iterator[ObjectSummary]:
        for key in sorted(self.objects):
            if key.startswith(prefix):
                yield ObjectSummary(key=key, size=len(self.objects[key][0]))

    def close(self) -> None:
        self.close_calls += 1


class RecordingListener(BlobStoreListener):
    def __init__(self):
        self.events: list[tuple] = []

    def tile_stored(self, tile):
        self.events.append(("stored", tile.xyz))

    def tile_updated(self, tile, old_size):
        self.events.append(("updated", tile.xyz, old_size))

    def tile_deleted(self, tile):
        self.events.append(("deleted", tile.xyz, tile.blob_size))

    def layer_deleted(self, layer_name):
        self.events.append(("layer_deleted", layer_name))

    def gridset_deleted(self, layer_name, gridset_id):
        self.events.append(("gridset_deleted", layer_name, gridset_id))


def make_tile(xyz=(1, 2, 3), blob: bytes | None = b"tile-bytes", layer="topp:states", gridset="EPSG:4326"):
    if blob is None:
        return TileObject.query(layer, gridset, xyz, "image/png")
    return TileObject.complete(layer, gridset, xyz, "image/png", blob)


@pytest.fixture()
def memory_client():
    return InMemoryStorageClient()


@pytest.fixture()
def store(memory_client):
    config = BlobStoreConfig(bucket="tiles", prefix="gwc", check_bucket_access=False)
    return S3BlobStore(config, client=memory_client)


@pytest.fixture()
def listener(store):
    recording = RecordingListener()
    store.add_listener(recording)
    return recording


@pytest.fixture()
def tile_factory():
    return make_tile

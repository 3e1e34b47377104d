"""Prefix-scoped bulk deletion of tile objects."""

import logging
from collections.abc import Iterable, Iterator
from itertools import islice

from .key_builder import TMSKeyBuilder
from .storage.base import ObjectStorageClient, ObjectSummary

log = logging.getLogger(__name__)

MAX_BATCH_SIZE = 1000


def _partition(objects: Iterable[ObjectSummary], size: int) -> Iterator[list[ObjectSummary]]:
    it = iter(objects)
    while batch := list(islice(it, size)):
        yield batch


class BulkDeleter:
    """Deletes every tile under a key prefix in batched, quiet requests.

    Layer metadata objects are never removed here; callers delete them
    explicitly when a whole layer goes away.
    """

    def __init__(self, client: ObjectStorageClient, batch_size: int = MAX_BATCH_SIZE):
        if not 1 <= batch_size <= MAX_BATCH_SIZE:
            raise ValueError(f"batch_size must be between 1 and {MAX_BATCH_SIZE}")
        self._client = client
        self._batch_size = batch_size

    def delete_under_prefix(self, prefix: str) -> int:
        """Delete all tiles under prefix and return how many keys were submitted."""
        count = 0
        batches = 0
        for batch in _partition(self._client.list_objects(prefix), self._batch_size):
            keys = [obj.key for obj in batch if not TMSKeyBuilder.is_layer_metadata(obj.key)]
            if not keys:
                continue
            failed = self._client.delete_objects(keys, quiet=True)
            if failed:
                log.warning(
                    "Bulk delete under %s: %d of %d keys not deleted (first: %s)",
                    prefix,
                    len(failed),
                    len(keys),
                    failed[0],
                )
            count += len(keys)
            batches += 1
            log.debug("Bulk delete under %s: batch %d, %d keys", prefix, batches, len(keys))
        return count

"""Change notification for tile stores.

Observers subclass :class:`BlobStoreListener` and override the events they
care about. A store owns one :class:`BlobStoreListenerList` and calls its
``send_*`` methods after each successful mutation.
"""

import threading
from typing import Tuple

from .tile import TileObject


class BlobStoreListener:
    """Receives tile store events. Every hook is a no-op by default."""

    def tile_stored(self, tile: TileObject) -> None:
        pass

    def tile_updated(self, tile: TileObject, old_size: int) -> None:
        pass

    def tile_deleted(self, tile: TileObject) -> None:
        pass

    def layer_deleted(self, layer_name: str) -> None:
        pass

    def gridset_deleted(self, layer_name: str, gridset_id: str) -> None:
        pass


class BlobStoreListenerList:
    """Ordered set of listeners, dispatched synchronously on the caller's thread.

    Listener exceptions are not caught. Registration swaps in a new tuple
    under a lock, so dispatch always iterates over a stable snapshot.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._listeners: Tuple[BlobStoreListener, ...] = ()

    def add_listener(self, listener: BlobStoreListener) -> None:
        with self._lock:
            self._listeners = self._listeners + (listener,)

    def remove_listener(self, listener: BlobStoreListener) -> bool:
        """Remove a listener. Returns False if it was not registered."""
        with self._lock:
            for i, registered in enumerate(self._listeners):
                if registered is listener:
                    self._listeners = self._listeners[:i] + self._listeners[i + 1:]
                    return True
        return False

    def is_empty(self) -> bool:
        return not self._listeners

    def __len__(self) -> int:
        return len(self._listeners)

    def send_tile_stored(self, tile: TileObject) -> None:
        for listener in self._listeners:
            listener.tile_stored(tile)

    def send_tile_updated(self, tile: TileObject, old_size: int) -> None:
        for listener in self._listeners:
            listener.tile_updated(tile, old_size)

    def send_tile_deleted(self, tile: TileObject) -> None:
        for listener in self._listeners:
            listener.tile_deleted(tile)

    def send_layer_deleted(self, layer_name: str) -> None:
        for listener in self._listeners:
            listener.layer_deleted(layer_name)

    def send_gridset_deleted(self, layer_name: str, gridset_id: str) -> None:
        for listener in self._listeners:
            listener.gridset_deleted(layer_name, gridset_id)

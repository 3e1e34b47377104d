"""Unit tests for the listener dispatcher."""

from unittest.mock import MagicMock

import pytest

from tile_blobstore.listeners import BlobStoreListener, BlobStoreListenerList
from tile_blobstore.tile import TileObject


@pytest.fixture()
def tile():
    return TileObject.complete("layer", "EPSG:4326", (0, 0, 0), "image/png", b"x")


class TestRegistration:
    def test_new_list_is_empty(self):
        assert BlobStoreListenerList().is_empty()

    def test_add_and_remove(self):
        listeners = BlobStoreListenerList()
        listener = BlobStoreListener()
        listeners.add_listener(listener)
        assert len(listeners) == 1

        assert listeners.remove_listener(listener) is True
        assert listeners.is_empty()

    def test_remove_unregistered_returns_false(self):
        assert BlobStoreListenerList().remove_listener(BlobStoreListener()) is False


class TestDispatch:
    def test_calls_listeners_in_registration_order(self, tile):
        calls = []

        class Named(BlobStoreListener):
            def __init__(self, name):
                self.name = name

            def tile_stored(self, tile):
                calls.append(self.name)

        listeners = BlobStoreListenerList()
        for name in ["first", "second", "third"]:
            listeners.add_listener(Named(name))

        listeners.send_tile_stored(tile)
        assert calls == ["first", "second", "third"]

    def test_forwards_event_arguments(self, tile):
        listener = MagicMock(spec=BlobStoreListener)
        listeners = BlobStoreListenerList()
        listeners.add_listener(listener)

        listeners.send_tile_updated(tile, 42)
        listeners.send_tile_deleted(tile)
        listeners.send_layer_deleted("layer")
        listeners.send_gridset_deleted("layer", "EPSG:4326")

        listener.tile_updated.assert_called_once_with(tile, 42)
        listener.tile_deleted.assert_called_once_with(tile)
        listener.layer_deleted.assert_called_once_with("layer")
        listener.gridset_deleted.assert_called_once_with("layer", "EPSG:4326")

    def test_listener_errors_propagate(self, tile):
        listener = MagicMock(spec=BlobStoreListener)
        listener.tile_deleted.side_effect = RuntimeError("listener failed")
        listeners = BlobStoreListenerList()
        listeners.add_listener(listener)

        with pytest.raises(RuntimeError, match="listener failed"):
            listeners.send_tile_deleted(tile)

    def test_default_hooks_are_noops(self, tile):
        listeners = BlobStoreListenerList()
        listeners.add_listener(BlobStoreListener())
        listeners.send_tile_stored(tile)
        listeners.send_layer_deleted("layer")

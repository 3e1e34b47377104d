"""Tile addressing and payload model."""

import hashlib
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple
from urllib.parse import urlencode


def parameters_id(parameters: Optional[Dict[str, str]]) -> Optional[str]:
    """Return the SHA-1 id of a set of request parameters, or None if empty."""
    if not parameters:
        return None
    canonical = urlencode(sorted(parameters.items()))
    return hashlib.sha1(canonical.encode("utf-8")).hexdigest()


@dataclass
class TileObject:
    """A single tile: its coordinates plus, once stored or fetched, its blob."""

    layer_name: str
    gridset_id: str
    x: int
    y: int
    z: int
    blob_format: Optional[str]
    parameters: Dict[str, str] = field(default_factory=dict)
    blob: Optional[bytes] = None
    blob_size: int = 0
    created: int = 0

    @classmethod
    def query(
        cls,
        layer_name: str,
        gridset_id: str,
        xyz: Tuple[int, int, int],
        blob_format: Optional[str] = None,
        parameters: Optional[Dict[str, str]] = None,
    ) -> "TileObject":
        """Build a tile to look up or delete."""
        x, y, z = xyz
        return cls(layer_name, gridset_id, x, y, z, blob_format, dict(parameters or {}))

    @classmethod
    def complete(
        cls,
        layer_name: str,
        gridset_id: str,
        xyz: Tuple[int, int, int],
        blob_format: str,
        blob: bytes,
        parameters: Optional[Dict[str, str]] = None,
    ) -> "TileObject":
        """Build a tile ready to be stored."""
        tile = cls.query(layer_name, gridset_id, xyz, blob_format, parameters)
        tile.blob = blob
        tile.blob_size = len(blob)
        return tile

    @property
    def xyz(self) -> Tuple[int, int, int]:
        return (self.x, self.y, self.z)

    @property
    def parameters_id(self) -> Optional[str]:
        return parameters_id(self.parameters)


@dataclass(frozen=True)
class TileRange:
    """A rectangular block of tiles across zoom levels of one layer and gridset."""

    layer_name: str
    gridset_id: str
    zoom_start: int
    zoom_stop: int
    blob_format: str
    parameters: Dict[str, str] = field(default_factory=dict)

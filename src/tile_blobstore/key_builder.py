"""
Object key layout for tiles and layer metadata.

Keys follow a TMS-like hierarchy under the store's root prefix:

    {prefix}/{layer}/{gridset}/{format}/{parameters_id}/{z}/{x}/{y}.{ext}
    {prefix}/{layer}/metadata.properties

Layer names, gridset ids and unknown formats are percent-encoded so a
segment never contains the separator.
"""

from urllib.parse import quote

from .tile import TileObject

LAYER_METADATA_OBJECT_NAME = "metadata.properties"
DEFAULT_PARAMETERS_ID = "default"

# (format id, file extension) for the MIME types tile servers commonly cache
_KNOWN_FORMATS = {
    "image/png": ("png", "png"),
    "image/png; mode=8bit": ("png8", "png"),
    "image/png; mode=24bit": ("png24", "png"),
    "image/jpeg": ("jpeg", "jpeg"),
    "image/vnd.jpeg-png": ("jpeg-png", "jpeg"),
    "image/vnd.jpeg-png8": ("jpeg-png8", "jpeg"),
    "image/gif": ("gif", "gif"),
    "image/tiff": ("tiff", "tiff"),
    "image/webp": ("webp", "webp"),
    "image/svg+xml": ("svg", "svg"),
    "application/vnd.mapbox-vector-tile": ("pbf", "pbf"),
    "application/json;type=geojson": ("geojson", "geojson"),
    "application/json;type=topojson": ("topojson", "topojson"),
    "application/json;type=utfgrid": ("utfgrid", "json"),
    "application/vnd.google-earth.kml+xml": ("kml", "kml"),
}


def _segment(value: str, what: str) -> str:
    if not value:
        raise ValueError(f"{what} cannot be empty")
    return quote(value, safe="")


def _format_segment(blob_format: str | None) -> tuple[str, str]:
    """Return (key segment, file extension) for a tile format."""
    if not blob_format:
        raise ValueError("Tile format is required to build a key")
    known = _KNOWN_FORMATS.get(blob_format)
    if known:
        return known
    if "/" not in blob_format:
        raise ValueError(f"Unknown tile format {blob_format!r}: expected a MIME type")
    return quote(blob_format, safe=""), "bin"


class TMSKeyBuilder:
    """Builds object keys for one logical store rooted at ``prefix``."""

    def __init__(self, prefix: str = ""):
        self.prefix = prefix.strip("/")

    def _join(self, *segments: str) -> str:
        if self.prefix:
            return "/".join((self.prefix,) + segments)
        return "/".join(segments)

    def for_tile(self, tile: TileObject) -> str:
        layer = _segment(tile.layer_name, "Layer name")
        gridset = _segment(tile.gridset_id, "Gridset id")
        format_id, extension = _format_segment(tile.blob_format)
        params = tile.parameters_id or DEFAULT_PARAMETERS_ID
        return self._join(
            layer,
            gridset,
            format_id,
            params,
            str(int(tile.z)),
            str(int(tile.x)),
            f"{int(tile.y)}.{extension}",
        )

    def for_layer(self, layer_name: str) -> str:
        return self._join(_segment(layer_name, "Layer name"), "")

    def for_gridset(self, layer_name: str, gridset_id: str) -> str:
        return self._join(
            _segment(layer_name, "Layer name"),
            _segment(gridset_id, "Gridset id"),
            "",
        )

    def layer_metadata(self, layer_name: str) -> str:
        return self._join(_segment(layer_name, "Layer name"), LAYER_METADATA_OBJECT_NAME)

    @staticmethod
    def is_layer_metadata(key: str) -> bool:
        """True if the key's trailing segment is the reserved metadata name."""
        return key.rsplit("/", 1)[-1] == LAYER_METADATA_OBJECT_NAME

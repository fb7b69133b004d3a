"""
TMX Loader - reads Tiled TMX maps into an immutable map model

Requisitos:
    pip install numpy glfw
"""

from .config import LoaderConfig
from .diagnostics import DiagnosticKind, Diagnostics
from .errors import (
    DocumentParseFailure, IOFailure, MalformedAttribute,
    MalformedTileData, TmxError, UnsupportedEncoding,
)
from .loader import TmxLoader, load_map, load_map_from_stream
from .map import MapBuilder, MapObject, TiledMap, TileLayer, Tileset

__version__ = "1.0.0"
__all__ = [
    "TmxLoader",
    "load_map",
    "load_map_from_stream",
    "LoaderConfig",
    "DiagnosticKind",
    "Diagnostics",
    "TiledMap",
    "TileLayer",
    "Tileset",
    "MapObject",
    "MapBuilder",
    "TmxError",
    "MalformedAttribute",
    "UnsupportedEncoding",
    "MalformedTileData",
    "DocumentParseFailure",
    "IOFailure",
]

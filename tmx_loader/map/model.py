"""
In-memory model of a loaded TMX map

=============================================================================
WHAT A MAP HOLDS
=============================================================================

    TiledMap
    ├── width, height            grid size in tiles
    ├── tilewidth, tileheight    tile size in pixels
    ├── tilesets                 Tileset(source, firstgid), document order
    ├── layers                   TileLayer(name, width, height, tiles)
    └── objects                  MapObject(...) from every <objectgroup>

Everything is frozen once built. Sequences are tuples, property maps are
read-only mappings and tile grids are read-only numpy arrays, so a map can be
shared freely between rendering, collision and scripting code.

=============================================================================
GLOBAL TILE IDs (GIDs)
=============================================================================

Layer cells hold Global IDs across all tilesets:

    Tileset A (firstgid=1):   tiles 1-100
    Tileset B (firstgid=101): tiles 101-200

    GID 0   = empty tile
    GID 150 = tile 49 of tileset B (150 - 101)

get_tileset_for_gid() finds the owning tileset; nothing else in the loader
interprets GIDs.

=============================================================================
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

import numpy as np

from ..errors import MalformedTileData


@dataclass(frozen=True)
class Tileset:
    """Reference to a tileset and where its tiles start in GID space."""
    source: str                          # Path/name of the tileset (TSX or image)
    firstgid: int                        # First Global ID

    def __post_init__(self):
        if self.firstgid < 0:
            raise ValueError(f"firstgid must be non-negative, got {self.firstgid}")


@dataclass(frozen=True, eq=False)
class TileLayer:
    """
    Tile layer - a grid of tile references.

    tiles is a read-only uint32 array of shape (height, width), indexed as
    tiles[row, column].
    """
    name: str                            # Layer name
    width: int                           # Width in tiles
    height: int                          # Height in tiles
    tiles: np.ndarray                    # GIDs, row-major

    def __post_init__(self):
        if tuple(self.tiles.shape) != (self.height, self.width):
            raise MalformedTileData(
                f"Layer '{self.name}' grid has shape {self.tiles.shape}, "
                f"expected ({self.height}, {self.width})"
            )
        if self.tiles.flags.writeable or self.tiles.dtype != np.uint32:
            grid = self.tiles.astype(np.uint32)
            grid.setflags(write=False)
            object.__setattr__(self, 'tiles', grid)

    def get_tile_gid(self, x: int, y: int) -> int:
        """
        Get the GID of the tile at column x, row y.

        Out of bounds positions are empty (0).
        """
        if 0 <= x < self.width and 0 <= y < self.height:
            return int(self.tiles[y, x])
        return 0

    def tolist(self) -> List[List[int]]:
        """Grid as nested lists, one list per row."""
        return self.tiles.tolist()


@dataclass(frozen=True)
class MapObject:
    """
    Object placed on an object layer.

    Points have width and height 0. Properties are plain strings keyed by
    property name.
    """
    id: int                                          # Object ID
    name: str = ""                                   # Object name
    type: str = ""                                   # Object type/class
    x: float = 0                                     # X position
    y: float = 0                                     # Y position
    width: float = 0                                 # Width (0 for points)
    height: float = 0                                # Height (0 for points)
    properties: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        if None in self.properties:
            raise ValueError(f"Object {self.id} has a property without a name")
        object.__setattr__(self, 'properties',
                           MappingProxyType(dict(self.properties)))


@dataclass(frozen=True)
class TiledMap:
    """
    Complete loaded map.

    Build it with MapBuilder; fields are never modified afterwards.
    """
    width: int                                       # Map width in tiles
    height: int                                      # Map height in tiles
    tilewidth: int                                   # Tile width in pixels
    tileheight: int                                  # Tile height in pixels
    layers: Tuple[TileLayer, ...] = ()
    tilesets: Tuple[Tileset, ...] = ()
    objects: Tuple[MapObject, ...] = ()

    def get_layer_by_name(self, name: str) -> Optional[TileLayer]:
        """First layer with this name, or None."""
        for layer in self.layers:
            if layer.name == name:
                return layer
        return None

    def get_tileset_for_gid(self, gid: int) -> Optional[Tileset]:
        """
        Find which tileset contains a given GID.

        A GID belongs to the tileset with the largest firstgid <= gid.
        GID 0 (empty) belongs to none.
        """
        if gid <= 0:
            return None
        candidates = [ts for ts in self.tilesets if ts.firstgid <= gid]
        if not candidates:
            return None
        return max(candidates, key=lambda ts: ts.firstgid)

    def get_objects_by_type(self, type_name: str) -> Tuple[MapObject, ...]:
        return tuple(obj for obj in self.objects if obj.type == type_name)


class MapBuilder:
    """
    Collects map fields during a parse and produces a frozen TiledMap.

        tiled_map = (MapBuilder()
                     .set_width(20).set_height(15)
                     .set_tile_width(32).set_tile_height(32)
                     .set_layers(layers)
                     .build())
    """

    def __init__(self):
        self._width: Optional[int] = None
        self._height: Optional[int] = None
        self._tile_width: Optional[int] = None
        self._tile_height: Optional[int] = None
        self._layers: List[TileLayer] = []
        self._tilesets: List[Tileset] = []
        self._objects: List[MapObject] = []

    def set_width(self, width: int) -> 'MapBuilder':
        self._width = width
        return self

    def set_height(self, height: int) -> 'MapBuilder':
        self._height = height
        return self

    def set_tile_width(self, tile_width: int) -> 'MapBuilder':
        self._tile_width = tile_width
        return self

    def set_tile_height(self, tile_height: int) -> 'MapBuilder':
        self._tile_height = tile_height
        return self

    def set_layers(self, layers) -> 'MapBuilder':
        self._layers = list(layers)
        return self

    def set_tilesets(self, tilesets) -> 'MapBuilder':
        self._tilesets = list(tilesets)
        return self

    def set_objects(self, objects) -> 'MapBuilder':
        self._objects = list(objects)
        return self

    def add_layer(self, layer: TileLayer) -> 'MapBuilder':
        self._layers.append(layer)
        return self

    def add_tileset(self, tileset: Tileset) -> 'MapBuilder':
        self._tilesets.append(tileset)
        return self

    def add_object(self, obj: MapObject) -> 'MapBuilder':
        self._objects.append(obj)
        return self

    def build(self) -> TiledMap:
        """
        Freeze the collected fields into a TiledMap.

        Raises ValueError if a dimension was never set.
        """
        dimensions = {
            'width': self._width,
            'height': self._height,
            'tilewidth': self._tile_width,
            'tileheight': self._tile_height,
        }
        missing = [name for name, value in dimensions.items() if value is None]
        if missing:
            raise ValueError(f"MapBuilder is missing: {', '.join(missing)}")

        return TiledMap(
            layers=tuple(self._layers),
            tilesets=tuple(self._tilesets),
            objects=tuple(self._objects),
            **dimensions
        )

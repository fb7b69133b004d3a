"""Builds a TiledMap from a parsed TMX document"""

from typing import Optional

from .attributes import read_int
from .diagnostics import Diagnostics
from .document import Node
from .errors import DocumentParseFailure
from .map.model import MapBuilder, TiledMap
from .sections import parse_layers, parse_object_groups, parse_tilesets


def assemble_map(root: Node, diagnostics: Optional[Diagnostics] = None) -> TiledMap:
    """
    Read the <map> attributes, run the section parsers and build the map.

    Any exception raised here means the document can't be loaded.
    """
    diagnostics = diagnostics or Diagnostics()

    if root.tag != 'map':
        raise DocumentParseFailure(f"Root element is <{root.tag}>, expected <map>")

    # parse map attributes
    map_width = read_int(root, 'width')
    map_height = read_int(root, 'height')
    tile_width = read_int(root, 'tilewidth')
    tile_height = read_int(root, 'tileheight')

    tilesets = parse_tilesets(root, diagnostics)
    layers = parse_layers(root, diagnostics)
    objects = parse_object_groups(root, diagnostics)

    return (MapBuilder()
            .set_width(map_width)
            .set_height(map_height)
            .set_tile_width(tile_width)
            .set_tile_height(tile_height)
            .set_layers(layers)
            .set_tilesets(tilesets)
            .set_objects(objects)
            .build())

"""
Section parsers for TMX documents

Each parser scans the whole document for one kind of repeating element and
returns the records it found, in document order:

    parse_tilesets       <tileset>                 -> [Tileset]
    parse_layers         <layer><data/></layer>    -> [TileLayer]
    parse_object_groups  <objectgroup><object/>    -> [MapObject]

Descendants are searched, not just children of <map>, so layers and object
groups inside <group> folders are picked up as well. The parsers only read
the tree and keep no state; they can run in any order.
"""

from typing import Dict, List, Optional

from .attributes import read_float, read_int, read_optional_float, read_str
from .diagnostics import DiagnosticKind, Diagnostics
from .document import Node
from .errors import MalformedAttribute, MalformedTileData, UnsupportedEncoding
from .map.model import MapObject, TileLayer, Tileset
from .tile_data import decode_tile_data


def parse_tilesets(root: Node, diagnostics: Optional[Diagnostics] = None) -> List[Tileset]:
    """
    Collect tileset references.

    A missing or invalid firstgid raises MalformedAttribute, which aborts the
    whole load.
    """
    diagnostics = diagnostics or Diagnostics()
    tilesets = []

    for tileset_elem in root.iter('tileset'):
        source = read_str(tileset_elem, 'source')
        firstgid = read_int(tileset_elem, 'firstgid')
        if firstgid < 0:
            raise MalformedAttribute('tileset', 'firstgid', tileset_elem.get('firstgid'))

        tilesets.append(Tileset(source=source, firstgid=firstgid))
        diagnostics.emit(DiagnosticKind.TILESET_LOADED,
                         "Loaded tileset: %s (firstgid: %d)", source, firstgid)

    return tilesets


def parse_layers(root: Node, diagnostics: Optional[Diagnostics] = None) -> List[TileLayer]:
    """
    Collect tile layers, decoding each layer's <data> payload.

    Layers with an unsupported encoding are skipped. Malformed tile data
    raises MalformedTileData.
    """
    diagnostics = diagnostics or Diagnostics()
    layers = []

    for layer_elem in root.iter('layer'):
        name = read_str(layer_elem, 'name')
        width = read_int(layer_elem, 'width')
        height = read_int(layer_elem, 'height')

        data_elem = layer_elem.find('data')
        if data_elem is None:
            raise MalformedTileData(f"Layer '{name}' has no <data> element")

        try:
            tiles = decode_tile_data(
                data_elem.get('encoding'),
                data_elem.text,
                width,
                height,
                compression=data_elem.get('compression'),
            )
        except UnsupportedEncoding as exc:
            diagnostics.emit(DiagnosticKind.UNSUPPORTED_ENCODING,
                             "Unsupported encoding %r in layer '%s', skipping layer",
                             exc.encoding, name)
            continue

        layers.append(TileLayer(name=name, width=width, height=height, tiles=tiles))
        diagnostics.emit(DiagnosticKind.LAYER_LOADED,
                         "Loaded layer: %s (%dx%d)", name, width, height)

    return layers


def parse_object_groups(root: Node, diagnostics: Optional[Diagnostics] = None) -> List[MapObject]:
    """Collect the objects of every object group into one flat list."""
    diagnostics = diagnostics or Diagnostics()
    objects = []

    for group_elem in root.iter('objectgroup'):
        count = 0
        for obj_elem in group_elem.iter('object'):
            objects.append(parse_object(obj_elem))
            count += 1

        diagnostics.emit(DiagnosticKind.OBJECT_GROUP_LOADED,
                         "Loaded object group '%s' with %d objects",
                         read_str(group_elem, 'name'), count)

    return objects


def parse_object(obj_elem: Node) -> MapObject:
    """
    Parse a single <object> element.

    XML format:
        <object id="3" name="door" type="trigger" x="64" y="96" width="32" height="32">
            <properties>
                <property name="target" value="cellar"/>
            </properties>
        </object>
    """
    return MapObject(
        id=read_int(obj_elem, 'id'),
        name=read_str(obj_elem, 'name'),
        # Tiled 1.9+ writes "class" instead of "type"
        type=read_str(obj_elem, 'type') or read_str(obj_elem, 'class'),
        x=read_float(obj_elem, 'x'),
        y=read_float(obj_elem, 'y'),
        width=read_optional_float(obj_elem, 'width', 0.0),
        height=read_optional_float(obj_elem, 'height', 0.0),
        properties=parse_properties(obj_elem),
    )


def parse_properties(elem: Node) -> Dict[str, str]:
    """
    Gather the <property> children of elem's <properties> as name -> value
    strings. Members of class-typed properties are not flattened in.

    Multi-line string properties keep their value in the element text rather
    than a value attribute.
    """
    properties = {}
    props_elem = elem.find('properties')
    if props_elem is None:
        return properties
    for prop_elem in props_elem.findall('property'):
        name = prop_elem.get('name')
        if name is None:
            raise MalformedAttribute('property', 'name')
        value = prop_elem.get('value')
        if value is None:
            value = prop_elem.text or ''
        properties[name] = value
    return properties

#!/usr/bin/env python3

"""
TMX Loader - print a summary of a Tiled map

Usage:
    python -m tmx_loader <map.tmx> [-v]
"""

import argparse
import logging
import sys

from .loader import load_map
from .map.model import TiledMap


def format_summary(tiled_map: TiledMap) -> str:
    lines = [
        f"Map: {tiled_map.width}x{tiled_map.height} tiles "
        f"({tiled_map.tilewidth}x{tiled_map.tileheight} px)",
        f"Tilesets: {len(tiled_map.tilesets)}",
    ]
    for tileset in tiled_map.tilesets:
        lines.append(f"  - {tileset.source or '<embedded>'} (firstgid {tileset.firstgid})")
    lines.append(f"Layers: {len(tiled_map.layers)}")
    for layer in tiled_map.layers:
        used = int((layer.tiles != 0).sum())
        lines.append(f"  - {layer.name} {layer.width}x{layer.height}, {used} tiles used")
    lines.append(f"Objects: {len(tiled_map.objects)}")
    return "\n".join(lines)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="tmx_loader", description=__doc__.strip().splitlines()[0])
    parser.add_argument("map", help="TMX file to load")
    parser.add_argument("-v", "--verbose", action="store_true", help="log every loaded section")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    tiled_map = load_map(args.map)
    if tiled_map is None:
        print(f"Error: could not load '{args.map}'", file=sys.stderr)
        return 1

    print(format_summary(tiled_map))
    return 0


if __name__ == "__main__":
    sys.exit(main())

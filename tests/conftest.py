import base64
import pathlib
import struct
import sys
import zlib

import pytest

# Ensure project root is in sys.path
repo_root = pathlib.Path(__file__).parent.parent
sys.path.insert(0, str(repo_root))


def pack_gids(gids, compression=None):
    """Little-endian uint32 GIDs, optionally zlib compressed, as base64 text."""
    raw = struct.pack(f"<{len(gids)}I", *gids)
    if compression == "zlib":
        raw = zlib.compress(raw)
    return base64.b64encode(raw).decode("ascii")


def layer_xml(name, width, height, payload, encoding="csv", compression=None):
    compression_attr = f' compression="{compression}"' if compression else ""
    return (
        f'<layer id="1" name="{name}" width="{width}" height="{height}">'
        f'<data encoding="{encoding}"{compression_attr}>{payload}</data>'
        f'</layer>'
    )


def map_xml(*sections, width=2, height=2, tilewidth=32, tileheight=32):
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<map version="1.10" orientation="orthogonal" width="{width}" height="{height}" '
        f'tilewidth="{tilewidth}" tileheight="{tileheight}">'
        + "".join(sections)
        + "</map>"
    )


@pytest.fixture
def write_tmx(tmp_path):
    """Write TMX text to a temporary file and return its path."""
    def _write(content, name="map.tmx"):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def sample_tmx():
    return map_xml(
        '<tileset firstgid="1" source="terrain.tsx"/>',
        '<tileset firstgid="65" source="props.tsx"/>',
        layer_xml("ground", 2, 2, "\n1,2,\n3,4\n"),
        layer_xml("decor", 2, 2, pack_gids([0, 65, 66, 0]), encoding="base64"),
        '<objectgroup id="3" name="spawns">'
        '<object id="1" name="player" type="spawn" x="10.5" y="20.0"/>'
        '<object id="2" name="door" type="trigger" x="32" y="0" width="32" height="64">'
        '<properties>'
        '<property name="target" value="cellar"/>'
        '<property name="locked" type="bool" value="true"/>'
        '</properties>'
        '</object>'
        '</objectgroup>',
    )

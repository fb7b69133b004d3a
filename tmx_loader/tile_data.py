"""
Tile layer payload decoding

=============================================================================
DATA ENCODINGS
=============================================================================

A <layer> stores its grid of GIDs inside a <data> element. Two encodings of
the same logical content are understood here:

1. CSV:
   <data encoding="csv">
       1,2,
       3,4
   </data>
   Human-readable, one integer per cell.

2. Base64:
   <data encoding="base64">
       AQAAAAIAAAADAAAABAAAAA==
   </data>
   Each cell is a little-endian unsigned 32-bit integer; the packed bytes are
   then base64 encoded. Optionally the bytes are compressed (zlib or gzip)
   before encoding:
   <data encoding="base64" compression="zlib">eJz...</data>

Both produce the same grid for the same tiles. The tag is matched without
regard to case; anything else raises UnsupportedEncoding so the caller can
skip the layer.

=============================================================================
GRID LAYOUT
=============================================================================

Cells are stored row-major: the cell at column x, row y is element
y * width + x of the flat sequence. Decoded grids are numpy uint32 arrays of
shape (height, width), marked read-only.

=============================================================================
"""

import base64
import binascii
import gzip
import zlib
from enum import Enum
from typing import Optional

import numpy as np

from .errors import MalformedTileData, UnsupportedEncoding

# Largest GID a cell can hold (4 bytes per tile)
MAX_GID = 0xFFFFFFFF


class TileEncoding(Enum):
    CSV = "csv"
    BASE64 = "base64"

    @classmethod
    def from_tag(cls, tag: Optional[str]) -> 'TileEncoding':
        """Resolve an encoding attribute value, case-insensitively."""
        if tag is not None:
            for encoding in cls:
                if encoding.value == tag.strip().lower():
                    return encoding
        raise UnsupportedEncoding(tag)


class Compression(Enum):
    NONE = None
    ZLIB = "zlib"
    GZIP = "gzip"

    @classmethod
    def from_tag(cls, tag: Optional[str]) -> 'Compression':
        if tag is None or not tag.strip():
            return cls.NONE
        for compression in (cls.ZLIB, cls.GZIP):
            if compression.value == tag.strip().lower():
                return compression
        raise UnsupportedEncoding(f"base64+{tag}")


def _check_dimensions(width: int, height: int):
    if width < 0 or height < 0:
        raise MalformedTileData(f"Invalid layer dimensions {width}x{height}")


def _freeze(gids: np.ndarray, width: int, height: int) -> np.ndarray:
    grid = gids.astype(np.uint32).reshape(height, width)
    grid.setflags(write=False)
    return grid


def decode_csv(payload: str, width: int, height: int) -> np.ndarray:
    """
    Decode comma-separated GIDs into a (height, width) grid.

    Whitespace and newlines around each token are ignored. The number of
    tokens must be exactly width * height.
    """
    _check_dimensions(width, height)
    expected = width * height

    csv_data = payload.strip()
    tokens = csv_data.split(',') if csv_data else []
    if len(tokens) != expected:
        raise MalformedTileData(
            f"CSV tile data has {len(tokens)} values, expected {expected} "
            f"for a {width}x{height} layer"
        )

    gids = []
    for index, token in enumerate(tokens):
        gid_text = token.strip()
        if not (gid_text.isascii() and gid_text.isdigit()):
            raise MalformedTileData(f"Invalid tile id {gid_text!r} at index {index}")
        gid = int(gid_text)
        if not 0 <= gid <= MAX_GID:
            raise MalformedTileData(f"Tile id {gid} at index {index} out of range")
        gids.append(gid)

    return _freeze(np.array(gids, dtype=np.uint32), width, height)


def decode_base64(payload: str, width: int, height: int,
                  compression: Optional[str] = None) -> np.ndarray:
    """
    Decode base64 packed little-endian uint32 GIDs into a (height, width) grid.

    The decoded (and decompressed) buffer must hold exactly width * height
    four-byte values.
    """
    _check_dimensions(width, height)
    method = Compression.from_tag(compression)

    # Tiled wraps long payloads over several lines
    b64_data = ''.join(payload.split())
    try:
        raw_data = base64.b64decode(b64_data, validate=True)
    except binascii.Error as exc:
        raise MalformedTileData(f"Invalid base64 tile data: {exc}") from exc

    # -----------------------------------------------------------------
    # DECOMPRESSION (if compressed)
    # -----------------------------------------------------------------
    try:
        if method is Compression.ZLIB:
            raw_data = zlib.decompress(raw_data)
        elif method is Compression.GZIP:
            raw_data = gzip.decompress(raw_data)
    except (zlib.error, OSError, EOFError) as exc:
        raise MalformedTileData(
            f"Could not decompress {method.value} tile data: {exc}") from exc

    expected = width * height * 4
    if len(raw_data) != expected:
        raise MalformedTileData(
            f"Base64 tile data has {len(raw_data)} bytes, expected {expected} "
            f"for a {width}x{height} layer"
        )

    return _freeze(np.frombuffer(raw_data, dtype='<u4'), width, height)


def decode_tile_data(encoding: Optional[str], payload: Optional[str],
                     width: int, height: int,
                     compression: Optional[str] = None) -> np.ndarray:
    """
    Decode a <data> payload according to its encoding attribute.

    Raises:
    -------
    UnsupportedEncoding : encoding (or compression) not understood
    MalformedTileData : payload doesn't fit the declared dimensions
    """
    payload = payload or ''
    selected = TileEncoding.from_tag(encoding)

    if selected is TileEncoding.CSV:
        return decode_csv(payload, width, height)
    elif selected is TileEncoding.BASE64:
        return decode_base64(payload, width, height, compression)
    raise UnsupportedEncoding(encoding)

"""
Loading TMX maps from files and streams

=============================================================================
USAGE
=============================================================================

    from tmx_loader import load_map

    tiled_map = load_map("level1.tmx")
    if tiled_map is None:
        ...  # details are in the log

    ground = tiled_map.get_layer_by_name("ground")
    gid = ground.get_tile_gid(5, 10)

Loading never raises. A map is either returned complete or not at all: any
failure (unreadable file, bad XML, malformed attributes or tile data) is
logged and None is returned. The only tolerated problem is a layer with an
unsupported encoding, which is left out of the map.

=============================================================================
"""

import logging
from pathlib import Path
from typing import IO, Optional, Union

from .assembler import assemble_map
from .config import LoaderConfig
from .diagnostics import DiagnosticKind, DiagnosticSink, Diagnostics
from .document import parse_file, parse_stream
from .map.model import TiledMap

logger = logging.getLogger(__name__)


class TmxLoader:
    """
    Loads TiledMap objects from TMX files or streams.

    The loader holds only configuration, so one instance can be shared
    between threads.
    """

    def __init__(self, config: Optional[LoaderConfig] = None,
                 sink: Optional[DiagnosticSink] = None):
        self.config = config or LoaderConfig()
        self.diagnostics = Diagnostics(sink, logger)

    def load_from_tmx(self, file_path: Union[str, Path]) -> Optional[TiledMap]:
        """
        Load a map from a TMX file path.

        Returns None (and logs the reason) if the map can't be loaded.
        """
        try:
            root = parse_file(file_path, self.config.max_document_bytes)
            return assemble_map(root, self.diagnostics)
        except Exception as exc:
            self.diagnostics.emit(DiagnosticKind.LOAD_FAILED,
                                  "Failed to load map from TMX: %s (%s)", file_path, exc)
            return None

    def load_from_stream(self, stream: IO, name: str = "<stream>") -> Optional[TiledMap]:
        """
        Load a map from an open stream, e.g. a packaged resource.

        name only identifies the stream in log messages.
        """
        try:
            root = parse_stream(stream, self.config.max_document_bytes)
            return assemble_map(root, self.diagnostics)
        except Exception as exc:
            self.diagnostics.emit(DiagnosticKind.LOAD_FAILED,
                                  "Failed to load map from stream %s (%s)", name, exc)
            return None


def load_map(file_path: Union[str, Path],
             config: Optional[LoaderConfig] = None) -> Optional[TiledMap]:
    """Shortcut for TmxLoader(config).load_from_tmx(file_path)."""
    return TmxLoader(config).load_from_tmx(file_path)


def load_map_from_stream(stream: IO,
                         config: Optional[LoaderConfig] = None) -> Optional[TiledMap]:
    """Shortcut for TmxLoader(config).load_from_stream(stream)."""
    return TmxLoader(config).load_from_stream(stream)

"""
Document tree access for TMX files

=============================================================================
THE TREE WE WALK
=============================================================================

The loader never builds XML itself. It asks this module for a parsed tree and
then only reads from it through the small Node interface below:

    node.tag             element name ("map", "layer", "data", ...)
    node.attrib          string -> string attribute mapping
    node.text            text content (tile payload for <data>)
    node.get(name)       attribute value or None
    node.find(tag)       first direct child with that tag, or None
    node.iter(tag)       all descendants (and self) with that tag, in order

xml.etree.ElementTree.Element satisfies this interface as is, so any other
tree implementation exposing the same members works with the parsers too.

=============================================================================
"""

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import IO, Iterator, Mapping, Optional, Protocol, Union

from .errors import DocumentParseFailure, IOFailure


class Node(Protocol):
    """Read-only view of one element in a parsed document."""

    tag: str
    attrib: Mapping[str, str]
    text: Optional[str]

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        ...

    def find(self, path: str) -> Optional["Node"]:
        ...

    def iter(self, tag: Optional[str] = None) -> Iterator["Node"]:
        ...


def parse_file(path: Union[str, Path], max_bytes: Optional[int] = None) -> Node:
    """
    Parse a TMX file and return its root element.

    Raises:
    -------
    IOFailure : file missing, unreadable, or larger than max_bytes
    DocumentParseFailure : content is not well-formed XML
    """
    path = Path(path)
    try:
        if max_bytes is None:
            return ET.parse(path).getroot()
        with path.open('rb') as fp:
            return _parse_bounded(fp, max_bytes)
    except ET.ParseError as exc:
        raise DocumentParseFailure(f"{path}: {exc}") from exc
    except OSError as exc:
        raise IOFailure(f"{path}: {exc}") from exc


def parse_stream(stream: IO, max_bytes: Optional[int] = None) -> Node:
    """
    Parse a TMX document from an open stream (binary or text).

    The stream is read but not closed.
    """
    try:
        if max_bytes is None:
            return ET.parse(stream).getroot()
        return _parse_bounded(stream, max_bytes)
    except ET.ParseError as exc:
        raise DocumentParseFailure(f"stream: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise IOFailure(f"stream: {exc}") from exc


def _parse_bounded(stream: IO, max_bytes: int) -> Node:
    # One extra unit tells us whether the limit was exceeded
    content = stream.read(max_bytes + 1)
    size = len(content.encode("utf-8")) if isinstance(content, str) else len(content)
    if size > max_bytes:
        raise IOFailure(f"document exceeds {max_bytes} bytes")
    return ET.fromstring(content)

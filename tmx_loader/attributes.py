"""
Typed attribute reads from document nodes

All numeric parse failures surface as MalformedAttribute, naming the element
and attribute involved.
"""

from typing import Callable, TypeVar

from .document import Node
from .errors import MalformedAttribute

T = TypeVar('T')


def _convert(node: Node, name: str, convert: Callable[[str], T]) -> T:
    raw = node.get(name)
    if raw is None:
        raise MalformedAttribute(node.tag, name)
    try:
        return convert(raw)
    except ValueError as exc:
        raise MalformedAttribute(node.tag, name, raw) from exc


def read_int(node: Node, name: str) -> int:
    """Required integer attribute."""
    return _convert(node, name, int)


def read_float(node: Node, name: str) -> float:
    """Required float attribute."""
    return _convert(node, name, float)


def read_optional_int(node: Node, name: str, default: int = 0) -> int:
    """Integer attribute that falls back to default when absent."""
    if node.get(name) is None:
        return default
    return _convert(node, name, int)


def read_optional_float(node: Node, name: str, default: float = 0.0) -> float:
    """Float attribute that falls back to default when absent."""
    if node.get(name) is None:
        return default
    return _convert(node, name, float)


def read_str(node: Node, name: str) -> str:
    """Free text attribute; absent means empty string."""
    return node.get(name, '') or ''

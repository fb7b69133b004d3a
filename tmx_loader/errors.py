"""
Exceptions raised while loading TMX maps

Only UnsupportedEncoding is recovered inside the loader (the layer that
declares it is skipped). Everything else aborts the load and is turned into
a logged ``None`` by the loader facade.
"""


class TmxError(Exception):
    """Base class for every TMX loading failure."""


class MalformedAttribute(TmxError):
    """An expected attribute is missing or not parseable as its type."""

    def __init__(self, tag: str, attribute: str, value=None):
        self.tag = tag
        self.attribute = attribute
        self.value = value
        if value is None:
            message = f"<{tag}> is missing required attribute '{attribute}'"
        else:
            message = f"<{tag}> attribute '{attribute}' has invalid value {value!r}"
        super().__init__(message)


class UnsupportedEncoding(TmxError):
    """A layer declares a tile data encoding (or compression) we can't read."""

    def __init__(self, encoding):
        self.encoding = encoding
        super().__init__(f"Unsupported encoding: {encoding!r}")


class MalformedTileData(TmxError):
    """Tile payload is inconsistent with the layer's declared dimensions."""


class DocumentParseFailure(TmxError):
    """The XML document could not be parsed at all."""


class IOFailure(TmxError):
    """The input file or stream could not be read."""

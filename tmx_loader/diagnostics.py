"""
Diagnostic events emitted while a map loads

Every event goes to the standard logging module. Callers that want to react
programmatically (editors, test harnesses, asset pipelines) can also pass a
sink callable that receives (DiagnosticKind, message) for each event.
"""

import logging
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class DiagnosticKind(Enum):
    TILESET_LOADED = "tileset_loaded"
    LAYER_LOADED = "layer_loaded"
    OBJECT_GROUP_LOADED = "object_group_loaded"
    UNSUPPORTED_ENCODING = "unsupported_encoding"
    LOAD_FAILED = "load_failed"


DiagnosticSink = Callable[[DiagnosticKind, str], None]

_LEVELS = {
    DiagnosticKind.TILESET_LOADED: logging.INFO,
    DiagnosticKind.LAYER_LOADED: logging.INFO,
    DiagnosticKind.OBJECT_GROUP_LOADED: logging.INFO,
    DiagnosticKind.UNSUPPORTED_ENCODING: logging.WARNING,
    DiagnosticKind.LOAD_FAILED: logging.ERROR,
}


class Diagnostics:
    """Logs diagnostic events and forwards them to an optional sink."""

    def __init__(self, sink: Optional[DiagnosticSink] = None,
                 log: Optional[logging.Logger] = None):
        self.sink = sink
        self.log = log or logger

    def emit(self, kind: DiagnosticKind, msg: str, *args):
        self.log.log(_LEVELS[kind], msg, *args)
        if self.sink is None:
            return
        try:
            self.sink(kind, msg % args if args else msg)
        except Exception:
            # Sink errors are logged, never raised
            self.log.exception("Diagnostic sink failed on %s event", kind.value)

"""
Typed publish/subscribe event bus

Listeners register for an event class and are called synchronously, in
registration order, when an event of exactly that class is triggered:

    events = EventManager()
    events.add_listener(MapLoaded, on_map_loaded)
    events.trigger_event(MapLoaded(tiled_map))

Script hooks name an external handler by import path instead of passing a
callable, so level data (e.g. an object property) can refer to game code:

    events.add_script_listener("DoorOpened", "game.scripts.doors:on_open")
"""

import importlib
import logging
from collections import defaultdict
from typing import Callable, Dict, List, Optional, Type, TypeVar

logger = logging.getLogger(__name__)

E = TypeVar('E')
Listener = Callable[[E], None]


class ScriptHookRegistry:
    """Named external handlers, resolved from "module:function" paths."""

    def __init__(self):
        self._handlers: Dict[str, List[Callable]] = defaultdict(list)

    def register_event_handler(self, event_name: str, handler_path: str):
        """
        Register the handler found at handler_path for event_name.

        Raises ValueError for a malformed path, ImportError or
        AttributeError if the handler can't be found.
        """
        module_name, sep, attr = handler_path.partition(':')
        if not sep or not module_name or not attr:
            raise ValueError(f"Handler path must look like 'module:function', got {handler_path!r}")

        handler = importlib.import_module(module_name)
        for part in attr.split('.'):
            handler = getattr(handler, part)
        if not callable(handler):
            raise ValueError(f"{handler_path} is not callable")

        self._handlers[event_name].append(handler)
        logger.info("Script handler registered: %s -> %s", event_name, handler_path)

    def handlers_for(self, event_name: str) -> List[Callable]:
        return list(self._handlers.get(event_name, ()))

    def handle(self, event_name: str, event):
        for handler in self.handlers_for(event_name):
            handler(event)


class EventManager:
    """Dispatches events to listeners registered for their class."""

    def __init__(self, script_hooks: Optional[ScriptHookRegistry] = None):
        self._listeners: Dict[type, List[Callable]] = {}
        self.script_hooks = script_hooks or ScriptHookRegistry()

    def add_listener(self, event_type: Type[E], listener: Listener):
        self._listeners.setdefault(event_type, []).append(listener)

    def add_script_listener(self, event_name: str, handler_path: str):
        """Register a script handler for events whose class is named event_name."""
        self.script_hooks.register_event_handler(event_name, handler_path)

    def remove_listener(self, event_type: Type[E], listener: Listener):
        listeners = self._listeners.get(event_type)
        if listeners and listener in listeners:
            listeners.remove(listener)

    def trigger_event(self, event):
        """
        Notify listeners of type(event), then script handlers named after it.

        Subclasses of a registered type are not matched. Exceptions raised by
        a listener propagate to the caller.
        """
        # Copy so listeners can unregister themselves while being notified
        for listener in list(self._listeners.get(type(event), ())):
            listener(event)
        self.script_hooks.handle(type(event).__name__, event)

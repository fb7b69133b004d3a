"""Event bus and input bindings used alongside loaded maps"""

from .events import EventManager, ScriptHookRegistry

__all__ = ["EventManager", "ScriptHookRegistry"]

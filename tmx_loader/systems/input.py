"""
Keyboard bindings for GLFW windows

GLFW delivers key events only to the focused window and accepts one key
callback per window, so InputHandler installs a single dispatcher per window
and routes events to the bindings registered for it:

    handler = InputHandler()
    handler.setup_key_bindings(window, "SPACE", start_jump, stop_jump)

Key names are the suffixes of GLFW's KEY_* constants: "A", "SPACE", "LEFT",
"PAGE_UP", "F1", ...
"""

import logging
from typing import Callable, Dict, Optional, Tuple

import glfw

logger = logging.getLogger(__name__)

Action = Callable[[], None]


def resolve_key(key: str) -> Optional[int]:
    """GLFW key code for a key name, or None if there is no such key."""
    name = key.strip().upper().replace(' ', '_')
    if not name:
        return None
    code = getattr(glfw, f"KEY_{name}", None)
    return code if isinstance(code, int) else None


class InputHandler:
    """Binds press/release actions to keys of GLFW windows."""

    def __init__(self):
        # window -> key code -> (on_press, on_release)
        self._bindings: Dict[object, Dict[int, Tuple[Action, Action]]] = {}

    def setup_key_bindings(self, window, key: str,
                           on_press: Action, on_release: Action) -> bool:
        """
        Fire on_press when key goes down and on_release when it comes up.

        Key repeat events are ignored. Rebinding a key replaces its actions.
        Returns False (with a warning logged) when any argument is invalid;
        nothing is installed in that case.
        """
        if (window is None or not isinstance(key, str)
                or on_press is None or on_release is None):
            logger.warning("Invalid input parameters... window, on_press and "
                           "on_release cannot be None, key must be a key name.")
            return False

        code = resolve_key(key)
        if code is None or code == glfw.KEY_UNKNOWN:
            logger.warning("Invalid key for action: %sPress / %sRelease", key, key)
            return False

        if window not in self._bindings:
            self._bindings[window] = {}
            glfw.set_key_callback(window, self._key_callback)

        self._bindings[window][code] = (on_press, on_release)
        logger.info("Key binding is set up: %sPress (Press)", key)
        logger.info("Key binding is set up: %sRelease (Release)", key)
        return True

    def remove_key_binding(self, window, key: str):
        code = resolve_key(key) if key is not None else None
        self._bindings.get(window, {}).pop(code, None)

    def _key_callback(self, window, key, scancode, action, mods):
        """GLFW key callback"""
        binding = self._bindings.get(window, {}).get(key)
        if binding is None:
            return
        on_press, on_release = binding
        if action == glfw.PRESS:
            on_press()
        elif action == glfw.RELEASE:
            on_release()

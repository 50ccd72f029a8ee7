"""Terminal host for the navigation engine.

Draws the current view with rich and maps key presses onto navigation events.
"""
from .host import TerminalHost
from .keymap import DEFAULT_KEYMAP, build_keymap

__all__ = ["DEFAULT_KEYMAP", "TerminalHost", "build_keymap"]

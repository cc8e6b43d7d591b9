"""User interface: preview window and keyboard input."""

from groom_protocol.ui.display import DisplayWindow, KeyAction

__all__ = ["DisplayWindow", "KeyAction"]

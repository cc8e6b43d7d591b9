"""OpenCV window management for the gesture preview."""

from __future__ import annotations

from enum import Enum, auto
from typing import TYPE_CHECKING

import cv2
import numpy as np

from groom_protocol.core.config import UISettings
from groom_protocol.core.logging import get_logger

if TYPE_CHECKING:
    from numpy.typing import NDArray

logger = get_logger(__name__)


class KeyAction(Enum):
    """Actions triggered by keyboard input."""

    NONE = auto()
    QUIT = auto()
    NEXT_GESTURE = auto()
    PREVIOUS_GESTURE = auto()
    PAUSE = auto()


# Key mappings (ASCII codes)
KEY_BINDINGS: dict[int, KeyAction] = {
    ord("q"): KeyAction.QUIT,
    ord("Q"): KeyAction.QUIT,
    27: KeyAction.QUIT,  # ESC
    ord("n"): KeyAction.NEXT_GESTURE,
    ord("]"): KeyAction.NEXT_GESTURE,
    ord("p"): KeyAction.PREVIOUS_GESTURE,
    ord("["): KeyAction.PREVIOUS_GESTURE,
    ord(" "): KeyAction.PAUSE,
}


def action_for_key(key: int) -> KeyAction:
    """Map a raw ``cv2.waitKey`` result to an action."""
    key &= 0xFF
    if key == 0xFF:  # No key pressed
        return KeyAction.NONE
    return KEY_BINDINGS.get(key, KeyAction.NONE)


class DisplayWindow:
    """OpenCV preview window with keyboard polling."""

    WINDOW_NAME = "Groom Protocol"

    def __init__(self, settings: UISettings | None = None) -> None:
        """Initialize display window.

        Args:
            settings: UI settings (uses defaults if None)
        """
        self.settings = settings or UISettings()
        self.is_open = False
        self.is_paused = False

    def open(self) -> None:
        """Create and show the display window."""
        cv2.namedWindow(self.WINDOW_NAME, cv2.WINDOW_NORMAL)
        cv2.resizeWindow(self.WINDOW_NAME, self.settings.display_width, self.settings.display_height)
        self.is_open = True
        logger.info(
            "Display window opened (%dx%d)",
            self.settings.display_width,
            self.settings.display_height,
        )

    def close(self) -> None:
        """Close and destroy the display window."""
        if self.is_open:
            cv2.destroyWindow(self.WINDOW_NAME)
            self.is_open = False
            logger.info("Display window closed")

    def show_frame(self, image: NDArray[np.uint8]) -> None:
        """Display a BGR frame in the window."""
        if not self.is_open:
            self.open()
        cv2.imshow(self.WINDOW_NAME, image)

    def poll_key(self, wait_ms: int = 1) -> KeyAction:
        """Poll for keyboard input.

        Args:
            wait_ms: Milliseconds to wait for key (1 for non-blocking)

        Returns:
            KeyAction corresponding to pressed key
        """
        action = action_for_key(cv2.waitKey(wait_ms))

        if action == KeyAction.PAUSE:
            self.is_paused = not self.is_paused
            logger.info("Paused: %s", self.is_paused)

        return action

    def show_message(self, message: str) -> None:
        """Show a centered message on a black background."""
        width, height = self.settings.display_width, self.settings.display_height
        image = np.zeros((height, width, 3), dtype=np.uint8)

        font = cv2.FONT_HERSHEY_SIMPLEX
        (text_w, text_h), _ = cv2.getTextSize(message, font, 1.2, 2)
        cv2.putText(
            image,
            message,
            ((width - text_w) // 2, (height + text_h) // 2),
            font,
            1.2,
            (255, 255, 255),
            2,
        )

        self.show_frame(image)
        cv2.waitKey(1)

    def __enter__(self) -> DisplayWindow:
        """Context manager entry."""
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Context manager exit."""
        self.close()

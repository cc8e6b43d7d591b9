"""Webcam preview for tuning and demoing the gesture classifier."""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from collections.abc import Sequence

import cv2
import numpy as np

from groom_protocol.core.config import Settings, get_settings
from groom_protocol.core.exceptions import CameraError, GroomProtocolError
from groom_protocol.core.logging import get_logger, setup_logging
from groom_protocol.core.types import Frame, GestureType
from groom_protocol.pipeline.processor import GestureProcessor
from groom_protocol.ui.display import DisplayWindow, KeyAction
from groom_protocol.vision.overlay import OverlayRenderer

logger = get_logger(__name__)


def cycle_gesture(
    gestures: Sequence[GestureType],
    current: GestureType | None,
    step: int,
) -> GestureType:
    """Move ``step`` places through ``gestures``, wrapping at either end.

    A current gesture outside the sequence restarts at the first one.
    """
    if current not in gestures:
        return gestures[0]
    return gestures[(gestures.index(current) + step) % len(gestures)]


def open_camera(settings: Settings) -> cv2.VideoCapture:
    """Open the configured webcam.

    Raises:
        CameraError: If the device cannot be opened
    """
    cap = cv2.VideoCapture(settings.camera.index)
    if not cap.isOpened():
        cap.release()
        raise CameraError(f"Cannot open camera {settings.camera.index}")

    cap.set(cv2.CAP_PROP_FRAME_WIDTH, settings.camera.width)
    cap.set(cv2.CAP_PROP_FRAME_HEIGHT, settings.camera.height)
    return cap


async def run_preview(settings: Settings, initial: GestureType | None) -> int:
    """Run the interactive preview loop.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    processor = GestureProcessor(settings)
    display = DisplayWindow(settings.ui)
    overlay = OverlayRenderer(settings.ui)
    gestures = processor.classifier.supported_gestures
    cap: cv2.VideoCapture | None = None

    processor.target = initial if initial in gestures else gestures[0]

    try:
        # Model download and camera warmup overlap
        preload = processor.preload()
        cap = open_camera(settings)

        display.open()
        display.show_message("Loading pose model...")
        await preload
        await processor.initialize()

        logger.info("Preview running (n/p to change gesture, q to quit)")

        start_time = time.monotonic()
        frame_idx = 0

        while True:
            ok, raw_image = cap.read()
            if not ok:
                raise CameraError("Camera stopped delivering frames")

            frame = Frame(
                image=np.asarray(raw_image, dtype=np.uint8),
                timestamp=time.monotonic() - start_time,
                index=frame_idx,
            )
            frame_idx += 1

            if not display.is_paused:
                result = await processor.process_frame(frame)
                display.show_frame(
                    overlay.render_full_overlay(frame, result.pose, result.target, result.analysis)
                )

            action = display.poll_key(wait_ms=1)

            if action == KeyAction.QUIT:
                logger.info("Quit requested")
                break
            elif action == KeyAction.NEXT_GESTURE:
                processor.target = cycle_gesture(gestures, processor.target, 1)
            elif action == KeyAction.PREVIOUS_GESTURE:
                processor.target = cycle_gesture(gestures, processor.target, -1)

        return 0

    except CameraError as e:
        logger.error("Camera error: %s", e)
        return 1

    except GroomProtocolError as e:
        logger.error("Preview error: %s", e)
        return 2

    except Exception as e:
        logger.exception("Unexpected error: %s", e)
        return 3

    finally:
        if cap is not None:
            cap.release()
        await processor.shutdown()
        display.close()
        logger.info("Preview stopped")


def build_parser() -> argparse.ArgumentParser:
    """Command line interface definition."""
    parser = argparse.ArgumentParser(
        description="Groom Protocol - live scrubbing gesture preview",
    )
    parser.add_argument(
        "--gesture",
        choices=[g.value for g in GestureType],
        help="Gesture to test first (defaults to the first in the set)",
    )
    parser.add_argument(
        "--gesture-set",
        choices=["tutorial", "shower", "full"],
        help="Which gestures the classifier supports",
    )
    parser.add_argument(
        "--camera",
        type=int,
        help="Webcam device index",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    settings = get_settings()
    if args.gesture_set:
        settings.gesture.gesture_set = args.gesture_set
    if args.camera is not None:
        settings.camera.index = args.camera

    setup_logging(settings.logging, debug=args.debug)

    try:
        exit_code = asyncio.run(run_preview(settings, GestureType.parse(args.gesture)))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        exit_code = 0

    sys.exit(exit_code)


if __name__ == "__main__":
    main()

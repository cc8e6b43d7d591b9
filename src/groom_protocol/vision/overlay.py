"""Overlay rendering for keypoints, gesture guides, and analysis status."""

from __future__ import annotations

from typing import TYPE_CHECKING

import cv2
import numpy as np

from groom_protocol.core.config import UISettings
from groom_protocol.core.types import (
    Frame,
    GestureAnalysis,
    GestureType,
    Keypoint,
    KeypointName as K,
    Pose,
    keypoints_by_name,
)

if TYPE_CHECKING:
    from numpy.typing import NDArray

# Skeleton connection pairs (keypoint names)
POSE_CONNECTIONS = [
    # Head
    (K.NOSE, K.LEFT_EYE),
    (K.NOSE, K.RIGHT_EYE),
    (K.LEFT_EYE, K.LEFT_EAR),
    (K.RIGHT_EYE, K.RIGHT_EAR),
    # Torso
    (K.LEFT_SHOULDER, K.RIGHT_SHOULDER),
    (K.LEFT_SHOULDER, K.LEFT_HIP),
    (K.RIGHT_SHOULDER, K.RIGHT_HIP),
    (K.LEFT_HIP, K.RIGHT_HIP),
    # Arms
    (K.LEFT_SHOULDER, K.LEFT_ELBOW),
    (K.LEFT_ELBOW, K.LEFT_WRIST),
    (K.RIGHT_SHOULDER, K.RIGHT_ELBOW),
    (K.RIGHT_ELBOW, K.RIGHT_WRIST),
    # Legs
    (K.LEFT_HIP, K.LEFT_KNEE),
    (K.LEFT_KNEE, K.LEFT_ANKLE),
    (K.RIGHT_HIP, K.RIGHT_KNEE),
    (K.RIGHT_KNEE, K.RIGHT_ANKLE),
]

# Which landmark pairs each gesture rule measures
GESTURE_GUIDES: dict[GestureType, list[tuple[str, str]]] = {
    GestureType.RUB_HANDS: [(K.LEFT_WRIST, K.RIGHT_WRIST)],
    GestureType.SCRUB_HEAD: [(K.LEFT_WRIST, K.NOSE), (K.RIGHT_WRIST, K.NOSE)],
    GestureType.SCRUB_ARMS: [(K.LEFT_WRIST, K.RIGHT_SHOULDER), (K.RIGHT_WRIST, K.LEFT_SHOULDER)],
    GestureType.SCRUB_ARMPITS: [(K.LEFT_WRIST, K.LEFT_SHOULDER), (K.RIGHT_WRIST, K.RIGHT_SHOULDER)],
    GestureType.SCRUB_BUTT: [
        (K.LEFT_WRIST, K.LEFT_HIP),
        (K.RIGHT_WRIST, K.RIGHT_HIP),
        (K.LEFT_WRIST, K.RIGHT_HIP),
        (K.RIGHT_WRIST, K.LEFT_HIP),
    ],
}

# Colors (BGR format)
COLOR_SKELETON = (0, 255, 0)  # Green
COLOR_KEYPOINT = (255, 255, 255)  # White
COLOR_GUIDE = (255, 0, 255)  # Magenta
COLOR_TEXT = (255, 255, 255)  # White
COLOR_TEXT_BG = (0, 0, 0)  # Black
COLOR_ACTIVE = (0, 255, 0)  # Green
COLOR_MATCHED = (0, 255, 255)  # Yellow
COLOR_IDLE = (128, 128, 128)  # Gray


def _point(keypoint: Keypoint) -> tuple[int, int]:
    return int(keypoint.x), int(keypoint.y)


def status_of(analysis: GestureAnalysis) -> tuple[str, tuple[int, int, int]]:
    """Banner text and color for an analysis."""
    if analysis.is_active:
        return "ACTIVE", COLOR_ACTIVE
    if analysis.gesture is not None:
        return "LOW CONFIDENCE", COLOR_MATCHED
    return "idle", COLOR_IDLE


class OverlayRenderer:
    """Renders visual overlays on video frames."""

    def __init__(self, settings: UISettings | None = None) -> None:
        """Initialize renderer with settings.

        Args:
            settings: UI/display settings (uses defaults if None)
        """
        self.settings = settings or UISettings()

    def _visible(self, pose: Pose) -> dict[str, Keypoint]:
        return {
            name: kp
            for name, kp in keypoints_by_name(pose.keypoints).items()
            if kp.score >= self.settings.min_keypoint_score
        }

    def draw_keypoints(
        self,
        image: NDArray[np.uint8],
        pose: Pose,
        color: tuple[int, int, int] = COLOR_SKELETON,
        thickness: int = 2,
    ) -> NDArray[np.uint8]:
        """Draw the pose skeleton and keypoints.

        Args:
            image: Input image array
            pose: Detected pose (pixel coordinates)
            color: Line color (BGR)
            thickness: Line thickness

        Returns:
            Image with skeleton overlay
        """
        result = image.copy()
        points = self._visible(pose)

        for start, end in POSE_CONNECTIONS:
            if start in points and end in points:
                cv2.line(result, _point(points[start]), _point(points[end]), color, thickness)

        for keypoint in points.values():
            cv2.circle(result, _point(keypoint), 4, COLOR_KEYPOINT, -1)

        return result

    def draw_guides(
        self,
        image: NDArray[np.uint8],
        pose: Pose,
        target: GestureType,
    ) -> NDArray[np.uint8]:
        """Draw the landmark pairs the target gesture's rule measures."""
        result = image.copy()
        points = self._visible(pose)

        for start, end in GESTURE_GUIDES.get(target, []):
            if start in points and end in points:
                cv2.line(result, _point(points[start]), _point(points[end]), COLOR_GUIDE, 1)

        return result

    def draw_status(
        self,
        image: NDArray[np.uint8],
        target: GestureType | None,
        analysis: GestureAnalysis,
    ) -> NDArray[np.uint8]:
        """Draw the target gesture and its current verdict.

        Args:
            image: Input image array
            target: Gesture being tested (None if no step is selected)
            analysis: Latest analysis

        Returns:
            Image with status banner
        """
        result = image.copy()

        x, y = 10, 30
        line_height = 30
        font = cv2.FONT_HERSHEY_SIMPLEX
        font_scale = 0.7
        status, color = status_of(analysis)

        lines = [
            (f"Target: {target.label if target else '-'}", COLOR_TEXT),
            (f"Confidence: {analysis.confidence:.2f}", COLOR_TEXT),
            (status, color),
        ]

        for i, (text, text_color) in enumerate(lines):
            pos = (x, y + i * line_height)
            (text_w, text_h), _ = cv2.getTextSize(text, font, font_scale, 2)
            cv2.rectangle(
                result,
                (pos[0] - 2, pos[1] - text_h - 2),
                (pos[0] + text_w + 2, pos[1] + 4),
                COLOR_TEXT_BG,
                -1,
            )
            cv2.putText(result, text, pos, font, font_scale, text_color, 2)

        return result

    def render_full_overlay(
        self,
        frame: Frame,
        pose: Pose | None,
        target: GestureType | None,
        analysis: GestureAnalysis,
    ) -> NDArray[np.uint8]:
        """Render complete overlay with all enabled elements.

        Args:
            frame: Input frame
            pose: Primary pose (optional)
            target: Gesture being tested
            analysis: Latest analysis

        Returns:
            Fully rendered frame
        """
        image = frame.image.copy()

        if pose is not None:
            if self.settings.show_keypoints:
                image = self.draw_keypoints(image, pose)
            if self.settings.show_guides and target is not None:
                image = self.draw_guides(image, pose, target)

        return self.draw_status(image, target, analysis)

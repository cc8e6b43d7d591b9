"""Pytest fixtures for Groom Protocol tests."""

from __future__ import annotations

from collections.abc import Callable

import numpy as np
import pytest

from groom_protocol.core.config import GestureSettings, Settings
from groom_protocol.core.types import Frame, Keypoint, KeypointName, Pose

# Pixel positions for someone facing a 640x480 camera with arms held out
# low to the sides. No gesture rule matches this posture.
NEUTRAL_POSITIONS: dict[str, tuple[float, float]] = {
    KeypointName.NOSE: (320.0, 80.0),
    KeypointName.LEFT_SHOULDER: (400.0, 200.0),
    KeypointName.RIGHT_SHOULDER: (240.0, 200.0),
    KeypointName.LEFT_HIP: (380.0, 450.0),
    KeypointName.RIGHT_HIP: (260.0, 450.0),
    KeypointName.LEFT_WRIST: (560.0, 300.0),
    KeypointName.RIGHT_WRIST: (80.0, 300.0),
}

KeypointFactory = Callable[..., list[Keypoint]]


def build_keypoints(
    positions: dict[str, tuple[float, float]] | None = None,
    scores: dict[str, float] | None = None,
    omit: tuple[str, ...] = (),
    default_score: float = 0.9,
) -> list[Keypoint]:
    """Build a keypoint list from the neutral posture plus overrides."""
    merged = {**NEUTRAL_POSITIONS, **(positions or {})}
    scores = scores or {}
    return [
        Keypoint(name=name, x=x, y=y, score=scores.get(name, default_score))
        for name, (x, y) in merged.items()
        if name not in omit
    ]


@pytest.fixture
def make_keypoints() -> KeypointFactory:
    """Factory for keypoint lists based on the neutral posture."""
    return build_keypoints


@pytest.fixture
def neutral_keypoints() -> list[Keypoint]:
    """Keypoints that match no gesture."""
    return build_keypoints()


@pytest.fixture
def rub_hands_pose() -> Pose:
    """Pose with both wrists together in front of the chest."""
    keypoints = build_keypoints(
        {
            KeypointName.LEFT_WRIST: (340.0, 320.0),
            KeypointName.RIGHT_WRIST: (300.0, 320.0),
        }
    )
    return Pose(keypoints=keypoints, timestamp=0.0, frame_idx=0, confidence=0.9)


@pytest.fixture
def neutral_pose(neutral_keypoints: list[Keypoint]) -> Pose:
    """Pose that matches no gesture."""
    return Pose(keypoints=neutral_keypoints, timestamp=0.0, frame_idx=0, confidence=0.9)


@pytest.fixture
def gesture_settings() -> GestureSettings:
    """Gesture settings with the standard thresholds."""
    return GestureSettings(
        gesture_set="full",
        activation_threshold=0.3,
        rub_hands_distance_px=100.0,
        scrub_head_distance_px=150.0,
        scrub_arms_distance_px=120.0,
        scrub_butt_distance_px=200.0,
    )


@pytest.fixture
def settings(gesture_settings: GestureSettings) -> Settings:
    """Application settings with standard gesture thresholds."""
    return Settings(gesture=gesture_settings)


@pytest.fixture
def blank_frame() -> Frame:
    """Black 640x480 frame."""
    return Frame(image=np.zeros((480, 640, 3), dtype=np.uint8), timestamp=0.0, index=0)

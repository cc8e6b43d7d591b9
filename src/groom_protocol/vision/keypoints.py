"""Conversion from MediaPipe pose landmarks to named pixel-space keypoints.

MediaPipe reports 33 landmarks by index in normalized coordinates. The gesture
rules work on the 17 MoveNet names in source-frame pixels, so only those
landmarks are kept.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from groom_protocol.core.types import Keypoint, KeypointName

# MediaPipe landmark index -> MoveNet keypoint name
MEDIAPIPE_KEYPOINTS: dict[int, str] = {
    0: KeypointName.NOSE,
    2: KeypointName.LEFT_EYE,
    5: KeypointName.RIGHT_EYE,
    7: KeypointName.LEFT_EAR,
    8: KeypointName.RIGHT_EAR,
    11: KeypointName.LEFT_SHOULDER,
    12: KeypointName.RIGHT_SHOULDER,
    13: KeypointName.LEFT_ELBOW,
    14: KeypointName.RIGHT_ELBOW,
    15: KeypointName.LEFT_WRIST,
    16: KeypointName.RIGHT_WRIST,
    23: KeypointName.LEFT_HIP,
    24: KeypointName.RIGHT_HIP,
    25: KeypointName.LEFT_KNEE,
    26: KeypointName.RIGHT_KNEE,
    27: KeypointName.LEFT_ANKLE,
    28: KeypointName.RIGHT_ANKLE,
}


class NormalizedLandmark(Protocol):
    """Shape of a MediaPipe normalized landmark."""

    x: float
    y: float
    visibility: float | None


def to_keypoints(
    landmarks: Sequence[NormalizedLandmark],
    width: int,
    height: int,
) -> list[Keypoint]:
    """Convert one pose's landmarks to pixel-space keypoints.

    Args:
        landmarks: MediaPipe landmarks for a single pose, indexed as in the model
        width: Source frame width in pixels
        height: Source frame height in pixels

    Returns:
        Keypoints for every mapped landmark the pose contains
    """
    keypoints: list[Keypoint] = []

    for idx, name in MEDIAPIPE_KEYPOINTS.items():
        if idx >= len(landmarks):
            continue

        lm = landmarks[idx]
        visibility = 1.0 if lm.visibility is None else float(lm.visibility)
        keypoints.append(
            Keypoint(
                name=name,
                x=float(lm.x) * width,
                y=float(lm.y) * height,
                score=min(max(visibility, 0.0), 1.0),
            )
        )

    return keypoints


def mean_score(keypoints: Sequence[Keypoint]) -> float:
    """Average keypoint score, used as overall pose confidence."""
    if not keypoints:
        return 0.0
    return sum(kp.score for kp in keypoints) / len(keypoints)

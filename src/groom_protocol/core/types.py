"""Core data types and structures."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import numpy as np
from numpy.typing import NDArray


class KeypointName:
    """Landmark names as reported by MoveNet (COCO 17-point topology)."""

    NOSE = "nose"
    LEFT_EYE = "left_eye"
    RIGHT_EYE = "right_eye"
    LEFT_EAR = "left_ear"
    RIGHT_EAR = "right_ear"
    LEFT_SHOULDER = "left_shoulder"
    RIGHT_SHOULDER = "right_shoulder"
    LEFT_ELBOW = "left_elbow"
    RIGHT_ELBOW = "right_elbow"
    LEFT_WRIST = "left_wrist"
    RIGHT_WRIST = "right_wrist"
    LEFT_HIP = "left_hip"
    RIGHT_HIP = "right_hip"
    LEFT_KNEE = "left_knee"
    RIGHT_KNEE = "right_knee"
    LEFT_ANKLE = "left_ankle"
    RIGHT_ANKLE = "right_ankle"


@dataclass(frozen=True, slots=True)
class Keypoint:
    """A named body landmark in source-frame pixel coordinates.

    Attributes:
        name: Landmark name (see KeypointName)
        x: Horizontal pixel position
        y: Vertical pixel position (grows downward)
        score: Detection confidence [0, 1]
    """

    name: str
    x: float
    y: float
    score: float

    def distance_to(self, other: Keypoint) -> float:
        """Planar Euclidean distance in pixels."""
        return math.hypot(self.x - other.x, self.y - other.y)


@dataclass(slots=True)
class Pose:
    """All keypoints detected for one person in one frame.

    Attributes:
        keypoints: Unordered keypoints, looked up by name
        timestamp: Frame timestamp in seconds
        frame_idx: Frame sequence number
        confidence: Overall pose detection confidence [0, 1]
    """

    keypoints: list[Keypoint] = field(default_factory=list)
    timestamp: float = 0.0
    frame_idx: int = 0
    confidence: float = 0.0

    @property
    def names(self) -> set[str]:
        """Names of every keypoint present."""
        return {kp.name for kp in self.keypoints}

    def get(self, name: str) -> Keypoint | None:
        """Get the first keypoint with the given name."""
        for keypoint in self.keypoints:
            if keypoint.name == name:
                return keypoint
        return None


@dataclass(slots=True)
class Frame:
    """A video frame with metadata.

    Attributes:
        image: BGR image array (OpenCV format)
        timestamp: Frame timestamp in seconds
        index: Frame sequence number
    """

    image: NDArray[np.uint8]
    timestamp: float
    index: int

    @property
    def width(self) -> int:
        """Frame width in pixels."""
        return int(self.image.shape[1])

    @property
    def height(self) -> int:
        """Frame height in pixels."""
        return int(self.image.shape[0])

    @property
    def dimensions(self) -> tuple[int, int]:
        """Frame dimensions as (width, height)."""
        return self.width, self.height


class GestureType(Enum):
    """Scrubbing gestures the user can be asked to perform."""

    RUB_HANDS = "rub-hands"
    SCRUB_HEAD = "scrub-head"
    SCRUB_ARMS = "scrub-arms"
    SCRUB_ARMPITS = "scrub-armpits"
    SCRUB_BUTT = "scrub-butt"

    @classmethod
    def parse(cls, value: GestureType | str | None) -> GestureType | None:
        """Resolve a gesture from an enum member or its tag.

        Returns None for None or an unknown tag.
        """
        if value is None or isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def label(self) -> str:
        """Human readable name, e.g. "Scrub armpits"."""
        return self.value.replace("-", " ").capitalize()


@dataclass(frozen=True, slots=True)
class GestureAnalysis:
    """Per-frame verdict for the requested gesture.

    ``gesture`` is set whenever the geometric test matched, even below the
    activation threshold. ``is_active`` additionally requires confidence above
    that threshold.

    Attributes:
        is_active: Shape matched and confidence cleared the threshold
        confidence: Score derived from the wrist keypoints [0, 1]
        gesture: The requested gesture if the shape matched, else None
    """

    is_active: bool = False
    confidence: float = 0.0
    gesture: GestureType | None = None

    @classmethod
    def inactive(cls) -> GestureAnalysis:
        """The result used whenever a gesture cannot be evaluated."""
        return cls(is_active=False, confidence=0.0, gesture=None)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase shape the web client reads."""
        return {
            "isActive": self.is_active,
            "confidence": self.confidence,
            "gesture": self.gesture.value if self.gesture is not None else None,
        }


def keypoints_by_name(keypoints: Iterable[Keypoint]) -> dict[str, Keypoint]:
    """Index keypoints by name, keeping the first occurrence of each name."""
    indexed: dict[str, Keypoint] = {}
    for keypoint in keypoints:
        indexed.setdefault(keypoint.name, keypoint)
    return indexed


def primary_pose(poses: Sequence[Pose]) -> Pose | None:
    """First detected pose, or None if nothing was detected."""
    return poses[0] if poses else None

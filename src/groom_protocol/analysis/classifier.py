"""Per-frame gesture classification over pose keypoints.

This module is pure logic with NO I/O and NO OpenCV imports. Every call is
evaluated fresh from its inputs, so a classifier can be shared across frames
and threads.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from groom_protocol.analysis.rules import GestureRule, rules_for
from groom_protocol.core.config import GestureSettings
from groom_protocol.core.logging import get_logger
from groom_protocol.core.types import (
    GestureAnalysis,
    GestureType,
    Keypoint,
    Pose,
    keypoints_by_name,
    primary_pose,
)

logger = get_logger(__name__)

# Built-in thresholds, never read from the environment. Deployments tune them
# through Settings.gesture instead.
DEFAULT_SETTINGS = GestureSettings.model_construct()


class GestureClassifier:
    """Decides whether a pose is performing a requested gesture.

    The classifier is total over its inputs: missing landmarks, an unknown
    target, or a gesture outside the configured set all produce
    ``GestureAnalysis.inactive()`` instead of an error.
    """

    def __init__(self, settings: GestureSettings | None = None) -> None:
        """Initialize classifier with settings.

        Args:
            settings: Gesture thresholds and gesture set (built-in defaults if None)
        """
        self.settings = settings or DEFAULT_SETTINGS
        self._rules: dict[GestureType, GestureRule] = rules_for(self.settings.gesture_set)

    @property
    def supported_gestures(self) -> tuple[GestureType, ...]:
        """Gestures enabled by the configured gesture set, in step order."""
        return tuple(self._rules)

    def classify(
        self,
        keypoints: Iterable[Keypoint],
        target: GestureType | str | None,
    ) -> GestureAnalysis:
        """Classify one frame's keypoints against the target gesture.

        Args:
            keypoints: Keypoints of a single pose, in any order
            target: Gesture to test for, as enum member or tag

        Returns:
            Analysis for this frame
        """
        gesture = GestureType.parse(target)
        rule = self._rules.get(gesture) if gesture is not None else None
        if rule is None:
            logger.debug("Gesture %r not supported by set %s", target, self.settings.gesture_set)
            return GestureAnalysis.inactive()

        points = keypoints_by_name(keypoints)
        missing = rule.missing(points)
        if missing:
            logger.debug("Cannot evaluate %s, missing %s", gesture.value, ", ".join(missing))
            return GestureAnalysis.inactive()

        matched, confidence = rule.evaluate(points, self.settings)

        return GestureAnalysis(
            is_active=matched and confidence > self.settings.activation_threshold,
            confidence=confidence,
            gesture=gesture if matched else None,
        )

    def classify_pose(self, pose: Pose | None, target: GestureType | str | None) -> GestureAnalysis:
        """Classify a single pose (None means nobody was detected)."""
        if pose is None:
            return GestureAnalysis.inactive()
        return self.classify(pose.keypoints, target)

    def classify_poses(
        self,
        poses: Sequence[Pose],
        target: GestureType | str | None,
    ) -> GestureAnalysis:
        """Classify the primary (first) pose of a frame's detections."""
        return self.classify_pose(primary_pose(poses), target)


_DEFAULT_CLASSIFIER = GestureClassifier()


def classify(
    keypoints: Iterable[Keypoint],
    target: GestureType | str | None,
    settings: GestureSettings | None = None,
) -> GestureAnalysis:
    """Classify keypoints against a target gesture.

    Pure function for one-off evaluation.

    Args:
        keypoints: Keypoints of a single pose
        target: Gesture to test for
        settings: Thresholds and gesture set

    Returns:
        Analysis for the keypoints
    """
    classifier = _DEFAULT_CLASSIFIER if settings is None else GestureClassifier(settings)
    return classifier.classify(keypoints, target)

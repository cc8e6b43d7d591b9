"""Geometric rules for each scrubbing gesture.

Each rule names the landmarks it cannot do without and a pure predicate over
pixel-space keypoints. Image y grows downward, so ``a.y < b.y`` means ``a`` is
higher on screen than ``b``.

This module is pure logic with NO I/O and NO OpenCV imports.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass

from groom_protocol.core.config import GestureSetName, GestureSettings
from groom_protocol.core.types import GestureType, Keypoint, KeypointName

Points = Mapping[str, Keypoint]
Evaluation = tuple[bool, float]

_WRISTS = (KeypointName.LEFT_WRIST, KeypointName.RIGHT_WRIST)
_WRISTS_AND_SHOULDERS = (*_WRISTS, KeypointName.LEFT_SHOULDER, KeypointName.RIGHT_SHOULDER)


@dataclass(frozen=True, slots=True)
class GestureRule:
    """One row of the gesture table.

    Attributes:
        gesture: Gesture this rule recognizes
        required: Landmarks that must all be present to evaluate at all
        evaluate: Predicate returning (shape matched, confidence)
    """

    gesture: GestureType
    required: tuple[str, ...]
    evaluate: Callable[[Points, GestureSettings], Evaluation]

    def missing(self, points: Points) -> tuple[str, ...]:
        """Required landmarks absent from ``points``."""
        return tuple(name for name in self.required if name not in points)


def _rub_hands(points: Points, settings: GestureSettings) -> Evaluation:
    left_wrist = points[KeypointName.LEFT_WRIST]
    right_wrist = points[KeypointName.RIGHT_WRIST]

    matched = left_wrist.distance_to(right_wrist) < settings.rub_hands_distance_px
    return matched, min(left_wrist.score, right_wrist.score)


def _scrub_head(points: Points, settings: GestureSettings) -> Evaluation:
    nose = points[KeypointName.NOSE]
    wrists = [points[name] for name in _WRISTS if name in points]

    matched = any(w.distance_to(nose) < settings.scrub_head_distance_px for w in wrists)
    confidence = max((w.score for w in wrists), default=0.0)
    return matched, confidence


def _scrub_arms(points: Points, settings: GestureSettings) -> Evaluation:
    left_wrist = points[KeypointName.LEFT_WRIST]
    right_wrist = points[KeypointName.RIGHT_WRIST]
    left_shoulder = points[KeypointName.LEFT_SHOULDER]
    right_shoulder = points[KeypointName.RIGHT_SHOULDER]

    # Each hand reaches across to the opposite arm
    threshold = settings.scrub_arms_distance_px
    matched = (
        left_wrist.distance_to(right_shoulder) < threshold
        or right_wrist.distance_to(left_shoulder) < threshold
    )
    return matched, min(left_wrist.score, right_wrist.score)


def _scrub_armpits(points: Points, settings: GestureSettings) -> Evaluation:
    left_wrist = points[KeypointName.LEFT_WRIST]
    right_wrist = points[KeypointName.RIGHT_WRIST]

    # Raised hand: wrist above its own shoulder
    matched = (
        left_wrist.y < points[KeypointName.LEFT_SHOULDER].y
        or right_wrist.y < points[KeypointName.RIGHT_SHOULDER].y
    )
    return matched, max(left_wrist.score, right_wrist.score)


def _scrub_butt(points: Points, settings: GestureSettings) -> Evaluation:
    left_wrist = points[KeypointName.LEFT_WRIST]
    right_wrist = points[KeypointName.RIGHT_WRIST]
    hips = (points[KeypointName.LEFT_HIP], points[KeypointName.RIGHT_HIP])

    hands_lowered = (
        left_wrist.y > points[KeypointName.LEFT_SHOULDER].y
        or right_wrist.y > points[KeypointName.RIGHT_SHOULDER].y
    )
    near_hips = any(
        wrist.distance_to(hip) < settings.scrub_butt_distance_px
        for wrist in (left_wrist, right_wrist)
        for hip in hips
    )
    return hands_lowered and near_hips, max(left_wrist.score, right_wrist.score)


RULES: dict[GestureType, GestureRule] = {
    rule.gesture: rule
    for rule in (
        GestureRule(GestureType.RUB_HANDS, _WRISTS, _rub_hands),
        GestureRule(GestureType.SCRUB_HEAD, (KeypointName.NOSE,), _scrub_head),
        GestureRule(GestureType.SCRUB_ARMS, _WRISTS_AND_SHOULDERS, _scrub_arms),
        GestureRule(GestureType.SCRUB_ARMPITS, _WRISTS_AND_SHOULDERS, _scrub_armpits),
        GestureRule(
            GestureType.SCRUB_BUTT,
            (*_WRISTS_AND_SHOULDERS, KeypointName.LEFT_HIP, KeypointName.RIGHT_HIP),
            _scrub_butt,
        ),
    )
}

# Ordered so the tutorial and shower flows step through them in sequence
GESTURE_SETS: dict[str, tuple[GestureType, ...]] = {
    "tutorial": (
        GestureType.RUB_HANDS,
        GestureType.SCRUB_HEAD,
        GestureType.SCRUB_ARMS,
        GestureType.SCRUB_ARMPITS,
    ),
    "shower": (
        GestureType.SCRUB_HEAD,
        GestureType.SCRUB_ARMPITS,
        GestureType.SCRUB_BUTT,
    ),
    "full": tuple(GestureType),
}


def rules_for(gesture_set: GestureSetName) -> dict[GestureType, GestureRule]:
    """Rules enabled by a named gesture set, in step order."""
    return {gesture: RULES[gesture] for gesture in GESTURE_SETS[gesture_set]}

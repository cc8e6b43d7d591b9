"""Groom Protocol: scrubbing gesture detection over pose keypoints."""

from groom_protocol.analysis.classifier import GestureClassifier, classify
from groom_protocol.core.types import GestureAnalysis, GestureType, Keypoint, Pose

__version__ = "0.1.0"

__all__ = [
    "GestureClassifier",
    "classify",
    "GestureAnalysis",
    "GestureType",
    "Keypoint",
    "Pose",
]

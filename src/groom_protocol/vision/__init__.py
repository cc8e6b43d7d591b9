"""Computer vision operations: pose estimation, model loading, and overlay."""

from groom_protocol.vision.loader import Estimator, EstimatorLoader
from groom_protocol.vision.overlay import OverlayRenderer

__all__ = [
    "Estimator",
    "EstimatorLoader",
    "OverlayRenderer",
]

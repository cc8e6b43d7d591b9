"""Core infrastructure: config, types, exceptions, and logging."""

from groom_protocol.core.config import Settings, get_settings
from groom_protocol.core.exceptions import (
    CameraError,
    GroomProtocolError,
    PoseEstimationError,
)
from groom_protocol.core.logging import get_logger, setup_logging
from groom_protocol.core.types import (
    Frame,
    GestureAnalysis,
    GestureType,
    Keypoint,
    KeypointName,
    Pose,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Types
    "Keypoint",
    "KeypointName",
    "Pose",
    "Frame",
    "GestureType",
    "GestureAnalysis",
    # Exceptions
    "GroomProtocolError",
    "CameraError",
    "PoseEstimationError",
    # Logging
    "setup_logging",
    "get_logger",
]

"""Custom exceptions for Groom Protocol."""


class GroomProtocolError(Exception):
    """Base exception for all Groom Protocol errors."""

    pass


class CameraError(GroomProtocolError):
    """Camera could not be opened or stopped delivering frames."""

    def __init__(self, message: str = "Camera unavailable") -> None:
        self.message = message
        super().__init__(self.message)


class PoseEstimationError(GroomProtocolError):
    """Pose model failed to load or returned invalid data."""

    def __init__(self, message: str = "Pose estimation failed") -> None:
        self.message = message
        super().__init__(self.message)

"""MediaPipe pose estimation wrapper using the Tasks API."""

from __future__ import annotations

import urllib.request
from pathlib import Path

import cv2
import mediapipe as mp
from mediapipe.tasks import python
from mediapipe.tasks.python import vision

from groom_protocol.core.config import PoseSettings
from groom_protocol.core.exceptions import PoseEstimationError
from groom_protocol.core.logging import get_logger
from groom_protocol.core.types import Frame, Pose
from groom_protocol.vision.keypoints import mean_score, to_keypoints

logger = get_logger(__name__)

MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/pose_landmarker/"
    "pose_landmarker_{variant}/float16/latest/pose_landmarker_{variant}.task"
)
DEFAULT_MODEL_DIR = Path(__file__).parent.parent.parent.parent / "data" / "models"


def _download_model(variant: str, model_dir: Path) -> Path:
    """Download the pose landmarker model if not present.

    Raises:
        PoseEstimationError: If download fails
    """
    model_path = model_dir / f"pose_landmarker_{variant}.task"
    if model_path.exists():
        return model_path

    logger.info("Downloading MediaPipe pose landmarker (%s)...", variant)
    model_dir.mkdir(parents=True, exist_ok=True)

    try:
        urllib.request.urlretrieve(MODEL_URL.format(variant=variant), model_path)
    except Exception as e:
        model_path.unlink(missing_ok=True)
        raise PoseEstimationError(f"Failed to download model: {e}") from e

    logger.info("Model downloaded to %s", model_path)
    return model_path


class PoseEstimator:
    """Wrapper for MediaPipe pose estimation using the Tasks API.

    Converts MediaPipe results to Pose/Keypoint types in frame pixels so
    MediaPipe objects never leak past this module.
    """

    def __init__(self, settings: PoseSettings | None = None) -> None:
        """Initialize pose estimator with settings.

        Args:
            settings: Pose estimation settings (uses defaults if None)
        """
        self.settings = settings or PoseSettings()
        self._landmarker: vision.PoseLandmarker | None = None
        self._last_timestamp_ms = -1

    @property
    def is_initialized(self) -> bool:
        """Check if MediaPipe model is loaded."""
        return self._landmarker is not None

    def initialize(self) -> None:
        """Load MediaPipe pose model.

        Raises:
            PoseEstimationError: If model fails to load
        """
        if self._landmarker is not None:
            return

        model_dir = Path(self.settings.model_dir) if self.settings.model_dir else DEFAULT_MODEL_DIR

        try:
            model_path = _download_model(self.settings.model_variant, model_dir)

            options = vision.PoseLandmarkerOptions(
                base_options=python.BaseOptions(model_asset_path=str(model_path)),
                running_mode=vision.RunningMode.VIDEO,
                num_poses=self.settings.num_poses,
                min_pose_detection_confidence=self.settings.min_detection_confidence,
                min_pose_presence_confidence=self.settings.min_tracking_confidence,
                min_tracking_confidence=self.settings.min_tracking_confidence,
            )

            self._landmarker = vision.PoseLandmarker.create_from_options(options)
            logger.info("MediaPipe PoseLandmarker initialized (%s)", self.settings.model_variant)

        except PoseEstimationError:
            raise
        except Exception as e:
            raise PoseEstimationError(f"Failed to initialize MediaPipe: {e}") from e

    def close(self) -> None:
        """Release MediaPipe resources."""
        if self._landmarker is not None:
            self._landmarker.close()
            self._landmarker = None
            self._last_timestamp_ms = -1

    def estimate(self, frame: Frame) -> list[Pose]:
        """Run pose estimation on a frame.

        Args:
            frame: Input video frame

        Returns:
            Detected poses, most prominent first (empty if nobody is visible)

        Raises:
            PoseEstimationError: If estimation fails
        """
        if self._landmarker is None:
            self.initialize()

        if self._landmarker is None:
            raise PoseEstimationError("Pose estimator not initialized")

        # VIDEO mode rejects non-increasing timestamps
        timestamp_ms = max(int(frame.timestamp * 1000), self._last_timestamp_ms + 1)
        self._last_timestamp_ms = timestamp_ms

        try:
            rgb_image = cv2.cvtColor(frame.image, cv2.COLOR_BGR2RGB)
            mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_image)
            results = self._landmarker.detect_for_video(mp_image, timestamp_ms)
        except Exception as e:
            logger.error("Pose estimation failed: %s", e)
            raise PoseEstimationError(f"Estimation failed: {e}") from e

        return self._convert_results(results, frame)

    def _convert_results(self, results: vision.PoseLandmarkerResult, frame: Frame) -> list[Pose]:
        """Convert MediaPipe results to Pose dataclasses."""
        poses: list[Pose] = []

        for pose_landmarks in results.pose_landmarks or []:
            keypoints = to_keypoints(pose_landmarks, frame.width, frame.height)
            poses.append(
                Pose(
                    keypoints=keypoints,
                    timestamp=frame.timestamp,
                    frame_idx=frame.index,
                    confidence=mean_score(keypoints),
                )
            )

        return poses

    def __enter__(self) -> PoseEstimator:
        """Context manager entry."""
        self.initialize()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Context manager exit."""
        self.close()

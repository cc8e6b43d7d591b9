"""Frame processing pipeline orchestration."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field

from groom_protocol.analysis.classifier import GestureClassifier
from groom_protocol.core.config import Settings, get_settings
from groom_protocol.core.logging import get_logger
from groom_protocol.core.types import (
    Frame,
    GestureAnalysis,
    GestureType,
    Pose,
    primary_pose,
)
from groom_protocol.vision.loader import Estimator, EstimatorLoader

logger = get_logger(__name__)


@dataclass
class ProcessedFrame:
    """Result of processing a single frame."""

    frame: Frame
    target: GestureType | None
    analysis: GestureAnalysis
    poses: list[Pose] = field(default_factory=list)

    @property
    def pose(self) -> Pose | None:
        """Primary pose the analysis was computed from."""
        return primary_pose(self.poses)


class GestureProcessor:
    """Feeds frames through pose estimation and gesture classification.

    Holds the currently selected target gesture and the latest poses and
    analysis, which the presentation layer reads to drive step progress.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        loader: EstimatorLoader | None = None,
    ) -> None:
        """Initialize processor with settings.

        Args:
            settings: Application settings (uses defaults if None)
            loader: Estimator loader (MediaPipe-backed if None)
        """
        self.settings = settings or get_settings()
        self._loader = loader or EstimatorLoader(self._create_estimator)
        self._classifier = GestureClassifier(self.settings.gesture)

        self._target: GestureType | None = None
        self._poses: list[Pose] = []
        self._analysis = GestureAnalysis.inactive()

    def _create_estimator(self) -> Estimator:
        # Deferred so MediaPipe is only imported when actually used
        from groom_protocol.vision.pose import PoseEstimator

        return PoseEstimator(self.settings.pose)

    @property
    def classifier(self) -> GestureClassifier:
        """Classifier used for every frame."""
        return self._classifier

    @property
    def target(self) -> GestureType | None:
        """Gesture currently being tested."""
        return self._target

    @target.setter
    def target(self, value: GestureType | str | None) -> None:
        gesture = GestureType.parse(value)
        if value is not None and gesture is None:
            logger.warning("Unknown gesture %r, clearing target", value)
        if gesture != self._target:
            logger.info("Target gesture: %s", gesture.value if gesture else "none")
        self._target = gesture

    @property
    def poses(self) -> list[Pose]:
        """Poses from the most recent frame."""
        return self._poses

    @property
    def analysis(self) -> GestureAnalysis:
        """Analysis of the most recent frame."""
        return self._analysis

    def preload(self) -> asyncio.Task[None]:
        """Start loading the pose model in the background."""
        return self._loader.preload()

    async def initialize(self) -> None:
        """Wait until the pose model is loaded."""
        await self._loader.get()
        logger.info("Gesture processor initialized")

    async def shutdown(self) -> None:
        """Release the pose model."""
        self._loader.close()
        logger.info("Gesture processor shutdown")

    def analyze(self, poses: Sequence[Pose]) -> GestureAnalysis:
        """Classify already-estimated poses against the current target.

        Args:
            poses: Poses detected in one frame, primary first

        Returns:
            Analysis, also stored as ``analysis``
        """
        self._poses = list(poses)

        if self._target is None:
            self._analysis = GestureAnalysis.inactive()
        else:
            self._analysis = self._classifier.classify_poses(self._poses, self._target)

        return self._analysis

    async def process_frame(self, frame: Frame) -> ProcessedFrame:
        """Process a single frame through the full pipeline.

        Args:
            frame: Input video frame

        Returns:
            ProcessedFrame with poses and analysis

        Raises:
            PoseEstimationError: If the model fails to load or run
        """
        estimator = await self._loader.get()
        poses = await asyncio.to_thread(estimator.estimate, frame)

        analysis = self.analyze(poses)

        return ProcessedFrame(
            frame=frame,
            target=self._target,
            analysis=analysis,
            poses=self._poses,
        )

    async def __aenter__(self) -> GestureProcessor:
        """Async context manager entry."""
        await self.initialize()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Async context manager exit."""
        await self.shutdown()

"""Application configuration via Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

GestureSetName = Literal["tutorial", "shower", "full"]


class CameraSettings(BaseSettings):
    """Webcam capture settings."""

    model_config = SettingsConfigDict(env_prefix="CAMERA_")

    index: int = 0
    width: int = 1280
    height: int = 720


class PoseSettings(BaseSettings):
    """MediaPipe pose estimation settings."""

    model_config = SettingsConfigDict(env_prefix="POSE_")

    model_variant: Literal["lite", "full", "heavy"] = "lite"
    num_poses: int = Field(default=1, ge=1)
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5
    model_dir: str | None = None


class GestureSettings(BaseSettings):
    """Gesture rule thresholds.

    Distances are in source-frame pixels and are not normalized by body size,
    so they only hold for the camera framing they were tuned on.
    """

    model_config = SettingsConfigDict(env_prefix="GESTURE_")

    gesture_set: GestureSetName = "full"
    activation_threshold: float = Field(default=0.3, ge=0.0, le=1.0)
    rub_hands_distance_px: float = Field(default=100.0, gt=0)
    scrub_head_distance_px: float = Field(default=150.0, gt=0)
    scrub_arms_distance_px: float = Field(default=120.0, gt=0)
    scrub_butt_distance_px: float = Field(default=200.0, gt=0)


class UISettings(BaseSettings):
    """Display and overlay settings."""

    model_config = SettingsConfigDict(env_prefix="UI_")

    display_width: int = 1280
    display_height: int = 720
    show_keypoints: bool = True
    show_guides: bool = True
    min_keypoint_score: float = 0.3


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = "INFO"
    file: str | None = None


class Settings(BaseSettings):
    """Root settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    camera: CameraSettings = Field(default_factory=CameraSettings)
    pose: PoseSettings = Field(default_factory=PoseSettings)
    gesture: GestureSettings = Field(default_factory=GestureSettings)
    ui: UISettings = Field(default_factory=UISettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings instance."""
    return Settings()

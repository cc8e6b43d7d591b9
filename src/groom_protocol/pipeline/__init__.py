"""Frame processing pipeline orchestration."""

from groom_protocol.pipeline.processor import GestureProcessor, ProcessedFrame

__all__ = ["GestureProcessor", "ProcessedFrame"]

"""Pure analysis logic: gesture rules and classification.

This module contains NO I/O operations and NO OpenCV imports.
All functions operate on typed dataclasses and return results.
"""

from groom_protocol.analysis.classifier import GestureClassifier, classify
from groom_protocol.analysis.rules import GESTURE_SETS, RULES, GestureRule

__all__ = ["GestureClassifier", "classify", "GestureRule", "RULES", "GESTURE_SETS"]

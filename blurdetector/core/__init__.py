"""Core module - Fundamental data structures and constants."""

from blurdetector.core.constants import (
    BLUR_LABELS,
    DEFAULT_MASK_FACTOR,
    DEFAULT_PATCH_COUNT,
    INTERPOLATION_METHODS,
    PATCH_SIZE,
    POSITIVE_LABEL,
    SAMPLING_MODES,
)
from blurdetector.core.models import BlurEvaluation, PatchResult, Rectangle

__all__ = [
    # Models
    "BlurEvaluation",
    "PatchResult",
    "Rectangle",
    # Constants
    "BLUR_LABELS",
    "DEFAULT_MASK_FACTOR",
    "DEFAULT_PATCH_COUNT",
    "INTERPOLATION_METHODS",
    "PATCH_SIZE",
    "POSITIVE_LABEL",
    "SAMPLING_MODES",
]

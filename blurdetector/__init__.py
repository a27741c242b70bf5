"""Patch-based image blur detection."""

from blurdetector.core import BlurEvaluation, PatchResult, Rectangle
from blurdetector.detection import BlurEvaluator, SamplingMode
from blurdetector.ml import ClassifierConfig, EvaluatorConfig

__version__ = "0.1.0"

__all__ = [
    "BlurEvaluation",
    "BlurEvaluator",
    "ClassifierConfig",
    "EvaluatorConfig",
    "PatchResult",
    "Rectangle",
    "SamplingMode",
    "__version__",
]

"""Machine Learning submodule.

Provides the patch classifier protocol consumed by the evaluation pipeline,
its configuration models, and a torchvision-backed implementation.
"""

from blurdetector.ml.base import PatchClassifier, PatchPrediction
from blurdetector.ml.classifier import TorchPatchClassifier, select_device
from blurdetector.ml.config import ClassifierConfig, EvaluatorConfig
from blurdetector.ml.models import build_model, count_parameters

__all__ = [
    # Configs
    "ClassifierConfig",
    "EvaluatorConfig",
    # Interfaces
    "PatchClassifier",
    "PatchPrediction",
    # Torch binding
    "TorchPatchClassifier",
    "build_model",
    "count_parameters",
    "select_device",
]

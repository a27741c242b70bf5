"""Detection module - Patch sampling, extraction and blur aggregation."""

from blurdetector.detection.aggregator import ResultAggregator
from blurdetector.detection.base import (
    BlurDetectionError,
    ClassificationError,
    EmptyPredictionSetError,
    ExtractionError,
    InvalidSamplingRegionError,
    UnknownLabelError,
)
from blurdetector.detection.evaluator import BlurEvaluator
from blurdetector.detection.extractor import PatchExtractor
from blurdetector.detection.sampler import PatchSampler, SamplingMode

__all__ = [
    # Pipeline stages
    "PatchSampler",
    "SamplingMode",
    "PatchExtractor",
    "ResultAggregator",
    "BlurEvaluator",
    # Errors
    "BlurDetectionError",
    "InvalidSamplingRegionError",
    "ExtractionError",
    "ClassificationError",
    "UnknownLabelError",
    "EmptyPredictionSetError",
]

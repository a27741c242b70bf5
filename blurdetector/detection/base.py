"""Error hierarchy shared by the blur detection pipeline stages."""

from __future__ import annotations


class BlurDetectionError(Exception):
    """Base exception for blur detection errors."""

    default_code = "BLUR_DETECTION_ERROR"

    def __init__(self, message: str, error_code: str | None = None) -> None:
        super().__init__(message)
        self.error_code = error_code or self.default_code


class InvalidSamplingRegionError(BlurDetectionError):
    """Exception raised when the mask cannot hold a single patch."""

    default_code = "INVALID_SAMPLING_REGION"


class ExtractionError(BlurDetectionError):
    """Exception raised when a patch cannot be cut from the image."""

    default_code = "EXTRACTION_FAILED"


class ClassificationError(BlurDetectionError):
    """Exception raised when the classifier fails on a batch."""

    default_code = "CLASSIFICATION_FAILED"


class UnknownLabelError(BlurDetectionError):
    """Exception raised when a prediction carries a label outside the label set."""

    default_code = "UNKNOWN_LABEL"

    def __init__(self, label: str, expected: tuple[str, ...] | list[str]) -> None:
        msg = f"Unknown label {label!r}, expected one of {list(expected)}"
        super().__init__(msg)
        self.label = label


class EmptyPredictionSetError(BlurDetectionError):
    """Exception raised when there is nothing to aggregate."""

    default_code = "EMPTY_PREDICTION_SET"

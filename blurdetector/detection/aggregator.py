"""Combine per-patch predictions into one blur probability."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np
from pydantic import ValidationError

from blurdetector.core.constants import BLUR_LABELS, POSITIVE_LABEL
from blurdetector.core.models import BlurEvaluation, PatchResult, Rectangle
from blurdetector.detection.base import (
    ClassificationError,
    EmptyPredictionSetError,
    UnknownLabelError,
)
from blurdetector.ml.base import PatchPrediction

logger = logging.getLogger(__name__)


class ResultAggregator:
    """Majority-vote aggregation of patch labels.

    Every patch casts exactly one vote for its top label, whatever its
    confidence margin. The probability is the share of votes for the
    positive label.
    """

    def __init__(
        self,
        labels: Sequence[str] = tuple(BLUR_LABELS),
        positive_label: str = POSITIVE_LABEL,
    ) -> None:
        if positive_label not in labels:
            msg = f"positive_label {positive_label!r} not in labels {list(labels)}"
            raise ValueError(msg)
        self.labels = tuple(labels)
        self.positive_label = positive_label

    def count_labels(self, predictions: Sequence[PatchPrediction]) -> dict[str, int]:
        """Count votes per label, rejecting labels outside the label set."""
        counts = dict.fromkeys(self.labels, 0)
        for prediction in predictions:
            if prediction.label not in counts:
                raise UnknownLabelError(prediction.label, self.labels)
            counts[prediction.label] += 1
        return counts

    def probability(self, counts: dict[str, int]) -> float:
        """Share of votes cast for the positive label."""
        total = sum(counts.values())
        if total == 0:
            msg = "Cannot aggregate an empty prediction set"
            raise EmptyPredictionSetError(msg)
        return counts[self.positive_label] / total

    def aggregate(
        self,
        patches: Sequence[np.ndarray],
        predictions: Sequence[PatchPrediction],
        rectangles: Sequence[Rectangle],
    ) -> BlurEvaluation:
        """Build the aggregate result from aligned patches, predictions, rectangles."""
        if not len(patches) == len(predictions) == len(rectangles):
            msg = (
                "Patches, predictions and rectangles length mismatch: "
                f"{len(patches)}, {len(predictions)}, {len(rectangles)}"
            )
            raise ClassificationError(msg, "PREDICTION_COUNT_MISMATCH")

        counts = self.count_labels(predictions)
        probability = self.probability(counts)

        results = []
        for patch, prediction, rect in zip(
            patches, predictions, rectangles, strict=True
        ):
            confidence = prediction.confidence
            if confidence is None:
                msg = f"No confidence for {prediction.label!r} at {rect}"
                raise ClassificationError(msg, "MISSING_CONFIDENCE")
            if not 0.0 <= confidence <= 1.0:
                msg = f"Confidence {confidence} for {prediction.label!r} at {rect}"
                msg += " is outside [0, 1]"
                raise ClassificationError(msg, "INVALID_CONFIDENCE")
            try:
                result = PatchResult(
                    image=patch,
                    label=prediction.label,
                    confidence=confidence,
                    rectangle=rect,
                )
            except ValidationError as e:
                msg = f"Invalid patch result at {rect}: {e}"
                raise ClassificationError(msg) from e
            results.append(result)

        return BlurEvaluation(
            probability=probability,
            results=results,
            label_counts=counts,
            positive_label=self.positive_label,
        )

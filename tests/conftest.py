"""Shared fixtures: synthetic images and a scripted patch classifier."""

from __future__ import annotations

from collections.abc import Callable, Sequence

import numpy as np
import pytest

from blurdetector.ml.base import PatchPrediction


class ScriptedClassifier:
    """Classifier double returning a fixed label sequence."""

    def __init__(
        self,
        labels_out: Sequence[str],
        confidence: float = 0.9,
        labels: Sequence[str] = ("blurred", "focused"),
    ) -> None:
        self.labels = list(labels)
        self.labels_out = list(labels_out)
        self.confidence = confidence
        self.calls: list[int] = []

    def classify(self, patches: Sequence[np.ndarray]) -> list[PatchPrediction]:
        self.calls.append(len(patches))
        predictions = []
        for i in range(len(patches)):
            label = self.labels_out[i % len(self.labels_out)]
            others = {name: 1.0 - self.confidence for name in self.labels}
            confidences = {**others, label: self.confidence}
            predictions.append(PatchPrediction(label=label, confidences=confidences))
        return predictions


@pytest.fixture
def scripted_classifier() -> Callable[..., ScriptedClassifier]:
    """Build a classifier double that cycles through the given labels."""
    return ScriptedClassifier


@pytest.fixture
def image_1000() -> np.ndarray:
    """1000x1000 RGB image filled with seeded noise."""
    rng = np.random.default_rng(0)
    return rng.integers(0, 256, size=(1000, 1000, 3), dtype=np.uint8)

"""Classifier interface consumed by the blur evaluation pipeline."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

import numpy as np


@dataclass
class PatchPrediction:
    """Backend-agnostic prediction for one patch."""

    label: str
    confidences: dict[str, float] = field(default_factory=dict)  # label -> [0, 1]

    @property
    def confidence(self) -> float | None:
        """Get the confidence of the predicted label, if reported."""
        return self.confidences.get(self.label)


@runtime_checkable
class PatchClassifier(Protocol):
    """Binary blur classifier over a batch of fixed-size RGB patches."""

    labels: Sequence[str]

    def classify(self, patches: Sequence[np.ndarray]) -> list[PatchPrediction]:
        """Predict one label per patch, preserving order."""
        ...

"""Torch binding of the patch classifier protocol."""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from pathlib import Path

import numpy as np
import torch
from torchvision.transforms import v2 as T

from blurdetector.ml.base import PatchPrediction
from blurdetector.ml.config import ClassifierConfig
from blurdetector.ml.models import build_model, count_parameters

logger = logging.getLogger(__name__)

IMAGENET_MEAN = [0.485, 0.456, 0.406]
IMAGENET_STD = [0.229, 0.224, 0.225]


def select_device(preferred: str | None = None) -> torch.device:
    """Select an appropriate torch.device."""
    if preferred is not None and preferred != "auto":
        return torch.device(preferred)
    if torch.cuda.is_available():
        return torch.device("cuda")
    # MPS may not exist on all builds
    if getattr(torch.backends, "mps", None) and torch.backends.mps.is_available():
        return torch.device("mps")
    return torch.device("cpu")


class TorchPatchClassifier:
    """Blurred/focused patch classifier backed by a torchvision network.

    One instance may be shared by concurrent evaluations; inference calls are
    serialized on an internal lock.
    """

    def __init__(self, config: ClassifierConfig | None = None) -> None:
        self.config = config or ClassifierConfig()
        self.labels: list[str] = list(self.config.labels)
        self.input_size = (self.config.input_size, self.config.input_size)
        self.device = select_device(self.config.device)
        self.model = build_model(self.config).to(self.device)
        self.model.eval()
        self.transforms = T.Compose(
            [
                T.ToImage(),
                T.ToDtype(torch.float32, scale=True),
                T.Normalize(mean=IMAGENET_MEAN, std=IMAGENET_STD),
            ]
        )
        self._lock = threading.Lock()

        logger.info(
            "Built %s classifier on %s (%d parameters)",
            self.config.arch,
            self.device,
            count_parameters(self.model)["total"],
        )

        if self.config.checkpoint_path is not None:
            self.load_checkpoint(self.config.checkpoint_path)

    def load_checkpoint(self, checkpoint_path: Path) -> None:
        """Load model weights from a state dict or a training checkpoint."""
        if not checkpoint_path.exists():
            msg = f"Checkpoint file not found: {checkpoint_path}"
            raise FileNotFoundError(msg)

        ckpt = torch.load(checkpoint_path, map_location=self.device)
        state = ckpt.get("model_state", ckpt) if isinstance(ckpt, dict) else ckpt
        self.model.load_state_dict(state)
        self.model.eval()
        logger.info("Loaded checkpoint: %s", checkpoint_path)

    def _to_tensor(self, patch: np.ndarray) -> torch.Tensor:
        if patch.shape[:2] != (self.input_size[1], self.input_size[0]):
            msg = (
                f"Patch shape {patch.shape[:2]} does not match classifier input "
                f"{self.input_size[1]}x{self.input_size[0]}"
            )
            raise ValueError(msg)
        return self.transforms(patch)

    @torch.no_grad()
    def _predict_batch(self, patches: Sequence[np.ndarray]) -> list[PatchPrediction]:
        batch = torch.stack([self._to_tensor(p) for p in patches]).to(self.device)
        probs = torch.softmax(self.model(batch), dim=1).cpu().numpy()

        predictions = []
        for row in probs:
            confidences = {
                label: float(score)
                for label, score in zip(self.labels, row, strict=True)
            }
            label = self.labels[int(np.argmax(row))]
            predictions.append(PatchPrediction(label=label, confidences=confidences))
        return predictions

    def classify(self, patches: Sequence[np.ndarray]) -> list[PatchPrediction]:
        """Predict blurred/focused for each patch, preserving order."""
        if not patches:
            return []

        predictions: list[PatchPrediction] = []
        batch_size = self.config.batch_size
        with self._lock:
            for i in range(0, len(patches), batch_size):
                predictions.extend(self._predict_batch(patches[i : i + batch_size]))
        return predictions

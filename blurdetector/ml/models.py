"""Model builder utilities for patch classifiers."""

from __future__ import annotations

import logging
from typing import Any

import torchvision
from torch import nn

from blurdetector.ml.config import ClassifierConfig

logger = logging.getLogger(__name__)


def build_model(cfg: ClassifierConfig) -> nn.Module:
    """Create a torchvision classification model with a len(labels)-way head."""
    num_classes = len(cfg.labels)
    name = cfg.arch

    if name == "mobilenet_v2":
        model = torchvision.models.mobilenet_v2(
            weights=(
                torchvision.models.MobileNet_V2_Weights.DEFAULT
                if cfg.pretrained
                else None
            ),
        )
        in_features = model.classifier[-1].in_features
        model.classifier[-1] = nn.Linear(in_features, num_classes)

    elif name == "resnet18":
        model = torchvision.models.resnet18(
            weights=(
                torchvision.models.ResNet18_Weights.DEFAULT if cfg.pretrained else None
            ),
        )
        model.fc = nn.Linear(model.fc.in_features, num_classes)
    else:
        msg = f"Unsupported model name: {name}"
        raise ValueError(msg)

    logger.debug("Built %s with a %d-way head", name, num_classes)
    return model


def count_parameters(model: nn.Module) -> dict[str, Any]:
    """Count total and trainable parameters."""
    counts = {"total": 0, "trainable": 0}
    for param in model.parameters():
        counts["total"] += param.numel()
        if param.requires_grad:
            counts["trainable"] += param.numel()
    return counts

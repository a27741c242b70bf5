"""Configuration models for the classifier and the evaluation pipeline."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Literal, Self

from pydantic import BaseModel, Field, field_validator, model_validator

from blurdetector.core.constants import (
    BLUR_LABELS,
    DEFAULT_MASK_FACTOR,
    DEFAULT_PATCH_COUNT,
    PATCH_SIZE,
    POSITIVE_LABEL,
)


def _read_json(path: Path) -> dict:
    if not path.exists():
        msg = f"Config file not found: {path}"
        raise FileNotFoundError(msg)
    return json.loads(path.read_text(encoding="utf-8"))


class ClassifierConfig(BaseModel):
    """Patch classifier configuration."""

    arch: Literal["mobilenet_v2", "resnet18"] = "mobilenet_v2"
    labels: list[str] = Field(
        default_factory=lambda: list(BLUR_LABELS), description="Ordered class names"
    )
    input_size: int = Field(PATCH_SIZE[0], ge=32, description="Square patch side")
    batch_size: int = Field(32, ge=1)
    pretrained: bool = False
    checkpoint_path: Path | None = Field(None, description="Trained weights")
    device: str | None = Field(None, description="'cuda', 'mps', 'cpu' or auto")

    @field_validator("labels")
    @classmethod
    def _validate_labels(cls, v: list[str]) -> list[str]:
        expected_count = 2
        if len(v) != expected_count or len(set(v)) != expected_count:
            msg = f"labels must be two distinct names, got {v}"
            raise ValueError(msg)
        return v

    @field_validator("checkpoint_path")
    @classmethod
    def _to_path(cls, v: Path | None) -> Path | None:
        return None if v is None else Path(v)

    @classmethod
    def from_file(cls, path: Path) -> ClassifierConfig:
        """Load configuration from a JSON file."""
        return cls.model_validate(_read_json(path))


class EvaluatorConfig(BaseModel):
    """Defaults applied by the blur evaluator when a call does not override them."""

    patch_count: int = Field(DEFAULT_PATCH_COUNT, ge=1)
    mask_factor: float = Field(DEFAULT_MASK_FACTOR, gt=0.0, le=1.0)
    sampling: Literal["random", "uniform"] = "random"
    patch_size: tuple[int, int] = Field(PATCH_SIZE, description="(width, height)")
    seed: int | None = Field(None, description="Seed for random sampling")
    extraction_workers: int = Field(1, ge=1)
    max_workers: int = Field(1, ge=1, description="Concurrent background evaluations")
    labels: list[str] = Field(default_factory=lambda: list(BLUR_LABELS))
    positive_label: str = POSITIVE_LABEL

    @field_validator("patch_size")
    @classmethod
    def _validate_patch_size(cls, v: tuple[int, int]) -> tuple[int, int]:
        if v[0] < 1 or v[1] < 1:
            msg = f"patch_size must be positive, got {v}"
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def _validate_positive_label(self) -> Self:
        if self.positive_label not in self.labels:
            msg = f"positive_label {self.positive_label!r} not in labels {self.labels}"
            raise ValueError(msg)
        return self

    @classmethod
    def from_file(cls, path: Path) -> EvaluatorConfig:
        """Load configuration from a JSON file."""
        return cls.model_validate(_read_json(path))

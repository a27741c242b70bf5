"""Tests for configuration models."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from blurdetector.ml.config import ClassifierConfig, EvaluatorConfig


class TestClassifierConfig:
    """Test classifier configuration."""

    def test_defaults(self) -> None:
        """Defaults describe a 224px MobileNetV2 blur classifier."""
        config = ClassifierConfig()
        assert config.arch == "mobilenet_v2"
        assert config.labels == ["blurred", "focused"]
        assert config.input_size == 224
        assert config.checkpoint_path is None

    def test_labels_must_be_two_distinct(self) -> None:
        """The label space is binary."""
        with pytest.raises(ValidationError, match="two distinct names"):
            ClassifierConfig(labels=["blurred", "blurred"])
        with pytest.raises(ValidationError, match="two distinct names"):
            ClassifierConfig(labels=["a", "b", "c"])

    def test_unknown_arch(self) -> None:
        """Only supported architectures are accepted."""
        with pytest.raises(ValidationError):
            ClassifierConfig(arch="vgg16")

    def test_checkpoint_path_coerced(self) -> None:
        """String paths become Path objects."""
        config = ClassifierConfig(checkpoint_path="models/blur.pt")
        assert config.checkpoint_path == Path("models/blur.pt")

    def test_from_file(self, tmp_path: Path) -> None:
        """Configuration loads from JSON."""
        path = tmp_path / "classifier.json"
        path.write_text(json.dumps({"arch": "resnet18", "batch_size": 8}))
        config = ClassifierConfig.from_file(path)
        assert config.arch == "resnet18"
        assert config.batch_size == 8


class TestEvaluatorConfig:
    """Test evaluator configuration."""

    def test_defaults(self) -> None:
        """Defaults are 50 random patches over the central 70%."""
        config = EvaluatorConfig()
        assert config.patch_count == 50
        assert config.mask_factor == 0.7
        assert config.sampling == "random"
        assert config.patch_size == (224, 224)
        assert config.positive_label == "blurred"

    @pytest.mark.parametrize("factor", [0.0, 1.01, -1.0])
    def test_mask_factor_range(self, factor: float) -> None:
        """Mask factor must lie in (0, 1]."""
        with pytest.raises(ValidationError):
            EvaluatorConfig(mask_factor=factor)

    def test_patch_count_positive(self) -> None:
        """Patch count must be at least one."""
        with pytest.raises(ValidationError):
            EvaluatorConfig(patch_count=0)

    def test_sampling_mode(self) -> None:
        """Only random and uniform sampling exist."""
        assert EvaluatorConfig(sampling="uniform").sampling == "uniform"
        with pytest.raises(ValidationError):
            EvaluatorConfig(sampling="grid")

    def test_patch_size_positive(self) -> None:
        """Patch dimensions must be positive."""
        with pytest.raises(ValidationError, match="patch_size must be positive"):
            EvaluatorConfig(patch_size=(0, 224))

    def test_positive_label_in_labels(self) -> None:
        """The positive label must be part of the label set."""
        with pytest.raises(ValidationError, match="positive_label"):
            EvaluatorConfig(positive_label="sharp")

    def test_from_file(self, tmp_path: Path) -> None:
        """Configuration loads from JSON, lists become tuples."""
        path = tmp_path / "evaluator.json"
        data = {"patch_count": 20, "sampling": "uniform", "patch_size": [112, 112]}
        path.write_text(json.dumps(data))
        config = EvaluatorConfig.from_file(path)
        assert config.patch_count == 20
        assert config.patch_size == (112, 112)

    def test_from_missing_file(self, tmp_path: Path) -> None:
        """A missing file is reported."""
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            EvaluatorConfig.from_file(tmp_path / "nope.json")

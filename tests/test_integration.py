"""Integration tests for the complete blur detection pipeline."""

from __future__ import annotations

from pathlib import Path

import cv2
import numpy as np
import pytest

from blurdetector import (
    BlurEvaluator,
    ClassifierConfig,
    EvaluatorConfig,
    Rectangle,
)
from blurdetector.ml import TorchPatchClassifier
from blurdetector.utils import ImageUtils


@pytest.fixture(scope="module")
def torch_classifier() -> TorchPatchClassifier:
    """Small untrained classifier so the pipeline runs quickly on CPU."""
    return TorchPatchClassifier(
        ClassifierConfig(input_size=32, batch_size=16, device="cpu")
    )


def _checkerboard(height: int, width: int, cell: int = 16) -> np.ndarray:
    ys, xs = np.indices((height, width))
    board = (((ys // cell) + (xs // cell)) % 2 * 255).astype(np.uint8)
    return np.stack([board, board, board], axis=-1)


def test_pipeline_with_torch_classifier(torch_classifier, tmp_path: Path) -> None:
    """An image on disk flows through every stage to a valid evaluation."""
    sharp = _checkerboard(600, 800)
    path = tmp_path / "board.png"
    cv2.imwrite(str(path), sharp)

    config = EvaluatorConfig(patch_count=12, seed=3)
    with BlurEvaluator(torch_classifier, config) as evaluator:
        evaluation = evaluator.evaluate_path(path)

    assert 0.0 <= evaluation.probability <= 1.0
    assert evaluation.patch_count == 12
    assert sum(evaluation.label_counts.values()) == 12
    assert evaluation.mask == Rectangle(x=120, y=90, width=560, height=420)
    for result in evaluation.results:
        assert result.image.shape == (32, 32, 3)
        assert result.label in ("blurred", "focused")
        assert evaluation.mask.contains(result.rectangle)
    expected = evaluation.label_counts["blurred"] / evaluation.patch_count
    assert evaluation.probability == expected


def test_uniform_pipeline_with_torch_classifier(torch_classifier) -> None:
    """Uniform sampling tiles the mask and every tile is classified."""
    image = cv2.GaussianBlur(_checkerboard(480, 640), (31, 31), 0)
    evaluator = BlurEvaluator(torch_classifier, EvaluatorConfig())
    evaluation = evaluator.evaluate(
        image, patch_count=6, sampling="uniform", mask_factor=1.0
    )

    assert evaluation.sampling == "uniform"
    assert evaluation.patch_count == 6
    xs = sorted({r.x for r in evaluation.rectangles})
    ys = sorted({r.y for r in evaluation.rectangles})
    assert xs[0] == 0 and xs[-1] == 640 - 224
    assert ys[0] == 0 and ys[-1] == 480 - 224


def test_background_evaluations(image_1000, scripted_classifier) -> None:
    """Several background evaluations resolve independently."""
    config = EvaluatorConfig(max_workers=2, seed=11)
    classifier = scripted_classifier(["blurred", "focused", "focused", "focused"])
    with BlurEvaluator(classifier, config) as evaluator:
        futures = [
            evaluator.submit(image_1000, patch_count=8, mask_factor=1.0)
            for _ in range(3)
        ]
        results = [future.result(timeout=60) for future in futures]

    for evaluation in results:
        assert evaluation.probability == 0.25
        assert evaluation.patch_count == 8


def test_saved_patches_round_trip(image_1000, scripted_classifier, tmp_path) -> None:
    """Result patches can be written to disk and read back unchanged."""
    evaluator = BlurEvaluator(scripted_classifier(["focused"]), EvaluatorConfig(seed=4))
    evaluation = evaluator.evaluate(image_1000, patch_count=2)

    for i, result in enumerate(evaluation.results):
        path = tmp_path / f"patch_{i:03d}_{result.label}.png"
        ImageUtils.save_image(result.image, path)
        assert np.array_equal(ImageUtils.load_image(path), result.image)

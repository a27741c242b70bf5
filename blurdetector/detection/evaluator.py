"""Blur evaluator wiring sampling, extraction, classification and aggregation."""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any

import numpy as np

from blurdetector.core.constants import PATCH_SIZE
from blurdetector.core.models import BlurEvaluation, Rectangle
from blurdetector.detection.aggregator import ResultAggregator
from blurdetector.detection.base import (
    BlurDetectionError,
    ClassificationError,
    InvalidSamplingRegionError,
)
from blurdetector.detection.extractor import PatchExtractor
from blurdetector.detection.sampler import PatchSampler, SamplingMode
from blurdetector.ml.base import PatchClassifier, PatchPrediction
from blurdetector.ml.config import EvaluatorConfig
from blurdetector.utils.image import ImageUtils

logger = logging.getLogger(__name__)


class BlurEvaluator:
    """Estimate how blurred an image is from classified patches.

    The evaluator owns the classifier handle and the configured defaults for
    its lifetime. Each call runs sample -> extract -> classify -> aggregate in
    order and either returns a complete ``BlurEvaluation`` or raises the first
    ``BlurDetectionError`` encountered; partial results are never returned.
    """

    def __init__(
        self,
        classifier: PatchClassifier,
        config: EvaluatorConfig | None = None,
        *,
        sampler: PatchSampler | None = None,
        extractor: PatchExtractor | None = None,
        aggregator: ResultAggregator | None = None,
    ) -> None:
        self.classifier = classifier
        self.config = config or EvaluatorConfig()
        self.sampler = sampler or PatchSampler(seed=self.config.seed)
        self.extractor = extractor or PatchExtractor(
            input_size=getattr(classifier, "input_size", PATCH_SIZE),
            workers=self.config.extraction_workers,
        )
        self.aggregator = aggregator or ResultAggregator(
            labels=self.config.labels,
            positive_label=self.config.positive_label,
        )
        if set(classifier.labels) != set(self.aggregator.labels):
            msg = (
                f"Classifier labels {list(classifier.labels)} do not match "
                f"evaluation labels {list(self.aggregator.labels)}"
            )
            raise ValueError(msg)
        self._executor: ThreadPoolExecutor | None = None

    def resolve_mask(
        self,
        image: np.ndarray,
        mask: Rectangle | None = None,
        mask_factor: float | None = None,
    ) -> Rectangle:
        """Resolve an explicit mask or a mask factor to a rectangle in the image."""
        if mask is not None and mask_factor is not None:
            msg = "Pass either mask or mask_factor, not both"
            raise ValueError(msg)

        width, height = ImageUtils.image_size(image)
        if mask is not None:
            if not mask.fits(width, height):
                msg = f"Mask {mask} exceeds image bounds {width}x{height}"
                raise InvalidSamplingRegionError(msg)
            return mask

        factor = self.config.mask_factor if mask_factor is None else mask_factor
        return Rectangle.from_mask_factor(width, height, factor)

    def evaluate(
        self,
        image: np.ndarray,
        patch_count: int | None = None,
        sampling: SamplingMode | str | None = None,
        mask: Rectangle | None = None,
        mask_factor: float | None = None,
    ) -> BlurEvaluation:
        """Predict the blur probability of ``image``.

        Args:
            image: Source image, (H, W) or (H, W, C) with 1, 3 or 4 channels.
            patch_count: Number of patches; with uniform sampling the realized
                count may differ slightly in favor of even coverage.
            sampling: ``"random"`` or ``"uniform"``.
            mask: Explicit region to sample from.
            mask_factor: Fraction of each image side to sample from, centered.

        Raises:
            ValueError: If the patch count is below one.
            BlurDetectionError: If any pipeline stage fails.

        """
        ImageUtils.validate_image(image)
        count = self.config.patch_count if patch_count is None else patch_count
        mode = SamplingMode(sampling or self.config.sampling)
        timings: dict[str, float] = {}
        start = time.perf_counter()

        region = self.resolve_mask(image, mask, mask_factor)
        rectangles = self.sampler.sample(region, self.config.patch_size, count, mode)
        timings["sampling"] = time.perf_counter() - start

        stage = time.perf_counter()
        patches = self.extractor.extract(image, rectangles)
        timings["extraction"] = time.perf_counter() - stage

        stage = time.perf_counter()
        predictions = self._classify(patches)
        timings["classification"] = time.perf_counter() - stage

        stage = time.perf_counter()
        evaluation = self.aggregator.aggregate(patches, predictions, rectangles)
        timings["aggregation"] = time.perf_counter() - stage
        timings["total"] = time.perf_counter() - start

        logger.info(
            "%s\nPatch extraction: %.3fs\nBatch prediction: %.3fs",
            evaluation.label_counts,
            timings["extraction"],
            timings["classification"],
        )

        return evaluation.model_copy(
            update={"timings": timings, "mask": region, "sampling": mode.value}
        )

    def _classify(self, patches: list[np.ndarray]) -> list[PatchPrediction]:
        try:
            predictions = list(self.classifier.classify(patches))
        except BlurDetectionError:
            raise
        except Exception as e:
            msg = f"Batch classification of {len(patches)} patches failed: {e}"
            logger.exception(msg)
            raise ClassificationError(msg) from e

        if len(predictions) != len(patches):
            msg = (
                f"Classifier returned {len(predictions)} predictions "
                f"for {len(patches)} patches"
            )
            raise ClassificationError(msg, "PREDICTION_COUNT_MISMATCH")
        return predictions

    def evaluate_path(self, image_path: Path, **kwargs: Any) -> BlurEvaluation:
        """Load an image from disk and evaluate it."""
        image = ImageUtils.load_image(image_path, color_mode="RGB")
        return self.evaluate(image, **kwargs)

    def submit(self, image: np.ndarray, **kwargs: Any) -> Future[BlurEvaluation]:
        """Run one evaluation as a background task.

        Failures are raised from ``Future.result()``.
        """
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.config.max_workers,
                thread_name_prefix="blur-evaluator",
            )
        return self._executor.submit(self.evaluate, image, **kwargs)

    def close(self) -> None:
        """Shut down the background executor, waiting for running evaluations."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> BlurEvaluator:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

"""Cut classifier-ready patches out of a source image."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from blurdetector.core.constants import PATCH_SIZE
from blurdetector.core.models import Rectangle
from blurdetector.detection.base import ExtractionError
from blurdetector.utils.image import ImageUtils, is_quality_interpolation

logger = logging.getLogger(__name__)


class PatchExtractor:
    """Crop each sampled rectangle and resize it to the classifier input size."""

    def __init__(
        self,
        input_size: tuple[int, int] = PATCH_SIZE,
        interpolation: str = "INTER_LINEAR",
        workers: int = 1,
    ) -> None:
        if not is_quality_interpolation(interpolation):
            msg = f"interpolation must be bilinear or better, got {interpolation}"
            raise ValueError(msg)

        if workers < 1:
            msg = f"workers must be >= 1, got {workers}"
            raise ValueError(msg)

        self.input_size = input_size
        self.interpolation = interpolation
        self.workers = workers

    def extract(
        self, image: np.ndarray, rectangles: Sequence[Rectangle]
    ) -> list[np.ndarray]:
        """Extract one RGB patch per rectangle, in rectangle order."""
        rgb = ImageUtils.to_rgb(image)

        if self.workers > 1 and len(rectangles) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                return list(
                    pool.map(lambda rect: self._extract_one(rgb, rect), rectangles)
                )

        return [self._extract_one(rgb, rect) for rect in rectangles]

    def _extract_one(self, image: np.ndarray, rect: Rectangle) -> np.ndarray:
        try:
            crop = ImageUtils.crop_image(image, rect)
            return ImageUtils.resize_image(crop, self.input_size, self.interpolation)
        except (ValueError, RuntimeError) as e:
            width, height = ImageUtils.image_size(image)
            msg = f"Failed to extract patch at {rect} from {width}x{height} image: {e}"
            logger.exception(msg)
            raise ExtractionError(msg) from e

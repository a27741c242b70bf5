"""Patch sampling strategies over a mask rectangle."""

from __future__ import annotations

import logging
import math
from enum import Enum

import numpy as np

from blurdetector.core.models import Rectangle
from blurdetector.detection.base import InvalidSamplingRegionError

logger = logging.getLogger(__name__)


class SamplingMode(str, Enum):
    """How patch locations are chosen inside the mask."""

    RANDOM = "random"
    UNIFORM = "uniform"


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


class PatchSampler:
    """Produce patch rectangles that lie entirely inside a mask rectangle.

    ``random`` draws independent top-left corners, so patches may overlap or
    repeat. ``uniform`` lays a near-regular grid over the mask; its realized
    patch count can differ from the requested one by at most the number of
    patches along the shorter grid axis.
    """

    def __init__(self, seed: int | np.random.Generator | None = None) -> None:
        if isinstance(seed, np.random.Generator):
            self.rng = seed
        else:
            self.rng = np.random.default_rng(seed)

    def sample(
        self,
        mask: Rectangle,
        patch_size: tuple[int, int],
        count: int,
        mode: SamplingMode | str = SamplingMode.RANDOM,
    ) -> list[Rectangle]:
        """Sample patch rectangles inside ``mask``."""
        patch_width, patch_height = patch_size
        if patch_width < 1 or patch_height < 1:
            msg = f"patch size must be positive, got {patch_size}"
            raise ValueError(msg)

        if count < 1:
            msg = f"count must be >= 1, got {count}"
            raise ValueError(msg)

        if mask.width < patch_width or mask.height < patch_height:
            msg = (
                f"Mask {mask} is smaller than patch size "
                f"{patch_width}x{patch_height}"
            )
            raise InvalidSamplingRegionError(msg)

        mode = SamplingMode(mode)
        if mode is SamplingMode.RANDOM:
            rectangles = self._sample_random(mask, patch_width, patch_height, count)
        else:
            rectangles = self._sample_uniform(mask, patch_width, patch_height, count)

        logger.debug(
            "Sampled %d %s patches (requested %d) in %s",
            len(rectangles),
            mode.value,
            count,
            mask,
        )
        return rectangles

    def _sample_random(
        self, mask: Rectangle, patch_width: int, patch_height: int, count: int
    ) -> list[Rectangle]:
        # integers() upper bound is exclusive
        xs = self.rng.integers(mask.x, mask.x2 - patch_width + 1, size=count)
        ys = self.rng.integers(mask.y, mask.y2 - patch_height + 1, size=count)
        return [
            Rectangle(x=int(x), y=int(y), width=patch_width, height=patch_height)
            for x, y in zip(xs, ys, strict=True)
        ]

    def _sample_uniform(
        self, mask: Rectangle, patch_width: int, patch_height: int, count: int
    ) -> list[Rectangle]:
        rows, cols = self.grid_shape(mask, count)
        ys = self._axis_positions(mask.y, mask.height, patch_height, rows)
        xs = self._axis_positions(mask.x, mask.width, patch_width, cols)
        return [
            Rectangle(x=x, y=y, width=patch_width, height=patch_height)
            for y in ys
            for x in xs
        ]

    @staticmethod
    def grid_shape(mask: Rectangle, count: int) -> tuple[int, int]:
        """Get (rows, cols) of the uniform grid for ``count`` patches.

        The shorter mask side gets ``round(sqrt(count * short / long))`` cells,
        capped at ``isqrt(count)`` so it never exceeds the longer side; the
        longer side gets ``round(count / n_short)``.
        """
        if count < 1:
            msg = f"count must be >= 1, got {count}"
            raise ValueError(msg)

        short_side = min(mask.width, mask.height)
        long_side = max(mask.width, mask.height)

        n_short = _round_half_up(math.sqrt(count * short_side / long_side))
        n_short = max(1, min(n_short, math.isqrt(count)))
        n_long = max(1, _round_half_up(count / n_short))

        if mask.width >= mask.height:
            return n_short, n_long
        return n_long, n_short

    @staticmethod
    def _axis_positions(origin: int, extent: int, patch: int, cells: int) -> list[int]:
        """Spread ``cells`` patch origins evenly from edge to edge."""
        free = extent - patch
        if cells == 1:
            return [origin + free // 2]
        step = free / (cells - 1)
        return [origin + _round_half_up(i * step) for i in range(cells)]

"""Core data models for patch-based blur detection."""

from __future__ import annotations

import numpy as np
from PIL import Image
from pydantic import BaseModel, Field, field_validator

from blurdetector.core.constants import POSITIVE_LABEL


class Rectangle(BaseModel):
    """Axis-aligned rectangle in source image pixel coordinates."""

    x: int = Field(..., ge=0, description="Left coordinate (0-based)")
    y: int = Field(..., ge=0, description="Top coordinate (0-based)")
    width: int = Field(..., gt=0, description="Rectangle width (must be > 0)")
    height: int = Field(..., gt=0, description="Rectangle height (must be > 0)")

    model_config = {
        "frozen": True,  # Make immutable
    }

    @property
    def area(self) -> int:
        """Calculate the area of the rectangle."""
        return self.width * self.height

    @property
    def center(self) -> tuple[int, int]:
        """Get the center coordinates of the rectangle."""
        return (self.x + self.width // 2, self.y + self.height // 2)

    @property
    def x2(self) -> int:
        """Get the right coordinate (exclusive)."""
        return self.x + self.width

    @property
    def y2(self) -> int:
        """Get the bottom coordinate (exclusive)."""
        return self.y + self.height

    @property
    def size(self) -> tuple[int, int]:
        """Get (width, height)."""
        return (self.width, self.height)

    def contains(self, other: Rectangle) -> bool:
        """Check if another rectangle lies entirely inside this one."""
        return (
            self.x <= other.x
            and self.y <= other.y
            and other.x2 <= self.x2
            and other.y2 <= self.y2
        )

    def fits(self, image_width: int, image_height: int) -> bool:
        """Check if the rectangle lies within image bounds."""
        return self.x2 <= image_width and self.y2 <= image_height

    def to_tuple(self) -> tuple[int, int, int, int]:
        """Return (x, y, width, height)."""
        return (self.x, self.y, self.width, self.height)

    @classmethod
    def full_image(cls, image_width: int, image_height: int) -> Rectangle:
        """Create a rectangle covering the whole image."""
        return cls(x=0, y=0, width=image_width, height=image_height)

    @classmethod
    def from_mask_factor(
        cls, image_width: int, image_height: int, factor: float
    ) -> Rectangle:
        """Create a rectangle centered in the image, scaled by factor per side.

        A factor of 1.0 covers the whole image. Sizes are floored to whole
        pixels and the remaining margin is split evenly around the rectangle.
        """
        if not 0.0 < factor <= 1.0:
            msg = f"mask factor must be in (0, 1], got {factor}"
            raise ValueError(msg)

        if factor == 1.0:
            return cls.full_image(image_width, image_height)

        width = int(image_width * factor)
        height = int(image_height * factor)
        if width < 1 or height < 1:
            msg = (
                f"mask factor {factor} leaves an empty region "
                f"for a {image_width}x{image_height} image"
            )
            raise ValueError(msg)

        return cls(
            x=(image_width - width) // 2,
            y=(image_height - height) // 2,
            width=width,
            height=height,
        )

    def __str__(self) -> str:
        """Return string representation."""
        return f"Rectangle(x={self.x}, y={self.y}, w={self.width}, h={self.height})"


class PatchResult(BaseModel):
    """Classification outcome of a single patch."""

    image: np.ndarray = Field(..., description="Patch pixels (H, W, 3) RGB uint8")
    label: str = Field(..., min_length=1, description="Predicted class label")
    confidence: float = Field(
        ..., ge=0.0, le=1.0, description="Confidence of the predicted label"
    )
    rectangle: Rectangle = Field(..., description="Source region of the patch")

    model_config = {
        "frozen": True,
        "arbitrary_types_allowed": True,
    }

    @field_validator("image")
    @classmethod
    def validate_image(cls, v: np.ndarray) -> np.ndarray:
        """Ensure the patch holds pixel data."""
        if not isinstance(v, np.ndarray) or v.size == 0:
            msg = "Patch image must be a non-empty numpy array"
            raise ValueError(msg)
        return v

    def to_pil(self) -> Image.Image:
        """Convert the patch to a PIL image."""
        return Image.fromarray(np.ascontiguousarray(self.image))

    def __repr__(self) -> str:
        """Return detailed representation."""
        return (
            f"PatchResult(label={self.label!r}, confidence={self.confidence:.3f}, "
            f"rectangle={self.rectangle})"
        )


class BlurEvaluation(BaseModel):
    """Aggregated blur probability with its per-patch breakdown."""

    probability: float = Field(
        ..., ge=0.0, le=1.0, description="Fraction of patches voted blurred"
    )
    results: list[PatchResult] = Field(
        default_factory=list, description="Per-patch results in sampling order"
    )
    label_counts: dict[str, int] = Field(
        default_factory=dict, description="Number of votes per label"
    )
    timings: dict[str, float] = Field(
        default_factory=dict, description="Stage durations in seconds"
    )
    mask: Rectangle | None = Field(default=None, description="Sampled region")
    sampling: str | None = Field(default=None, description="Sampling mode used")
    positive_label: str = Field(
        default=POSITIVE_LABEL, description="Label counted towards the probability"
    )

    model_config = {
        "frozen": True,
        "arbitrary_types_allowed": True,
    }

    @property
    def patch_count(self) -> int:
        """Get the number of evaluated patches."""
        return len(self.results)

    @property
    def rectangles(self) -> list[Rectangle]:
        """Get all patch rectangles in order."""
        return [result.rectangle for result in self.results]

    @property
    def labels(self) -> list[str]:
        """Get all predicted labels in order."""
        return [result.label for result in self.results]

    def results_for(self, label: str) -> list[PatchResult]:
        """Get patch results with the given label."""
        return [result for result in self.results if result.label == label]

    @property
    def blurred_results(self) -> list[PatchResult]:
        """Get patches voted for the positive label."""
        return self.results_for(self.positive_label)

    @property
    def focused_results(self) -> list[PatchResult]:
        """Get patches voted for any other label."""
        return [r for r in self.results if r.label != self.positive_label]

    def is_blurred(self, threshold: float = 0.5) -> bool:
        """Check whether the blur probability reaches the threshold."""
        return self.probability >= threshold

    def __str__(self) -> str:
        """Return string representation."""
        return (
            f"BlurEvaluation(probability={self.probability:.3f}, "
            f"patches={self.patch_count})"
        )

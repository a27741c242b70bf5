"""Image utilities for loading, converting, cropping and resizing."""

from __future__ import annotations

import logging
from pathlib import Path

import cv2
import numpy as np

from blurdetector.core.constants import INTERPOLATION_METHODS
from blurdetector.core.models import Rectangle

logger = logging.getLogger(__name__)

# Constants for image validation
GRAY_CHANNELS = 1
RGB_CHANNELS = 3
RGBA_CHANNELS = 4
VALID_IMAGE_CHANNELS = [GRAY_CHANNELS, RGB_CHANNELS, RGBA_CHANNELS]

INTERPOLATION_FLAGS = {
    "INTER_NEAREST": cv2.INTER_NEAREST,
    "INTER_LINEAR": cv2.INTER_LINEAR,
    "INTER_CUBIC": cv2.INTER_CUBIC,
    "INTER_AREA": cv2.INTER_AREA,
    "INTER_LANCZOS4": cv2.INTER_LANCZOS4,
}

READ_FLAGS = {
    "BGR": cv2.IMREAD_COLOR,
    "RGB": cv2.IMREAD_COLOR,
    "GRAY": cv2.IMREAD_GRAYSCALE,
}


class ImageUtils:
    """Utilities for image I/O and the pixel operations behind patch extraction."""

    @staticmethod
    def load_image(image_path: Path, color_mode: str = "RGB") -> np.ndarray:
        """Read an image file, decoding to RGB by default."""
        if not image_path.exists():
            msg = f"Image file not found: {image_path}"
            logger.error(msg)
            raise FileNotFoundError(msg)

        if color_mode not in READ_FLAGS:
            msg = f"Invalid color_mode: {color_mode}. Must be one of {list(READ_FLAGS)}"
            raise ValueError(msg)

        try:
            image = cv2.imread(str(image_path), READ_FLAGS[color_mode])
            if image is None:
                msg = "OpenCV could not decode the file"
                raise ValueError(msg)
        except (cv2.error, ValueError) as e:
            msg = f"Error loading image {image_path}: {e}"
            logger.exception(msg)
            raise RuntimeError(msg) from e

        if color_mode == "RGB":
            image = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
        logger.debug("Loaded %s with shape %s", image_path.name, image.shape)
        return image

    @staticmethod
    def save_image(image: np.ndarray, output_path: Path, *, rgb: bool = True) -> None:
        """Write an image array to disk, converting RGB to OpenCV order."""
        if not isinstance(image, np.ndarray):
            msg = "Image must be a numpy array"
            raise TypeError(msg)

        if image.size == 0:
            msg = "Cannot save empty image"
            raise ValueError(msg)

        output_path.parent.mkdir(parents=True, exist_ok=True)

        if rgb and image.ndim == 3 and image.shape[2] == RGB_CHANNELS:
            image = cv2.cvtColor(image, cv2.COLOR_RGB2BGR)

        success = cv2.imwrite(str(output_path), image)
        if not success:
            msg = f"Failed to save image to: {output_path}"
            logger.error(msg)
            raise RuntimeError(msg)
        logger.debug("Saved image to: %s", output_path)

    @staticmethod
    def validate_image(image: np.ndarray) -> None:
        """Validate input image format."""
        if not isinstance(image, np.ndarray):
            msg = f"Image must be a numpy array, got {type(image).__name__}"
            raise TypeError(msg)

        if image.size == 0:
            msg = "Input image is empty"
            raise ValueError(msg)

        if image.ndim not in [2, 3]:
            msg = f"Image must be 2D or 3D array, got {image.ndim}D"
            raise ValueError(msg)

        if image.ndim == 3 and image.shape[2] not in VALID_IMAGE_CHANNELS:
            msg = (
                f"Image must have {VALID_IMAGE_CHANNELS} channels, got {image.shape[2]}"
            )
            raise ValueError(msg)

    @staticmethod
    def to_rgb(image: np.ndarray) -> np.ndarray:
        """Convert grayscale or RGBA input to a 3-channel uint8 RGB image.

        Floating point input is read as intensities in [0, 1]; other integer
        types are clipped to the byte range.
        """
        ImageUtils.validate_image(image)

        if np.issubdtype(image.dtype, np.floating):
            image = np.rint(np.clip(image, 0.0, 1.0) * 255.0).astype(np.uint8)
        elif image.dtype != np.uint8:
            image = np.clip(image, 0, 255).astype(np.uint8)

        if image.ndim == 2:
            return cv2.cvtColor(image, cv2.COLOR_GRAY2RGB)
        if image.shape[2] == GRAY_CHANNELS:
            return cv2.cvtColor(image[:, :, 0], cv2.COLOR_GRAY2RGB)
        if image.shape[2] == RGBA_CHANNELS:
            return cv2.cvtColor(image, cv2.COLOR_RGBA2RGB)
        return image

    @staticmethod
    def image_size(image: np.ndarray) -> tuple[int, int]:
        """Get (width, height) of an image array."""
        height, width = image.shape[:2]
        return width, height

    @staticmethod
    def resize_image(
        image: np.ndarray,
        size: tuple[int, int],
        interpolation: str = "INTER_LINEAR",
    ) -> np.ndarray:
        """Resize an image to exactly (width, height)."""
        if image.size == 0:
            msg = "Cannot resize empty image"
            raise ValueError(msg)

        if interpolation not in INTERPOLATION_FLAGS:
            msg = (
                f"Invalid interpolation: {interpolation}. Must be one of "
                f"{list(INTERPOLATION_FLAGS.keys())}"
            )
            raise ValueError(msg)

        target_width, target_height = size
        if target_width <= 0 or target_height <= 0:
            msg = f"Invalid target dimensions: {target_width}x{target_height}"
            raise ValueError(msg)

        if ImageUtils.image_size(image) == (target_width, target_height):
            return image

        return cv2.resize(
            image,
            (target_width, target_height),
            interpolation=INTERPOLATION_FLAGS[interpolation],
        )

    @staticmethod
    def crop_image(image: np.ndarray, rect: Rectangle) -> np.ndarray:
        """Crop an image using a rectangle."""
        if image.size == 0:
            msg = "Cannot crop empty image"
            raise ValueError(msg)

        width, height = ImageUtils.image_size(image)
        if not rect.fits(width, height):
            msg = f"Rectangle exceeds image dimensions: {rect} vs {width}x{height}"
            raise ValueError(msg)

        # Copy so patches never alias the source image
        return image[rect.y : rect.y2, rect.x : rect.x2].copy()


def is_quality_interpolation(interpolation: str) -> bool:
    """Check that a resampling method is bilinear or better."""
    return interpolation in INTERPOLATION_METHODS

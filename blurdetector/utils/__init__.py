"""Utils module - Common utilities and helper functions."""

from .image import ImageUtils

__all__ = [
    "ImageUtils",
]

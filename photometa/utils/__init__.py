"""Utility functions for photometa."""

from photometa.utils.files import extract_exif_data, read_image_bytes
from photometa.utils.image import (
    create_thumbnail,
    get_image_dimensions,
    thumbnail_size,
)

__all__ = [
    "extract_exif_data",
    "read_image_bytes",
    "create_thumbnail",
    "get_image_dimensions",
    "thumbnail_size",
]

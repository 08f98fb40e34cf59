"""Processing module for extracting metadata from image files."""

from .processor import (
    BatchProcessingStats,
    ImageMetadata,
    MediaProcessor,
    ProcessingResult,
    extract_image_metadata,
)

__all__ = [
    "BatchProcessingStats",
    "ImageMetadata",
    "MediaProcessor",
    "ProcessingResult",
    "extract_image_metadata",
]

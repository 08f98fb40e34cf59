"""EXIF metadata extraction from JPEG bytes."""

from photometa.exif.models import ExtractedMetadata, ExtractionResult
from photometa.exif.parser import (
    extract,
    extract_with_warnings,
    normalize_exif_date,
)

__all__ = [
    "extract",
    "extract_with_warnings",
    "normalize_exif_date",
    "ExtractedMetadata",
    "ExtractionResult",
]

"""photometa - EXIF metadata extraction for uploaded photos.

Decodes capture date, GPS position and camera details from JPEG bytes
without external EXIF libraries, and builds dimensions and thumbnails for
media notes.
"""

from photometa._version import __version__, __version_info__
from photometa.config import ConfigManager
from photometa.exif import (
    ExtractedMetadata,
    ExtractionResult,
    extract,
    extract_with_warnings,
)
from photometa.processing import MediaProcessor, extract_image_metadata

__license__ = "MIT"
__all__ = [
    "__version__",
    "__version_info__",
    "ConfigManager",
    "ExtractedMetadata",
    "ExtractionResult",
    "extract",
    "extract_with_warnings",
    "MediaProcessor",
    "extract_image_metadata",
]

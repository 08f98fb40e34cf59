"""Image metadata processing for local files."""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Union
import logging
import mimetypes
import time

from ..config import ConfigManager
from ..exceptions import ImageDecodeError, PhotoMetaError
from ..exif import ExtractedMetadata, extract_with_warnings
from ..media import MediaLimits, validate_media_file
from ..utils.files import read_image_bytes
from ..utils.image import create_thumbnail, get_image_dimensions

logger = logging.getLogger(__name__)


@dataclass
class ImageMetadata:
    """EXIF, dimensions and thumbnail for one image.

    Attributes:
        exif: Extracted metadata with width and height filled in
        width: Displayed width in pixels
        height: Displayed height in pixels
        thumbnail: JPEG thumbnail as a data URL (None if disabled or failed)
        warnings: Non-fatal EXIF decode warnings
    """
    exif: ExtractedMetadata
    width: int
    height: int
    thumbnail: Optional[str] = None
    warnings: List[str] = field(default_factory=list)


@dataclass
class ProcessingResult:
    """Result of processing a single file.

    Attributes:
        path: Image file path
        success: Whether processing succeeded
        content_type: Guessed MIME type
        byte_size: File size in bytes
        metadata: Image metadata if processing succeeded
        processing_time: Time taken to process (seconds)
        error: Error message if failed
    """
    path: str
    success: bool
    content_type: Optional[str] = None
    byte_size: int = 0
    metadata: Optional[ImageMetadata] = None
    processing_time: float = 0.0
    error: Optional[str] = None


@dataclass
class BatchProcessingStats:
    """Statistics for batch processing.

    Attributes:
        total_files: Number of files submitted
        processed: Number successfully processed
        errors: Number that failed
        with_exif: Number with any EXIF field extracted
        with_gps: Number with GPS coordinates
        total_time: Total processing time (seconds)
        results: Individual results, in input order
    """
    total_files: int
    processed: int = 0
    errors: int = 0
    with_exif: int = 0
    with_gps: int = 0
    total_time: float = 0.0
    results: List[ProcessingResult] = field(default_factory=list)


def extract_image_metadata(
    data: bytes,
    thumbnail_size: Optional[int] = 200,
    thumbnail_quality: int = 70,
    apply_altitude_ref: bool = True,
) -> ImageMetadata:
    """Extract EXIF, dimensions and a thumbnail from image bytes.

    EXIF extraction never fails. A thumbnail failure leaves ``thumbnail``
    as None. Dimensions are required, so an undecodable image raises.

    Args:
        data: Encoded image bytes
        thumbnail_size: Longest thumbnail side, or None to skip the thumbnail
        thumbnail_quality: JPEG quality of the thumbnail
        apply_altitude_ref: Negate altitude below sea level

    Returns:
        ImageMetadata

    Raises:
        ImageDecodeError: If the image cannot be decoded
    """
    result = extract_with_warnings(data, apply_altitude_ref=apply_altitude_ref)
    width, height = get_image_dimensions(data)

    thumbnail = None
    if thumbnail_size:
        try:
            thumbnail = create_thumbnail(data, thumbnail_size, thumbnail_quality)
        except ImageDecodeError as e:
            logger.warning(f"Thumbnail creation failed: {e}")

    return ImageMetadata(
        exif=result.metadata.with_dimensions(width, height),
        width=width,
        height=height,
        thumbnail=thumbnail,
        warnings=list(result.warnings),
    )


class MediaProcessor:
    """Validates image files and extracts their metadata.

    Each file is read fully into memory, checked against the upload limits,
    and passed through EXIF extraction, dimension decoding and thumbnail
    creation. Extraction keeps no shared state, so batches run on a thread
    pool.
    """

    def __init__(self, config: Optional[ConfigManager] = None) -> None:
        """Initialize media processor.

        Args:
            config: Configuration manager (defaults used if not provided)
        """
        self.config = config or ConfigManager.defaults()
        self.limits = MediaLimits.from_config(self.config)
        self.max_workers = self.config.get("processing.max_workers", 4)

        if self.config.get("thumbnail.enabled", True):
            self.thumbnail_size = self.config.get("thumbnail.max_size", 200)
        else:
            self.thumbnail_size = None
        self.thumbnail_quality = self.config.get("thumbnail.quality", 70)
        self.apply_altitude_ref = self.config.get("extraction.apply_altitude_ref", True)

        logger.debug(
            f"MediaProcessor initialized: workers={self.max_workers}, "
            f"thumbnail={self.thumbnail_size}"
        )

    def process_file(self, path: Union[str, Path]) -> ProcessingResult:
        """Process a single image file.

        Args:
            path: Path to the image file

        Returns:
            ProcessingResult (errors are recorded, not raised)
        """
        start_time = time.time()
        content_type = mimetypes.guess_type(str(path))[0] or "application/octet-stream"
        result = ProcessingResult(path=str(path), success=False, content_type=content_type)

        try:
            data = read_image_bytes(path)
            result.byte_size = len(data)
            validate_media_file(content_type, result.byte_size, self.limits)

            result.metadata = extract_image_metadata(
                data,
                thumbnail_size=self.thumbnail_size,
                thumbnail_quality=self.thumbnail_quality,
                apply_altitude_ref=self.apply_altitude_ref,
            )
            result.success = True

            exif = result.metadata.exif
            exif_info = f" (EXIF date: {exif.date_taken})" if exif.date_taken else ""
            gps_info = f" (GPS: {exif.latitude}, {exif.longitude})" if exif.has_coordinates else ""
            logger.info(f"Processed {Path(path).name}{exif_info}{gps_info}")

        except PhotoMetaError as e:
            result.error = str(e)
            logger.error(f"Failed to process {path}: {e}")
        except Exception as e:
            logger.error(f"Error processing {path}: {e}", exc_info=True)
            result.error = str(e)

        result.processing_time = time.time() - start_time
        return result

    def process_files(
        self,
        paths: Iterable[Union[str, Path]],
        max_workers: Optional[int] = None
    ) -> BatchProcessingStats:
        """Process several image files concurrently.

        Args:
            paths: Image file paths
            max_workers: Thread count (config value if not provided)

        Returns:
            BatchProcessingStats with results in input order
        """
        paths = list(paths)
        stats = BatchProcessingStats(total_files=len(paths))
        if not paths:
            logger.warning("No files to process")
            return stats

        start_time = time.time()
        workers = max(1, max_workers or self.max_workers)
        logger.info(f"Processing {len(paths)} file(s) with {workers} worker(s)")

        with ThreadPoolExecutor(max_workers=workers) as executor:
            stats.results = list(executor.map(self.process_file, paths))

        for result in stats.results:
            if not result.success:
                stats.errors += 1
                continue
            stats.processed += 1
            exif = result.metadata.exif
            if exif.to_dict().keys() - {"width", "height"}:
                stats.with_exif += 1
            if exif.has_coordinates:
                stats.with_gps += 1

        stats.total_time = time.time() - start_time
        logger.info(
            f"Processing complete: {stats.processed} processed, "
            f"{stats.errors} errors (Total time: {stats.total_time:.1f}s)"
        )
        return stats

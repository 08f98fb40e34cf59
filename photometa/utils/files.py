"""Reading image files into memory for extraction."""

import logging
from pathlib import Path
from typing import Union

from photometa.exceptions import MediaReadError
from photometa.exif import ExtractedMetadata, extract

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def read_image_bytes(path: PathLike) -> bytes:
    """Read a whole image file into memory.

    Args:
        path: Path to the image file

    Returns:
        File contents

    Raises:
        MediaReadError: If the file is missing or cannot be read
    """
    image_file = Path(path).expanduser()
    try:
        return image_file.read_bytes()
    except OSError as e:
        raise MediaReadError(f"Failed to read image file {image_file}: {e}") from e


def extract_exif_data(path: PathLike) -> ExtractedMetadata:
    """Extract EXIF metadata from an image file.

    A file that cannot be read yields an empty record, the same as a file
    without EXIF.

    Args:
        path: Path to the image file

    Returns:
        ExtractedMetadata, possibly empty

    Examples:
        >>> metadata = extract_exif_data("photo.jpg")
        >>> if metadata.date_taken:
        ...     print(f"Taken on {metadata.date_taken}")
    """
    try:
        data = read_image_bytes(path)
    except MediaReadError as e:
        logger.warning(f"Error extracting EXIF from {path}: {e}")
        return ExtractedMetadata()
    return extract(data)

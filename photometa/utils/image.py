"""Image dimension and thumbnail helpers built on Pillow."""

import base64
import logging
from io import BytesIO
from typing import Tuple

from PIL import Image, ImageOps, UnidentifiedImageError

from photometa.exceptions import ImageDecodeError
from photometa.exif import tags

logger = logging.getLogger(__name__)

# Orientations that rotate the image by 90 or 270 degrees
_TRANSPOSED_ORIENTATIONS = {5, 6, 7, 8}


def _open(data: bytes) -> Image.Image:
    try:
        return Image.open(BytesIO(data))
    except Image.DecompressionBombError as e:
        raise ImageDecodeError(f"Image too large to decode: {e}") from e
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ImageDecodeError(f"Failed to load image: {e}") from e


def get_image_dimensions(data: bytes) -> Tuple[int, int]:
    """Return the displayed (width, height) of an image.

    Only the image header is decoded. Dimensions are swapped for EXIF
    orientations that rotate by 90 degrees, so they match what a viewer
    shows.

    Args:
        data: Encoded image bytes

    Returns:
        Tuple of (width, height) in pixels

    Raises:
        ImageDecodeError: If the bytes are not a readable image
    """
    with _open(data) as img:
        width, height = img.size
        try:
            orientation = img.getexif().get(tags.ORIENTATION)
        except Exception as e:
            logger.debug(f"Could not read orientation for dimensions: {e}")
            orientation = None

    if orientation in _TRANSPOSED_ORIENTATIONS:
        width, height = height, width
    return width, height


def thumbnail_size(width: int, height: int, max_size: int) -> Tuple[int, int]:
    """Scale (width, height) so the longer side is at most ``max_size``.

    Aspect ratio is kept and images are never upscaled.

    Examples:
        >>> thumbnail_size(800, 600, 200)
        (200, 150)
        >>> thumbnail_size(100, 50, 200)
        (100, 50)
    """
    if width > height:
        if width > max_size:
            height = round(height * max_size / width)
            width = max_size
    elif height > max_size:
        width = round(width * max_size / height)
        height = max_size
    return max(width, 1), max(height, 1)


def create_thumbnail(data: bytes, max_size: int = 200, quality: int = 70) -> str:
    """Create a JPEG thumbnail and return it as a ``data:`` URL.

    Args:
        data: Encoded image bytes
        max_size: Maximum length of the longer side in pixels
        quality: JPEG quality (1-95)

    Returns:
        ``data:image/jpeg;base64,...`` string

    Raises:
        ImageDecodeError: If the image cannot be decoded or re-encoded
    """
    try:
        with _open(data) as img:
            img = ImageOps.exif_transpose(img)
            if img.mode not in ("RGB", "L"):
                img = img.convert("RGB")

            size = thumbnail_size(img.width, img.height, max_size)
            if size != img.size:
                img = img.resize(size, Image.Resampling.LANCZOS)

            output = BytesIO()
            img.save(output, format="JPEG", quality=quality)
    except ImageDecodeError:
        raise
    except (OSError, ValueError) as e:
        raise ImageDecodeError(f"Failed to create thumbnail: {e}") from e

    encoded = base64.b64encode(output.getvalue()).decode("ascii")
    logger.debug(f"Created {size[0]}x{size[1]} thumbnail ({len(encoded)} chars)")
    return f"data:image/jpeg;base64,{encoded}"

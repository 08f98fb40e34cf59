"""Custom exceptions for photometa."""


class PhotoMetaError(Exception):
    """Base exception for photometa errors."""
    pass


class ExifDecodeError(PhotoMetaError):
    """Raised inside the EXIF parser when a structure cannot be decoded.

    Never escapes ``photometa.exif.extract``; the parser turns it into a
    warning and an absent field.
    """
    pass


class OutOfBoundsError(ExifDecodeError):
    """Raised when a read would fall outside the TIFF block.

    Attributes:
        offset: Requested offset (relative to the TIFF block)
        size: Requested number of bytes
        length: Length of the TIFF block
    """

    def __init__(self, offset: int, size: int, length: int):
        super().__init__(
            f"read of {size} byte(s) at offset {offset} exceeds block of {length} byte(s)"
        )
        self.offset = offset
        self.size = size
        self.length = length


class MediaError(PhotoMetaError):
    """Base exception for media file handling errors."""
    pass


class MediaReadError(MediaError):
    """Raised when an image file cannot be read into memory."""
    pass


class MediaValidationError(MediaError):
    """Raised when an upload fails type, size or geotag validation."""
    pass


class ImageDecodeError(MediaError):
    """Raised when Pillow cannot decode the image (dimensions, thumbnail)."""
    pass

"""Data models for extracted image metadata."""

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class ExtractedMetadata:
    """Best-effort metadata decoded from an image's EXIF block.

    Every field is optional; a record with all fields absent is the normal
    outcome for images without EXIF or with corrupt EXIF.

    Attributes:
        date_taken: Capture time as ISO-8601 (``YYYY-MM-DDTHH:MM:SS``)
        latitude: Decimal degrees in [-90, 90], negative for South
        longitude: Decimal degrees in [-180, 180], negative for West
        altitude: Meters, negative below sea level
        make: Camera manufacturer
        model: Camera model
        orientation: EXIF orientation code (1-8)
        width: Pixel width (filled by the image decode step, not the parser)
        height: Pixel height (filled by the image decode step, not the parser)
    """
    date_taken: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    altitude: Optional[float] = None
    make: Optional[str] = None
    model: Optional[str] = None
    orientation: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        """Whether no field is present."""
        return not self.to_dict()

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def to_dict(self) -> Dict[str, Any]:
        """Return present fields only."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def merged(self, other: "ExtractedMetadata") -> "ExtractedMetadata":
        """Return a new record with ``other``'s present fields layered on top."""
        return replace(self, **other.to_dict())

    def with_dimensions(self, width: int, height: int) -> "ExtractedMetadata":
        return replace(self, width=width, height=height)

    def __str__(self) -> str:
        if self.is_empty:
            return "ExtractedMetadata(empty)"
        parts = ", ".join(f"{k}={v}" for k, v in self.to_dict().items())
        return f"ExtractedMetadata({parts})"


@dataclass(frozen=True)
class ExtractionResult:
    """Extracted metadata plus the non-fatal problems met while decoding.

    Callers that only care about the metadata can ignore ``warnings``;
    the parser never raises either way.

    Attributes:
        metadata: The decoded (possibly empty) metadata record
        warnings: Human-readable notes on skipped segments, entries or fields
    """
    metadata: ExtractedMetadata = ExtractedMetadata()
    warnings: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        """Whether decoding finished without skipping anything."""
        return not self.warnings

"""Validation and EXIF-fallback helpers for media uploads."""

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from photometa.config import ConfigManager
from photometa.config.defaults import DEFAULT_CONFIG
from photometa.exceptions import MediaValidationError
from photometa.exif import ExtractedMetadata

_HTML_TAG = re.compile(r"<[^>]*>")
_MEDIA_DEFAULTS = DEFAULT_CONFIG["media"]


@dataclass(frozen=True)
class MediaLimits:
    """Upload limits for media notes.

    Attributes:
        max_file_size_bytes: Largest accepted upload
        allowed_types: Accepted MIME content types
        max_labels: Labels kept per item
        max_label_length: Characters kept per label
        max_notes_length: Characters kept in free-text notes
    """
    max_file_size_bytes: int = _MEDIA_DEFAULTS["max_file_size_bytes"]
    allowed_types: Tuple[str, ...] = tuple(_MEDIA_DEFAULTS["allowed_types"])
    max_labels: int = _MEDIA_DEFAULTS["max_labels"]
    max_label_length: int = _MEDIA_DEFAULTS["max_label_length"]
    max_notes_length: int = _MEDIA_DEFAULTS["max_notes_length"]

    @classmethod
    def from_config(cls, config: ConfigManager) -> "MediaLimits":
        defaults = cls()
        return cls(
            max_file_size_bytes=config.get("media.max_file_size_bytes", defaults.max_file_size_bytes),
            allowed_types=tuple(config.get("media.allowed_types", defaults.allowed_types)),
            max_labels=config.get("media.max_labels", defaults.max_labels),
            max_label_length=config.get("media.max_label_length", defaults.max_label_length),
            max_notes_length=config.get("media.max_notes_length", defaults.max_notes_length),
        )


@dataclass(frozen=True)
class CaptureFields:
    """Capture date and geotag to store on a media record.

    Attributes:
        taken_at: ISO-8601 capture time
        latitude: Decimal degrees
        longitude: Decimal degrees
        sources: Field name -> "user" or "exif"
    """
    taken_at: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    sources: dict = field(default_factory=dict)


def validate_media_file(
    content_type: str,
    byte_size: int,
    limits: MediaLimits = MediaLimits()
) -> None:
    """Check an upload's content type and size.

    Raises:
        MediaValidationError: If the type is not allowed or the file is too large
    """
    if content_type not in limits.allowed_types:
        raise MediaValidationError(
            f"Invalid file type. Allowed: {', '.join(limits.allowed_types)}"
        )
    if byte_size > limits.max_file_size_bytes:
        raise MediaValidationError(
            f"File too large. Maximum: {limits.max_file_size_bytes / 1024 / 1024:g} MB"
        )


def validate_geotag(latitude: Optional[float] = None, longitude: Optional[float] = None) -> bool:
    """Whether the given coordinates are in range. Absent values are valid."""
    if latitude is not None and not -90 <= latitude <= 90:
        return False
    if longitude is not None and not -180 <= longitude <= 180:
        return False
    return True


def normalize_label(label: str, limits: MediaLimits = MediaLimits()) -> str:
    return label.strip().lower()[:limits.max_label_length]


def normalize_labels(labels: Iterable[str], limits: MediaLimits = MediaLimits()) -> List[str]:
    """Trim, lowercase and deduplicate labels, keeping first-seen order."""
    unique: List[str] = []
    for label in labels:
        normalized = normalize_label(label, limits)
        if normalized and normalized not in unique:
            unique.append(normalized)
    return unique[:limits.max_labels]


def strip_html(text: str, limits: MediaLimits = MediaLimits()) -> str:
    """Remove HTML tags from notes and truncate to the notes limit."""
    return _HTML_TAG.sub("", text)[:limits.max_notes_length]


def resolve_capture_fields(
    exif: ExtractedMetadata,
    taken_at: Optional[str] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
) -> CaptureFields:
    """Pick capture date and geotag, using EXIF only where the user gave nothing.

    An empty ``taken_at`` string counts as not given; coordinates are
    resolved independently of each other.

    Raises:
        MediaValidationError: If user-supplied coordinates are out of range
    """
    if not validate_geotag(latitude, longitude):
        raise MediaValidationError("Invalid geotag coordinates")

    sources = {}
    resolved = {}
    for name, user_value, exif_value in (
        ("taken_at", taken_at or None, exif.date_taken),
        ("latitude", latitude, exif.latitude),
        ("longitude", longitude, exif.longitude),
    ):
        if user_value is not None:
            resolved[name] = user_value
            sources[name] = "user"
        elif exif_value is not None:
            resolved[name] = exif_value
            sources[name] = "exif"

    return CaptureFields(sources=sources, **resolved)

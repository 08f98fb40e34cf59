"""Default configuration values for photometa."""

from pathlib import Path

# Default configuration dictionary
DEFAULT_CONFIG = {
    # EXIF Extraction Configuration
    "extraction": {
        "apply_altitude_ref": True,  # Negative altitude below sea level
        "include_warnings": False,
    },

    # Thumbnail Configuration
    "thumbnail": {
        "enabled": True,
        "max_size": 200,
        "quality": 70,
    },

    # Media Upload Validation
    "media": {
        "max_file_size_bytes": 25 * 1024 * 1024,  # 25 MB
        "allowed_types": ["image/jpeg", "image/png", "image/webp"],
        "max_labels": 10,
        "max_label_length": 32,
        "max_notes_length": 2000,
    },

    # Batch Processing Configuration
    "processing": {
        "max_workers": 4,
    },

    # Logging Configuration
    "logging": {
        "level": "INFO",
        "file": str(Path.home() / ".photometa" / "photometa.log"),
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    },
}

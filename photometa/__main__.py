#!/usr/bin/env python3
"""photometa - EXIF metadata extraction for uploaded photos.

This is the CLI entry point. It reads image files, extracts capture date,
GPS position and camera details, and prints them as text or JSON.

Usage:
    python -m photometa photo.jpg
    python -m photometa *.jpg --json
    python -m photometa photo.jpg --thumbnail --warnings
"""

import sys
import json
import logging
import argparse
from pathlib import Path
from typing import Any, Dict, List, Optional

from ._version import __version__
from .config import ConfigManager, ConfigError
from .processing import MediaProcessor
from .processing.processor import BatchProcessingStats, ProcessingResult


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    config: Optional[ConfigManager] = None
) -> None:
    """Configure logging for the application.

    Args:
        verbose: If True, enable DEBUG level logging
        quiet: If True, only log errors to the console
        config: Configuration with optional ``logging.file``
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter('%(levelname)s - %(name)s - %(message)s'))

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    root_logger.addHandler(console_handler)

    if config is None:
        return

    log_file = config.get("logging.file")
    if not log_file:
        return
    try:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(config.get("logging.level", "INFO"))
        file_handler.setFormatter(logging.Formatter(
            config.get(
                "logging.format",
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )
        ))
        root_logger.addHandler(file_handler)
    except (OSError, ValueError) as e:
        # Console logging still works
        root_logger.warning(f"Could not set up log file {log_file}: {e}")


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog="photometa",
        description="photometa - extract EXIF capture date, GPS and camera details",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show metadata for one photo
  python -m photometa photo.jpg

  # Machine-readable output for a batch
  python -m photometa photos/*.jpg --json

  # Include a base64 thumbnail and decode warnings
  python -m photometa photo.jpg --json --thumbnail --warnings
"""
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"photometa {__version__}"
    )
    parser.add_argument(
        "files",
        nargs="+",
        metavar="FILE",
        help="Image file(s) to read"
    )

    # Output options
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON"
    )
    parser.add_argument(
        "--thumbnail",
        action="store_true",
        help="Include the thumbnail data URL in JSON output"
    )
    parser.add_argument(
        "--warnings",
        action="store_true",
        help="Show non-fatal EXIF decode warnings"
    )

    # Processing options
    parser.add_argument(
        "--workers",
        type=int,
        metavar="N",
        help="Number of files processed in parallel (default: from config)"
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Path to config file (default: ~/.photometa/config.yaml)"
    )

    # Output control
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose debug logging"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress all output except errors"
    )

    return parser.parse_args(argv)


def result_to_dict(
    result: ProcessingResult,
    include_thumbnail: bool = False,
    include_warnings: bool = False
) -> Dict[str, Any]:
    """Convert a processing result to a JSON-friendly dictionary."""
    data: Dict[str, Any] = {
        "file": result.path,
        "success": result.success,
    }
    if not result.success:
        data["error"] = result.error
        return data

    data["content_type"] = result.content_type
    data["byte_size"] = result.byte_size
    data["metadata"] = result.metadata.exif.to_dict()
    if include_thumbnail and result.metadata.thumbnail:
        data["thumbnail"] = result.metadata.thumbnail
    if include_warnings:
        data["warnings"] = result.metadata.warnings
    return data


def print_result(result: ProcessingResult, show_warnings: bool) -> None:
    """Print one result in human-readable form."""
    print(result.path)
    if not result.success:
        print(f"  ✗ Error: {result.error}")
        print()
        return

    fields = result.metadata.exif.to_dict()
    for name, value in fields.items():
        print(f"  {name + ':':<14}{value}")
    if show_warnings:
        for warning in result.metadata.warnings:
            print(f"  ⚠️  {warning}")
    print()


def print_summary(stats: BatchProcessingStats) -> None:
    """Print processing summary.

    Args:
        stats: BatchProcessingStats object
    """
    print("=" * 70)
    print(f"Total files:      {stats.total_files}")
    print(f"Processed:        {stats.processed} ✓")
    print(f"With EXIF:        {stats.with_exif}")
    print(f"With GPS:         {stats.with_gps}")
    if stats.errors > 0:
        print(f"Errors:           {stats.errors} ✗")
    print(f"Processing time:  {stats.total_time:.1f}s")
    print("=" * 70)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the photometa CLI.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    args = parse_arguments(argv)

    try:
        config = ConfigManager.load(config_path=args.config)
    except ConfigError as e:
        setup_logging(args.verbose, args.quiet)
        logging.getLogger(__name__).error(f"Configuration error: {e}")
        if not args.quiet:
            print(f"✗ Configuration Error: {e}")
        return 2

    setup_logging(args.verbose, args.quiet, config)
    logger = logging.getLogger(__name__)
    logger.debug(f"Using configuration: {config!r}")

    show_warnings = args.warnings or config.get("extraction.include_warnings", False)

    try:
        processor = MediaProcessor(config)
        stats = processor.process_files(args.files, max_workers=args.workers)

        if args.json:
            output = [
                result_to_dict(result, args.thumbnail, show_warnings)
                for result in stats.results
            ]
            print(json.dumps(output, indent=2))
        elif not args.quiet:
            for result in stats.results:
                print_result(result, show_warnings)
            print_summary(stats)

        return 1 if stats.errors > 0 else 0

    except KeyboardInterrupt:
        if not args.quiet:
            print()
            print("Processing interrupted by user")
        return 130

    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        if not args.quiet:
            print()
            print(f"✗ Unexpected Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

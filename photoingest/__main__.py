#!/usr/bin/env python3
"""photoIngest - upload-to-derivative pipeline for photo uploads.

This is the CLI entry point for photoIngest. It reads an upload notification
(JSON with a ``Records`` list) and processes every record: metadata
extraction, web/thumbnail derivatives and the metadata record.

Usage:
    python -m photoingest event.json
    python -m photoingest - < event.json
    python -m photoingest event.json --dry-run
    python -m photoingest event.json --config ./config.yaml
"""

import sys
import json
import logging
import argparse
from pathlib import Path
from typing import Optional

from ._version import __version__
from .config import ConfigManager
from .config.manager import ConfigError
from .processing import PhotoProcessor
from .storage.exceptions import StorageError


def setup_logging(config: Optional[ConfigManager] = None, verbose: bool = False) -> None:
    """Configure logging for the application.

    Args:
        config: Loaded configuration (for level, file and format)
        verbose: If True, enable DEBUG level logging
    """
    if verbose:
        level = logging.DEBUG
    else:
        level_name = str(config.get("logging.level", "INFO")).upper() if config else "INFO"
        level = getattr(logging, level_name, logging.INFO)

    # Console handler with simpler format
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter('%(levelname)s - %(name)s - %(message)s'))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    # Also log to file if configured
    log_file = config.get("logging.file") if config else None
    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(logging.DEBUG)  # Always DEBUG in file
        file_handler.setFormatter(logging.Formatter(
            config.get(
                "logging.format",
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )
        ))
        root_logger.addHandler(file_handler)


def parse_arguments(argv=None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="photoingest",
        description="photoIngest - turn upload notifications into photo derivatives",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Process a saved notification
  python -m photoingest event.json

  # Read the notification from stdin
  python -m photoingest - < event.json

  # Derive keys and derivatives without writing anything
  python -m photoingest event.json --dry-run
"""
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"photoIngest {__version__}"
    )
    parser.add_argument(
        "event",
        metavar="EVENT_FILE",
        help="Path to a JSON notification, or - for stdin"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Process without writing derivatives or records"
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Path to config file (default: ~/.photoingest/config.yaml)"
    )
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


def read_event(source: str) -> dict:
    """Read a notification from a file path or stdin (``-``).

    Raises:
        ValueError: If the content is not a JSON object
    """
    if source == "-":
        data = json.load(sys.stdin)
    else:
        with open(source, "r") as f:
            data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError("Notification must be a JSON object with a 'Records' list")
    return data


def print_summary(stats, dry_run: bool) -> None:
    """Print processing summary.

    Args:
        stats: BatchProcessingStats object
        dry_run: Whether this was a dry run
    """
    print()
    print("=" * 70)
    print("Processing Summary")
    print("=" * 70)
    print()
    print(f"Total records:    {stats.total_records}")
    print(f"Processed:        {stats.processed}")
    if stats.errors > 0:
        print(f"Errors:           {stats.errors}")
    print(f"Processing time:  {stats.total_time:.1f}s")
    print()

    for result in stats.results:
        status = "OK " if result.success else "ERR"
        print(f"[{status}] {result.source_key}")
        if result.success:
            print(f"      photo:     {result.photo_key}")
            print(f"      thumbnail: {result.thumbnail_key}")
            if result.warning:
                print(f"      warning:   {result.warning}")
        else:
            print(f"      error:     {result.error}")

    print()
    if dry_run:
        print("Dry run complete. Nothing was written.")
    print()


def main(argv=None) -> int:
    """Main entry point for photoIngest CLI.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    args = parse_arguments(argv)
    logger = logging.getLogger(__name__)

    try:
        config = ConfigManager.load(config_path=args.config)

        if args.quiet:
            logging.basicConfig(level=logging.ERROR)
        else:
            setup_logging(config, args.verbose)

        event = read_event(args.event)
        processor = PhotoProcessor(config=config, dry_run=args.dry_run)
        stats = processor.process_event(event)

        if not args.quiet:
            print_summary(stats, args.dry_run)

        return 1 if stats.errors > 0 else 0

    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        if not args.quiet:
            print(f"\nConfiguration Error: {e}\n")
        return 2

    except StorageError as e:
        logger.error(f"Storage error: {e}", exc_info=args.verbose)
        if not args.quiet:
            print(f"\nStorage Error: {e}\n")
        return 3

    except KeyboardInterrupt:
        if not args.quiet:
            print("\n\nProcessing interrupted by user")
        return 130

    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        if not args.quiet:
            print(f"\nUnexpected Error: {e}\n")
            if not args.verbose:
                print("Run with --verbose for detailed error information")
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""
Command-line schedule import.

Usage:
    python -m buildtrack.importer <file> --project-id ID [options]

Options:
    --no-upload         Parse locally without storing the file
    --no-fallback       Report an error instead of placeholder items
    --output PATH       Write candidates to a file instead of stdout
    --format FMT        Output format: json (default) or csv
    --persist           Insert the candidates into the schedule table
    --verbose           Debug logging
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from buildtrack.config.settings import settings
from buildtrack.importer.orchestrator import ScheduleImporter
from buildtrack.loaders.db_loader import DatabaseLoader
from buildtrack.loaders.file_loader import FileLoader
from buildtrack.utils.logger import configure_logging


def setup_logging(verbose: bool = False) -> None:
    """Configure the package logger (console, plus a file under LOG_DIR if set)."""
    logger = configure_logging("buildtrack")
    if verbose:
        logger.setLevel(logging.DEBUG)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Import a construction schedule file (csv, xlsx, xls, pdf)",
    )
    parser.add_argument("file", type=Path, help="Schedule file to import")
    parser.add_argument("--project-id", required=True, help="Owning project id")
    parser.add_argument("--no-upload", action="store_true", help="Parse without uploading")
    parser.add_argument("--no-fallback", action="store_true",
                        help="Fail instead of returning placeholder items")
    parser.add_argument("--output", type=Path, help="Write candidates to this file")
    parser.add_argument("--format", choices=["json", "csv"], default="json",
                        help="Output file format")
    parser.add_argument("--persist", action="store_true",
                        help="Insert candidates into the schedule table")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    if not args.file.exists():
        print(f"Error: file not found: {args.file}", file=sys.stderr)
        return 1

    needs_backend = not args.no_upload or args.persist
    if needs_backend:
        missing = settings.validate_required_settings()
        if missing:
            print(f"Error: missing settings: {', '.join(missing)}", file=sys.stderr)
            return 1

    fallback = False if args.no_fallback else None
    if args.no_upload:
        importer = ScheduleImporter(synthesize_fallback=fallback)
    else:
        importer = ScheduleImporter.from_settings(synthesize_fallback=fallback)

    result = importer.import_schedule(
        args.project_id,
        args.file.name,
        args.file.read_bytes(),
        upload=not args.no_upload,
    )

    if not result.ok:
        print(f"Error: {result.error}", file=sys.stderr)
        if result.mock_items:
            print(json.dumps([item.to_api_dict() for item in result.mock_items], indent=2))
        return 1

    if result.file_url:
        logger.info(f"Stored file at {result.file_url}")

    if args.output:
        loader = FileLoader()
        if not loader.load(result.items, file_path=str(args.output), format=args.format):
            return 1
        print(f"Wrote {loader.loaded_count} candidates to {args.output}")
    else:
        print(json.dumps(result.to_response(), indent=2))

    if args.persist:
        db_loader = DatabaseLoader.from_settings()
        if not db_loader.load(result.items):
            return 1
        print(f"Persisted {db_loader.loaded_count} schedule items")

    return 0


if __name__ == "__main__":
    sys.exit(main())

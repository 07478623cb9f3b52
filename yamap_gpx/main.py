"""Command line entry point: fetch or load track data and write a GPX file.

Usage examples:

    # Convert a YAMAP activity
    yamap-gpx --link https://yamap.com/activities/39755763 --name "Mt. Takao"

    # Convert a local JSON file and print the GPX to stdout
    yamap-gpx --input-file track.json --no-file
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from .config import GPX_OUTPUT_DIR, PREVIEW_ENABLED
from .converter import convert, write_gpx_file
from .errors import ConversionError, YamapAPIError
from .ingest import load_points_from_file
from .models import SOURCE_FILE, SOURCE_YAMAP, ConversionRequest, RawPoint
from .utils import format_preview
from .yamap_client import fetch_track_points

LOGGER = logging.getLogger(__name__)


def _setup_logging(level: str) -> None:
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(
            level=getattr(logging, level),
            format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        )
    else:
        logging.getLogger().setLevel(getattr(logging, level))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert YAMAP activity tracks or JSON trackpoint files to GPX"
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--link",
        help="YAMAP activity link, e.g. https://yamap.com/activities/39755763",
    )
    source.add_argument(
        "--activity-id",
        help="YAMAP activity ID",
    )
    source.add_argument(
        "--input-file",
        help="JSON file containing an array of trackpoints",
    )
    parser.add_argument(
        "--name",
        default="",
        help="Track name (default: GPS Track)",
    )
    parser.add_argument(
        "--desc",
        default="",
        help="Track description",
    )
    parser.add_argument(
        "--output-dir",
        default=GPX_OUTPUT_DIR,
        help=f"Directory for the GPX file (default: {GPX_OUTPUT_DIR})",
    )
    parser.add_argument(
        "--no-file",
        action="store_true",
        help="Print to stdout instead of writing to file",
    )
    parser.add_argument(
        "--no-preview",
        action="store_true",
        help="Do not print the sample trackpoints before converting",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Python logging level",
    )
    return parser


def _load_points(args: argparse.Namespace) -> tuple[List[RawPoint], str]:
    if args.input_file:
        return load_points_from_file(args.input_file), SOURCE_FILE
    return fetch_track_points(args.link or args.activity_id), SOURCE_YAMAP


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the yamap-gpx tool. Returns the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.log_level)

    try:
        points, source = _load_points(args)
    except (ConversionError, YamapAPIError) as exc:
        LOGGER.error("Failed to load track data: %s", exc)
        return 1
    except OSError as exc:
        LOGGER.error("Failed to read input file '%s': %s", args.input_file, exc)
        return 1

    if PREVIEW_ENABLED and not args.no_preview:
        stream = sys.stderr if args.no_file else sys.stdout
        print(format_preview(points, source), file=stream)

    request = ConversionRequest(
        raw_points=points,
        name=args.name,
        description=args.desc,
        source=source,
    )
    try:
        result = convert(request)
    except ConversionError as exc:
        LOGGER.error("Error generating GPX: %s", exc)
        return 1

    if args.no_file:
        print(result.gpx)
        return 0

    try:
        write_gpx_file(result, args.output_dir)
    except OSError as exc:
        LOGGER.error("Failed to write GPX file to '%s': %s", args.output_dir, exc)
        return 1

    source_text = "YAMAP data" if source == SOURCE_YAMAP else "file data"
    LOGGER.info("GPX file generated successfully from %s!", source_text)
    return 0

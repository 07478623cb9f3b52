"""Conversion pipeline: raw points -> Track -> GPX string -> file."""

from __future__ import annotations

import logging
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

from .config import DEFAULT_TRACK_NAME
from .errors import EmptyOrMissingTrackData
from .gpx_writer import serialize
from .models import ConversionRequest, ConversionResult, RawPoint, Track
from .normalizer import normalize_all
from .utils import gpx_filename

LOGGER = logging.getLogger(__name__)


def build_track(
    raw_points: Iterable[RawPoint],
    name: Optional[str] = None,
    description: Optional[str] = None,
) -> Track:
    """Normalize every point and wrap them in a :class:`Track`."""
    points = normalize_all(raw_points)
    if not points:
        raise EmptyOrMissingTrackData("No trackpoints to convert")
    return Track(
        points=tuple(points),
        name=name or DEFAULT_TRACK_NAME,
        description=description or "",
    )


def convert(
    request: ConversionRequest, generated_at: Optional[datetime] = None
) -> ConversionResult:
    """Run one conversion request end to end.

    Either the whole request succeeds or an error propagates; no partial GPX
    is returned.
    """
    if generated_at is None:
        generated_at = datetime.now(timezone.utc)

    track = build_track(request.raw_points, request.name, request.description)
    gpx = serialize(track, generated_at=generated_at)
    result = ConversionResult(
        gpx=gpx,
        filename=gpx_filename(track.name),
        track=track,
        source=request.source,
        generated_at=generated_at,
    )

    LOGGER.info(
        "Converted %d trackpoints from %s into '%s'",
        result.point_count,
        request.source,
        result.filename,
    )
    if result.fallback_time_count:
        LOGGER.warning(
            "GPX '%s' contains %d trackpoints timestamped with conversion time",
            result.filename,
            result.fallback_time_count,
        )
    return result


def write_gpx_file(result: ConversionResult, output_dir: str | Path) -> Path:
    """Write the GPX document to ``output_dir`` without exposing a partial file."""
    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)
    output_path = directory / result.filename

    handle = tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        dir=directory,
        prefix=f".{output_path.stem}.",
        suffix=".tmp",
        delete=False,
    )
    temp_path = Path(handle.name)
    try:
        with handle:
            handle.write(result.gpx)
        temp_path.replace(output_path)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise

    LOGGER.info("Output written to %s", output_path)
    return output_path

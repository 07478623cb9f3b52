"""Turn upstream payloads and uploaded files into lists of raw points."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Sequence

from .errors import EmptyOrMissingTrackData, InvalidInputFormat
from .models import RawPoint

LOGGER = logging.getLogger(__name__)

TRACK_KEY = "activity_regularized_track"
POINTS_KEY = "points"

# The YAMAP producer always sends these; their absence means a foreign payload.
YAMAP_REQUIRED_FIELDS = ("coord", "pass_at")


def extract_points(payload: Any) -> List[RawPoint]:
    """Return the points array from an API response or a flat list.

    Accepts either a flat list of points or
    ``{"activity_regularized_track": {"points": [...]}}``.

    Raises:
        InvalidInputFormat: If the payload is neither a list nor an object.
        EmptyOrMissingTrackData: If the points array is missing, not a list,
            or empty.
    """
    if isinstance(payload, list):
        points = payload
    elif isinstance(payload, dict):
        track = payload.get(TRACK_KEY)
        if not isinstance(track, dict) or POINTS_KEY not in track:
            raise EmptyOrMissingTrackData(
                f"Invalid response format - missing {TRACK_KEY}.{POINTS_KEY}"
            )
        points = track[POINTS_KEY]
        if not isinstance(points, list):
            raise EmptyOrMissingTrackData(
                f"Invalid response format - {POINTS_KEY} should be an array"
            )
    else:
        raise InvalidInputFormat(
            f"Expected a JSON array or object, got {type(payload).__name__}"
        )

    if not points:
        raise EmptyOrMissingTrackData("No trackpoints found")
    return points


def validate_yamap_points(points: Sequence[RawPoint]) -> None:
    """Check that points look like the YAMAP producer's shape."""
    if not points:
        raise EmptyOrMissingTrackData("No trackpoints found in activity")
    first = points[0]
    if not isinstance(first, dict) or any(
        first.get(field) is None for field in YAMAP_REQUIRED_FIELDS
    ):
        fields = " and ".join(f'"{field}"' for field in YAMAP_REQUIRED_FIELDS)
        raise InvalidInputFormat(f"Trackpoints must have {fields} properties")


def load_points_from_bytes(data: bytes) -> List[RawPoint]:
    """Parse uploaded file content as a JSON array of raw points."""
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise InvalidInputFormat(f"File is not UTF-8 text: {exc}") from exc
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidInputFormat(f"Invalid JSON: {exc}") from exc
    if not isinstance(payload, list):
        raise InvalidInputFormat("JSON file must contain an array of trackpoints")
    if not payload:
        raise EmptyOrMissingTrackData("JSON file contains no trackpoints")
    return payload


def load_points_from_file(path: str | Path) -> List[RawPoint]:
    file_path = Path(path)
    LOGGER.debug("Reading trackpoints from %s", file_path)
    points = load_points_from_bytes(file_path.read_bytes())
    LOGGER.info("Loaded %d trackpoints from %s", len(points), file_path)
    return points

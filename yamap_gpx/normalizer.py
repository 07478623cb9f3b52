"""Normalize raw trackpoint records into canonical :class:`Trackpoint` values.

Raw points come from two producers that disagree on field names: the YAMAP
activity API (``coord`` + ``pass_at``) and hand-authored JSON files
(``coordinates``/``longitude``/``latitude`` + ``timestamp``/``time``). Each
canonical attribute is resolved through an ordered rule table; the first rule
that matches wins and values from different rules are never merged.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

from dateutil import parser

from .errors import MalformedTrackpoint
from .models import RawPoint, Trackpoint

LOGGER = logging.getLogger(__name__)

Clock = Callable[[], datetime]
CoordinateExtractor = Callable[[RawPoint], Optional[Tuple[float, float]]]
TimeExtractor = Callable[[RawPoint], Optional[datetime]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_float(value: Any, label: str) -> float:
    if isinstance(value, bool):
        raise MalformedTrackpoint(f"invalid {label}: {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise MalformedTrackpoint(f"invalid {label}: {value!r}") from exc


# ---------------------------------------------------------------------------
# Coordinates
# ---------------------------------------------------------------------------
def _lon_lat_pair(key: str) -> CoordinateExtractor:
    """Extractor for a ``[longitude, latitude]`` pair stored under ``key``."""

    def extract(raw: RawPoint) -> Optional[Tuple[float, float]]:
        value = raw.get(key)
        if value is None:
            return None
        if not isinstance(value, (list, tuple)) or len(value) < 2:
            raise MalformedTrackpoint(f"invalid coordinate in '{key}': {value!r}")
        lon = _to_float(value[0], f"longitude in '{key}'")
        lat = _to_float(value[1], f"latitude in '{key}'")
        return lon, lat

    return extract


def _scalar_lon_lat(raw: RawPoint) -> Optional[Tuple[float, float]]:
    lon = raw.get("longitude")
    lat = raw.get("latitude")
    if lon is None or lat is None:
        return None
    return _to_float(lon, "longitude"), _to_float(lat, "latitude")


COORDINATE_RULES: Sequence[Tuple[str, CoordinateExtractor]] = (
    ("coord", _lon_lat_pair("coord")),
    ("coordinates", _lon_lat_pair("coordinates")),
    ("longitude/latitude", _scalar_lon_lat),
)


# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------
def _epoch_seconds(key: str) -> TimeExtractor:
    """Extractor for a Unix epoch (seconds) stored under ``key``."""

    def extract(raw: RawPoint) -> Optional[datetime]:
        value = raw.get(key)
        if value is None:
            return None
        seconds = _to_float(value, f"epoch seconds in '{key}'")
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as exc:
            raise MalformedTrackpoint(
                f"epoch seconds out of range in '{key}': {value!r}"
            ) from exc

    return extract


def _date_string(key: str) -> TimeExtractor:
    """Extractor for an ISO-8601 or other date string stored under ``key``."""

    def extract(raw: RawPoint) -> Optional[datetime]:
        value = raw.get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise MalformedTrackpoint(f"invalid time in '{key}': {value!r}")
        text = value.strip()
        try:
            parsed = parser.isoparse(text)
        except ValueError:
            # RFC 2822 and other free-form dates, e.g. "Tue, 14 Nov 2023 22:13:20 GMT"
            try:
                parsed = parser.parse(text)
            except (ValueError, OverflowError) as exc:
                raise MalformedTrackpoint(
                    f"invalid time in '{key}': {value!r}"
                ) from exc
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)

    return extract


TIME_RULES: Sequence[Tuple[str, TimeExtractor]] = (
    ("pass_at", _epoch_seconds("pass_at")),
    ("timestamp", _epoch_seconds("timestamp")),
    ("time", _date_string("time")),
)


# ---------------------------------------------------------------------------
# Elevation and speed
# ---------------------------------------------------------------------------
# Falsy values (including a literal 0) fall through to the next key.
ELEVATION_KEYS: Sequence[str] = ("altitude", "elevation")

# ``speed`` is the legacy name for horizontal speed.
HORIZONTAL_SPEED_KEYS: Sequence[str] = ("horizontal_speed", "speed")
VERTICAL_SPEED_KEYS: Sequence[str] = ("vertical_speed",)


def _first_truthy(raw: RawPoint, keys: Iterable[str]) -> Optional[Tuple[str, Any]]:
    for key in keys:
        value = raw.get(key)
        if value:
            return key, value
    return None


def _first_present(raw: RawPoint, keys: Iterable[str]) -> Optional[Tuple[str, Any]]:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return key, value
    return None


def _optional_float(raw: RawPoint, keys: Iterable[str]) -> Optional[float]:
    found = _first_present(raw, keys)
    if found is None:
        return None
    key, value = found
    return _to_float(value, f"'{key}'")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def extract_coordinates(raw: RawPoint) -> Tuple[float, float]:
    """Return ``(longitude, latitude)`` from the first matching coordinate rule."""

    for _name, extractor in COORDINATE_RULES:
        result = extractor(raw)
        if result is not None:
            return result
    raise MalformedTrackpoint("missing coordinate")


def extract_time(raw: RawPoint) -> Optional[datetime]:
    """Return the UTC timestamp from the first matching rule, or ``None``."""

    for _name, extractor in TIME_RULES:
        result = extractor(raw)
        if result is not None:
            return result
    return None


def extract_elevation(raw: RawPoint) -> float:
    found = _first_truthy(raw, ELEVATION_KEYS)
    if found is None:
        return 0.0
    key, value = found
    return _to_float(value, f"'{key}'")


def normalize(raw: RawPoint, *, clock: Clock = _utcnow) -> Trackpoint:
    """Convert one raw record into a canonical :class:`Trackpoint`.

    Args:
        raw: Mapping in any of the accepted producer shapes.
        clock: Source of the wall-clock time used when the record carries no
            timestamp. Points built that way have ``time_is_fallback=True``
            and make the output non-reproducible.

    Raises:
        MalformedTrackpoint: If no coordinate representation is found or a
            matched value cannot be interpreted.
    """
    if not isinstance(raw, Mapping):
        raise MalformedTrackpoint(
            f"trackpoint must be an object, got {type(raw).__name__}"
        )

    lon, lat = extract_coordinates(raw)
    time = extract_time(raw)
    time_is_fallback = time is None
    if time is None:
        time = clock()
        LOGGER.debug("Trackpoint without timestamp; using wall-clock time %s", time)

    return Trackpoint(
        latitude=lat,
        longitude=lon,
        time=time,
        elevation=extract_elevation(raw),
        horizontal_speed=_optional_float(raw, HORIZONTAL_SPEED_KEYS),
        vertical_speed=_optional_float(raw, VERTICAL_SPEED_KEYS),
        time_is_fallback=time_is_fallback,
    )


def normalize_all(
    raw_points: Iterable[RawPoint], *, clock: Clock = _utcnow
) -> List[Trackpoint]:
    """Normalize a whole batch, preserving order.

    The first malformed record aborts the batch; no partial list is returned.
    """
    points: List[Trackpoint] = []
    for index, raw in enumerate(raw_points):
        try:
            points.append(normalize(raw, clock=clock))
        except MalformedTrackpoint as exc:
            raise MalformedTrackpoint(f"trackpoint {index}: {exc}") from exc

    fallback_count = sum(1 for point in points if point.time_is_fallback)
    if fallback_count:
        LOGGER.warning(
            "%d of %d trackpoints had no timestamp; substituted current time "
            "(output is not reproducible)",
            fallback_count,
            len(points),
        )
    return points

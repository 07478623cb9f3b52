"""Serialize a :class:`Track` into a GPX 1.1 document.

The document is built line by line as text, with one ``<trk>`` holding a
single ``<trkseg>``. Coordinates and elevation use fixed-point formatting
because GPX consumers parse these attributes as plain text.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from .config import GPX_CREATOR
from .models import Track, Trackpoint

GPX_NAMESPACE = "http://www.topografix.com/GPX/1/1"
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
GPX_SCHEMA_LOCATION = f"{GPX_NAMESPACE} http://www.topografix.com/GPX/1/1/gpx.xsd"

COORDINATE_DECIMALS = 7
ELEVATION_DECIMALS = 2

_XML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&apos;",
}


def escape_xml(text: Optional[str]) -> str:
    """Escape the five reserved XML characters."""
    if not text:
        return ""
    return "".join(_XML_ESCAPES.get(char, char) for char in text)


def format_time(value: datetime) -> str:
    """Format as ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    utc = value.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def format_coordinate(value: float) -> str:
    return f"{value:.{COORDINATE_DECIMALS}f}"


def format_elevation(value: float) -> str:
    return f"{value:.{ELEVATION_DECIMALS}f}"


def format_speed(value: float) -> str:
    """Shortest text that round-trips, without a trailing ``.0`` on integers."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _extension_lines(point: Trackpoint) -> List[str]:
    if not point.has_speed:
        return []
    lines = ["        <extensions>"]
    if point.horizontal_speed is not None:
        speed = format_speed(point.horizontal_speed)
        lines.append(f"          <speed>{speed}</speed>")
    if point.vertical_speed is not None:
        vspeed = format_speed(point.vertical_speed)
        lines.append(f"          <vspeed>{vspeed}</vspeed>")
    lines.append("        </extensions>")
    return lines


def trackpoint_lines(point: Trackpoint) -> List[str]:
    """Return the ``<trkpt>`` element for one point."""
    lat = format_coordinate(point.latitude)
    lon = format_coordinate(point.longitude)
    lines = [
        f'      <trkpt lat="{lat}" lon="{lon}">',
        f"        <ele>{format_elevation(point.elevation)}</ele>",
        f"        <time>{format_time(point.time)}</time>",
    ]
    lines.extend(_extension_lines(point))
    lines.append("      </trkpt>")
    return lines


def serialize(track: Track, generated_at: Optional[datetime] = None) -> str:
    """Convert a track into a GPX 1.1 XML string.

    Args:
        track: Normalized track; points are written in sequence order.
        generated_at: Value of ``<metadata><time>``. Defaults to the current
            time when serialization runs.

    Returns:
        GPX XML string.
    """
    if generated_at is None:
        generated_at = datetime.now(timezone.utc)

    name = escape_xml(track.name)
    description = escape_xml(track.description)

    gpx_lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<gpx version="1.1" creator="{escape_xml(GPX_CREATOR)}"',
        f'     xsi:schemaLocation="{GPX_SCHEMA_LOCATION}"',
        f'     xmlns="{GPX_NAMESPACE}"',
        f'     xmlns:xsi="{XSI_NAMESPACE}">',
        "  <metadata>",
        f"    <name>{name}</name>",
        f"    <desc>{description}</desc>",
        f"    <time>{format_time(generated_at)}</time>",
        "  </metadata>",
        "  <trk>",
        f"    <name>{name}</name>",
        f"    <desc>{description}</desc>",
        "    <trkseg>",
    ]

    for point in track.points:
        gpx_lines.extend(trackpoint_lines(point))

    gpx_lines.extend(
        [
            "    </trkseg>",
            "  </trk>",
            "</gpx>",
        ]
    )

    return "\n".join(gpx_lines)

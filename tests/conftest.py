"""Global pytest fixtures & helpers.

Adds project root to path and provides reusable raw trackpoint fixtures for
the normalizer, serializer and conversion tests.
"""
from __future__ import annotations

import os
import sys
from datetime import datetime, timezone
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

GPX_NS = {"gpx": "http://www.topografix.com/GPX/1/1"}
FIXED_NOW = datetime(2025, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)


# --- Factory helpers -------------------------------------------------
def make_yamap_point(lon, lat, pass_at, altitude=None, horizontal_speed=None, vertical_speed=None):
    return {
        "coord": [lon, lat],
        "pass_at": pass_at,
        "altitude": altitude,
        "horizontal_speed": horizontal_speed,
        "vertical_speed": vertical_speed,
    }


def make_file_point(lon, lat, iso, elevation=None):
    point = {"longitude": lon, "latitude": lat, "time": iso}
    if elevation is not None:
        point["elevation"] = elevation
    return point


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def yamap_points():
    return [
        make_yamap_point(139.123, 35.456, 1700000000, altitude=12.3, horizontal_speed=1.5),
        make_yamap_point(139.124, 35.457, 1700000010, altitude=14.0, horizontal_speed=1.2, vertical_speed=0.1),
        make_yamap_point(139.125, 35.458, 1700000020, altitude=15.5),
    ]


@pytest.fixture
def file_points():
    return [
        make_file_point(-3.18, 51.48, "2025-01-05T10:00:00Z", elevation=20),
        make_file_point(-3.181, 51.481, "2025-01-05T10:00:05Z", elevation=21),
    ]


@pytest.fixture
def yamap_payload(yamap_points):
    return {"activity_regularized_track": {"points": yamap_points}}

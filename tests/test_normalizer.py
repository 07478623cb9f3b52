from datetime import datetime, timezone

import pytest

from yamap_gpx.errors import MalformedTrackpoint
from yamap_gpx.normalizer import normalize, normalize_all

from conftest import FIXED_NOW


def _fixed_clock():
    return FIXED_NOW


def test_yamap_point_normalizes_all_fields():
    point = normalize(
        {
            "coord": [139.123, 35.456],
            "pass_at": 1700000000,
            "altitude": 12.3,
            "horizontal_speed": 1.5,
            "vertical_speed": None,
        }
    )
    assert point.longitude == pytest.approx(139.123)
    assert point.latitude == pytest.approx(35.456)
    assert point.time == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
    assert point.elevation == pytest.approx(12.3)
    assert point.horizontal_speed == pytest.approx(1.5)
    assert point.vertical_speed is None
    assert point.time_is_fallback is False


def test_coordinate_sources_in_priority_order():
    # coord wins over coordinates and scalar fields; values are never merged
    point = normalize(
        {
            "coord": [1.0, 2.0],
            "coordinates": [3.0, 4.0],
            "longitude": 5.0,
            "latitude": 6.0,
            "pass_at": 0,
        }
    )
    assert (point.longitude, point.latitude) == (1.0, 2.0)

    point = normalize({"coordinates": [3.0, 4.0], "longitude": 5.0, "latitude": 6.0, "pass_at": 0})
    assert (point.longitude, point.latitude) == (3.0, 4.0)

    point = normalize({"longitude": 5.0, "latitude": 6.0, "pass_at": 0})
    assert (point.longitude, point.latitude) == (5.0, 6.0)


def test_missing_coordinate_raises():
    with pytest.raises(MalformedTrackpoint, match="missing coordinate"):
        normalize({"pass_at": 1700000000, "altitude": 3})


def test_only_longitude_is_missing_coordinate():
    with pytest.raises(MalformedTrackpoint, match="missing coordinate"):
        normalize({"longitude": 1.0, "pass_at": 1700000000})


@pytest.mark.parametrize("coord", [[1.0], "1,2", [None, 2.0], ["east", 2.0]])
def test_unusable_coordinate_raises(coord):
    with pytest.raises(MalformedTrackpoint):
        normalize({"coord": coord, "pass_at": 1700000000})


def test_non_object_record_raises():
    with pytest.raises(MalformedTrackpoint, match="must be an object"):
        normalize([139.0, 35.0])


def test_timestamp_sources_in_priority_order():
    point = normalize({"coord": [0, 0], "pass_at": 1700000000, "timestamp": 1, "time": "2000-01-01T00:00:00Z"})
    assert point.time == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)

    point = normalize({"coord": [0, 0], "timestamp": 1700000000.5, "time": "2000-01-01T00:00:00Z"})
    assert point.time == datetime(2023, 11, 14, 22, 13, 20, 500000, tzinfo=timezone.utc)

    point = normalize({"coord": [0, 0], "time": "2000-01-01T09:00:00+09:00"})
    assert point.time == datetime(2000, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


def test_naive_iso_time_is_treated_as_utc():
    point = normalize({"coord": [0, 0], "time": "2024-06-01T12:30:00"})
    assert point.time == datetime(2024, 6, 1, 12, 30, tzinfo=timezone.utc)


def test_invalid_iso_time_raises():
    with pytest.raises(MalformedTrackpoint, match="invalid time"):
        normalize({"coord": [0, 0], "time": "yesterday"})


def test_single_digit_fractional_seconds_are_parsed():
    point = normalize({"coord": [0, 0], "time": "2023-11-14T22:13:20.5Z"})
    assert point.time == datetime(2023, 11, 14, 22, 13, 20, 500000, tzinfo=timezone.utc)


def test_rfc2822_time_string_is_parsed():
    point = normalize({"coord": [0, 0], "time": "Tue, 14 Nov 2023 22:13:20 GMT"})
    assert point.time == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
    assert point.time_is_fallback is False


def test_missing_timestamp_uses_clock_and_is_flagged():
    point = normalize({"longitude": 1.0, "latitude": 2.0}, clock=_fixed_clock)
    assert point.time == FIXED_NOW
    assert point.time_is_fallback is True


def test_elevation_zero_falls_through_to_next_source():
    assert normalize({"coord": [0, 0], "pass_at": 0, "altitude": 0, "elevation": 5}).elevation == 5.0
    assert normalize({"coord": [0, 0], "pass_at": 0, "altitude": None, "elevation": 7.5}).elevation == 7.5
    assert normalize({"coord": [0, 0], "pass_at": 0}).elevation == 0.0


def test_speed_fields_only_set_when_present():
    point = normalize({"coord": [0, 0], "pass_at": 0, "speed": 2})
    assert point.horizontal_speed == 2.0
    assert point.vertical_speed is None

    point = normalize({"coord": [0, 0], "pass_at": 0, "horizontal_speed": None, "speed": 3.5, "vertical_speed": -0.2})
    assert point.horizontal_speed == 3.5
    assert point.vertical_speed == -0.2

    point = normalize({"coord": [0, 0], "pass_at": 0, "horizontal_speed": 0})
    assert point.horizontal_speed == 0.0
    assert point.has_speed


def test_scalar_form_normalization_is_stable():
    raw = {"longitude": 139.5, "latitude": 35.5, "timestamp": 1700000000, "elevation": 100}
    first = normalize(raw)
    second = normalize(raw)
    assert first == second
    again = normalize(
        {
            "longitude": first.longitude,
            "latitude": first.latitude,
            "time": first.time.isoformat(),
            "elevation": first.elevation,
        }
    )
    assert again == first


def test_out_of_range_coordinates_pass_through():
    point = normalize({"longitude": 500.0, "latitude": -120.0, "pass_at": 0})
    assert (point.longitude, point.latitude) == (500.0, -120.0)


def test_normalize_all_preserves_order(yamap_points):
    points = normalize_all(yamap_points)
    assert [p.longitude for p in points] == pytest.approx([139.123, 139.124, 139.125])


def test_normalize_all_aborts_whole_batch_with_index(yamap_points):
    raw = list(yamap_points)
    raw.insert(1, {"pass_at": 1700000005})
    with pytest.raises(MalformedTrackpoint, match="trackpoint 1: missing coordinate"):
        normalize_all(raw)


def test_normalize_all_warns_about_fallback_times(caplog):
    caplog.set_level("WARNING")
    points = normalize_all(
        [{"longitude": 1, "latitude": 2}, {"longitude": 1, "latitude": 2, "timestamp": 5}],
        clock=_fixed_clock,
    )
    assert [p.time_is_fallback for p in points] == [True, False]
    assert "1 of 2 trackpoints had no timestamp" in caplog.text

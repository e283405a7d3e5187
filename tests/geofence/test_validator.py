import math

import pytest

from shift_attendance.geofence.model import GeoPoint
from shift_attendance.geofence.validator import Geofence, haversine_distance, is_within

CENTER = GeoPoint(-3.69019, 33.41387)
# One degree of latitude on a 6 371 km sphere.
METERS_PER_DEGREE = 2 * math.pi * 6_371_000 / 360


def _north_of_center(meters: float) -> GeoPoint:
    return GeoPoint(CENTER.latitude + meters / METERS_PER_DEGREE, CENTER.longitude)


def test_distance_to_self_is_zero():
    assert haversine_distance(CENTER, CENTER) == pytest.approx(0.0)


def test_distance_along_meridian():
    assert haversine_distance(CENTER, _north_of_center(150)) == pytest.approx(150, abs=0.01)


def test_point_inside_radius():
    assert is_within(CENTER, 100, _north_of_center(50))
    assert Geofence(CENTER, 100).contains(_north_of_center(99))


def test_point_150m_away_is_rejected():
    assert not Geofence(CENTER, 100).contains(_north_of_center(150))


@pytest.mark.parametrize(
    "point",
    [
        None,
        GeoPoint(None, 33.41387),
        GeoPoint(-3.69019, None),
        GeoPoint(float("nan"), 33.41387),
        GeoPoint(-3.69019, float("inf")),
        GeoPoint("abc", 33.41387),
        GeoPoint(91.0, 33.41387),
        GeoPoint(-3.69019, 181.0),
    ],
)
def test_invalid_points_fail_closed(point):
    assert is_within(CENTER, 100, point) is False


def test_negative_radius_fails_closed():
    assert is_within(CENTER, -1, CENTER) is False

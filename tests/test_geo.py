"""Tests for geographic helpers."""

import pytest

from src.flight_sim.geo import haversine_distance, interpolate, point_in_polygon
from src.flight_sim.models import LatLng

SQUARE = (LatLng(0.0, 0.0), LatLng(0.0, 2.0), LatLng(2.0, 2.0), LatLng(2.0, 0.0))


class TestHaversine:
    def test_one_degree_of_longitude_at_equator(self):
        assert haversine_distance(LatLng(0.0, 0.0), LatLng(0.0, 1.0)) == pytest.approx(
            111_194.9, rel=1e-4
        )

    def test_same_point_is_zero(self):
        assert haversine_distance(LatLng(51.5, -0.1), LatLng(51.5, -0.1)) == 0.0

    def test_is_symmetric(self):
        a, b = LatLng(48.85, 2.35), LatLng(50.85, 4.35)
        assert haversine_distance(a, b) == pytest.approx(haversine_distance(b, a))

    @pytest.mark.parametrize(
        "a, b",
        [
            (LatLng(float("nan"), 0.0), LatLng(0.0, 1.0)),
            (LatLng(0.0, 0.0), LatLng(95.0, 0.0)),
            (None, LatLng(0.0, 1.0)),
        ],
    )
    def test_invalid_input_is_zero(self, a, b):
        assert haversine_distance(a, b) == 0.0


class TestInterpolate:
    def test_endpoints_and_midpoint(self):
        a, b = LatLng(0.0, 0.0), LatLng(2.0, 4.0)
        assert interpolate(a, b, 0.0) == a
        assert interpolate(a, b, 1.0) == b
        assert interpolate(a, b, 0.5) == LatLng(1.0, 2.0)


class TestPointInPolygon:
    def test_inside(self):
        assert point_in_polygon(LatLng(1.0, 1.0), SQUARE) is True

    def test_outside(self):
        assert point_in_polygon(LatLng(3.0, 1.0), SQUARE) is False

    def test_degenerate_polygon(self):
        assert point_in_polygon(LatLng(0.0, 0.0), SQUARE[:2]) is False

    def test_invalid_point(self):
        assert point_in_polygon(LatLng(float("nan"), 1.0), SQUARE) is False

"""
Tests for shared geographic functions.

Tests the haversine distance and path length calculations.
"""

import pytest

from survey_api.shared.geo import (
    haversine,
    haversine_m,
    path_distance_m,
    EARTH_RADIUS_KM,
)


# =============================================================================
# Test Haversine Distance
# =============================================================================

class TestHaversine:
    """Tests for haversine function."""

    def test_same_point(self):
        """Distance between same point should be 0."""
        dist = haversine(43.0, 76.0, 43.0, 76.0)
        assert dist == 0.0

    def test_known_distance_almaty_astana(self):
        """Test with known distance (Almaty to Astana ~974km)."""
        dist = haversine(43.238949, 76.945465, 51.169392, 71.449074)
        assert 950 < dist < 1000

    def test_small_distance(self):
        """0.001 degree latitude is about 111 meters."""
        dist = haversine(43.0, 76.0, 43.001, 76.0)
        assert 0.1 < dist < 0.15

    def test_symmetry(self):
        """Distance A->B should equal B->A."""
        dist_ab = haversine(43.0, 76.0, 44.0, 77.0)
        dist_ba = haversine(44.0, 77.0, 43.0, 76.0)
        assert dist_ab == pytest.approx(dist_ba, rel=0.0001)

    def test_east_west_distance(self):
        """At equator, 1 degree longitude is about 111 km."""
        dist = haversine(0.0, 0.0, 0.0, 1.0)
        assert 110 < dist < 112

    def test_earth_radius_constant(self):
        """Verify Earth radius constant is correct."""
        assert EARTH_RADIUS_KM == 6371.0

    def test_negative_coordinates(self):
        """Sydney to Melbourne (~714 km)."""
        dist = haversine(-33.8688, 151.2093, -37.8136, 144.9631)
        assert 700 < dist < 900

    def test_antimeridian(self):
        """Test distance across the antimeridian (180° longitude)."""
        dist = haversine(0.0, 179.0, 0.0, -179.0)
        assert 220 < dist < 225

    def test_meters(self):
        """haversine_m is haversine in meters."""
        km = haversine(43.0, 76.0, 43.01, 76.01)
        assert haversine_m(43.0, 76.0, 43.01, 76.01) == pytest.approx(km * 1000)


# =============================================================================
# Test Path Distance
# =============================================================================

class TestPathDistance:
    """Tests for path_distance_m function."""

    def test_empty_path(self):
        """Empty path has zero length."""
        assert path_distance_m([]) == 0.0

    def test_single_point(self):
        """Single point has zero length."""
        assert path_distance_m([(43.0, 76.0)]) == 0.0

    def test_multiple_points(self):
        """Legs are summed (~333 m for three 111 m legs)."""
        points = [(43.0, 76.0), (43.001, 76.0), (43.002, 76.0), (43.003, 76.0)]
        assert 300 < path_distance_m(points) < 350

    def test_round_trip(self):
        """Going out and back is twice the one-way distance, not zero."""
        points = [(43.0, 76.0), (43.01, 76.0), (43.0, 76.0)]
        one_way = haversine_m(43.0, 76.0, 43.01, 76.0)
        assert path_distance_m(points) == pytest.approx(2 * one_way, rel=1e-9)

    def test_accepts_generator(self):
        """Points may be any iterable."""
        dist = path_distance_m((lat, 76.0) for lat in (43.0, 43.001))
        assert dist == pytest.approx(haversine_m(43.0, 76.0, 43.001, 76.0))

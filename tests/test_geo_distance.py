import pytest

from factorynear.core.geo import Coordinate, haversine_km, planar_distance_km


USER = Coordinate(latitude=14.0504, longitude=101.3678)
EAST = Coordinate(latitude=14.0504, longitude=101.4678)


def test_haversine_is_zero_for_identical_points():
    assert haversine_km(USER, USER) == 0.0


def test_haversine_is_symmetric():
    a = Coordinate(latitude=13.8891, longitude=101.5489)
    assert haversine_km(USER, a) == haversine_km(a, USER)


def test_haversine_one_degree_of_latitude():
    a = Coordinate(latitude=0.0, longitude=0.0)
    b = Coordinate(latitude=1.0, longitude=0.0)
    assert haversine_km(a, b) == pytest.approx(111.195, abs=0.01)


def test_planar_distance_is_zero_for_coincident_points():
    assert planar_distance_km(USER, USER) == 0.0


def test_planar_distance_for_tenth_of_a_degree_longitude():
    d = planar_distance_km(USER, EAST)
    assert d == pytest.approx(0.1 * 111, abs=1e-6)
    assert d > 10


def test_planar_and_great_circle_metrics_differ_off_equator():
    # cos(14.05°) shrinks longitude on the sphere but not in degree-space.
    planar = planar_distance_km(USER, EAST)
    great_circle = haversine_km(USER, EAST)
    assert great_circle == pytest.approx(10.787, abs=0.01)
    assert planar - great_circle > 0.25


def test_coordinate_from_geojson_pair_swaps_axis_order():
    c = Coordinate.from_lon_lat([101.3721, 14.0612])
    assert c.latitude == 14.0612
    assert c.longitude == 101.3721

import math
import pytest
from routebuilder.core.exceptions import InvalidCoordinate
from routebuilder.schemas.route import Coordinate
from routebuilder.services import geo

ALMATY = Coordinate(latitude=43.2389, longitude=76.8897)
ASTANA = Coordinate(latitude=51.1694, longitude=71.4491)


def test_distance_one_degree_on_equator():
    """One degree of longitude on the equator is R * pi / 180."""
    d = geo.distance(
        Coordinate(latitude=0.0, longitude=0.0), Coordinate(latitude=0.0, longitude=1.0)
    )
    expected = 6_371_000 * math.pi / 180
    assert d == pytest.approx(expected, rel=1e-9), f"Got {d:.2f}m, expected {expected:.2f}m"


def test_distance_symmetric_and_zero_on_equal():
    ab = geo.distance(ALMATY, ASTANA)
    ba = geo.distance(ASTANA, ALMATY)

    assert ab == ba, "distance must be symmetric"
    assert 950_000 < ab < 1_000_000, f"Almaty-Astana should be ~970km, got {ab:.0f}m"
    assert geo.distance(ALMATY, ALMATY) == 0.0
    assert geo.distance(ALMATY, Coordinate(latitude=43.2389, longitude=76.8898)) > 0


def test_distance_rejects_out_of_range():
    with pytest.raises(InvalidCoordinate):
        geo.distance(Coordinate(latitude=91.0, longitude=0.0), ALMATY)
    with pytest.raises(InvalidCoordinate):
        geo.distance(ALMATY, Coordinate(latitude=0.0, longitude=-180.5))


def test_travel_time_mixed_profile():
    # 40 km/h → 40km in 60 min
    assert geo.travel_time(40_000) == 60
    assert geo.travel_time(0) == 0
    assert geo.travel_time(1_000) == 2  # 1.5 min rounds to 2
    assert geo.travel_time(40_000, "walk") == 480


def test_travel_time_monotone_in_distance():
    times = [geo.travel_time(m) for m in range(0, 50_000, 250)]
    assert all(t >= 0 for t in times)
    assert times == sorted(times), "travel_time must be non-decreasing in distance"


def test_leg_without_endpoint_is_free():
    assert geo.leg(None, ALMATY) == (0, 0.0)
    assert geo.leg(ALMATY, None) == (0, 0.0)

    minutes, meters = geo.leg(ALMATY, ASTANA)
    assert meters == geo.distance(ALMATY, ASTANA)
    assert minutes == geo.travel_time(meters)


def test_distance_matrix_matches_pairwise():
    coords = [ALMATY, ASTANA, Coordinate(latitude=42.3417, longitude=69.5901)]
    matrix = geo.distance_matrix(coords)

    assert matrix.shape == (3, 3)
    for i in range(3):
        assert matrix[i, i] == 0.0
        for j in range(3):
            assert matrix[i, j] == pytest.approx(geo.distance(coords[i], coords[j]), rel=1e-9)
            assert matrix[i, j] == pytest.approx(matrix[j, i], rel=1e-12)

    assert geo.distance_matrix([]).shape == (0, 0)


def test_distance_antipodal_points():
    """Antipodal pairs are half the circumference, never a math domain error."""
    half_circumference = 6_371_000 * math.pi
    for lat in range(-89, 90):
        a = Coordinate(latitude=lat + 0.3, longitude=0.0)
        b = Coordinate(latitude=-(lat + 0.3), longitude=180.0)
        d = geo.distance(a, b)
        assert d == pytest.approx(half_circumference, rel=1e-6), f"lat {lat + 0.3}: {d:.0f}m"


def test_travel_time_rounds_half_minutes_up():
    # 3km at 40 km/h is 4.5 min, 7km is 10.5 min
    assert geo.travel_time(3_000) == 5
    assert geo.travel_time(7_000) == 11
    assert geo.travel_time(2_999) == 4

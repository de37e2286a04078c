import math

import pytest

from transit_tracker.utils.geo import dedupe_consecutive, distance_km, path_length_km


TORONTO = (-79.3832, 43.6532)
MISSISSAUGA = (-79.6441, 43.5890)
OTTAWA = (-75.6972, 45.4215)


@pytest.mark.parametrize("point", [TORONTO, (0.0, 0.0), (180.0, -90.0), (-45.5, 12.25)])
def test_distance_to_self_is_zero(point):
    assert distance_km(point, point) == 0


def test_distance_is_symmetric():
    assert distance_km(TORONTO, OTTAWA) == pytest.approx(distance_km(OTTAWA, TORONTO))


def test_triangle_inequality():
    direct = distance_km(MISSISSAUGA, OTTAWA)
    via = distance_km(MISSISSAUGA, TORONTO) + distance_km(TORONTO, OTTAWA)
    assert direct <= via + 1e-9


def test_known_distance():
    # One degree of latitude on a 6371 km sphere
    assert distance_km((0, 0), (0, 1)) == pytest.approx(6371 * math.pi / 180)
    assert distance_km(TORONTO, OTTAWA) == pytest.approx(352, abs=5)


def test_out_of_range_input_is_not_an_error():
    assert distance_km((500, 200), (0, 0)) >= 0


def test_path_length_degenerate_cases():
    assert path_length_km([]) == 0
    assert path_length_km([TORONTO]) == 0
    assert path_length_km([TORONTO, TORONTO]) == 0


def test_path_length_sums_segments():
    coords = [MISSISSAUGA, TORONTO, OTTAWA]
    expected = distance_km(MISSISSAUGA, TORONTO) + distance_km(TORONTO, OTTAWA)
    assert path_length_km(coords) == pytest.approx(expected)


def test_dedupe_consecutive():
    assert dedupe_consecutive([[0, 0], [0, 0], [1, 1]]) == [(0, 0), (1, 1)]
    # Only consecutive repeats go
    assert dedupe_consecutive([[0, 0], [1, 1], [0, 0]]) == [(0, 0), (1, 1), (0, 0)]
    assert dedupe_consecutive([]) == []

import math
import random

import pytest

from geohash import RangeError
from geohash_geometry import (
    EARTH_RADIUS_KM,
    LNG_DEGREE_KM,
    MERCATOR_MAX_KM,
    BoundingBox,
    bounding_box,
    distance,
    estimate_length,
)


def test_bounding_box_at_equator():
    box = bounding_box(0.0, 10.0, 111.1)
    assert isinstance(box, BoundingBox)
    assert box.min_lat == pytest.approx(-1.0)
    assert box.max_lat == pytest.approx(1.0)
    assert box.min_lng == pytest.approx(10.0 - 111.1 / LNG_DEGREE_KM)
    assert box.max_lng == pytest.approx(10.0 + 111.1 / LNG_DEGREE_KM)


def test_bounding_box_field_order():
    assert BoundingBox._fields == ("min_lat", "max_lat", "min_lng", "max_lng")


def test_bounding_box_widens_with_latitude():
    near_equator = bounding_box(5.0, 0.0, 10.0)
    near_pole = bounding_box(80.0, 0.0, 10.0)
    assert near_pole.max_lat - near_pole.min_lat == pytest.approx(near_equator.max_lat - near_equator.min_lat)
    assert near_pole.max_lng - near_pole.min_lng > near_equator.max_lng - near_equator.min_lng
    assert near_pole.max_lng == pytest.approx(10.0 / (LNG_DEGREE_KM * math.cos(math.radians(80.0))))


def test_bounding_box_zero_radius_is_point():
    assert bounding_box(21.0278, 105.8342, 0.0) == (21.0278, 21.0278, 105.8342, 105.8342)


@pytest.mark.parametrize(
    "lat, lng, radius",
    [(90.0, 0.0, 1.0), (-90.0, 0.0, 1.0), (91.0, 0.0, 1.0), (0.0, 181.0, 1.0), (0.0, 0.0, -1.0)],
)
def test_bounding_box_rejects(lat, lng, radius):
    with pytest.raises(RangeError):
        bounding_box(lat, lng, radius)


@pytest.mark.parametrize(
    "radius, expected",
    [
        (0, 12),
        (1.0, 3),
        (0.001, 5),
        (1e-12, 11),
        (1e-15, 12),
        (MERCATOR_MAX_KM, 1),
        (20037.73, 1),
        (50000.0, 1),
    ],
)
def test_estimate_length(radius, expected):
    assert estimate_length(radius) == expected


def test_estimate_length_rejects_negative():
    with pytest.raises(RangeError):
        estimate_length(-1.0)


def test_distance_same_point_is_zero():
    assert distance(21.0278, 105.8342, 21.0278, 105.8342) == 0.0


def test_distance_one_degree_on_equator():
    assert distance(0.0, 0.0, 0.0, 1.0) == pytest.approx(EARTH_RADIUS_KM * math.pi / 180)


def test_distance_antipodes():
    assert distance(0.0, 0.0, 0.0, 180.0) == pytest.approx(EARTH_RADIUS_KM * math.pi)
    assert distance(90.0, 0.0, -90.0, 0.0) == pytest.approx(EARTH_RADIUS_KM * math.pi)


def test_distance_is_symmetric():
    a = (21.0278, 105.8342)
    b = (10.8231, 106.6297)
    assert distance(*a, *b) == pytest.approx(distance(*b, *a))
    assert distance(*a, *b) == pytest.approx(1137, rel=0.01)


def test_distance_antipodal_pairs_do_not_fail():
    rng = random.Random(2024)
    pairs = [(66.16849958870057, -92.19208432063249)]
    pairs += [(rng.uniform(-90, 90), rng.uniform(-180, 0)) for _ in range(5000)]
    for lat, lng in pairs:
        assert distance(lat, lng, -lat, lng + 180) == pytest.approx(EARTH_RADIUS_KM * math.pi)


@pytest.mark.parametrize("point", [(91.0, 0.0, 0.0, 0.0), (0.0, 0.0, 0.0, -181.0)])
def test_distance_rejects_out_of_range(point):
    with pytest.raises(RangeError):
        distance(*point)

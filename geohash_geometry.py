import logging
import math
from typing import NamedTuple

from geohash import MAX_LAT, MAX_PRECISION, RangeError, check_coordinate

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0
# https://en.wikipedia.org/wiki/Latitude#Meridian_distance
LAT_DEGREE_KM = 111.1
# https://en.wikipedia.org/wiki/Longitude#Length_of_a_degree_of_longitude
LNG_DEGREE_KM = 111.320
MERCATOR_MAX_KM = 20037.726


class BoundingBox(NamedTuple):
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float


def _check_radius(radius_km: float) -> None:
    if not radius_km >= 0:
        raise RangeError(f"radius must be a non-negative number of km, got {radius_km}")


def bounding_box(lat: float, lng: float, radius_km: float) -> BoundingBox:
    """Box of +/- radius_km around a point, using flat per-degree lengths.

    The longitude span diverges at the poles, so |lat| == 90 is rejected.
    """
    check_coordinate(lat, lng)
    _check_radius(radius_km)
    if abs(lat) == MAX_LAT:
        raise RangeError("bounding box is undefined at the poles")

    delta_lat = radius_km / LAT_DEGREE_KM
    delta_lng = radius_km / (LNG_DEGREE_KM * math.cos(math.radians(lat)))

    return BoundingBox(
        min_lat=lat - delta_lat,
        max_lat=lat + delta_lat,
        min_lng=lng - delta_lng,
        max_lng=lng + delta_lng,
    )


def estimate_length(radius_km: float) -> int:
    """Geohash length to use for a search of the given radius."""
    _check_radius(radius_km)
    if radius_km == 0:
        return MAX_PRECISION

    steps = 0
    span = radius_km
    while span < MERCATOR_MAX_KM:
        span *= 2
        steps += 1

    length = min(max(steps // 5, 1), MAX_PRECISION)
    logger.debug("radius %s km -> %d doublings -> length %d", radius_km, steps, length)
    return length


def distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two points on Earth in kilometers.

    Uses the Haversine formula. Inputs are decimal degrees and must lie on the
    globe, otherwise RangeError is raised.
    """
    check_coordinate(lat1, lng1)
    check_coordinate(lat2, lng2)

    rlat1, rlng1 = math.radians(lat1), math.radians(lng1)
    rlat2, rlng2 = math.radians(lat2), math.radians(lng2)

    dlat = rlat2 - rlat1
    dlng = rlng2 - rlng1

    a = math.sin(dlat / 2) ** 2 + math.cos(rlat1) * math.cos(rlat2) * math.sin(dlng / 2) ** 2
    # rounding can push a just past 1 for antipodal points
    a = min(a, 1.0)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c

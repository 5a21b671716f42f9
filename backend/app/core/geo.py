"""
GEO - Radius search primitives.

Two-phase radius search:
1. Bounding box: a cheap latitude/longitude window derived from the
   radius, evaluated by the datastore. May admit points outside the
   circle (the box corners) but never drops a point inside it.
2. Haversine: exact great-circle distance, authoritative for inclusion
   and ordering.

Near the poles the longitude window degenerates (division by
cos(lat)), so above `polar_latitude_limit` only the latitude band is
used. Windows crossing the antimeridian are split in two.
"""
from dataclasses import dataclass, field
from math import radians, cos, sin, asin, sqrt
from typing import Optional

EARTH_RADIUS_KM = 6371
KM_PER_DEGREE = 111  # Rough conversion: 1 degree of latitude ~ 111 km

LAT_MIN, LAT_MAX = -90.0, 90.0
LON_MIN, LON_MAX = -180.0, 180.0


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float

    def is_valid(self) -> bool:
        return (
            LAT_MIN <= self.latitude <= LAT_MAX
            and LON_MIN <= self.longitude <= LON_MAX
        )


@dataclass(frozen=True)
class BoundingBox:
    """
    Candidate window for a radius search.

    lon_ranges is a list of (min, max) windows OR-ed together; None
    means longitude is unconstrained.
    """
    lat_min: float
    lat_max: float
    lon_ranges: Optional[list[tuple[float, float]]] = field(default=None)

    def contains(self, point: GeoPoint) -> bool:
        if not self.lat_min <= point.latitude <= self.lat_max:
            return False
        if self.lon_ranges is None:
            return True
        return any(lo <= point.longitude <= hi for lo, hi in self.lon_ranges)


def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate the great circle distance in km between two points."""
    lat1, lon1, lat2, lon2 = map(radians, [lat1, lon1, lat2, lon2])
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    c = 2 * asin(min(1.0, sqrt(a)))
    return EARTH_RADIUS_KM * c


def distance_km(a: GeoPoint, b: GeoPoint) -> float:
    return haversine(a.latitude, a.longitude, b.latitude, b.longitude)


def bounding_box(
    center: GeoPoint,
    radius_km: float,
    polar_latitude_limit: float = 89.0,
) -> BoundingBox:
    """
    Derive the pre-filter window for a radius search around `center`.

    latRange = r / 111
    lonRange = r / (111 * cos(lat0))
    """
    lat_range = radius_km / KM_PER_DEGREE
    lat_min = max(LAT_MIN, center.latitude - lat_range)
    lat_max = min(LAT_MAX, center.latitude + lat_range)

    if abs(center.latitude) >= polar_latitude_limit:
        return BoundingBox(lat_min, lat_max)

    lon_range = radius_km / (KM_PER_DEGREE * cos(radians(center.latitude)))
    if lon_range >= 180:
        return BoundingBox(lat_min, lat_max)

    lon_min = center.longitude - lon_range
    lon_max = center.longitude + lon_range

    # Wrap windows that cross the antimeridian
    if lon_min < LON_MIN:
        ranges = [(LON_MIN, lon_max), (lon_min + 360, LON_MAX)]
    elif lon_max > LON_MAX:
        ranges = [(lon_min, LON_MAX), (LON_MIN, lon_max - 360)]
    else:
        ranges = [(lon_min, lon_max)]

    return BoundingBox(lat_min, lat_max, ranges)


def longitude_window_is_safe(radius_km: float, polar_latitude_limit: float) -> bool:
    """
    True when no radius search up to `radius_km` can lose a hit to the
    longitude window.

    The widest circle that still gets a longitude window is centered
    just below `polar_latitude_limit`. There the circle must not reach
    the pole, and its true longitude half-width
    asin(sin(d) / cos(lat)) must fit inside the window.
    """
    if polar_latitude_limit <= 0:
        return True

    d = radius_km / EARTH_RADIUS_KM
    cos_lat = cos(radians(polar_latitude_limit))
    if sin(d) >= cos_lat:
        return False

    window = radians(radius_km / (KM_PER_DEGREE * cos_lat))
    return window >= asin(sin(d) / cos_lat)

from __future__ import annotations
from dataclasses import dataclass
from math import asin, cos, radians, sin, sqrt

"""
Geospatial helpers.

Two distance metrics live here and they are deliberately not interchangeable:
- `haversine_km` is the great-circle distance shown next to each facility.
- `planar_distance_km` is the degree-space approximation the radius filter uses.
  It over/under-estimates away from the equator; radius membership is defined by it.
"""

EARTH_RADIUS_KM = 6371.0
KM_PER_DEGREE = 111.0


@dataclass(frozen=True)
class Coordinate:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float

    @classmethod
    def from_lon_lat(cls, pair: list[float] | tuple[float, float]) -> "Coordinate":
        """Build from a GeoJSON-ordered `[longitude, latitude]` pair."""
        lon, lat = pair[0], pair[1]
        return cls(latitude=float(lat), longitude=float(lon))


def haversine_km(a: Coordinate, b: Coordinate) -> float:
    """Compute great-circle distance in kilometers between two points."""
    lat1 = radians(a.latitude)
    lon1 = radians(a.longitude)
    lat2 = radians(b.latitude)
    lon2 = radians(b.longitude)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_KM * asin(sqrt(h))


def planar_distance_km(a: Coordinate, b: Coordinate, *, km_per_degree: float = KM_PER_DEGREE) -> float:
    """Euclidean distance in degree-space scaled to kilometers (radius filter metric)."""
    dlat = b.latitude - a.latitude
    dlon = b.longitude - a.longitude
    return sqrt(dlat**2 + dlon**2) * km_per_degree

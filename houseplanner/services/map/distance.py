"""
Distance helpers: Haversine great-circle distance, average-speed travel
time, and the bounding window used to scope amenity queries.
"""

import math
from dataclasses import dataclass
from typing import Optional

from houseplanner.config import settings
from houseplanner.models.request import Coordinate

EARTH_RADIUS_KM = 6371.0
KM_PER_DEGREE_LAT = 111.32

# Longitude span stops growing past this latitude
_MAX_WINDOW_LATITUDE = 85.0


def _speeds():
    return {
        "walking": settings.walking_speed_kmh,
        "driving": settings.driving_speed_kmh,
    }


def direct_distance(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in kilometers (Haversine formula)"""
    lat1_rad = math.radians(a.lat)
    lat2_rad = math.radians(b.lat)
    delta_lat = math.radians(b.lat - a.lat)
    delta_lng = math.radians(b.lng - a.lng)

    h = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))

    return EARTH_RADIUS_KM * c


def average_speed(mode: str) -> float:
    speeds = _speeds()
    if mode not in speeds:
        raise ValueError(f"Unknown travel mode: {mode!r}")
    return speeds[mode]


def travel_time(distance_km: float, mode: str = "walking") -> float:
    """Minutes needed to cover distance_km at the mode's average speed."""
    return distance_km / average_speed(mode) * 60


def wrap_longitude(lng: float) -> float:
    if -180.0 <= lng <= 180.0:
        return lng
    return (lng + 180.0) % 360.0 - 180.0


@dataclass(frozen=True)
class BoundingWindow:
    south: float
    west: float
    north: float
    east: float

    @property
    def crosses_antimeridian(self) -> bool:
        return self.west > self.east

    def to_overpass(self) -> str:
        return f"{self.south:.6f},{self.west:.6f},{self.north:.6f},{self.east:.6f}"


def search_window(origin: Coordinate, radius_km: Optional[float] = None) -> BoundingWindow:
    """
    Square window of half-side radius_km around origin.

    The latitude span is constant in degrees; the longitude span is divided by
    cos(lat) so the window keeps the same ground size away from the equator.
    """
    if radius_km is None:
        radius_km = settings.search_radius_km

    lat_delta = radius_km / KM_PER_DEGREE_LAT
    cos_lat = math.cos(math.radians(min(abs(origin.lat), _MAX_WINDOW_LATITUDE)))
    lng_delta = min(radius_km / (KM_PER_DEGREE_LAT * cos_lat), 180.0)

    south = max(origin.lat - lat_delta, -90.0)
    north = min(origin.lat + lat_delta, 90.0)
    if lng_delta >= 180.0:
        return BoundingWindow(south=south, west=-180.0, north=north, east=180.0)

    return BoundingWindow(
        south=south,
        west=wrap_longitude(origin.lng - lng_delta),
        north=north,
        east=wrap_longitude(origin.lng + lng_delta),
    )

from __future__ import annotations

import numpy as np
from math import radians, sin, cos, sqrt, atan2, floor
from typing import Optional, Sequence
from routebuilder.core.config import settings
from routebuilder.core.exceptions import InvalidCoordinate
from routebuilder.schemas.route import Coordinate

EARTH_RADIUS_M = 6_371_000.0

# Average door-to-door speeds in km/h
SPEED_PROFILES = {
    "walk": 5.0,
    "mixed": settings.AVERAGE_SPEED_KMH,
    "drive": 60.0,
}


def check_coordinate(coord: Coordinate) -> Coordinate:
    """Raise InvalidCoordinate unless lat is in [-90, 90] and lon in [-180, 180]."""
    if not (-90.0 <= coord.latitude <= 90.0) or not (
        -180.0 <= coord.longitude <= 180.0
    ):
        raise InvalidCoordinate(coord.latitude, coord.longitude)
    return coord


def distance(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in meters (haversine)."""
    check_coordinate(a)
    check_coordinate(b)
    if a == b:
        return 0.0

    dlat = radians(b.latitude - a.latitude)
    dlon = radians(b.longitude - a.longitude)
    h = (
        sin(dlat / 2) ** 2
        + cos(radians(a.latitude)) * cos(radians(b.latitude)) * sin(dlon / 2) ** 2
    )
    # Rounding can push h past 1 for near-antipodal points
    h = min(1.0, max(0.0, h))
    return EARTH_RADIUS_M * 2 * atan2(sqrt(h), sqrt(1 - h))


def travel_time(distance_m: float, speed_profile: str = "mixed") -> int:
    """Whole minutes needed to cover `distance_m` at the profile's average speed."""
    if distance_m <= 0:
        return 0
    speed_kmh = SPEED_PROFILES.get(speed_profile, SPEED_PROFILES["mixed"])
    meters_per_minute = speed_kmh * 1000.0 / 60.0
    # Halves round up, not to even
    return max(0, floor(distance_m / meters_per_minute + 0.5))


def leg(
    origin: Optional[Coordinate],
    destination: Optional[Coordinate],
    speed_profile: str = "mixed",
) -> tuple[int, float]:
    """
    Travel time (minutes) and distance (meters) of one leg.

    A leg with a missing endpoint costs nothing.
    """
    if origin is None or destination is None:
        return 0, 0.0
    meters = distance(origin, destination)
    return travel_time(meters, speed_profile), meters


def distance_matrix(coords: Sequence[Coordinate]) -> np.ndarray:
    """
    NxN haversine distance matrix in meters.
    coords: ordered as nodes[0..N-1]
    """
    n = len(coords)
    if n == 0:
        return np.zeros((0, 0), dtype=np.float64)

    for c in coords:
        check_coordinate(c)

    lat = np.radians(np.array([c.latitude for c in coords], dtype=np.float64))
    lon = np.radians(np.array([c.longitude for c in coords], dtype=np.float64))

    dlat = lat[:, None] - lat[None, :]
    dlon = lon[:, None] - lon[None, :]
    h = (
        np.sin(dlat / 2) ** 2
        + np.cos(lat)[:, None] * np.cos(lat)[None, :] * np.sin(dlon / 2) ** 2
    )
    h = np.clip(h, 0.0, 1.0)
    matrix = EARTH_RADIUS_M * 2 * np.arctan2(np.sqrt(h), np.sqrt(1 - h))
    np.fill_diagonal(matrix, 0.0)
    return matrix

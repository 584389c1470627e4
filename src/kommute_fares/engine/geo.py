"""Route estimates from coordinates — used when no routing service is available."""

from __future__ import annotations

import math

from kommute_fares.engine.money import to_number
from kommute_fares.errors import InvalidInputError

EARTH_RADIUS_M = 6_371_000
DEFAULT_AVERAGE_SPEED_KMH = 30.0
"""Urban average for the Gran Área Metropolitana."""


def _check_coordinate(name: str, value: float, limit: float) -> float:
    v = to_number(value, name)
    if not -limit <= v <= limit:
        raise InvalidInputError(name, value, f"must be within ±{limit:g} degrees")
    return v


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points, in metres."""
    phi1 = math.radians(_check_coordinate("lat1", lat1, 90))
    phi2 = math.radians(_check_coordinate("lat2", lat2, 90))
    d_phi = phi2 - phi1
    d_lambda = math.radians(
        _check_coordinate("lon2", lon2, 180) - _check_coordinate("lon1", lon1, 180)
    )

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def estimate_duration(distance_meters: float, average_speed_kmh: float = DEFAULT_AVERAGE_SPEED_KMH) -> int:
    """Estimated trip time in whole seconds at a constant average speed."""
    distance = to_number(distance_meters, "distance_meters")
    speed = to_number(average_speed_kmh, "average_speed_kmh")
    if distance < 0:
        raise InvalidInputError("distance_meters", distance_meters, "must be >= 0")
    if speed <= 0:
        raise InvalidInputError("average_speed_kmh", average_speed_kmh, "must be > 0")
    hours = (distance / 1_000) / speed
    return round(hours * 3_600)

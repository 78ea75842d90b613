"""
Distance and scoring math.
Pure functions: no state, no validation of coordinate ranges.
"""

import math
from dataclasses import dataclass
from typing import Any

EARTH_RADIUS_KM = 6371.0

# Scoring defaults: full credit inside the threshold, exponential decay beyond it
SCORE_THRESHOLD_KM = 10.0
MAX_SCORE = 500
DECAY_RATE = 0.035


@dataclass(frozen=True)
class Coordinate:
    """A latitude/longitude pair in decimal degrees."""
    latitude: float
    longitude: float

    def to_dict(self) -> dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Coordinate":
        return cls(latitude=float(data["latitude"]), longitude=float(data["longitude"]))


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves toward +infinity (2.5 -> 3, -2.5 -> -2).
    This is the one rounding rule used for scores and whole-kilometre distances.
    """
    return int(math.floor(value + 0.5))


def haversine_distance(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in kilometres between two coordinates."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    dlat = math.radians(b.latitude - a.latitude)
    dlon = math.radians(b.longitude - a.longitude)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def exponential_decay_score(
    distance_km: float,
    threshold: float = SCORE_THRESHOLD_KM,
    max_score: int = MAX_SCORE,
    decay_rate: float = DECAY_RATE,
) -> int:
    """
    Points for a guess distance_km away from the target.

    Within threshold the guess earns max_score (map clicks are imprecise).
    Beyond it: round_half_up(max_score * exp(-decay_rate * (distance_km - threshold))), never below 0.

    Example: exponential_decay_score(30) -> 248
    """
    if distance_km <= threshold:
        return max_score

    distance_beyond_threshold = distance_km - threshold
    points = round_half_up(max_score * math.exp(-decay_rate * distance_beyond_threshold))
    return max(0, points)

"""Derived workout metrics.

Inputs are validated before a workout is built; these helpers never check them.
"""


def calc_pace(duration_min: float, distance_km: float) -> float:
    """Running pace in min/km."""
    return duration_min / distance_km


def calc_speed(duration_min: float, distance_km: float) -> float:
    """Cycling speed in km/h."""
    return distance_km / (duration_min / 60)

"""Workout records and their single-shot construction.

A workout is one of two frozen dataclasses, tagged by ``kind``. Per-kind
behaviour (derived metric, extra field) is selected by matching on ``kind`` in
``build_workout``, ``primary_metric`` and ``extra_metric``.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Iterable, Optional, Tuple, Union

from core.description import format_description
from core.errors import ValidationError
from core.metrics import calc_pace, calc_speed


Coordinates = Tuple[float, float]


class WorkoutKind(str, Enum):
    RUNNING = "running"
    CYCLING = "cycling"

    @classmethod
    def parse(cls, value) -> "WorkoutKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown workout type: {value!r}", field="kind") from None


@dataclass(frozen=True)
class RunningWorkout:
    id: str
    created_at: datetime
    coordinates: Coordinates
    distance_km: float
    duration_min: float
    description: str
    cadence_spm: float
    pace_min_per_km: float
    kind: WorkoutKind = field(default=WorkoutKind.RUNNING, init=False)


@dataclass(frozen=True)
class CyclingWorkout:
    id: str
    created_at: datetime
    coordinates: Coordinates
    distance_km: float
    duration_min: float
    description: str
    elevation_gain_m: float
    speed_km_per_h: float
    kind: WorkoutKind = field(default=WorkoutKind.CYCLING, init=False)


Workout = Union[RunningWorkout, CyclingWorkout]


class WorkoutIdGenerator:
    """Epoch-millisecond string ids, bumped by one when the clock stalls."""

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock or time.time
        self._last = 0

    def next_id(self) -> str:
        candidate = int(self._clock() * 1000)
        if candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return str(candidate)

    def seed(self, workout_ids: Iterable[str]) -> None:
        """Keep new ids above any numeric id that was already issued."""
        for workout_id in workout_ids:
            try:
                value = int(workout_id)
            except (TypeError, ValueError):
                continue
            if value > self._last:
                self._last = value


DEFAULT_ID_GENERATOR = WorkoutIdGenerator()


def is_finite_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def normalize_coordinates(value) -> Coordinates:
    """Return ``(lat, lng)`` as floats or raise ``ValidationError``."""
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValidationError("Coordinates must be a (lat, lng) pair", field="coordinates")
    lat, lng = value
    if not (is_finite_number(lat) and is_finite_number(lng)):
        raise ValidationError("Coordinates must be finite numbers", field="coordinates")
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        raise ValidationError("Coordinates are outside the map", field="coordinates")
    return (float(lat), float(lng))


def _require(condition: bool, name: str, message: str) -> None:
    if not condition:
        raise ValidationError(f"{name} {message}", field=name)


def build_workout(
    kind,
    coordinates,
    distance_km: float,
    duration_min: float,
    extra: float,
    *,
    id_generator: Optional[WorkoutIdGenerator] = None,
    now: Optional[datetime] = None,
) -> Workout:
    """
    Build a complete workout record.

    Args:
        kind: 'running' or 'cycling' (or a WorkoutKind)
        coordinates: (lat, lng) of the selected map point
        distance_km: strictly positive distance
        duration_min: strictly positive duration
        extra: cadence in steps/min for running, elevation gain in m for cycling
        id_generator: id source, the module default when omitted
        now: creation time, local wall-clock time when omitted

    Raises:
        ValidationError: when any field breaks a record invariant
    """
    kind = WorkoutKind.parse(kind)
    coords = normalize_coordinates(coordinates)
    _require(is_finite_number(distance_km) and distance_km > 0, "distance", "must be a positive number")
    _require(is_finite_number(duration_min) and duration_min > 0, "duration", "must be a positive number")

    if kind is WorkoutKind.RUNNING:
        _require(is_finite_number(extra) and extra > 0, "cadence", "must be a positive number")
    else:
        _require(is_finite_number(extra) and extra >= 0, "elevation", "must not be negative")

    created_at = now or datetime.now().astimezone()
    workout_id = (id_generator or DEFAULT_ID_GENERATOR).next_id()
    description = format_description(kind, created_at)
    distance_km = float(distance_km)
    duration_min = float(duration_min)

    if kind is WorkoutKind.RUNNING:
        return RunningWorkout(
            id=workout_id,
            created_at=created_at,
            coordinates=coords,
            distance_km=distance_km,
            duration_min=duration_min,
            description=description,
            cadence_spm=float(extra),
            pace_min_per_km=calc_pace(duration_min, distance_km),
        )
    return CyclingWorkout(
        id=workout_id,
        created_at=created_at,
        coordinates=coords,
        distance_km=distance_km,
        duration_min=duration_min,
        description=description,
        elevation_gain_m=float(extra),
        speed_km_per_h=calc_speed(duration_min, distance_km),
    )


def primary_metric(workout: Workout) -> Tuple[float, str]:
    """Derived metric and its unit: pace for running, speed for cycling."""
    if workout.kind is WorkoutKind.RUNNING:
        return workout.pace_min_per_km, "min/km"
    return workout.speed_km_per_h, "km/h"


def extra_metric(workout: Workout) -> Tuple[float, str]:
    """Kind-specific input field and its unit."""
    if workout.kind is WorkoutKind.RUNNING:
        return workout.cadence_spm, "spm"
    return workout.elevation_gain_m, "m"

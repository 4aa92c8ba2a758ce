"""Ordered, id-keyed workout collection and its persisted form."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from core.errors import DuplicateIdError, MalformedPersistedRecordWarning
from core.workout import (
    CyclingWorkout,
    RunningWorkout,
    Workout,
    WorkoutKind,
    is_finite_number,
    normalize_coordinates,
)


logger = logging.getLogger(__name__)


BASE_FIELDS = ('id', 'createdAt', 'coordinates', 'distanceKm', 'durationMin', 'description', 'kind')

KIND_FIELDS = {
    WorkoutKind.RUNNING: ('cadenceSpm', 'paceMinPerKm'),
    WorkoutKind.CYCLING: ('elevationGainM', 'speedKmPerH'),
}

# Short field names used by the older browser localStorage format.
LEGACY_FIELD_ALIASES = {
    'coords': 'coordinates',
    'distance': 'distanceKm',
    'duration': 'durationMin',
    'type': 'kind',
    'date': 'createdAt',
    'cadence': 'cadenceSpm',
    'pace': 'paceMinPerKm',
    'elevationGain': 'elevationGainM',
    'speed': 'speedKmPerH',
}


def workout_to_dict(workout: Workout) -> Dict[str, Any]:
    """Serialize one workout into its JSON-compatible persisted shape."""
    data: Dict[str, Any] = {
        'id': workout.id,
        'createdAt': workout.created_at.isoformat(),
        'coordinates': [workout.coordinates[0], workout.coordinates[1]],
        'distanceKm': workout.distance_km,
        'durationMin': workout.duration_min,
        'description': workout.description,
        'kind': workout.kind.value,
    }
    if workout.kind is WorkoutKind.RUNNING:
        data['cadenceSpm'] = workout.cadence_spm
        data['paceMinPerKm'] = workout.pace_min_per_km
    else:
        data['elevationGainM'] = workout.elevation_gain_m
        data['speedKmPerH'] = workout.speed_km_per_h
    return data


def parse_created_at(value) -> datetime:
    """Parse an ISO-8601 string (trailing 'Z' allowed) or an epoch-millisecond value."""
    if isinstance(value, str):
        text = value.strip()
        if not text.isdigit():
            return datetime.fromisoformat(text.replace("Z", "+00:00"))
        value = int(text)
    if not is_finite_number(value):
        raise ValueError(f"createdAt is not a date: {value!r}")
    try:
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    except (OverflowError, OSError) as exc:
        raise ValueError(f"createdAt is out of range: {value!r}") from exc


def _apply_legacy_aliases(entry: Dict[str, Any]) -> Dict[str, Any]:
    normalized = dict(entry)
    for legacy_name, name in LEGACY_FIELD_ALIASES.items():
        if name not in normalized and legacy_name in normalized:
            normalized[name] = normalized[legacy_name]
    return normalized


def _number(entry: Dict[str, Any], name: str, *, allow_zero: bool = False) -> float:
    value = entry[name]
    if not is_finite_number(value):
        raise ValueError(f"{name} is not a finite number")
    if value < 0 or (value == 0 and not allow_zero):
        raise ValueError(f"{name} is out of range: {value}")
    return float(value)


def workout_from_dict(entry) -> Workout:
    """
    Rehydrate one persisted workout without re-running construction.

    Derived metrics and the description are taken as stored.

    Raises:
        ValueError: with a human-readable reason when the entry is unusable
    """
    if not isinstance(entry, dict):
        raise ValueError(f"entry is not an object ({type(entry).__name__})")
    entry = _apply_legacy_aliases(entry)

    missing = [name for name in BASE_FIELDS if entry.get(name) is None]
    if missing:
        raise ValueError(f"missing field(s): {', '.join(missing)}")

    kind = WorkoutKind.parse(entry['kind'])
    missing = [name for name in KIND_FIELDS[kind] if entry.get(name) is None]
    if missing:
        raise ValueError(f"missing field(s): {', '.join(missing)}")

    workout_id = entry['id']
    if not isinstance(workout_id, str) or not workout_id:
        raise ValueError("id must be a non-empty string")
    description = entry['description']
    if not isinstance(description, str):
        raise ValueError("description must be a string")

    base = dict(
        id=workout_id,
        created_at=parse_created_at(entry['createdAt']),
        coordinates=normalize_coordinates(entry['coordinates']),
        distance_km=_number(entry, 'distanceKm'),
        duration_min=_number(entry, 'durationMin'),
        description=description,
    )
    if kind is WorkoutKind.RUNNING:
        return RunningWorkout(
            cadence_spm=_number(entry, 'cadenceSpm'),
            pace_min_per_km=_number(entry, 'paceMinPerKm'),
            **base,
        )
    return CyclingWorkout(
        elevation_gain_m=_number(entry, 'elevationGainM', allow_zero=True),
        speed_km_per_h=_number(entry, 'speedKmPerH'),
        **base,
    )


class WorkoutStore:
    """Owns the session's workouts, most recent last, ids unique."""

    def __init__(self, workouts: Iterable[Workout] = ()):
        self._workouts: List[Workout] = []
        self._by_id: Dict[str, Workout] = {}
        for workout in workouts:
            self.append(workout)

    def __len__(self) -> int:
        return len(self._workouts)

    def __iter__(self) -> Iterator[Workout]:
        return iter(tuple(self._workouts))

    def __contains__(self, workout_id) -> bool:
        return workout_id in self._by_id

    def append(self, workout: Workout) -> None:
        if workout.id in self._by_id:
            raise DuplicateIdError(workout.id)
        self._workouts.append(workout)
        self._by_id[workout.id] = workout

    def find_by_id(self, workout_id: str) -> Optional[Workout]:
        return self._by_id.get(workout_id)

    def all(self) -> Tuple[Workout, ...]:
        return tuple(self._workouts)

    def clear(self) -> None:
        self._workouts.clear()
        self._by_id.clear()

    def serialize(self) -> List[Dict[str, Any]]:
        return [workout_to_dict(workout) for workout in self._workouts]

    @classmethod
    def restore(cls, payload) -> Tuple["WorkoutStore", List[MalformedPersistedRecordWarning]]:
        """
        Rebuild a store from persisted data, skipping unusable entries.

        Returns the store and one warning per skipped entry. A payload that is
        not a list loads as an empty store with a single warning.
        """
        store = cls()
        warnings: List[MalformedPersistedRecordWarning] = []

        if payload is None:
            return store, warnings
        if not isinstance(payload, list):
            warnings.append(
                MalformedPersistedRecordWarning(0, f"expected a list, got {type(payload).__name__}")
            )
            logger.warning("Persisted workouts are not a list; starting empty")
            return store, warnings

        for index, entry in enumerate(payload):
            try:
                workout = workout_from_dict(entry)
            except ValueError as exc:
                warnings.append(MalformedPersistedRecordWarning(index, str(exc)))
                logger.warning("Skipping persisted workout #%s: %s", index, exc)
                continue
            if workout.id in store:
                warnings.append(MalformedPersistedRecordWarning(index, f"duplicate id {workout.id}"))
                logger.warning("Skipping persisted workout #%s: duplicate id %s", index, workout.id)
                continue
            store.append(workout)

        return store, warnings

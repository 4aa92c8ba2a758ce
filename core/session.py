"""Session controller: validated form input in, stored and persisted workouts out."""

from __future__ import annotations

import logging
import math
import sqlite3
from dataclasses import dataclass
from typing import Dict, List, Optional

from constants import TYPE_FIELDS, UI_COPY
from core.errors import (
    DuplicateIdError,
    LocationUnavailableError,
    MalformedPersistedRecordWarning,
    ValidationError,
)
from core.workout import (
    Coordinates,
    Workout,
    WorkoutIdGenerator,
    WorkoutKind,
    build_workout,
    normalize_coordinates,
)
from core.workout_store import WorkoutStore
from state import AppState, SessionPhase


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidatedSubmission:
    kind: WorkoutKind
    coordinates: Coordinates
    distance_km: float
    duration_min: float
    extra: float


def parse_number(raw, field: str) -> float:
    """Parse raw form input into a finite float or raise ValidationError."""
    if raw is None or isinstance(raw, bool):
        raise ValidationError(UI_COPY['invalid_input'], field=field)
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str) and raw.strip():
        try:
            value = float(raw.strip())
        except ValueError:
            raise ValidationError(UI_COPY['invalid_input'], field=field) from None
    else:
        raise ValidationError(UI_COPY['invalid_input'], field=field)
    if not math.isfinite(value):
        raise ValidationError(UI_COPY['invalid_input'], field=field)
    return value


def validate_submission(kind, raw_distance, raw_duration, raw_type_field, coordinates) -> ValidatedSubmission:
    """
    Check a form submission before anything is built.

    Distance, duration and the type field must all be finite. Distance and
    duration must be positive, and so must cadence for running. Elevation is
    not part of the positivity check.
    """
    kind = WorkoutKind.parse(kind)
    if coordinates is None:
        raise ValidationError(UI_COPY['no_point_selected'], field='coordinates')
    coords = normalize_coordinates(coordinates)

    type_field = TYPE_FIELDS[kind.value]['name']
    distance = parse_number(raw_distance, 'distance')
    duration = parse_number(raw_duration, 'duration')
    extra = parse_number(raw_type_field, type_field)

    required_positive = {'distance': distance, 'duration': duration}
    if kind is WorkoutKind.RUNNING:
        required_positive[type_field] = extra
    for name, value in required_positive.items():
        if value <= 0:
            raise ValidationError(UI_COPY['invalid_input'], field=name)

    return ValidatedSubmission(
        kind=kind,
        coordinates=coords,
        distance_km=distance,
        duration_min=duration,
        extra=extra,
    )


class SessionController:
    """
    Orchestrates one user session around a WorkoutStore.

    Optional callbacks in `callbacks`:
      - on_form_show(coordinates)
      - on_form_hide()
      - on_workout_added(workout)
      - on_workouts_loaded(workouts)
      - on_focus_workout(workout)
      - on_location(coordinates)
      - on_notify(message, level)
      - on_reset()
    """

    def __init__(
        self,
        store: Optional[WorkoutStore] = None,
        persistence=None,
        state: Optional[AppState] = None,
        location_provider=None,
        callbacks: Optional[Dict] = None,
        id_generator: Optional[WorkoutIdGenerator] = None,
    ) -> None:
        self.store = store if store is not None else WorkoutStore()
        self.persistence = persistence
        self.state = state or AppState()
        self.location_provider = location_provider
        self.callbacks = callbacks or {}
        self.id_generator = id_generator or WorkoutIdGenerator()
        self.load_warnings: List[MalformedPersistedRecordWarning] = []

    def _invoke_callback(self, name, *args, **kwargs):
        cb = self.callbacks.get(name)
        if not callable(cb):
            return None
        return cb(*args, **kwargs)

    def _notify(self, message: str, level: str = 'info') -> None:
        self._invoke_callback('on_notify', message, level)

    # --- Start-up ---

    async def start(self) -> List[MalformedPersistedRecordWarning]:
        """Hydrate the store, then ask the location provider once."""
        warnings = self.hydrate()
        await self.locate()
        return warnings

    def hydrate(self) -> List[MalformedPersistedRecordWarning]:
        """Replace the store contents with whatever the persistence layer holds."""
        payload = None
        warnings: List[MalformedPersistedRecordWarning] = []
        if self.persistence is not None:
            try:
                payload = self.persistence.load()
            except ValueError as exc:
                warnings.append(MalformedPersistedRecordWarning(0, str(exc)))
                logger.warning("Ignoring unreadable persisted workouts: %s", exc)
            except (sqlite3.Error, OSError) as exc:
                logger.warning("Unable to load persisted workouts: %s", exc)

        restored, restore_warnings = WorkoutStore.restore(payload)
        warnings.extend(restore_warnings)

        self.store.clear()
        for workout in restored:
            self.store.append(workout)
        self.id_generator.seed(workout.id for workout in restored)
        self.load_warnings = warnings

        logger.info("Loaded %s workout(s), skipped %s", len(self.store), len(warnings))
        self._invoke_callback('on_workouts_loaded', self.store.all())
        return warnings

    async def locate(self) -> Optional[Coordinates]:
        try:
            if self.location_provider is None:
                raise LocationUnavailableError("No location provider configured")
            coords = normalize_coordinates(await self.location_provider.get_current_position())
        except (LocationUnavailableError, ValidationError) as exc:
            logger.warning("Current position unavailable: %s", exc)
            self._notify(UI_COPY['location_unavailable'], 'warning')
            return None

        self._invoke_callback('on_location', coords)
        return coords

    # --- Map and form events ---

    def select_point(self, coordinates) -> Coordinates:
        coords = normalize_coordinates(coordinates)
        self.state.selected_coordinates = coords
        self.state.last_error = None
        self.state.phase = SessionPhase.AWAITING_SUBMISSION
        self._invoke_callback('on_form_show', coords)
        return coords

    def cancel_selection(self) -> None:
        self.state.clear_form()
        self._invoke_callback('on_form_hide')

    def type_field_for(self, kind) -> Dict[str, str]:
        """Type-specific form field (name, label, placeholder) for a workout kind."""
        kind = WorkoutKind.parse(kind)
        return TYPE_FIELDS[kind.value]

    def submit(self, kind, raw_distance, raw_duration, raw_type_field, coordinates=None) -> Optional[Workout]:
        """
        Validate, build, store and persist a workout.

        Returns the new workout, or None when the submission was rejected. A
        rejection leaves the store, the persisted data and the form untouched.
        """
        if coordinates is None:
            coordinates = self.state.selected_coordinates
        try:
            submission = validate_submission(kind, raw_distance, raw_duration, raw_type_field, coordinates)
            workout = build_workout(
                submission.kind,
                submission.coordinates,
                submission.distance_km,
                submission.duration_min,
                submission.extra,
                id_generator=self.id_generator,
            )
        except ValidationError as exc:
            self.state.last_error = str(exc)
            logger.info("Rejected workout submission (%s): %s", exc.field, exc)
            self._notify(str(exc), 'negative')
            return None

        try:
            self.store.append(workout)
        except DuplicateIdError as exc:
            self.state.last_error = UI_COPY['duplicate_workout']
            logger.error("%s", exc)
            self._notify(UI_COPY['duplicate_workout'], 'negative')
            return None

        self.persist()
        self.state.clear_form()
        self._invoke_callback('on_form_hide')
        self._invoke_callback('on_workout_added', workout)
        return workout

    def select_record(self, workout_id: str) -> Optional[Workout]:
        workout = self.store.find_by_id(workout_id)
        if workout is None:
            logger.warning("Selected workout %s is not in the store", workout_id)
            return None
        self._invoke_callback('on_focus_workout', workout)
        return workout

    # --- Persistence ---

    def persist(self) -> bool:
        """Save the whole store; failures are logged, never raised."""
        if self.persistence is None:
            return False
        try:
            self.persistence.save(self.store.serialize())
        except (sqlite3.Error, OSError) as exc:
            logger.warning("Failed to save workouts: %s", exc)
            return False
        logger.info("Saved %s workout(s)", len(self.store))
        return True

    def reset(self) -> None:
        """Delete all persisted workouts and start the session over."""
        if self.persistence is not None:
            try:
                self.persistence.clear()
            except (sqlite3.Error, OSError) as exc:
                logger.warning("Failed to clear persisted workouts: %s", exc)
        self.store.clear()
        self.state.reset()
        self._invoke_callback('on_reset')

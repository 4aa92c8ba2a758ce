"""Error taxonomy for workout capture, storage, and start-up."""

from __future__ import annotations

from typing import Optional


class WorkoutError(Exception):
    """Base class for workout domain errors."""


class ValidationError(WorkoutError, ValueError):
    """User input that cannot become a workout (non-finite or out of range)."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class DuplicateIdError(WorkoutError, KeyError):
    """A workout with the same id is already in the store."""

    def __init__(self, workout_id: str):
        super().__init__(workout_id)
        self.workout_id = workout_id

    def __str__(self) -> str:
        return f"Workout id already stored: {self.workout_id}"


class LocationUnavailableError(WorkoutError):
    """The location provider failed, timed out, or was denied."""


class MalformedPersistedRecordWarning(UserWarning):
    """Collected (never raised) when a persisted entry is skipped on restore."""

    def __init__(self, index: int, reason: str):
        super().__init__(f"Skipped persisted workout #{index}: {reason}")
        self.index = index
        self.reason = reason

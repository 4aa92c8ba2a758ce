"""Shared labels, defaults, and UI copy for Workout Map."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Tuple

APP_TITLE = 'Workout Map'

# Key-value slot holding the serialized workout list.
STORAGE_KEY = 'workouts'

DEFAULT_DATA_DIR = Path.home() / '.workout_map'
DEFAULT_DB_FILENAME = 'workout_map.db'

# Indexed by zero-based month number.
MONTHS: Tuple[str, ...] = (
    'January',
    'February',
    'March',
    'April',
    'May',
    'June',
    'July',
    'August',
    'September',
    'October',
    'November',
    'December',
)

KIND_LABELS: Dict[str, str] = {
    'running': 'Running',
    'cycling': 'Cycling',
}

KIND_ICONS: Dict[str, str] = {
    'running': '🏃‍♂️',
    'cycling': '🚴‍♀️',
}

KIND_COLORS: Dict[str, str] = {
    'running': '#00c46a',
    'cycling': '#ffb545',
}

# The type-specific form field shown for each kind.
TYPE_FIELDS: Dict[str, Dict[str, str]] = {
    'running': {'name': 'cadence', 'label': 'Cadence', 'placeholder': 'step/min'},
    'cycling': {'name': 'elevation', 'label': 'Elev Gain', 'placeholder': 'meters'},
}

# --- Map defaults ---
MAP_DEFAULT_ZOOM = 13
MAP_FALLBACK_CENTER: Tuple[float, float] = (51.505, -0.09)
MAP_TILE_URL = 'https://tile.openstreetmap.org/{z}/{x}/{y}.png'
MAP_TILE_ATTRIBUTION = (
    '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors'
)
POPUP_OPTIONS = {
    'maxWidth': 250,
    'minWidth': 100,
    'autoClose': False,
    'closeOnClick': False,
}

LOCATION_TIMEOUT_SEC = 10.0

UI_COPY: Dict[str, str] = {
    'invalid_input': 'Inputs have to be positive numbers!',
    'no_point_selected': 'Click on the map to choose where the workout happened.',
    'location_unavailable': 'Unable to get your current position.',
    'duplicate_workout': 'This workout was already saved.',
    'saved': 'Workout saved.',
    'reset_confirm': 'Delete all saved workouts?',
    'empty_list': 'No workouts yet. Click the map to log one.',
    'export_empty': 'No workouts to export.',
}

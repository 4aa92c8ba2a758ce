"""
state.py
────────
Centralized session state shared by the controller and the UI shell.

Holds only transient values (phase, selected map point, last error).
Workouts live in the WorkoutStore, never here.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class SessionPhase(str, Enum):
    AWAITING_SELECTION = "awaiting_selection"
    AWAITING_SUBMISSION = "awaiting_submission"


@dataclass
class AppState:
    phase: SessionPhase = SessionPhase.AWAITING_SELECTION
    selected_coordinates: Optional[Tuple[float, float]] = None
    last_error: Optional[str] = None

    def clear_form(self) -> None:
        self.selected_coordinates = None
        self.last_error = None
        self.phase = SessionPhase.AWAITING_SELECTION

    def reset(self) -> None:
        self.clear_form()

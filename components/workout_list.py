"""
components/workout_list.py
──────────────────────────
Sidebar workout feed: one card per workout, newest first.

Standalone NiceGUI renderer with callback injection.
"""
from nicegui import ui

from constants import KIND_COLORS, KIND_ICONS, UI_COPY
from core.workout import extra_metric, primary_metric


EXTRA_ICONS = {'spm': '🦶🏼', 'm': '⛰'}


def _detail(icon, value, unit):
    with ui.row().classes('items-baseline gap-1'):
        ui.label(icon).classes('text-sm')
        ui.label(value).classes('text-base font-bold text-white')
        ui.label(unit).classes('text-[10px] uppercase text-zinc-400')


def _fmt(value):
    return f'{value:g}'


def create_workout_card(workout, on_click=None):
    """Render a single workout card; clicking it calls on_click(workout_id)."""
    kind = workout.kind.value
    metric_value, metric_unit = primary_metric(workout)
    extra_value, extra_unit = extra_metric(workout)

    card = ui.card().classes(
        'w-full bg-zinc-700 p-3 cursor-pointer hover:bg-zinc-600 transition-colors'
    ).style(f'border-left: 5px solid {KIND_COLORS.get(kind, "#888")};')
    if on_click is not None:
        card.on('click', lambda _: on_click(workout.id))

    with card:
        ui.label(workout.description).classes('text-sm font-semibold text-white')
        with ui.row().classes('w-full gap-4'):
            _detail(KIND_ICONS.get(kind, ''), _fmt(workout.distance_km), 'km')
            _detail('⏱', _fmt(workout.duration_min), 'min')
            _detail('⚡️', f'{metric_value:.1f}', metric_unit)
            _detail(EXTRA_ICONS.get(extra_unit, ''), _fmt(extra_value), extra_unit)
    return card


class WorkoutList:
    """Feed container that keeps cards in newest-first order."""

    def __init__(self, on_select=None):
        self.on_select = on_select
        self.container = None
        self.empty_label = None

    def build(self):
        with ui.column().classes('w-full gap-2') as self.container:
            self.empty_label = ui.label(UI_COPY['empty_list']).classes('text-xs text-zinc-500')
        return self

    def add(self, workout):
        self.empty_label.set_visibility(False)
        with self.container:
            card = create_workout_card(workout, on_click=self.on_select)
        card.move(self.container, target_index=1)

    def render_all(self, workouts):
        self.clear()
        for workout in workouts:
            self.add(workout)

    def clear(self):
        self.container.clear()
        with self.container:
            self.empty_label = ui.label(UI_COPY['empty_list']).classes('text-xs text-zinc-500')

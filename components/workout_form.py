"""
components/workout_form.py
──────────────────────────
Workout entry form, shown after a map click.

Raw input strings are passed straight to the injected on_submit callback;
parsing and validation belong to the session controller.
"""
from __future__ import annotations

from nicegui import ui

from constants import KIND_LABELS, TYPE_FIELDS


class WorkoutForm:
    """
    Form with a type select and distance/duration/type-specific inputs.

    Callbacks in `callbacks`:
      - on_submit(kind, distance, duration, type_field)
      - on_kind_change(kind) -> type field dict (name, label, placeholder)
      - on_cancel()
    """

    def __init__(self, callbacks=None):
        self.callbacks = callbacks or {}
        self.card = None
        self.coords_label = None
        self.type_select = None
        self.distance_input = None
        self.duration_input = None
        self.type_inputs = {}

    def build(self):
        with ui.card().classes('w-full bg-zinc-800 p-4 gap-2') as self.card:
            self.coords_label = ui.label('').classes('text-xs text-zinc-400')
            with ui.grid(columns=2).classes('w-full gap-2'):
                self.type_select = ui.select(
                    options=KIND_LABELS,
                    value='running',
                    label='Type',
                    on_change=self._handle_kind_change,
                ).props('outlined dense dark')
                self.distance_input = ui.input('Distance', placeholder='km').props('outlined dense dark')
                self.duration_input = ui.input('Duration', placeholder='min').props('outlined dense dark')
                for field in TYPE_FIELDS.values():
                    self.type_inputs[field['name']] = ui.input(
                        field['label'],
                        placeholder=field['placeholder'],
                    ).props('outlined dense dark')
            with ui.row().classes('w-full justify-end gap-2'):
                ui.button('Cancel', on_click=self._handle_cancel).props('flat')
                ui.button('OK', on_click=self._handle_submit, icon='check')
        self._show_type_field(TYPE_FIELDS['running']['name'])
        self.card.set_visibility(False)
        return self

    def _show_type_field(self, field_name):
        for name, field_input in self.type_inputs.items():
            field_input.set_visibility(name == field_name)

    def show(self, coordinates):
        lat, lng = coordinates
        self.coords_label.set_text(f'📍 {lat:.4f}, {lng:.4f}')
        self.card.set_visibility(True)
        self.distance_input.run_method('focus')

    def hide(self):
        self.distance_input.value = ''
        self.duration_input.value = ''
        for field_input in self.type_inputs.values():
            field_input.value = ''
        self.card.set_visibility(False)

    def _handle_kind_change(self, e):
        cb = self.callbacks.get('on_kind_change')
        field = cb(e.value) if callable(cb) else None
        self._show_type_field((field or TYPE_FIELDS[e.value])['name'])

    def _handle_submit(self):
        cb = self.callbacks.get('on_submit')
        if not callable(cb):
            return
        kind = self.type_select.value
        cb(
            kind,
            self.distance_input.value,
            self.duration_input.value,
            self.type_inputs[TYPE_FIELDS[kind]['name']].value,
        )

    def _handle_cancel(self):
        cb = self.callbacks.get('on_cancel')
        if callable(cb):
            cb()
        self.hide()

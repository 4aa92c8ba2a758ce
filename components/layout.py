"""
components/layout.py
────────────────────
Application shell.

Owns:
  • Sidebar scaffolding (branding, form, summary, actions, workout feed)
  • Main content (the map)
  • Reset confirmation dialog

Does not own:
  • Domain/business handlers (injected callbacks)
  • Workout data (handed in by the app)
"""
from __future__ import annotations

from nicegui import ui

from constants import APP_TITLE, KIND_ICONS, UI_COPY
from components.workout_form import WorkoutForm
from components.workout_list import WorkoutList
from components.workout_map import WorkoutMap


class AppShell:
    """Encapsulates app-level shell scaffolding and shell-owned UI state."""

    def __init__(self, callbacks=None):
        self.callbacks = callbacks or {}

        self.form = WorkoutForm(callbacks={
            'on_submit': self.callbacks.get('on_submit'),
            'on_kind_change': self.callbacks.get('on_kind_change'),
            'on_cancel': self.callbacks.get('on_cancel'),
        })
        self.workout_list = WorkoutList(on_select=self.callbacks.get('on_select_workout'))
        self.workout_map = WorkoutMap(on_point_selected=self.callbacks.get('on_point_selected'))

        self.summary_label = None
        self.export_btn = None
        self.reset_dialog = None

    def _invoke_callback(self, name, *args, **kwargs):
        cb = self.callbacks.get(name)
        if not callable(cb):
            return None
        return cb(*args, **kwargs)

    def build(self):
        """Build the full shell (sidebar + map)."""
        with ui.row().classes('w-full h-screen m-0 p-0 gap-0 no-wrap overflow-hidden'):
            self.build_sidebar()
            with ui.column().classes('flex-grow h-screen p-0'):
                self.workout_map.build()
        self._build_reset_dialog()
        return self

    def build_sidebar(self):
        with ui.column().classes('w-96 bg-zinc-900 p-4 h-screen flex-shrink-0 overflow-y-auto'):
            ui.label(f'📍 {APP_TITLE}').classes('text-2xl font-black tracking-tight text-white mb-4')

            self.form.build()

            self.summary_label = ui.label('').classes('text-xs text-zinc-400')

            ui.label('ACTIONS').classes('text-[10px] text-zinc-500 font-semibold tracking-[0.10em] mt-1')
            with ui.row().classes('w-full gap-2'):
                self.export_btn = ui.button(
                    'EXPORT CSV',
                    on_click=lambda: self._invoke_callback('on_export_csv'),
                    icon='download',
                ).classes('bg-zinc-800 text-white').props('flat')
                ui.button(
                    'RESET',
                    on_click=lambda: self.reset_dialog.open(),
                    icon='delete_forever',
                ).classes('bg-zinc-800 text-white').props('flat')

            self.workout_list.build()

    def _build_reset_dialog(self):
        with ui.dialog() as self.reset_dialog, ui.card():
            ui.label(UI_COPY['reset_confirm'])
            with ui.row().classes('w-full justify-end'):
                ui.button('No', on_click=self.reset_dialog.close).props('flat')
                ui.button('Yes', on_click=self._confirm_reset, color='red')

    def _confirm_reset(self):
        self.reset_dialog.close()
        self._invoke_callback('on_reset')

    def update_summary(self, summary):
        parts = []
        for kind, entry in summary.items():
            if entry['count']:
                parts.append(
                    f"{KIND_ICONS.get(kind, '')} {entry['count']} · {entry['distance_km']:.1f} km"
                )
        self.summary_label.set_text('   '.join(parts))

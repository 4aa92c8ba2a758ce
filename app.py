"""
Workout Map
"""

# Standard library imports
import os
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

# Third-party imports
from nicegui import Client, ui

# Local imports
from constants import APP_TITLE, UI_COPY
from db import DatabaseManager, WorkoutPersistence, default_db_path
from location import BrowserLocationProvider, ConfiguredLocationProvider, parse_position
from state import AppState
from core.data_manager import DataManager
from core.session import SessionController
from components.layout import AppShell


logger = logging.getLogger(__name__)


class MuteFrameworkNoise(logging.Filter):
    def filter(self, record):
        # Filter out the specific NiceGUI warning about event listeners
        return "Event listeners changed after initial definition" not in record.getMessage()


@dataclass
class AppConfig:
    data_dir: Optional[str] = None
    home: Optional[Tuple[float, float]] = None
    native: bool = False

    @classmethod
    def from_env(cls, environ=None):
        """Read WORKOUT_MAP_* overrides from the environment."""
        environ = os.environ if environ is None else environ
        return cls(
            data_dir=environ.get('WORKOUT_MAP_DATA_DIR') or None,
            home=parse_position(environ.get('WORKOUT_MAP_HOME')),
            native=environ.get('WORKOUT_MAP_NATIVE', '').strip().lower() in ('1', 'true', 'yes'),
        )


class WorkoutMapApp:
    """One browser session: controller, persistence, and the UI shell."""

    def __init__(self, config: Optional[AppConfig] = None):
        self.config = config or AppConfig()
        self.db = DatabaseManager(default_db_path(self.config.data_dir))
        self.state = AppState()

        self.shell = AppShell(callbacks={
            'on_submit': self.handle_submit,
            'on_kind_change': self.handle_kind_change,
            'on_cancel': self.handle_cancel,
            'on_select_workout': self.handle_select_workout,
            'on_point_selected': self.handle_point_selected,
            'on_export_csv': self.export_csv,
            'on_reset': self.handle_reset,
        })

        self.controller = SessionController(
            persistence=WorkoutPersistence(self.db),
            state=self.state,
            location_provider=BrowserLocationProvider(
                fallback=ConfiguredLocationProvider(self.config.home),
            ),
            callbacks={
                'on_form_show': self.shell.form.show,
                'on_form_hide': self.shell.form.hide,
                'on_workout_added': self.on_workout_added,
                'on_workouts_loaded': self.on_workouts_loaded,
                'on_focus_workout': self.shell.workout_map.focus,
                'on_location': self.shell.workout_map.set_center,
                'on_notify': self.notify,
                'on_reset': self.on_reset,
            },
        )
        self.data_manager = DataManager(self.controller.store)

    def build_ui(self):
        self.shell.build()

    async def start(self):
        await self.shell.workout_map.initialized()
        warnings = await self.controller.start()
        if warnings:
            self.notify(f'Skipped {len(warnings)} unreadable saved workout(s).', 'warning')

    # --- Controller -> UI ---

    def notify(self, message, level='info'):
        ui.notify(message, type=level)

    def on_workouts_loaded(self, workouts):
        self.shell.workout_list.render_all(workouts)
        self.shell.workout_map.render_workouts(workouts)
        self.refresh_summary()

    def on_workout_added(self, workout):
        self.shell.workout_map.add_workout_marker(workout)
        self.shell.workout_list.add(workout)
        self.refresh_summary()

    def on_reset(self):
        ui.navigate.reload()

    def refresh_summary(self):
        self.shell.update_summary(self.data_manager.summarize())

    # --- UI -> Controller ---

    def handle_point_selected(self, coordinates):
        self.controller.select_point(coordinates)

    def handle_kind_change(self, kind):
        return self.controller.type_field_for(kind)

    def handle_cancel(self):
        self.controller.cancel_selection()

    def handle_submit(self, kind, distance, duration, type_field):
        workout = self.controller.submit(kind, distance, duration, type_field)
        if workout is not None:
            self.notify(UI_COPY['saved'], 'positive')

    def handle_select_workout(self, workout_id):
        self.controller.select_record(workout_id)

    def handle_reset(self):
        self.controller.reset()

    def export_csv(self):
        try:
            file_path = self.data_manager.export_csv()
        except ValueError:
            self.notify(UI_COPY['export_empty'], 'warning')
            return
        except OSError as exc:
            logger.warning("CSV export failed: %s", exc)
            self.notify(f'Export failed: {exc}', 'negative')
            return
        self.notify(f'Saved {file_path}', 'positive')


def main():
    """Application entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    # Suppress known NiceGUI framework listener-churn warning noise
    nicegui_logger = logging.getLogger('nicegui')
    nicegui_logger.addFilter(MuteFrameworkNoise())

    config = AppConfig.from_env()

    @ui.page('/')
    async def index(client: Client):
        workout_app = WorkoutMapApp(config)
        workout_app.build_ui()
        await client.connected()
        await workout_app.start()

    try:
        ui.run(
            native=config.native,
            window_size=(1200, 900) if config.native else None,
            title=APP_TITLE,
            reload=False,
            dark=True,
        )
    except KeyboardInterrupt:
        # Graceful terminal interrupt during local development.
        pass


if __name__ in {"__main__", "__mp_main__"}:
    main()

"""
components/workout_map.py
─────────────────────────
Leaflet map surface.

Owns:
  • Tile layer and initial view
  • Translating map clicks into (lat, lng) point-selected callbacks
  • One marker + popup per workout, and panning to a workout

Does not own:
  • Workout state (records are handed in by the controller)
"""
from __future__ import annotations

from nicegui import ui

from constants import (
    KIND_ICONS,
    MAP_DEFAULT_ZOOM,
    MAP_FALLBACK_CENTER,
    MAP_TILE_ATTRIBUTION,
    MAP_TILE_URL,
    POPUP_OPTIONS,
)


class WorkoutMap:
    """Map widget wrapper with callback injection."""

    def __init__(self, on_point_selected=None):
        self.on_point_selected = on_point_selected
        self.map = None
        self._markers = {}

    def build(self, center=None):
        self.map = ui.leaflet(
            center=center or MAP_FALLBACK_CENTER,
            zoom=MAP_DEFAULT_ZOOM,
        ).classes('w-full h-full')
        self.map.clear_layers()
        self.map.tile_layer(
            url_template=MAP_TILE_URL,
            options={'maxZoom': 19, 'attribution': MAP_TILE_ATTRIBUTION},
        )
        self.map.on('map-click', self._handle_click)
        return self

    async def initialized(self):
        await self.map.initialized()

    def _handle_click(self, e):
        latlng = (e.args or {}).get('latlng') or {}
        lat = latlng.get('lat')
        lng = latlng.get('lng')
        if lat is None or lng is None:
            return
        if callable(self.on_point_selected):
            self.on_point_selected((lat, lng))

    def add_workout_marker(self, workout):
        if workout.id in self._markers:
            return
        kind = workout.kind.value
        marker = self.map.marker(latlng=workout.coordinates)
        popup_options = dict(POPUP_OPTIONS, className=f'{kind}-popup')
        marker.run_method('bindPopup', f"{KIND_ICONS.get(kind, '')} {workout.description}", popup_options)
        marker.run_method('openPopup')
        self._markers[workout.id] = marker

    def render_workouts(self, workouts):
        for workout in workouts:
            self.add_workout_marker(workout)

    def set_center(self, coordinates):
        self.map.set_center(coordinates)

    def focus(self, workout):
        """Pan to a workout's marker."""
        self.map.run_map_method(
            'setView',
            list(workout.coordinates),
            MAP_DEFAULT_ZOOM,
            {'animate': True, 'pan': {'duration': 1}},
        )

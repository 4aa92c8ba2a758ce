"""Location providers consumed once at start-up by the session controller."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from nicegui import ui

from constants import LOCATION_TIMEOUT_SEC
from core.errors import LocationUnavailableError


logger = logging.getLogger(__name__)


GEOLOCATION_JS = '''
return await new Promise((resolve, reject) => {
    if (!navigator.geolocation) {
        reject(new Error('Geolocation is not supported by this browser'));
        return;
    }
    navigator.geolocation.getCurrentPosition(
        (position) => resolve([position.coords.latitude, position.coords.longitude]),
        (error) => reject(new Error(error.message || 'Permission denied')),
        {timeout: %d}
    );
});
'''


def parse_position(value: Optional[str]) -> Optional[Tuple[float, float]]:
    """Parse 'lat,lng' text; returns None for empty or invalid input."""
    if not value:
        return None
    try:
        lat_text, lng_text = value.split(',')
        return (float(lat_text), float(lng_text))
    except ValueError:
        logger.warning("Ignoring invalid position %r (expected 'lat,lng')", value)
        return None


class ConfiguredLocationProvider:
    """Returns a fixed home position, or fails when none is configured."""

    def __init__(self, home: Optional[Tuple[float, float]] = None):
        self.home = home

    async def get_current_position(self) -> Tuple[float, float]:
        if self.home is None:
            raise LocationUnavailableError("No home position configured")
        return self.home


class BrowserLocationProvider:
    """Asks the connected browser for its position through NiceGUI."""

    def __init__(self, timeout_sec: float = LOCATION_TIMEOUT_SEC, fallback=None):
        self.timeout_sec = timeout_sec
        self.fallback = fallback

    async def get_current_position(self) -> Tuple[float, float]:
        try:
            result = await ui.run_javascript(
                GEOLOCATION_JS % int(self.timeout_sec * 1000),
                timeout=self.timeout_sec + 1.0,
            )
            lat, lng = result
            return (float(lat), float(lng))
        except Exception as exc:
            if self.fallback is not None:
                logger.info("Browser location failed (%s); using configured fallback", exc)
                return await self.fallback.get_current_position()
            raise LocationUnavailableError(f"Browser location failed: {exc}") from exc

"""Human-readable workout labels."""

from __future__ import annotations

from datetime import datetime

from constants import MONTHS


def format_description(kind, created_at: datetime) -> str:
    """Return e.g. 'Running on April 14' for a kind and creation time."""
    kind_value = str(getattr(kind, 'value', kind))
    label = kind_value[:1].upper() + kind_value[1:]
    return f"{label} on {MONTHS[created_at.month - 1]} {created_at.day}"

"""
Rotation interval presets and their human-readable labels.
"""

from __future__ import annotations

MIN_ROTATION_INTERVAL_S = 10
MAX_ROTATION_INTERVAL_S = 86400

ROTATION_INTERVALS: list[dict] = [
    {"value": 10, "label": "10 seconds"},
    {"value": 30, "label": "30 seconds"},
    {"value": 60, "label": "1 minute"},
    {"value": 600, "label": "10 minutes"},
    {"value": 3600, "label": "1 hour"},
    {"value": 43200, "label": "12 hours"},
    {"value": 86400, "label": "24 hours"},
]


def _plural(unit: str, seconds: int, unit_s: int) -> str:
    count = seconds // unit_s
    suffix = "s" if seconds >= 2 * unit_s else ""
    return f"{count} {unit}{suffix}"


def format_interval(seconds: int) -> str:
    """
    Render an interval in its largest whole unit, e.g. 90 -> "1 minute",
    7200 -> "2 hours". Sub-minute values always read "N seconds".
    """
    if seconds < 60:
        return f"{seconds} seconds"
    if seconds < 3600:
        return _plural("minute", seconds, 60)
    if seconds < 86400:
        return _plural("hour", seconds, 3600)
    return _plural("day", seconds, 86400)

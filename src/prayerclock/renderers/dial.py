"""Geometry and palette shared by the 24-hour dial renderers."""

from datetime import datetime, timedelta

# Period name → fill color
PERIOD_COLORS: dict[str, str] = {
    "night": "rgb(30, 27, 75)",  # Deep indigo
    "fajr": "rgb(79, 70, 229)",  # Indigo
    "sunrise": "rgb(96, 165, 250)",  # Light blue
    "morning": "rgb(147, 197, 253)",  # Sky blue
    "dhuhr": "rgb(191, 219, 254)",  # Very light blue
    "asr": "rgb(59, 130, 246)",  # Blue
    "maghrib": "rgb(67, 56, 202)",  # Deeper blue
}
BACKGROUND = "#0a0a1e"


def clock_angle(moment: datetime) -> float:
    """Dial angle in degrees for a wall-clock time: 24 h = 360°, midnight = 0°.

    Minute resolution; seconds are ignored.
    """
    return (moment.hour * 60 + moment.minute) / (24 * 60) * 360


def span_degrees(duration: timedelta) -> float:
    """Angular width of a duration on the dial."""
    return duration.total_seconds() / 86400 * 360


def rgb_tuple(color: str) -> tuple[float, float, float]:
    """'rgb(r, g, b)' → matplotlib (r, g, b) in [0, 1]."""
    parts = color.removeprefix("rgb(").removesuffix(")").split(",")
    r, g, b = (int(p) / 255 for p in parts)
    return r, g, b

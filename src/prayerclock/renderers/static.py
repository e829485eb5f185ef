"""Matplotlib static PNG renderer for the 24-hour dial."""

from datetime import datetime
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure
from matplotlib.patches import Circle, Wedge

from prayerclock.i18n import prayer_label
from prayerclock.models import DayPeriod
from prayerclock.renderers.dial import (
    BACKGROUND,
    PERIOD_COLORS,
    clock_angle,
    rgb_tuple,
    span_degrees,
)

_ROOT = Path(__file__).parent.parent.parent.parent


def _to_math_angle(dial_deg: float) -> float:
    """Dial angle (0 at top, clockwise) → matplotlib angle (0 at right, counter-clockwise)."""
    return 90.0 - dial_deg


def render_static_dial(
    periods: tuple[DayPeriod, ...], now: datetime | None = None, size: int = 6
) -> Figure:
    """Render the day partition as a static matplotlib dial.

    Args:
        periods: Output of compute_day_periods. Degenerate periods are skipped.
        now: Current time; draws the hand when given.
        size: Output image size in inches.

    Returns:
        matplotlib Figure object.
    """
    fig, ax = plt.subplots(figsize=(size, size))
    fig.patch.set_facecolor(BACKGROUND)
    ax.set_facecolor(BACKGROUND)

    for period in periods:
        if period.is_degenerate:
            continue
        start = clock_angle(period.start)
        width = span_degrees(period.duration)
        # Wedge angles run counter-clockwise, so the clockwise span is [end, start]
        ax.add_patch(
            Wedge(
                (0, 0),
                1.0,
                _to_math_angle(start + width),
                _to_math_angle(start),
                facecolor=rgb_tuple(PERIOD_COLORS.get(period.name, "rgb(128, 128, 128)")),
                edgecolor="white",
                linewidth=0.5,
                alpha=0.75,
            )
        )
        mid = np.deg2rad(_to_math_angle(start + width / 2))
        ax.text(
            0.8 * np.cos(mid),
            0.8 * np.sin(mid),
            prayer_label(period.name),
            color="white",
            fontsize=8,
            ha="center",
            va="center",
        )

    ax.add_patch(Circle((0, 0), 1.0, fill=False, edgecolor="white", alpha=0.4))

    for hour in (0, 6, 12, 18):
        theta = np.deg2rad(_to_math_angle(hour / 24 * 360))
        ax.text(
            0.92 * np.cos(theta),
            0.92 * np.sin(theta),
            str(hour),
            color="white",
            fontsize=9,
            ha="center",
            va="center",
        )

    if now is not None:
        theta = np.deg2rad(_to_math_angle(clock_angle(now)))
        ax.plot([0, 0.7 * np.cos(theta)], [0, 0.7 * np.sin(theta)], color="white", lw=1.5)
        ax.add_patch(Circle((0, 0), 0.02, color="white"))

    ax.set_xlim(-1.05, 1.05)
    ax.set_ylim(-1.05, 1.05)
    ax.set_aspect("equal")
    ax.axis("off")
    return fig


def save_static_dial(
    periods: tuple[DayPeriod, ...],
    output_path: Path | None = None,
    now: datetime | None = None,
) -> Path:
    """Save the dial as a PNG file.

    Args:
        periods: Output of compute_day_periods.
        output_path: Destination path. Auto-generated under results/ if None.
        now: Current time; draws the hand when given.

    Returns:
        Path to the saved file.
    """
    if output_path is None:
        day = periods[1].start if len(periods) > 1 else datetime.now()
        output_path = _ROOT / "results" / f"prayer_dial_{day:%Y_%m_%d}.png"

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig = render_static_dial(periods, now=now)
    fig.savefig(output_path, facecolor=BACKGROUND)
    plt.close(fig)
    return output_path

"""Plotly 24-hour prayer dial renderer.

Each day period is a polar bar whose angular position and width follow its wall-clock
start and duration. Midnight is at the top, time runs clockwise.
"""

from datetime import datetime

import plotly.graph_objects as go

from prayerclock.i18n import prayer_label
from prayerclock.models import DayPeriod
from prayerclock.renderers.dial import BACKGROUND, PERIOD_COLORS, clock_angle, span_degrees

_HAND_COLOR = "#ffffff"
_OUTLINE = "rgba(255, 255, 255, 0.4)"


def render_dial(
    periods: tuple[DayPeriod, ...], now: datetime | None = None, lang: str = "en"
) -> go.Figure:
    """Render the day partition as a Plotly polar dial.

    Degenerate (zero or negative width) periods are skipped.

    Args:
        periods: Output of compute_day_periods.
        now: Current time; draws the hand when given.
        lang: Label language ('en' or 'ar').

    Returns:
        Plotly Figure object.
    """
    visible = [p for p in periods if not p.is_degenerate]
    spans = [span_degrees(p.duration) for p in visible]
    centers = [(clock_angle(p.start) + w / 2) % 360 for p, w in zip(visible, spans)]
    labels = [prayer_label(p.name, lang) for p in visible]
    hover = [
        f"{label}<br>{p.start:%H:%M} – {p.end:%H:%M}"
        for label, p in zip(labels, visible)
    ]

    sectors = go.Barpolar(
        r=[1.0] * len(visible),
        theta=centers,
        width=spans,
        marker=dict(
            color=[PERIOD_COLORS.get(p.name, "grey") for p in visible],
            opacity=0.75,
            line=dict(color=_OUTLINE, width=1),
        ),
        text=labels,
        hovertext=hover,
        hoverinfo="text",
        name="periods",
    )
    traces: list[go.Barpolar | go.Scatterpolar] = [sectors]

    if now is not None:
        angle = clock_angle(now)
        traces.append(
            go.Scatterpolar(
                r=[0.0, 0.85],
                theta=[angle, angle],
                mode="lines+markers",
                line=dict(color=_HAND_COLOR, width=2),
                marker=dict(size=[6, 0], color=_HAND_COLOR),
                hoverinfo="skip",
                name="now",
            )
        )

    fig = go.Figure(data=traces)
    fig.update_layout(
        paper_bgcolor=BACKGROUND,
        plot_bgcolor=BACKGROUND,
        showlegend=False,
        margin=dict(l=20, r=20, t=20, b=20),
        width=400,
        height=400,
        polar=dict(
            bgcolor=BACKGROUND,
            radialaxis=dict(visible=False, range=[0.0, 1.0]),
            angularaxis=dict(
                rotation=90,
                direction="clockwise",
                tickmode="array",
                tickvals=[0, 90, 180, 270],
                ticktext=["0", "6", "12", "18"],
                tickfont=dict(color="white", size=10),
                showgrid=False,
                linecolor=_OUTLINE,
            ),
        ),
    )
    return fig

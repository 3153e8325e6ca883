"""Shared Plotly plotting helpers."""
import math

import plotly.graph_objects as go

from tempsim.constants import (
    SERIES_COLORS, SERIES_LABELS, TEMPERATURE_UNIT, Y_AXIS_BASE_MAX, Y_AXIS_BASE_MIN,
)


def apply_common_layout(fig, title=None, height=500):
    """Apply common layout settings to a Plotly figure."""
    fig.update_layout(
        template="plotly_white",
        height=height,
        title=title,
        title_x=0.5,
        margin=dict(t=60, b=40, l=60, r=40),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, x=0),
    )
    return fig


def y_axis_range(prediction=None, trend_temps=()):
    """Temperature axis bounds; the top widens when the prediction runs hot.

    Trend points beyond the stepped range stretch the axis to the next whole degree.
    """
    if not prediction:
        y_min, y_max = Y_AXIS_BASE_MIN, Y_AXIS_BASE_MAX
    elif prediction > 29:
        y_min, y_max = Y_AXIS_BASE_MIN, 30
    elif prediction > 28:
        y_min, y_max = Y_AXIS_BASE_MIN, 29
    else:
        y_min, y_max = Y_AXIS_BASE_MIN, Y_AXIS_BASE_MAX

    temps = [t for t in trend_temps if math.isfinite(t)]
    if prediction and math.isfinite(prediction):
        temps.append(prediction)
    if temps:
        y_min = min(y_min, math.floor(min(temps)))
        y_max = max(y_max, math.ceil(max(temps)))
    return y_min, y_max


def thin_series(series, stride=10):
    """Every ``stride``-th record, plus the last one so the trend line has something to join."""
    if not series:
        return []
    thinned = list(series[::stride])
    if thinned[-1] is not series[-1]:
        thinned.append(series[-1])
    return thinned


def simulation_chart(series, trend_line=(), prediction=None, stride=10, height=500):
    """Observed annual mean, observed smoothed mean and projected trend on one year axis."""
    shown = thin_series(series, stride)
    years = [r.year for r in shown]

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=years, y=[r.annual_mean for r in shown],
        mode="lines+markers", name=SERIES_LABELS["annual_mean"],
        line=dict(color=SERIES_COLORS["annual_mean"], width=2), marker=dict(size=6),
    ))
    fig.add_trace(go.Scatter(
        x=years, y=[r.five_year_smooth for r in shown],
        mode="lines+markers", name=SERIES_LABELS["five_year_smooth"],
        line=dict(color=SERIES_COLORS["five_year_smooth"], width=2), marker=dict(size=6),
    ))
    if trend_line:
        fig.add_trace(go.Scatter(
            x=[int(label) for label, _ in trend_line], y=[temp for _, temp in trend_line],
            mode="lines+markers", name=SERIES_LABELS["trend"],
            line=dict(color=SERIES_COLORS["trend"], width=2, dash="dash"), marker=dict(size=6),
        ))

    y_min, y_max = y_axis_range(prediction, [temp for _, temp in trend_line])
    apply_common_layout(fig, title="Philippines Temperature Trends", height=height)
    fig.update_xaxes(title_text=SERIES_LABELS["year"])
    fig.update_yaxes(title_text=f"Temperature ({TEMPERATURE_UNIT})", range=[y_min, y_max],
                     dtick=0.5, ticksuffix=TEMPERATURE_UNIT)
    return fig

from __future__ import annotations

from typing import Any, Dict, List, Optional

import plotly.graph_objects as go

from charts.theme import DEFAULT_THEME, tooltip_colors
from schemas.chart_spec import ChartConfig, ChartModel, SeriesSpec
from schemas.theme import Theme

POLAR_TYPES = ("radar", "polarArea")
PIE_TYPES = ("pie", "doughnut")

BUBBLE_MIN_PX = 6
BUBBLE_MAX_PX = 40


def _bubble_sizes(values: List[float]) -> List[float]:
    mags = [abs(v) for v in values]
    hi = max(mags, default=0)
    if not hi:
        return [BUBBLE_MIN_PX for _ in values]
    return [BUBBLE_MIN_PX + (BUBBLE_MAX_PX - BUBBLE_MIN_PX) * m / hi for m in mags]


def _cartesian_trace(
    chart_type: str, labels: List[str], s: SeriesSpec
) -> go.BaseTraceType:
    line = dict(color=s.border_color, width=s.border_width)

    if chart_type == "bar":
        return go.Bar(
            x=labels,
            y=s.values,
            name=s.name,
            marker=dict(color=s.color, line=line),
        )
    if chart_type == "line":
        return go.Scatter(
            x=labels, y=s.values, name=s.name, mode="lines+markers", line=line
        )
    if chart_type == "area":
        # filled, smoothed line
        return go.Scatter(
            x=labels,
            y=s.values,
            name=s.name,
            mode="lines",
            fill="tozeroy",
            fillcolor=s.color,
            line=dict(line, shape="spline", smoothing=0.4),
        )
    if chart_type == "scatter":
        return go.Scatter(
            x=labels,
            y=s.values,
            name=s.name,
            mode="markers",
            marker=dict(color=s.color, line=line),
        )
    if chart_type == "bubble":
        return go.Scatter(
            x=labels,
            y=s.values,
            name=s.name,
            mode="markers",
            marker=dict(
                color=s.color, size=_bubble_sizes(s.values), line=line, opacity=0.7
            ),
        )
    raise ValueError(f"Unsupported chart_type: {chart_type}")


def _pie_traces(model: ChartModel, config: ChartConfig) -> List[go.Pie]:
    n = len(model.series)
    hole = 0.5 if config.chart_type == "doughnut" else 0.0
    traces = []
    for i, s in enumerate(model.series):
        traces.append(
            go.Pie(
                labels=model.labels,
                values=s.values,
                name=s.name,
                title=dict(text=s.name) if n > 1 else None,
                hole=hole,
                sort=False,
                domain=dict(x=[i / n, (i + 1) / n]),
                marker=dict(line=dict(color=s.border_color, width=s.border_width)),
            )
        )
    return traces


def _polar_trace(
    chart_type: str, labels: List[str], s: SeriesSpec
) -> go.BaseTraceType:
    if chart_type == "radar":
        return go.Scatterpolar(
            r=s.values,
            theta=labels,
            name=s.name,
            fill="toself",
            fillcolor=s.color,
            opacity=0.6,
            line=dict(color=s.border_color, width=s.border_width),
        )
    return go.Barpolar(
        r=s.values,
        theta=labels,
        name=s.name,
        marker=dict(color=s.color, line=dict(color=s.border_color)),
        opacity=0.7,
    )


def build_traces(model: ChartModel, config: ChartConfig) -> List[go.BaseTraceType]:
    chart_type = config.chart_type

    if chart_type in PIE_TYPES:
        return _pie_traces(model, config)

    if chart_type == "heatmap":
        if not model.series:
            return []
        return [
            go.Heatmap(
                z=[s.values for s in model.series],
                x=model.labels,
                y=[s.name for s in model.series],
                colorscale="Blues",
            )
        ]

    if chart_type in POLAR_TYPES:
        return [_polar_trace(chart_type, model.labels, s) for s in model.series]

    return [_cartesian_trace(chart_type, model.labels, s) for s in model.series]


def _axis(title: Optional[str], config: ChartConfig, theme: Theme) -> Dict[str, Any]:
    return dict(
        title=dict(text=title or None, font=dict(size=config.font_size)),
        showgrid=config.show_grid,
        gridcolor=theme.grid_color,
        tickfont=dict(size=config.font_size - 2, color=theme.text_color),
    )


def apply_layout(fig: go.Figure, config: ChartConfig, theme: Theme) -> go.Figure:
    pad = config.padding
    fig.update_layout(
        title=dict(
            text=config.title,
            font=dict(size=config.font_size + 2, color=theme.text_color),
        ),
        showlegend=config.show_legend,
        legend=dict(orientation="h", y=1.08, font=dict(size=config.font_size)),
        font=dict(size=config.font_size, color=theme.text_color),
        paper_bgcolor=theme.background_color,
        plot_bgcolor=theme.background_color,
        colorway=config.colors,
        hoverlabel=tooltip_colors(theme),
        margin=dict(l=pad, r=pad, t=pad + 50, b=pad),
        transition=dict(duration=500 if config.animation else 0),
        autosize=config.responsive,
    )

    if config.chart_type in POLAR_TYPES:
        fig.update_polars(
            bgcolor=theme.background_color,
            radialaxis=dict(showgrid=config.show_grid, gridcolor=theme.grid_color),
            angularaxis=dict(showgrid=config.show_grid, gridcolor=theme.grid_color),
        )
    elif config.chart_type not in PIE_TYPES:
        fig.update_xaxes(**_axis(config.x_axis_label, config, theme))
        fig.update_yaxes(**_axis(config.y_axis_label, config, theme))

    return fig


def render_plotly(
    model: ChartModel, config: ChartConfig, theme: Theme = DEFAULT_THEME
) -> go.Figure:
    if model is None or model.is_empty:
        fig = go.Figure()
        fig.update_layout(
            title="No data to chart",
            paper_bgcolor=theme.background_color,
            plot_bgcolor=theme.background_color,
            font=dict(color=theme.text_color),
        )
        return fig

    fig = go.Figure(data=build_traces(model, config))
    return apply_layout(fig, config, theme)


def plotly_config(config: ChartConfig) -> Dict[str, Any]:
    """
    Display options for the front end (passed as `config=` to plotly.js).
    """
    return {
        "responsive": config.responsive,
        "displaylogo": False,
        "fillFrame": not config.maintain_aspect_ratio,
    }

"""Chart creation utilities for lap and cohort visualization."""

import math
from typing import List

import plotly.express as px
import plotly.graph_objects as go
from loguru import logger

from ..analysis.cohort_analysis import CohortChartDataset
from ..analysis.lap_analysis import LapChartDataset
from ..config import CHART_MAX_MINUTES, CHART_MIN_MINUTES, THRESHOLD_MINUTES, Terrain
from ..data_processing.preprocessors import format_minutes

TERRAIN_FILL = {
    Terrain.TRAIL: "rgba(255, 223, 0, 0.1)",
    Terrain.ROAD: "rgba(0, 0, 139, 0.08)",
}
MIN_MARKER_COLOR = "#00FF00"
MAX_MARKER_COLOR = "#FF0000"


def runner_color(index: int) -> str:
    """Color of the index-th selected runner."""
    colors = px.colors.qualitative.Plotly
    return colors[index % len(colors)]


def _minute_ticks(low: float = CHART_MIN_MINUTES, high: float = CHART_MAX_MINUTES, step: int = 5) -> List[float]:
    return list(range(math.ceil(low), math.floor(high) + 1, step))


def _add_no_data(fig: go.Figure, text: str) -> None:
    fig.add_annotation(
        text=text,
        xref="paper", yref="paper",
        x=0.5, y=0.5, showarrow=False
    )


def create_lap_time_chart(dataset: LapChartDataset, title: str = "Lap Split Times") -> go.Figure:
    """Create the lap time chart for the selected runners.

    Args:
        dataset: Output of ``build_lap_chart_dataset``
        title: Chart title

    Returns:
        Plotly figure object
    """
    logger.info(f"Creating lap time chart for {len(dataset.runners)} runners")

    fig = go.Figure()

    if not dataset.runners:
        _add_no_data(fig, "Select runners in the results table")

    for band in dataset.sections:
        fig.add_vrect(
            x0=band.start_lap - 0.5,
            x1=band.end_lap + 0.5,
            fillcolor=TERRAIN_FILL[band.terrain],
            line_width=0,
            layer="below",
        )
        if band.center_lap <= dataset.max_laps:
            fig.add_annotation(
                x=band.center_lap, y=1, yref="paper", yanchor="top",
                text=band.label, showarrow=False,
                font=dict(size=12, color="rgba(0, 0, 0, 0.3)"),
            )

    for i, runner in enumerate(dataset.runners):
        color = runner_color(i)
        laps = runner.lap_numbers

        marker_colors = [color] * len(laps)
        marker_sizes = [6] * len(laps)
        for idx in runner.min_indices:
            marker_colors[idx] = MIN_MARKER_COLOR
            marker_sizes[idx] = 10
        for idx in runner.max_indices:
            marker_colors[idx] = MAX_MARKER_COLOR
            marker_sizes[idx] = 10

        fig.add_trace(go.Scatter(
            x=laps,
            y=runner.lap_times,
            mode="lines+markers",
            name=runner.name,
            line=dict(color=color),
            marker=dict(size=marker_sizes, color=marker_colors, line=dict(width=1, color="#000000")),
            customdata=[format_minutes(t) for t in runner.lap_times],
            hovertemplate=f"{runner.name}: %{{customdata}}<extra></extra>",
        ))

        if runner.trend is not None:
            fig.add_trace(go.Scatter(
                x=laps, y=runner.trend, mode="lines",
                name=f"{runner.name} Trend",
                line=dict(color=color, dash="longdash", width=2),
                hoverinfo="skip",
            ))

        if runner.ema is not None:
            fig.add_trace(go.Scatter(
                x=laps, y=runner.ema, mode="lines",
                name=f"{runner.name} EMA (6-lap)",
                line=dict(color=color, dash="dot", width=3),
                visible="legendonly",
                hoverinfo="skip",
            ))

        if runner.upper_band is not None and runner.lower_band is not None:
            group = f"std-{runner.bib}"
            fig.add_trace(go.Scatter(
                x=laps, y=runner.upper_band, mode="lines",
                name=f"{runner.name} Upper Std Dev",
                line=dict(color=color, dash="dash", width=1),
                legendgroup=group, showlegend=False,
                visible="legendonly", hoverinfo="skip",
            ))
            fig.add_trace(go.Scatter(
                x=laps, y=runner.lower_band, mode="lines",
                name=f"{runner.name} Standard Deviation",
                line=dict(color=color, dash="dash", width=1),
                fill="tonexty", opacity=0.3,
                legendgroup=group,
                visible="legendonly", hoverinfo="skip",
            ))

    ticks = _minute_ticks()
    fig.update_layout(
        title=title,
        xaxis_title="Lap Split Times (Trail: 11 hours, Road: 13 hours)",
        yaxis=dict(
            title="Time (minutes)",
            range=[CHART_MIN_MINUTES, CHART_MAX_MINUTES],
            tickvals=ticks,
            ticktext=[format_minutes(t) for t in ticks],
        ),
        template="plotly_white",
        hovermode="x unified",
        showlegend=True,
        height=600,
    )

    return fig


def create_cohort_chart(
    dataset: CohortChartDataset,
    threshold: float = THRESHOLD_MINUTES,
) -> go.Figure:
    """Create the placement scatter with EMA and best-fit lines.

    Args:
        dataset: Output of ``build_cohort_chart_dataset``
        threshold: Threshold used for the analysis, for labels

    Returns:
        Plotly figure object
    """
    logger.info(f"Creating cohort chart for {dataset.edition} edition")

    fig = go.Figure()
    label = f"% Laps > {threshold:g}min"

    if not dataset.ranks:
        _add_no_data(fig, f"No cohort analysis for {dataset.edition} edition")
    else:
        fig.add_trace(go.Scatter(
            x=dataset.ranks, y=dataset.percents, mode="markers",
            customdata=dataset.names, hovertemplate="%{customdata}: %{y:.1f}%",
            name=label, marker=dict(color="#36A2EB", size=8),
        ))
        if dataset.ema is not None:
            fig.add_trace(go.Scatter(
                x=dataset.ranks, y=dataset.ema, mode="lines",
                name="Weighted Avg (EMA, 6)", line=dict(color="#FF6384", width=2),
            ))
        if dataset.fit_values is not None:
            fig.add_trace(go.Scatter(
                x=dataset.ranks, y=dataset.fit_values, mode="lines",
                name="Best Fit", line=dict(color="#FFCE56", width=2),
            ))

    fig.update_layout(
        title=f"% of Laps Over {threshold:g} Minutes by Placement ({dataset.edition} Edition)",
        xaxis=dict(
            title="Athlete (Last Place = left, Winner = right)",
            # placement is the x value; names are only tick labels and may repeat
            tickmode="array",
            tickvals=dataset.ranks,
            ticktext=dataset.names,
            autorange="reversed",
            tickangle=-45,
            tickfont=dict(size=10),
        ),
        yaxis=dict(title=label, range=[0, 60]),
        template="plotly_white",
    )

    return fig

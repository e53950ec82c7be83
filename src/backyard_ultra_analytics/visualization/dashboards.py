"""Dashboard creation utilities."""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import dash
import plotly.graph_objects as go
from dash import ALL, Input, Output, State, dash_table, dcc, html
from loguru import logger

from ..analysis.cohort_analysis import analyze_laps_over_threshold, build_cohort_chart_dataset
from ..analysis.lap_analysis import build_lap_chart_dataset
from ..data_processing.records import EditionData
from ..data_processing.transformers import results_to_rows, sort_results
from ..state import (
    DashboardState,
    prune_selection,
    remove_runner,
    switch_edition,
    sync_selection,
    toggle_sort,
)
from .charts import create_cohort_chart, create_lap_time_chart, runner_color

ANALYSIS_PREFIX = "analysis-"
BADGE_TYPE = "remove-runner"

TABLE_COLUMNS = [
    ("place", "Place"),
    ("bib", "Bib"),
    ("name", "Name"),
    ("age", "Age"),
    ("state", "State"),
    ("laps_completed", "Laps"),
    ("total_distance_miles", "Miles"),
    ("total_distance_km", "KM"),
    ("race_time", "Race Time"),
]


def tab_edition(tab: str) -> str:
    """Return the edition a tab value refers to."""
    return tab[len(ANALYSIS_PREFIX):] if tab.startswith(ANALYSIS_PREFIX) else tab


def _selected_badges(dataset) -> list:
    badges = []
    for i, runner in enumerate(dataset.runners):
        badges.append(html.Span(
            f"{runner.name} (#{runner.bib}) ×",
            id={"type": BADGE_TYPE, "bib": runner.bib},
            n_clicks=0,
            title="Click to remove",
            className="badge",
            style={
                "backgroundColor": runner_color(i),
                "color": "white",
                "padding": "5px 10px",
                "marginRight": "5px",
                "cursor": "pointer",
            },
        ))
    return badges


def apply_table_sort(state: DashboardState, sort_by: Optional[Sequence[Dict]]) -> DashboardState:
    """Apply a header click reported by the table's ``sort_by``.

    The table clears ``sort_by`` on a third click of the same header, so an
    empty value means the current sort column was clicked again.
    """
    column = sort_by[0]["column_id"] if sort_by else state.sort_column
    if column is None:
        return state
    return toggle_sort(state, column)


def table_sort_by(state: DashboardState) -> List[Dict[str, str]]:
    """Express the state's sort in the table's ``sort_by`` format."""
    if state.sort_column is None:
        return []
    return [{"column_id": state.sort_column, "direction": state.sort_direction}]


def apply_event(state: DashboardState, event: str, value: Any) -> DashboardState:
    """Apply one user interaction to the dashboard state.

    Args:
        state: Current state
        event: ``"tab"``, ``"select"``, ``"sort"`` or ``"remove"``
        value: Tab value, selected row ids, table ``sort_by`` or a bib

    Returns:
        Updated state (the same object when nothing changes)
    """
    if event == "tab":
        return switch_edition(state, tab_edition(value))
    if event == "select":
        return sync_selection(state, value or ())
    if event == "sort":
        # the table reports the header it is showing, the state keeps the toggle
        return apply_table_sort(state, value)
    if event == "remove":
        return remove_runner(state, value)
    return state


def table_rows(editions: Mapping[str, EditionData], state: DashboardState) -> List[Dict]:
    """Rows of the active edition in the state's sort order."""
    results = editions[state.edition].results
    if state.sort_column is not None:
        results = sort_results(results, state.sort_column, state.sort_direction)
    return results_to_rows(results)


def chart_outputs(
    editions: Mapping[str, EditionData],
    state: DashboardState,
    tab: str,
) -> Tuple[go.Figure, list]:
    """Build the chart and badges for a tab.

    Selected bibs that do not exist in the tab's edition are ignored, so a
    selection left over from another edition never breaks the chart.
    """
    edition = tab_edition(tab)
    if tab.startswith(ANALYSIS_PREFIX):
        records = analyze_laps_over_threshold(edition, editions)
        return create_cohort_chart(build_cohort_chart_dataset(edition, records)), []

    edition_data = editions[edition]
    state = prune_selection(DashboardState(edition=edition, selection=state.selection), edition_data.bibs)
    dataset = build_lap_chart_dataset(edition_data, state.selection)
    return create_lap_time_chart(dataset), _selected_badges(dataset)


def _triggered_event() -> Tuple[Optional[str], Any]:
    trigger = dash.ctx.triggered_id
    if trigger is None:
        return None, None
    if isinstance(trigger, dict):
        # badges are re-rendered with n_clicks=0, which is not a click
        if not dash.ctx.triggered[0]["value"]:
            return None, None
        return "remove", trigger["bib"]
    if trigger == "edition-tabs":
        return "tab", dash.ctx.triggered[0]["value"]
    prop = dash.ctx.triggered[0]["prop_id"].rsplit(".", 1)[-1]
    return ("sort" if prop == "sort_by" else "select"), dash.ctx.triggered[0]["value"]


def build_results_dashboard(
    editions: Mapping[str, EditionData],
    default_edition: Optional[str] = None,
) -> dash.Dash:
    """Build the race results dashboard.

    Args:
        editions: Loaded editions keyed by name
        default_edition: Edition shown first (defaults to the first one)

    Returns:
        Dash application instance
    """
    if not editions:
        raise ValueError("At least one edition is required to build the dashboard")
    if default_edition is None or default_edition not in editions:
        default_edition = next(iter(editions))

    logger.info(f"Building results dashboard for editions {list(editions)}")

    app = dash.Dash(__name__)

    tabs = [dcc.Tab(label=f"{e} Edition", value=e) for e in editions]
    tabs += [dcc.Tab(label=f"Analysis {e}", value=f"{ANALYSIS_PREFIX}{e}") for e in editions]

    app.layout = html.Div([
        html.H1("Backyard Ultra Results", className="header-title"),
        dcc.Tabs(id="edition-tabs", value=default_edition, children=tabs),
        dcc.Store(id="dashboard-state", data=DashboardState(edition=default_edition).to_dict()),

        html.Div([
            html.Div([
                dash_table.DataTable(
                    id="results-table",
                    columns=[{"name": label, "id": col} for col, label in TABLE_COLUMNS],
                    data=results_to_rows(editions[default_edition].results),
                    row_selectable="multi",
                    selected_row_ids=[],
                    sort_action="custom",
                    sort_mode="single",
                    sort_by=[],
                    page_action="none",
                    style_table={"height": "80vh", "overflowY": "auto"},
                ),
            ], className="left-panel", style={"width": "35%", "display": "inline-block", "verticalAlign": "top"}),

            html.Div([
                html.Div(id="selected-runners"),
                dcc.Graph(id="lap-times-chart"),
            ], className="chart-container", style={"width": "63%", "display": "inline-block"}),
        ], className="split-container"),
    ])

    @app.callback(
        [Output("dashboard-state", "data"),
         Output("results-table", "selected_row_ids"),
         Output("results-table", "sort_by")],
        [Input("edition-tabs", "value"),
         Input("results-table", "selected_row_ids"),
         Input("results-table", "sort_by"),
         Input({"type": BADGE_TYPE, "bib": ALL}, "n_clicks")],
        State("dashboard-state", "data"),
    )
    def sync_state(tab, selected_ids, sort_by, badge_clicks, state_data):
        """Fold tab, row, header and badge clicks into the stored state."""
        state = DashboardState.from_dict(state_data)
        event, value = _triggered_event()
        if event is not None:
            state = apply_event(state, event, value)
        return state.to_dict(), list(state.selection), table_sort_by(state)

    @app.callback(
        [Output("results-table", "data"),
         Output("lap-times-chart", "figure"),
         Output("selected-runners", "children")],
        [Input("dashboard-state", "data"),
         Input("edition-tabs", "value")],
    )
    def render(state_data, tab: str):
        """Redraw the table and the lap chart, or the cohort chart on analysis tabs."""
        state = DashboardState.from_dict(state_data)
        figure, badges = chart_outputs(editions, state, tab)
        return (table_rows(editions, state), figure, badges)

    return app

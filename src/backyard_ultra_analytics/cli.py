"""Command-line interface for Backyard Ultra Analytics."""

from pathlib import Path
from typing import Optional

import click
from loguru import logger

from .analysis.cohort_analysis import analyze_laps_over_threshold, cohort_to_frame
from .analysis.lap_analysis import build_runner_series
from .analysis.sections import section_bands
from .config import THRESHOLD_MINUTES, configure_logging, get_settings
from .data_processing.loaders import load_edition, load_editions
from .data_processing.preprocessors import format_minutes
from .data_processing.transformers import SORTABLE_COLUMNS, results_to_frame, sort_results
from .exceptions import AnalyticsError, UnknownEditionError


def _check_edition(edition: str) -> str:
    known = get_settings().editions
    if edition not in known:
        raise UnknownEditionError(edition, known)
    return edition


def _load(ctx: click.Context, edition: str):
    try:
        return load_edition(_check_edition(edition), ctx.obj["data_root"])
    except AnalyticsError as e:
        raise click.ClickException(str(e))


@click.group()
@click.version_option(package_name="backyard-ultra-analytics")
@click.option("--data-root", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Directory holding data_<edition> folders")
@click.option("--log-level", default=None, help="Logging level (default from settings)")
@click.pass_context
def main(ctx: click.Context, data_root: Optional[Path], log_level: Optional[str]) -> None:
    """Backyard Ultra Race Analytics CLI.

    Explore race results, per-runner lap series and placement vs. fatigue
    across race editions.
    """
    settings = get_settings()
    configure_logging(log_level or settings.log_level)
    ctx.ensure_object(dict)
    ctx.obj["data_root"] = data_root or settings.data_root


@main.command()
@click.option("--edition", default=lambda: get_settings().default_edition, help="Race edition")
@click.option("--sort", "column", type=click.Choice(SORTABLE_COLUMNS), default=None, help="Column to sort by")
@click.option("--descending", is_flag=True, help="Sort in descending order")
@click.pass_context
def results(ctx: click.Context, edition: str, column: Optional[str], descending: bool) -> None:
    """Print the results table of an edition."""
    data = _load(ctx, edition)
    ordered = sort_results(data.results, column, "desc" if descending else "asc")
    click.echo(results_to_frame(ordered).to_string(index=False))


@main.command()
@click.option("--edition", default=lambda: get_settings().default_edition, help="Race edition")
@click.option("--bib", required=True, type=int, help="Runner bib")
@click.option("--selected", default=1, show_default=True, help="Number of selected runners (controls overlays)")
@click.pass_context
def runner(ctx: click.Context, edition: str, bib: int, selected: int) -> None:
    """Summarize one runner's lap series."""
    data = _load(ctx, edition)
    series = build_runner_series(bib, data, selected)
    if series is None:
        raise click.ClickException(f"Bib {bib} is not part of the {edition} edition")

    click.echo(f"{series.name} (#{series.bib}), {len(series.lap_times)} laps")
    click.echo(f"Mean: {format_minutes(series.stats.mean)}  Std dev: {series.stats.std_dev:.2f} min")
    click.echo(f"Fastest: {format_minutes(series.min_time)}  Slowest: {format_minutes(series.max_time)}")
    if series.trendline is not None:
        click.echo(f"Trend: {series.trendline.slope:+.3f} min/lap")
    click.echo(series.to_frame().to_string())


@main.command()
@click.option("--edition", default=lambda: get_settings().default_edition, help="Race edition")
@click.option("--threshold", default=THRESHOLD_MINUTES, show_default=True, help="Lap threshold in minutes")
@click.pass_context
def cohort(ctx: click.Context, edition: str, threshold: float) -> None:
    """Print the share of laps over the threshold by placement."""
    data = _load(ctx, edition)
    records = analyze_laps_over_threshold(edition, {edition: data}, threshold)
    click.echo(cohort_to_frame(records).to_string(index=False))


@main.command()
@click.option("--edition", default=lambda: get_settings().default_edition, help="Race edition")
@click.option("--max-lap", required=True, type=int, help="Last lap of the axis")
def sections(edition: str, max_lap: int) -> None:
    """List the trail/road sections of the lap axis."""
    for band in section_bands(max_lap, edition):
        click.echo(f"{band.section_number:>3}  laps {band.start_lap:>3}-{band.end_lap:<3}  {band.label}")


@main.command()
@click.option("--port", default=8050, help="Port to run dashboard on")
@click.option("--host", default="127.0.0.1", help="Host to bind dashboard to")
@click.option("--debug", is_flag=True, help="Enable debug mode")
@click.pass_context
def dashboard(ctx: click.Context, port: int, host: str, debug: bool) -> None:
    """Launch the interactive results dashboard."""
    from .visualization.dashboards import build_results_dashboard

    settings = get_settings()
    try:
        editions = load_editions(settings.editions, ctx.obj["data_root"])
    except AnalyticsError as e:
        raise click.ClickException(str(e))

    logger.info(f"Starting dashboard on {host}:{port}")
    click.echo(f"Dashboard starting on http://{host}:{port}")
    app = build_results_dashboard(editions, settings.default_edition)
    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":
    main()

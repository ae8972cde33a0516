"""Console summaries of the readings and the analyses."""

from typing import Dict, Optional, Union

import polars as pl
from rich import console as rich_console
from rich import table as rich_table

from thermorhythm.core import models


def summarize_series(decorated: pl.DataFrame) -> pl.DataFrame:
    """Skim-style statistics of the raw and smoothed temperature.

    Args:
        decorated: Output of `preprocessing.decorate`.

    Returns:
        A DataFrame with a 'statistic' column (count, null_count, mean, std, min,
        25%, 50%, 75%, max) and one column per temperature series.
    """
    return decorated.select(
        pl.col("temperature", "smoothed_temperature").fill_nan(None)
    ).describe()


def frame_table(frame: pl.DataFrame, title: str) -> rich_table.Table:
    """Convert a DataFrame to a rich table."""
    table = rich_table.Table(title=title)
    for column in frame.columns:
        table.add_column(column)
    for row in frame.iter_rows():
        table.add_row(*(_format_cell(value) for value in row))
    return table


def partition_status_table(
    spectra: Dict[models.PartitionKey, models.SpectralResult],
    autocorrelations: Dict[models.PartitionKey, models.AutocorrelationResult],
) -> rich_table.Table:
    """Table of which monthly estimates were computed and which were skipped."""
    table = rich_table.Table(title="Monthly estimates")
    table.add_column("partition")
    table.add_column("periodogram")
    table.add_column("autocorrelation")
    keys = sorted(set(spectra) | set(autocorrelations), key=lambda key: key.sort_key)
    for key in keys:
        table.add_row(
            key.label,
            _status(spectra.get(key)),
            _status(autocorrelations.get(key)),
        )
    return table


def print_results(
    results: models.AnalysisResults,
    console: Optional[rich_console.Console] = None,
) -> None:
    """Print the summaries of an analysis to the console.

    Args:
        results: The output of the orchestrator.
        console: The rich console to print to. Defaults to a new stdout console.
    """
    console = console or rich_console.Console()
    console.print(
        frame_table(
            summarize_series(results.decorated),
            f"Temperature summary for {results.subject_id}",
        )
    )
    if results.extrema is not None:
        console.print(
            frame_table(
                results.extrema.multi_extremum_days,
                "Days with multiple minima or maxima",
            )
        )
    if results.spectra or results.autocorrelations:
        console.print(
            partition_status_table(results.spectra, results.autocorrelations)
        )
    for report, message in results.failures.items():
        console.print(f"[red]{report} failed:[/red] {message}")


def _status(
    result: Union[models.SpectralResult, models.AutocorrelationResult, None],
) -> str:
    if result is None:
        return "-"
    if isinstance(result, models.InsufficientData):
        return result.reason
    return "computed"


def _format_cell(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        return f"{value:.3f}"
    return str(value)

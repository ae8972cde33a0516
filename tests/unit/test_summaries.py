"""Test the console summaries."""

from typing import Callable

import numpy as np
import polars as pl
from rich import console as rich_console

from thermorhythm.core import models
from thermorhythm.io.writers import summaries
from thermorhythm.processing import preprocessing


def test_summarize_series(make_readings: Callable[..., models.Readings]) -> None:
    """Test the statistics of the raw and smoothed temperature."""
    decorated = preprocessing.decorate(make_readings(days=1))

    summary = summaries.summarize_series(decorated)

    assert summary.columns == ["statistic", "temperature", "smoothed_temperature"]
    count = summary.filter(pl.col("statistic") == "count")
    assert count["temperature"][0] == 288
    mean = summary.filter(pl.col("statistic") == "mean")
    assert np.isclose(mean["temperature"][0], 37.0)


def test_summarize_series_ignores_nan(
    make_readings: Callable[..., models.Readings],
) -> None:
    """Test that missing temperatures are counted as nulls."""
    temperature = np.full(288, 37.0)
    temperature[:10] = np.nan
    decorated = preprocessing.decorate(make_readings(days=1, temperature=temperature))

    summary = summaries.summarize_series(decorated)

    null_count = summary.filter(pl.col("statistic") == "null_count")
    assert null_count["temperature"][0] == 10
    mean = summary.filter(pl.col("statistic") == "mean")
    assert mean["temperature"][0] == 37.0


def test_partition_status_table() -> None:
    """Test one row per partition in chronological order."""
    january = models.PartitionKey(year="2024", month="January")
    december = models.PartitionKey(year="2023", month="December")
    spectra = {
        january: models.InsufficientData(reason="too short"),
        december: models.InsufficientData(reason="too short"),
    }

    table = summaries.partition_status_table(spectra, {})

    assert table.row_count == 2
    assert list(table.columns[0].cells) == ["2023_December", "2024_January"]
    assert list(table.columns[2].cells) == ["-", "-"]


def test_print_results(make_readings: Callable[..., models.Readings]) -> None:
    """Test that summaries and failures are printed."""
    decorated = preprocessing.decorate(make_readings(days=1))
    key = models.PartitionKey(year="2024", month="January")
    results = models.AnalysisResults(
        subject_id="monkey_01",
        decorated=decorated,
        spectra={key: models.InsufficientData(reason="insufficient series length")},
        failures={"autocorrelation 2024_January": "boom"},
    )
    console = rich_console.Console(record=True, width=200)

    summaries.print_results(results, console=console)

    text = console.export_text()
    assert "Temperature summary for monkey_01" in text
    assert "insufficient series length" in text
    assert "autocorrelation 2024_January failed: boom" in text

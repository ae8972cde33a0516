"""Tests the main workflow of thermorhythm orchestrator."""

import pathlib

from thermorhythm.core import models, orchestrator


def test_orchestrator_happy_path(
    tmp_path: pathlib.Path, readings_csv: pathlib.Path
) -> None:
    """Happy path for orchestrator."""
    output = tmp_path / "figures"

    results = orchestrator.run(input=readings_csv, output=output)

    january = models.PartitionKey(year="2024", month="January")
    february = models.PartitionKey(year="2024", month="February")
    assert isinstance(results, models.AnalysisResults)
    assert results.failures == {}
    assert isinstance(results.extrema, models.ExtremaReport)
    assert isinstance(results.spectra[january], models.SpectralEstimate)
    assert isinstance(results.spectra[february], models.InsufficientData)
    assert isinstance(
        results.autocorrelations[january], models.AutocorrelationEstimate
    )
    assert isinstance(results.autocorrelations[february], models.InsufficientData)
    assert (output / "monkey_01_2024_chronogram.png").exists()
    assert (output / "monkey_01_2024_February_periodogram.png").exists()
    assert (output / "monkey_01_all_extrema_heatmap.png").exists()
    assert len(results.figures) == 10
    assert all(path.exists() for path in results.figures)

"""Python based runner."""

import logging
import pathlib
from typing import (
    Any,
    Callable,
    Dict,
    List,
    Literal,
    Optional,
    Sequence,
    TypeVar,
    Union,
)

import polars as pl
from rich import progress

from thermorhythm.core import config, models
from thermorhythm.io.readers import readers
from thermorhythm.io.writers import figures
from thermorhythm.processing import (
    autocorrelation,
    binning,
    extrema,
    preprocessing,
    spectral,
)

logger = config.get_logger()

Report = Literal["chronogram", "actogram", "extrema", "periodogram", "autocorrelation"]
REPORTS: tuple[Report, ...] = (
    "chronogram",
    "actogram",
    "extrema",
    "periodogram",
    "autocorrelation",
)

T = TypeVar("T")


def run(
    input: Union[pathlib.Path, str],
    output: Optional[Union[pathlib.Path, str]] = None,
    subject: Optional[str] = None,
    reports: Sequence[Report] = REPORTS,
    verbosity: int = logging.WARNING,
) -> models.AnalysisResults:
    """Runs the circadian temperature analysis on one subject's readings.

    The readings are decorated with calendar fields and a smoothed temperature. The
    requested reports are then derived: chronograms per year, the hourly trimean
    extrema over the whole recording, and actograms, periodograms and
    autocorrelations per calendar month. A failure in one report or partition is
    logged and recorded, and does not stop the others.

    Args:
        input: Path to the .csv or .parquet file with the cleaned readings.
        output: Directory the figures will be saved to. If None, nothing is written.
        subject: The subject to analyse, required when the file holds several.
        reports: The reports to produce.
        verbosity: The logging level for the logger.

    Returns:
        The AnalysisResults holding every computed table and estimate.

    Raises:
        ValueError: If an unknown report is requested or the output is a file.
        EmptySeriesError: If there are no readings to analyse.
        MalformedSeriesError: If the readings cannot be read as a valid series.
        InvalidFileTypeError: If the input is not a .csv or .parquet file.
    """
    logger.setLevel(verbosity)

    unknown = set(reports) - set(REPORTS)
    if unknown:
        msg = f"Invalid reports: {sorted(unknown)}. Choose from {list(REPORTS)}."
        logger.error(msg)
        raise ValueError(msg)

    input = pathlib.Path(input)
    output = pathlib.Path(output) if output is not None else None
    if output is not None and output.is_file():
        raise ValueError("Output is a file, but must be a directory.")

    readings = readers.read_readings(input, subject=subject)
    decorated = preprocessing.decorate(readings)
    subject_id = readings.subject_id

    failures: Dict[str, str] = {}
    figure_paths: List[pathlib.Path] = []
    chronograms: Dict[str, pl.DataFrame] = {}
    actograms: Dict[models.PartitionKey, pl.DataFrame] = {}
    spectra: Dict[models.PartitionKey, models.SpectralResult] = {}
    autocorrelations: Dict[models.PartitionKey, models.AutocorrelationResult] = {}
    extrema_report = None

    if "chronogram" in reports:
        for year, year_frame in binning.partition_by_year(decorated).items():
            chronogram = _isolated(
                failures, f"chronogram {year}", binning.chronogram_frame, year_frame
            )
            if chronogram is None:
                continue
            chronograms[year] = chronogram
            if output is not None:
                figure_paths.extend(
                    _figure(
                        failures,
                        f"chronogram figure {year}",
                        figures.plot_chronogram,
                        chronogram,
                        f"{subject_id} {year} chronogram",
                        figures.figure_path(output, subject_id, year, "chronogram"),
                    )
                )

    if "extrema" in reports:
        extrema_report = _isolated(
            failures, "extrema", extrema.find_extrema, decorated
        )
        if extrema_report is not None and output is not None:
            paths = _isolated(
                failures,
                "extrema figures",
                figures.plot_extrema_report,
                extrema_report,
                output,
                subject_id,
            )
            figure_paths.extend(paths or [])

    monthly_reports = [
        report
        for report in ("actogram", "periodogram", "autocorrelation")
        if report in reports
    ]
    partitions = binning.partition_by_month(decorated) if monthly_reports else {}
    with progress.Progress(
        progress.SpinnerColumn(),
        progress.TextColumn("[progress.description]{task.description}"),
        progress.BarColumn(),
        progress.TaskProgressColumn(),
        console=None,
        disable=not partitions,
    ) as progress_bar:
        task = progress_bar.add_task(
            f"[cyan]Analysing months of {subject_id}...", total=len(partitions)
        )
        for key, partition in partitions.items():
            logger.debug("Processing partition %s.", key.label)
            title = f"{subject_id} {key.year} {key.month}"

            if "actogram" in reports:
                actogram = _isolated(
                    failures,
                    f"actogram {key.label}",
                    binning.actogram_frame,
                    partition,
                )
                if actogram is not None:
                    actograms[key] = actogram
                    if output is not None:
                        figure_paths.extend(
                            _figure(
                                failures,
                                f"actogram figure {key.label}",
                                figures.plot_actogram,
                                actogram,
                                f"{title} actogram",
                                figures.figure_path(
                                    output, subject_id, key.label, "actogram"
                                ),
                            )
                        )

            if "periodogram" in reports:
                spectrum = _isolated(
                    failures,
                    f"periodogram {key.label}",
                    spectral.estimate_partition_spectrum,
                    partition,
                )
                if spectrum is not None:
                    spectra[key] = spectrum
                    if output is not None:
                        figure_paths.extend(
                            _figure(
                                failures,
                                f"periodogram figure {key.label}",
                                figures.plot_periodogram,
                                spectrum,
                                f"{title} periodogram",
                                figures.figure_path(
                                    output, subject_id, key.label, "periodogram"
                                ),
                            )
                        )

            if "autocorrelation" in reports:
                estimate = _isolated(
                    failures,
                    f"autocorrelation {key.label}",
                    _partition_autocorrelation,
                    partition,
                )
                if estimate is not None:
                    autocorrelations[key] = estimate
                    if output is not None:
                        figure_paths.extend(
                            _figure(
                                failures,
                                f"autocorrelation figure {key.label}",
                                figures.plot_autocorrelation,
                                estimate,
                                f"{title} autocorrelation",
                                figures.figure_path(
                                    output, subject_id, key.label, "autocorrelation"
                                ),
                            )
                        )
            progress_bar.update(task, advance=1)

    if failures:
        logger.warning("%s reports failed for %s.", len(failures), subject_id)
    logger.info("Processing for %s completed.", subject_id)
    return models.AnalysisResults(
        subject_id=subject_id,
        decorated=decorated,
        chronograms=chronograms,
        extrema=extrema_report,
        actograms=actograms,
        spectra=spectra,
        autocorrelations=autocorrelations,
        failures=failures,
        figures=figure_paths,
    )


def _isolated(
    failures: Dict[str, str], name: str, func: Callable[..., T], *args: Any
) -> Optional[T]:
    """Run one report, recording instead of raising any failure.

    Args:
        failures: Mapping of report names to error messages, updated in place.
        name: Name of the report, used as key in failures.
        func: The report to run.
        *args: Arguments to func.

    Returns:
        The report's output, or None if it failed.
    """
    try:
        return func(*args)
    except Exception as e:
        logger.error("Did not complete %s, Error: %s", name, e)
        failures[name] = str(e)
        return None


def _figure(
    failures: Dict[str, str], name: str, func: Callable[..., pathlib.Path], *args: Any
) -> List[pathlib.Path]:
    path = _isolated(failures, name, func, *args)
    return [path] if path is not None else []


def _partition_autocorrelation(
    partition: pl.DataFrame,
) -> models.AutocorrelationResult:
    return autocorrelation.estimate_partition_autocorrelation(
        binning.bin_half_hours(partition)
    )

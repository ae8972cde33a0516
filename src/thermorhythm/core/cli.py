"""CLI for thermorhythm."""

import logging
import pathlib
from enum import Enum

import typer

from thermorhythm.core import config, exceptions

logger = config.get_logger()
app = typer.Typer(
    help="Analyse the circadian rhythm of a body temperature recording.",
)


class Report(str, Enum):
    """Reports that can be requested from the orchestrator."""

    chronogram = "chronogram"
    actogram = "actogram"
    extrema = "extrema"
    periodogram = "periodogram"
    autocorrelation = "autocorrelation"


def version_check(version: bool) -> None:
    """Print the current version of thermorhythm and exit."""
    if version:
        typer.echo(f"Thermorhythm version: {config.get_version()}")
        raise typer.Exit()


@app.command()
def main(
    input: pathlib.Path = typer.Argument(
        ..., help="Path to the cleaned readings (.csv or .parquet).", exists=True
    ),
    output: pathlib.Path = typer.Option(
        None,
        "-o",
        "--output",
        help="Directory where the figures will be saved. "
        "If omitted, only the console summaries are produced.",
    ),
    subject: str = typer.Option(
        None,
        "-s",
        "--subject",
        help="Subject to analyse when the file holds several subjects.",
    ),
    report: list[Report] = typer.Option(
        list(Report),
        "-r",
        "--report",
        help="Report(s) to produce. Use multiple times for multiple reports: "
        "'-r periodogram -r autocorrelation'. Defaults to all reports.",
        case_sensitive=False,
    ),
    verbosity: bool = typer.Option(
        False,
        "-v",
        "--verbosity",
        help="Determines the level of verbosity. Use -v for DEBUG. "
        "Defaults to INFO if not included.",
    ),
    version: bool = typer.Option(
        False,
        "-V",
        "--version",
        help="Print the current version of thermorhythm and exit.",
        is_eager=True,
        callback=version_check,
    ),
) -> None:
    """Run thermorhythm orchestrator with command line arguments."""
    from thermorhythm.core import orchestrator
    from thermorhythm.io.writers import summaries

    log_level = logging.INFO
    if verbosity:
        log_level = logging.DEBUG
    logger.setLevel(log_level)

    reports = [item.value for item in report]

    logger.debug("Running thermorhythm. arguments given: %s", locals())
    try:
        results = orchestrator.run(
            input=input,
            output=output,
            subject=subject,
            reports=reports,  # type: ignore[arg-type] # Covered by Report Enum class
            verbosity=log_level,
        )
    except (
        exceptions.EmptySeriesError,
        exceptions.MalformedSeriesError,
        exceptions.InvalidFileTypeError,
    ) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    summaries.print_results(results)


if __name__ == "__main__":
    app()
